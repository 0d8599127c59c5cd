"""
HTML Generator
==============

Compose the quote card HTML document from sanitized request fields.
The document is self-contained: embedded styles, inline placeholder avatar,
no external stylesheet or script fetches.
"""

from typing import Dict, Any, Optional
from pathlib import Path
import jinja2
from markupsafe import Markup

from quotecard.config.logging import get_logger
from quotecard.core.rendering.sanitizer import SanitizedFields
from quotecard.models.schemas import CardDocument, RenderTarget

logger = get_logger(__name__)

TEMPLATE_NAME = "card.html"

# Attribute the card script sets on <body> once the avatar has loaded or failed.
READY_ATTRIBUTE = "data-card-ready"
READY_SELECTOR = f"body[{READY_ATTRIBUTE}]"

# Solid #1f2937 square, inlined so the avatar never waits on the network.
PLACEHOLDER_AVATAR = Markup(
    "data:image/svg+xml,%3Csvg xmlns='http://www.w3.org/2000/svg' width='48' height='48'%3E"
    "%3Crect width='48' height='48' fill='%231f2937'/%3E%3C/svg%3E"
)


class HTMLGenerationError(Exception):
    """Exception raised when HTML generation fails."""

    pass


class CardHTMLGenerator:
    """Jinja2-based quote card generator."""

    def __init__(self, template_dir: Optional[Path] = None) -> None:
        self.logger: Any = logger.bind(generator="jinja2")  # structlog.BoundLoggerBase
        self.template_dir = template_dir or Path(__file__).parent / "templates"
        self._setup_jinja2_environment()

    def _setup_jinja2_environment(self) -> None:
        """Setup Jinja2 template environment."""
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(self.template_dir)),
            autoescape=jinja2.select_autoescape(["html", "xml"]),
            undefined=jinja2.StrictUndefined,
        )

        def px(value: float) -> str:
            """Convert numeric value to CSS pixels."""
            return f"{value}px"

        self.env.filters["px"] = px

    def build(self, fields: SanitizedFields, target: RenderTarget) -> CardDocument:
        """
        Build the card document for a render target.

        Args:
            fields: Escaped and validated request fields
            target: Canvas the document is laid out for

        Returns:
            CardDocument holding the complete HTML

        Raises:
            HTMLGenerationError: If template rendering fails
        """
        try:
            template = self.env.get_template(TEMPLATE_NAME)
            html = template.render(**self._prepare_context(fields, target))
        except jinja2.TemplateError as e:
            error_msg = f"Template rendering failed: {e}"
            self.logger.error("HTML generation failed", error=error_msg)
            raise HTMLGenerationError(error_msg)

        self.logger.debug(
            "HTML generation completed",
            template=TEMPLATE_NAME,
            html_length=len(html),
            has_profile_image=fields.profile_image is not None,
            has_background=fields.background is not None,
        )
        return CardDocument(html=html, target=target)

    def _prepare_context(self, fields: SanitizedFields, target: RenderTarget) -> Dict[str, Any]:
        return {
            "fields": fields,
            "target": target,
            "placeholder": PLACEHOLDER_AVATAR,
            "ready_attribute": READY_ATTRIBUTE,
        }

