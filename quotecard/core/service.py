"""
Quote Card Service
==================

Validate a quote request, then run it through the rendering pipeline:
sanitize, build the card document, render it to PNG.
"""

from typing import Any, Dict, List, Optional, Protocol

from quotecard.config.logging import get_logger
from quotecard.config.settings import get_settings, Settings
from quotecard.core.rendering.html_generator import CardHTMLGenerator
from quotecard.core.rendering.png_generator import PlaywrightPNGGenerator, RenderError
from quotecard.core.rendering.sanitizer import QuoteValidationError, sanitize_request
from quotecard.models.schemas import (
    REQUIRED_FIELDS,
    CardDocument,
    QuoteRequest,
    RenderTarget,
    RenderedImage,
)

logger = get_logger(__name__)


class MissingFieldsError(QuoteValidationError):
    """Exception raised when required request fields are absent or blank."""

    def __init__(self, missing: List[str]):
        super().__init__(f"Missing required fields: {', '.join(missing)}")
        self.missing = missing
        self.required = list(REQUIRED_FIELDS)


class RenderEngine(Protocol):
    async def render(self, document: CardDocument, target: RenderTarget) -> RenderedImage: ...


def _optional_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _normalize_handle(value: Any) -> Optional[str]:
    """Strip whitespace and a single leading '@'. Nothing left means no handle."""
    if not isinstance(value, str):
        return None
    handle = value.strip()
    if handle.startswith("@"):
        handle = handle[1:].strip()
    return handle or None


def parse_request(payload: Any) -> QuoteRequest:
    """
    Build a QuoteRequest from a decoded JSON body.

    Args:
        payload: Decoded request body

    Returns:
        Validated QuoteRequest

    Raises:
        MissingFieldsError: If the body is not an object or a required field
            is missing, not a string, or blank. A handle that
            is empty once its leading "@" is dropped counts as blank.
    """
    if not isinstance(payload, dict):
        raise MissingFieldsError(list(REQUIRED_FIELDS))

    handle = _normalize_handle(payload.get("handle"))
    missing = [
        field
        for field in REQUIRED_FIELDS
        if not isinstance(payload.get(field), str)
        or not payload[field].strip()
        or (field == "handle" and handle is None)
    ]
    if missing:
        raise MissingFieldsError(missing)

    return QuoteRequest(
        name=payload["name"].strip(),
        handle=handle,
        tweet=payload["tweet"],
        profile_image=_optional_str(payload.get("profileImage")),
        background=_optional_str(payload.get("background")),
    )


class QuoteCardService:
    """Orchestrates validation, document building and rendering."""

    def __init__(
        self,
        engine: Optional[RenderEngine] = None,
        html_generator: Optional[CardHTMLGenerator] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.target = RenderTarget.from_settings(self.settings)
        self.engine = engine or PlaywrightPNGGenerator(self.settings)
        self.html_generator = html_generator or CardHTMLGenerator()
        self.logger: Any = logger.bind(component="quote_card_service")

    async def handle(self, payload: Dict[str, Any]) -> RenderedImage:
        """
        Render a quote card for a request body.

        Raises:
            QuoteValidationError: Before any browser work, for invalid input
            RenderError: If document building or rendering fails
        """
        request = parse_request(payload)
        fields = sanitize_request(request)

        self.logger.info("Generating quote", handle=request.handle)

        try:
            document = self.html_generator.build(fields, self.target)
            image = await self.engine.render(document, self.target)
        except RenderError:
            raise
        except Exception as e:
            self.logger.error("Quote generation failed", error=str(e))
            raise RenderError("Unexpected rendering failure") from e

        self.logger.info("Quote generated successfully", file_size=image.file_size)
        return image
