"""
Input Sanitizer
===============

Escape untrusted text for embedding in the card markup and validate the
image references that are embedded verbatim as URLs.
"""

import re
from dataclasses import dataclass
from typing import Optional

from markupsafe import Markup
from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from quotecard.models.schemas import QuoteRequest


class QuoteValidationError(Exception):
    """Exception raised when a quote request fails validation."""

    pass


class InvalidImageReferenceError(QuoteValidationError):
    """Exception raised when an image reference is not an acceptable URI."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid image reference in '{field}': {reason}")
        self.field = field
        self.reason = reason


# Characters that could terminate an HTML attribute or a CSS url('...') token.
_UNSAFE_URI_CHARS = re.compile(r"[\s\x00-\x1f\x7f\"'<>()\\`]")
_DATA_IMAGE_URI = re.compile(
    r"^data:image/[a-z0-9.+-]+(?:;[a-z0-9.+-]+=[a-z0-9.+-]+)*(?:;base64)?,.+$",
    re.IGNORECASE,
)
_http_url_adapter = TypeAdapter(AnyHttpUrl)


@dataclass(frozen=True)
class SanitizedFields:
    """Request fields that are safe to place into the card template as-is."""

    name: Markup
    handle: Markup
    tweet: Markup
    profile_image: Optional[Markup] = None
    background: Optional[Markup] = None


def escape_text(value: str) -> str:
    """Escape HTML special characters for text or attribute placement."""
    if not value:
        return ""
    return (
        value.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def escape_multiline(value: str) -> str:
    """Escape text and turn each line break into a <br> element."""
    normalized = value.replace("\r\n", "\n").replace("\r", "\n")
    return escape_text(normalized).replace("\n", "<br>")


def validate_image_ref(value: Optional[str], field: str) -> Optional[str]:
    """
    Validate an image reference destined for a src attribute or CSS url().

    Args:
        value: Raw reference from the request, or None
        field: Request field name, reported back on rejection

    Returns:
        The reference unchanged, or None when absent

    Raises:
        InvalidImageReferenceError: If the value is not an http(s) URL or a
            data:image URI, or contains characters that could break out of
            its markup context
    """
    if value is None:
        return None

    if _UNSAFE_URI_CHARS.search(value):
        raise InvalidImageReferenceError(field, "contains characters not allowed in a URL")

    if value[:5].lower() == "data:":
        if not _DATA_IMAGE_URI.match(value):
            raise InvalidImageReferenceError(field, "data URIs must use an image/* media type")
        return value

    try:
        _http_url_adapter.validate_python(value)
    except ValidationError:
        raise InvalidImageReferenceError(field, "must be an http(s) URL or a data:image URI")

    return value


def sanitize_request(request: QuoteRequest) -> SanitizedFields:
    """Escape the text fields and validate the image references of a request."""
    profile_image = validate_image_ref(request.profile_image, "profileImage")
    background = validate_image_ref(request.background, "background")

    return SanitizedFields(
        name=Markup(escape_text(request.name)),
        handle=Markup(escape_text(request.handle)),
        tweet=Markup(escape_multiline(request.tweet)),
        profile_image=Markup(profile_image) if profile_image else None,
        background=Markup(background) if background else None,
    )
