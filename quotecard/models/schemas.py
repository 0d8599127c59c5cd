"""
Pydantic Models and Schemas
===========================

Core data models for quote requests, the render canvas contract, rendered
images and API request/response payloads.
"""

from typing import Optional, List, Dict, Literal, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from quotecard.config.settings import Settings


REQUIRED_FIELDS: List[str] = ["name", "handle", "tweet"]
SUPPORTED_DEVICE_SCALE_FACTORS = (1.0, 2.0, 3.0)


# Request Models
class QuoteRequest(BaseModel):
    """A validated quote card request. Required fields are non-blank."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1, description="Display name")
    handle: str = Field(..., min_length=1, description="Account handle without the leading @")
    tweet: str = Field(..., min_length=1, description="Message body")
    profile_image: Optional[str] = Field(
        None, alias="profileImage", description="Profile image URL or data URI"
    )
    background: Optional[str] = Field(None, description="Background image URL or data URI")


# Rendering Models
class RenderTarget(BaseModel):
    """Fixed canvas contract shared by the document builder and the render engine."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(1500, gt=0, le=4000, description="Canvas width in CSS pixels")
    height: int = Field(1500, gt=0, le=4000, description="Canvas height in CSS pixels")
    device_scale_factor: float = Field(2.0, gt=0, le=3.0, description="Device pixel ratio")
    background_color: str = Field("#15202B", description="Canvas fallback color")
    card_max_width: int = Field(512, gt=0, description="Card max width in CSS pixels")
    card_padding: int = Field(48, ge=0, description="Card padding in CSS pixels")

    @field_validator("device_scale_factor")
    @classmethod
    def validate_device_scale_factor(cls, v: float) -> float:
        """Only whole densities map to an exact screenshot size."""
        if v not in SUPPORTED_DEVICE_SCALE_FACTORS:
            raise ValueError(
                f"Device scale factor must be one of: {SUPPORTED_DEVICE_SCALE_FACTORS}"
            )
        return v

    @property
    def pixel_width(self) -> int:
        return int(self.width * self.device_scale_factor)

    @property
    def pixel_height(self) -> int:
        return int(self.height * self.device_scale_factor)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "RenderTarget":
        return cls(
            width=settings.canvas_width,
            height=settings.canvas_height,
            device_scale_factor=settings.device_scale_factor,
            background_color=settings.background_color,
            card_max_width=settings.card_max_width,
            card_padding=settings.card_padding,
        )


class CardDocument(BaseModel):
    """A fully resolved card document, laid out for a single render target."""

    model_config = ConfigDict(frozen=True)

    html: str = Field(..., description="Complete HTML document")
    target: RenderTarget = Field(..., description="Canvas the document was laid out for")


class RenderedImage(BaseModel):
    """Result of PNG capture."""

    png_data: bytes = Field(..., description="PNG binary data", exclude=True)
    width: int = Field(..., description="Image width in device pixels")
    height: int = Field(..., description="Image height in device pixels")
    file_size: int = Field(..., description="File size in bytes")


# API Response Models
class ServiceDescriptor(BaseModel):
    """Service descriptor returned from the root endpoint."""

    status: Literal["ok"] = "ok"
    message: str = Field(..., description="Service name")
    endpoints: Dict[str, str] = Field(default_factory=dict, description="Endpoint map")
    version: str = Field(..., description="Application version")


class MissingFieldsResponse(BaseModel):
    """Error payload for a request without its required fields."""

    error: str = "Missing required fields"
    required: List[str] = Field(default_factory=lambda: list(REQUIRED_FIELDS))


class InvalidFieldResponse(BaseModel):
    """Error payload for a rejected field value."""

    error: str = Field(..., description="Error message")
    field: str = Field(..., description="Offending request field")


class RenderFailureResponse(BaseModel):
    """Error payload for a failed render or an unexpected server error."""

    error: str = Field(..., description="Error message")
    message: str = Field(..., description="Human-readable detail")


class NotFoundResponse(BaseModel):
    """Error payload for unknown routes."""

    error: str = "Not found"
    path: str = Field(..., description="Requested path")
    method: str = Field(..., description="Requested method")


class PayloadTooLargeResponse(BaseModel):
    """Error payload for oversized request bodies."""

    error: str = "Request body too large"
    limit: int = Field(..., description="Maximum body size in bytes")
