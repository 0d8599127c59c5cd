"""
Generate Routes
===============

FastAPI route that renders a quote card and returns the PNG bytes.
"""

import json
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from quotecard.config.logging import get_logger
from quotecard.config.settings import get_settings
from quotecard.core.service import MissingFieldsError, QuoteCardService
from quotecard.models.schemas import PayloadTooLargeResponse, REQUIRED_FIELDS

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["Rendering"])

_quote_service: Optional[QuoteCardService] = None


def get_quote_service() -> QuoteCardService:
    """Dependency returning the shared quote card service."""
    global _quote_service
    if _quote_service is None:
        _quote_service = QuoteCardService()
    return _quote_service


def decode_json_body(body: bytes) -> Any:
    """Decode a JSON body. Anything that is not JSON counts as an empty request."""
    if not body:
        return None
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None


async def read_limited_body(request: Request, limit: int) -> Optional[bytes]:
    """Read the request body chunk by chunk. Returns None once it grows past limit."""
    chunks: List[bytes] = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > limit:
            logger.info("Request body over limit", limit=limit, received=received)
            return None
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/generate-tweet", response_class=Response)
async def generate_tweet(
    request: Request, service: QuoteCardService = Depends(get_quote_service)
) -> Response:
    """
    Render a quote card to PNG.

    Body: JSON object with name, handle, tweet and optional profileImage and
    background. Validation and render errors are turned into JSON responses
    by the application's exception handlers.
    """
    limit = get_settings().max_body_bytes
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > limit:
        return JSONResponse(status_code=413, content=PayloadTooLargeResponse(limit=limit).model_dump())

    body = await read_limited_body(request, limit)
    if body is None:
        return JSONResponse(status_code=413, content=PayloadTooLargeResponse(limit=limit).model_dump())

    payload = decode_json_body(body)
    if payload is None:
        raise MissingFieldsError(list(REQUIRED_FIELDS))

    image = await service.handle(payload)

    return Response(
        content=image.png_data,
        media_type="image/png",
        headers={
            "Content-Length": str(image.file_size),
            "Cache-Control": "no-cache",
            "Content-Disposition": 'attachment; filename="twitter-quote.png"',
        },
    )
