"""
Test Data Generators
====================

Request payloads for quote card tests.
"""

from typing import Any, Dict

__all__ = ["QuotePayloadGenerator"]

RED_DOT_PNG = (
    "data:image/png;base64,"
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8DwHwAFBQIAX8jx0gAAAABJRU5ErkJggg=="
)


class QuotePayloadGenerator:
    """Generate request bodies for the generate endpoint."""

    @staticmethod
    def ada() -> Dict[str, Any]:
        return {"name": "Ada Lovelace", "handle": "ada", "tweet": "Hello\nWorld"}

    @staticmethod
    def with_images() -> Dict[str, Any]:
        payload = QuotePayloadGenerator.ada()
        payload["profileImage"] = RED_DOT_PNG
        payload["background"] = "https://images.example.com/backdrop.jpg?w=1500&h=1500"
        return payload

    @staticmethod
    def hostile() -> Dict[str, Any]:
        return {
            "name": 'Eve <script>alert("x")</script>',
            "handle": "eve&'co'",
            "tweet": "Tom & Jerry <b>bold</b>\n\"quoted\" and 'single'\r\nlast line",
        }
