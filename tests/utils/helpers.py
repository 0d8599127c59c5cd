"""
Test Helpers
============

Helper functions for common testing operations.
"""

import io
import time

from PIL import Image

__all__ = ["make_png", "TestTimer"]


def make_png(width: int, height: int, color: tuple = (21, 32, 43)) -> bytes:
    """Encode a solid-color PNG of the given size."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buffer, format="PNG")
    return buffer.getvalue()


class TestTimer:
    """Context manager for timing test operations."""

    __test__ = False

    def __init__(self, description: str = ""):
        self.description = description
        self.start_time = 0.0
        self.end_time = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.end_time = time.perf_counter()

    @property
    def duration(self) -> float:
        """Get the measured duration."""
        return self.end_time - self.start_time
