"""
PNG Generator
=============

Playwright-based PNG screenshot generation from card documents.

Every render launches its own Chromium instance and closes it before
returning, so no profile, cache or page state is shared between requests.
"""

from enum import Enum
from typing import Optional, Dict, Any, AsyncGenerator
import asyncio
import io
from contextlib import asynccontextmanager

from playwright.async_api import (
    async_playwright,
    Browser,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
)
from PIL import Image, UnidentifiedImageError

from quotecard.config.logging import get_logger
from quotecard.config.settings import get_settings, Settings
from quotecard.core.rendering.html_generator import READY_SELECTOR
from quotecard.models.schemas import CardDocument, RenderTarget, RenderedImage

logger = get_logger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class RenderPhase(str, Enum):
    """Lifecycle of a single render."""

    IDLE = "idle"
    LAUNCHING = "launching"
    LOADED = "loaded"
    STABLE = "stable"
    CAPTURED = "captured"
    FAILED = "failed"
    CLOSED = "closed"


class RenderError(Exception):
    """Exception raised when a card cannot be rendered."""

    def __init__(self, message: str, phase: RenderPhase = RenderPhase.IDLE):
        super().__init__(message)
        self.phase = phase


class BrowserLaunchError(RenderError):
    """The browser process could not be started."""

    def __init__(self, message: str = "Browser launch failed"):
        super().__init__(message, RenderPhase.LAUNCHING)


class RenderTimeoutError(RenderError):
    """The page did not reach network idle within the load budget."""

    def __init__(self, timeout_ms: int):
        super().__init__(f"Page did not finish loading within {timeout_ms} ms", RenderPhase.LOADED)
        self.timeout_ms = timeout_ms


class CaptureError(RenderError):
    """The screenshot could not be taken or is not the expected image."""

    def __init__(self, message: str = "Screenshot capture failed"):
        super().__init__(message, RenderPhase.CAPTURED)


class PlaywrightPNGGenerator:
    """Playwright-based PNG generator with one browser per render."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.logger: Any = logger.bind(generator="playwright")  # structlog.BoundLoggerBase

    @asynccontextmanager
    async def browser_session(self) -> AsyncGenerator[Browser, None]:
        """
        Launch an isolated browser and close it on every exit path.

        Raises:
            BrowserLaunchError: If the driver or the browser fails to start
        """
        try:
            playwright = await async_playwright().start()
        except Exception as e:
            self.logger.error("Playwright driver failed to start", error=str(e))
            raise BrowserLaunchError() from e

        browser: Optional[Browser] = None
        try:
            try:
                browser = await playwright.chromium.launch(
                    headless=self.settings.playwright_headless,
                    chromium_sandbox=self.settings.chromium_sandbox,
                    args=list(self.settings.browser_args),
                )
            except Exception as e:
                self.logger.error("Browser launch failed", error=str(e))
                raise BrowserLaunchError() from e

            yield browser
        finally:
            await self._teardown(playwright, browser)

    async def _teardown(self, playwright: Playwright, browser: Optional[Browser]) -> None:
        """Close the browser and stop the driver. Failures are logged only."""
        if browser is not None:
            try:
                await browser.close()
            except Exception as e:
                self.logger.error("Browser close failed", error=str(e))

        try:
            await playwright.stop()
        except Exception as e:
            self.logger.error("Playwright driver stop failed", error=str(e))

        self.logger.debug("Browser session closed", phase=RenderPhase.CLOSED.value)

    async def render(self, document: CardDocument, target: RenderTarget) -> RenderedImage:
        """
        Render a card document to PNG.

        Args:
            document: Card document to load
            target: Canvas contract for viewport, density and output size

        Returns:
            RenderedImage containing PNG data and pixel dimensions

        Raises:
            RenderError: If any phase fails. The browser is closed before
                the error propagates.
        """
        if document.target != target:
            raise RenderError("Document was built for a different render target")

        phase = RenderPhase.IDLE
        self.logger.info(
            "Rendering card",
            html_length=len(document.html),
            width=target.width,
            height=target.height,
            device_scale_factor=target.device_scale_factor,
        )

        try:
            phase = RenderPhase.LAUNCHING
            async with self.browser_session() as browser:
                context = await browser.new_context(**self._context_options(target))
                page = await context.new_page()

                await self._load(page, document)
                phase = RenderPhase.LOADED

                await self._stabilize(page)
                phase = RenderPhase.STABLE

                png_data = await self._capture(page, target)
                phase = RenderPhase.CAPTURED
        except RenderError as e:
            self.logger.error(
                "Card render failed",
                state=RenderPhase.FAILED.value,
                phase=e.phase.value,
                error=str(e),
            )
            raise
        except Exception as e:
            self.logger.error(
                "Card render failed",
                state=RenderPhase.FAILED.value,
                phase=phase.value,
                error=str(e),
            )
            raise RenderError("Unexpected rendering failure", phase) from e

        self.logger.info(
            "Card rendered",
            file_size=len(png_data),
            pixel_width=target.pixel_width,
            pixel_height=target.pixel_height,
        )
        return RenderedImage(
            png_data=png_data,
            width=target.pixel_width,
            height=target.pixel_height,
            file_size=len(png_data),
        )

    def _context_options(self, target: RenderTarget) -> Dict[str, Any]:
        """Fresh, non-persistent context sized to the canvas."""
        return {
            "viewport": {"width": target.width, "height": target.height},
            "device_scale_factor": target.device_scale_factor,
        }

    async def _load(self, page: Page, document: CardDocument) -> None:
        """Set page content and wait for network idle within the load budget."""
        timeout_ms = self.settings.load_timeout_ms
        ceiling = (timeout_ms + self.settings.load_timeout_grace_ms) / 1000

        try:
            await asyncio.wait_for(
                page.set_content(document.html, wait_until="networkidle", timeout=timeout_ms),
                timeout=ceiling,
            )
        except (PlaywrightTimeoutError, asyncio.TimeoutError) as e:
            raise RenderTimeoutError(timeout_ms) from e
        except Exception as e:
            raise RenderError("Page content failed to load", RenderPhase.LOADED) from e

    async def _stabilize(self, page: Page) -> None:
        """Wait for the card ready marker, then a fixed settle delay."""
        if self.settings.wait_for_ready_marker:
            try:
                await page.wait_for_selector(
                    READY_SELECTOR, state="attached", timeout=self.settings.ready_timeout_ms
                )
            except PlaywrightTimeoutError:
                self.logger.warning(
                    "Card ready marker not set, continuing",
                    timeout_ms=self.settings.ready_timeout_ms,
                )

        if self.settings.settle_delay_ms:
            await asyncio.sleep(self.settings.settle_delay_ms / 1000)

    async def _capture(self, page: Page, target: RenderTarget) -> bytes:
        """Capture exactly the viewport as an opaque PNG."""
        try:
            png_data = await page.screenshot(
                type="png",
                full_page=False,
                omit_background=False,
                clip={"x": 0, "y": 0, "width": target.width, "height": target.height},
            )
        except Exception as e:
            raise CaptureError() from e

        self._verify_png(png_data, target)
        return png_data

    def _verify_png(self, png_data: bytes, target: RenderTarget) -> None:
        """Check the capture is a PNG of the expected pixel size."""
        if not png_data.startswith(PNG_SIGNATURE):
            raise CaptureError("Screenshot is not a PNG image")

        try:
            with Image.open(io.BytesIO(png_data)) as image:
                size = image.size
        except (UnidentifiedImageError, OSError) as e:
            raise CaptureError("Screenshot could not be decoded") from e

        expected = (target.pixel_width, target.pixel_height)
        if size != expected:
            self.logger.error("Unexpected screenshot size", size=size, expected=expected)
            raise CaptureError("Screenshot size does not match the render target")
