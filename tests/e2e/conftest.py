"""
E2E Test Configuration
======================

Fixtures for tests that drive a real Chromium instance.
Tests are skipped when Playwright's browser binaries are not installed.
"""

import pytest
import pytest_asyncio
from playwright.async_api import async_playwright

from quotecard.config.settings import Settings
from quotecard.core.rendering.png_generator import PlaywrightPNGGenerator
from quotecard.core.service import QuoteCardService


@pytest_asyncio.fixture
async def chromium_available() -> None:
    """Skip unless a headless Chromium can be launched."""
    try:
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(headless=True, chromium_sandbox=False)
            await browser.close()
    except Exception as e:
        pytest.skip(f"Chromium not available: {e}")


@pytest.fixture
def e2e_settings() -> Settings:
    """Production canvas with a short settle delay."""
    return Settings(_env_file=None, environment="testing", settle_delay_ms=100)


@pytest.fixture
def real_service(chromium_available: None, e2e_settings: Settings) -> QuoteCardService:
    return QuoteCardService(engine=PlaywrightPNGGenerator(e2e_settings), settings=e2e_settings)
