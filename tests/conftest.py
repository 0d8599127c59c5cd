"""
Test Configuration
==================

Pytest configuration with fixtures for all test types.
Provides test settings, mock browser graphs and an API client.
"""

import os

os.environ.setdefault("QUOTECARD_ENVIRONMENT", "testing")
os.environ.setdefault("QUOTECARD_LOG_LEVEL", "DEBUG")

from typing import Any, Dict, Generator

import pytest
from fastapi.testclient import TestClient

from quotecard.api.main import app
from quotecard.api.routes.generate import get_quote_service
from quotecard.config.settings import Settings
from quotecard.core.rendering.html_generator import CardHTMLGenerator
from quotecard.core.service import QuoteCardService
from quotecard.models.schemas import RenderTarget

from tests.utils import MockPlaywright, QuotePayloadGenerator, SpyRenderEngine


def make_test_settings(**overrides: Any) -> Settings:
    """Small canvas and no settle delay so mocked renders stay fast."""
    values: Dict[str, Any] = {
        "environment": "testing",
        "canvas_width": 40,
        "canvas_height": 30,
        "device_scale_factor": 2.0,
        "settle_delay_ms": 0,
        "load_timeout_ms": 30000,
        "load_timeout_grace_ms": 2000,
        "ready_timeout_ms": 100,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def test_settings() -> Settings:
    """Test settings fixture."""
    return make_test_settings()


@pytest.fixture
def render_target(test_settings: Settings) -> RenderTarget:
    return RenderTarget.from_settings(test_settings)


@pytest.fixture
def mock_playwright(render_target: RenderTarget) -> MockPlaywright:
    """Playwright graph whose screenshot matches the test render target."""
    return MockPlaywright.for_target(render_target)


@pytest.fixture
def html_generator() -> CardHTMLGenerator:
    return CardHTMLGenerator()


@pytest.fixture
def spy_engine() -> SpyRenderEngine:
    return SpyRenderEngine(fail_marker="Crash Test")


@pytest.fixture
def quote_service(spy_engine: SpyRenderEngine, test_settings: Settings) -> QuoteCardService:
    return QuoteCardService(engine=spy_engine, settings=test_settings)


@pytest.fixture
def ada_payload() -> Dict[str, Any]:
    return QuotePayloadGenerator.ada()


@pytest.fixture
def api_client(quote_service: QuoteCardService) -> Generator[TestClient, None, None]:
    """FastAPI test client backed by the spy render engine."""
    app.dependency_overrides[get_quote_service] = lambda: quote_service
    try:
        with TestClient(app, raise_server_exceptions=False) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
