"""
Application Settings
===================

Main application settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional, List, Union
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json
from pathlib import Path

from quotecard.models.schemas import SUPPORTED_DEVICE_SCALE_FACTORS


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="Twitter Quote Generator API", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port")
    max_body_bytes: int = Field(
        default=10 * 1024 * 1024, gt=0, description="Maximum accepted request body size"
    )

    # Canvas Configuration
    canvas_width: int = Field(default=1500, gt=0, le=4000, description="Canvas width in CSS px")
    canvas_height: int = Field(default=1500, gt=0, le=4000, description="Canvas height in CSS px")
    device_scale_factor: float = Field(default=2.0, gt=0, le=3.0, description="Device pixel ratio")
    background_color: str = Field(default="#15202B", description="Canvas fallback color")
    card_max_width: int = Field(default=512, gt=0, description="Card max width in CSS px")
    card_padding: int = Field(default=48, ge=0, description="Card padding in CSS px")

    # Browser Configuration
    playwright_headless: bool = Field(default=True, description="Run browser in headless mode")
    chromium_sandbox: bool = Field(default=False, description="Enable the Chromium sandbox")
    browser_args: List[str] = Field(
        default=[
            "--disable-dev-shm-usage",
            "--disable-accelerated-2d-canvas",
            "--disable-gpu",
        ],
        description="Extra Chromium command line switches",
    )
    load_timeout_ms: int = Field(
        default=30000, gt=0, le=30000, description="Network idle wait budget in milliseconds"
    )
    load_timeout_grace_ms: int = Field(
        default=2000, ge=0, description="Hard ceiling slack on top of the load budget"
    )
    settle_delay_ms: int = Field(
        default=500, ge=0, description="Fixed delay after network idle, in milliseconds"
    )
    wait_for_ready_marker: bool = Field(
        default=True, description="Wait for the card's data-card-ready marker"
    )
    ready_timeout_ms: int = Field(
        default=2000, gt=0, description="Ready marker wait in milliseconds"
    )

    # Security Configuration
    allowed_hosts: List[str] = Field(default=["*"], description="Allowed origins for CORS")

    # Monitoring Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Optional[Path] = Field(default=None, description="Directory for rotating log files")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("device_scale_factor")
    @classmethod
    def validate_device_scale_factor(cls, v: float) -> float:
        """Validate device scale factor."""
        if v not in SUPPORTED_DEVICE_SCALE_FACTORS:
            raise ValueError(
                f"Device scale factor must be one of: {SUPPORTED_DEVICE_SCALE_FACTORS}"
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("allowed_hosts", "browser_args", mode="before")
    @classmethod
    def parse_string_list(cls, v: Union[str, List[str]]) -> List[str]:
        """Parse a list from a JSON array or a comma-separated string."""
        if isinstance(v, str):
            # Handle JSON-like string: ["*"] or ["host1", "host2"]
            v = v.strip()
            if v.startswith("[") and v.endswith("]"):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    pass
            # Handle comma-separated string: "*" or "host1,host2"
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("log_dir")
    @classmethod
    def create_log_dir(cls, v: Optional[Path]) -> Optional[Path]:
        """Ensure the log directory exists."""
        if v is not None:
            v.mkdir(parents=True, exist_ok=True)
        return v

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="QUOTECARD_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
