"""Application settings loaded from environment variables.

Defines all environment-driven configuration used by the app.
"""

from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed configuration model for the application."""

    # Check timing (seconds)
    BESTBUY_TIMEOUT_SECONDS: float = 60.0
    DEFAULT_TIMEOUT_SECONDS: float = 15.0
    BESTBUY_SETTLE_DELAY_SECONDS: float = 4.0
    DEFAULT_SETTLE_DELAY_SECONDS: float = 3.0
    INTER_CHECK_DELAY_SECONDS: float = 2.0

    # Browser rendering
    NAVIGATION_TIMEOUT_MS: int = 45000
    BROWSER_HEADLESS: bool = True
    VIEWPORT_WIDTH: int = 1920
    VIEWPORT_HEIGHT: int = 1080
    USER_AGENTS: List[str] = [
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/17.2 Safari/605.1.15",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    ]

    LOG_LEVEL: str = "INFO"

    # API parameters
    ROOT_PATH_BACKEND: str = ""
    ALLOWED_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
