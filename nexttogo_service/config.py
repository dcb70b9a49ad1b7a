# nexttogo_service/config.py
from functools import lru_cache
from typing import List
from typing import Literal

import structlog
from pydantic import Field
from pydantic import model_validator
from pydantic_settings import BaseSettings

DEFAULT_FEED_URL = "https://api.neds.com.au/rest/v1/racing/?method=nextraces&count=10"


class Settings(BaseSettings):
    # --- Feed Source ---
    FEED_SOURCE: Literal["neds", "stub"] = "neds"
    FEED_URL: str = DEFAULT_FEED_URL
    FETCH_TIMEOUT_SECONDS: float = 20.0

    # --- Display Window & Timing ---
    RACE_LIMIT: int = 5
    REFRESH_INTERVAL_SECONDS: float = 10.0
    GRACE_PERIOD_SECONDS: int = 60
    CLOCK_TICK_SECONDS: float = 1.0

    # --- API Gateway Configuration ---
    UVICORN_HOST: str = "127.0.0.1"
    UVICORN_PORT: int = 8000

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    # --- CORS Configuration ---
    ALLOWED_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:3001"]
    )

    model_config = {"env_file": ".env", "case_sensitive": True, "frozen": True}

    @model_validator(mode="after")
    def check_timing(self) -> "Settings":
        """Rejects windows and intervals that would stall or empty the display."""
        if self.RACE_LIMIT < 1:
            raise ValueError("RACE_LIMIT must be at least 1.")
        for name in ("REFRESH_INTERVAL_SECONDS", "CLOCK_TICK_SECONDS", "FETCH_TIMEOUT_SECONDS"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive.")
        if self.GRACE_PERIOD_SECONDS < 0:
            raise ValueError("GRACE_PERIOD_SECONDS must not be negative.")
        return self


@lru_cache()
def get_settings() -> Settings:
    settings = Settings()
    structlog.get_logger(__name__).info(
        "settings_loaded",
        feed_source=settings.FEED_SOURCE,
        race_limit=settings.RACE_LIMIT,
        refresh_interval=settings.REFRESH_INTERVAL_SECONDS,
        grace_period=settings.GRACE_PERIOD_SECONDS,
    )
    return settings
