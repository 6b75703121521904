import os
from typing import List
from functools import lru_cache

from .timeutils import parse_timezone


class Settings:
    """Engine settings read from the environment"""

    # Time handling
    TIMEZONE: str = os.getenv("TOURENGINE_TIMEZONE", "UTC")
    MAX_OCCURRENCES: int = int(os.getenv("TOURENGINE_MAX_OCCURRENCES", "52"))

    # Logging
    LOG_LEVEL: str = os.getenv("TOURENGINE_LOG_LEVEL", "INFO").upper()

    # CORS
    CORS_ALLOW_ORIGINS: List[str] = []
    CORS_ALLOW_CREDENTIALS: bool = True

    def __init__(self):
        self._validate()
        self._parse_cors_origins()
        self.tzinfo = parse_timezone(self.TIMEZONE)

    def _validate(self):
        """Validate settings that would otherwise fail late"""
        if self.MAX_OCCURRENCES <= 0:
            raise ValueError("TOURENGINE_MAX_OCCURRENCES must be a positive integer")
        if parse_timezone(self.TIMEZONE, strict=True) is None:
            raise ValueError(f"TOURENGINE_TIMEZONE '{self.TIMEZONE}' is not a known timezone")

    def _parse_cors_origins(self):
        """Parse CORS origins from environment"""
        raw_origins = os.getenv("CORS_ALLOW_ORIGINS", "*")

        if raw_origins.strip() == "*":
            self.CORS_ALLOW_ORIGINS = ["*"]
            self.CORS_ALLOW_CREDENTIALS = False  # wildcard forbids credentials
        else:
            self.CORS_ALLOW_ORIGINS = [o.strip() for o in raw_origins.split(",") if o.strip()]
            self.CORS_ALLOW_CREDENTIALS = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
