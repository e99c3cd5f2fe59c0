"""
TTL-Cache Configuration Settings

This module contains all configuration constants for the TTL-Cache
library and its HTTP listener.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Cache and server configuration settings."""

    # Network settings
    HOST: str = os.environ.get("TTL_CACHE_HOST", "0.0.0.0")
    PORT: int = int(os.environ.get("TTL_CACHE_PORT", "8080"))

    # Cache settings
    TTL_MS: int = int(os.environ.get("TTL_CACHE_TTL_MS", "1000"))

    # HTTP limits
    MAX_HEADER_BYTES: int = 16384  # Request line plus headers, enforced by h11
    MAX_BODY_BYTES: int = 1048576
    KEEP_ALIVE_TIMEOUT: int = 5  # Seconds before an idle connection is closed

    # Logging settings
    DEBUG: bool = os.environ.get("TTL_CACHE_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("TTL_CACHE_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
