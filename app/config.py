"""
Configuration read from environment variables.

Values are captured once when this module is imported, so variables
must be set before the application is created.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Service settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "FizzBuzz Stats")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # "memory" keeps counts in-process; "redis" uses REDIS_URL.
    store_backend: str = os.getenv("STORE_BACKEND", "memory").lower()
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    redis_socket_timeout: float = float(os.getenv("REDIS_SOCKET_TIMEOUT", "2.0"))

    # Every counter key is stored as "<namespace>:<canonical json>".
    stats_namespace: str = os.getenv("STATS_NAMESPACE", "stats")
    scan_page_size: int = int(os.getenv("SCAN_PAGE_SIZE", "1000"))

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "18001"))


settings = Settings()
