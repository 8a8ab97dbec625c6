"""
Reporter Configuration

Loads reporter settings from environment variables.
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

DEFAULT_ENDPOINT = "https://notify.bugsnag.com"
DEFAULT_FILTERS = ("password", "authorization", "cookie")


def _split(value: Optional[str]) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclass(frozen=True)
class ReporterConfig:
    """Configuration for the error reporter."""

    api_key: str
    endpoint: str = DEFAULT_ENDPOINT

    # Release stage settings
    release_stage: str = "production"
    notify_release_stages: Optional[Tuple[str, ...]] = None
    enabled: bool = True

    # Keys redacted from metadata, headers and query parameters
    filters: Tuple[str, ...] = DEFAULT_FILTERS

    # App metadata
    app_version: Optional[str] = None
    app_type: str = "asgi"
    hostname: Optional[str] = None

    timeout: float = 10.0  # seconds per submission

    def __post_init__(self):
        if not self.api_key:
            raise ValueError("api_key is required")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "ReporterConfig":
        """Create config from environment variables (and a .env file if present)."""
        load_dotenv(dotenv_path)

        filters = _split(os.getenv("BUGSNAG_FILTERS"))
        return cls(
            api_key=os.getenv("BUGSNAG_API_KEY", ""),
            endpoint=os.getenv("BUGSNAG_ENDPOINT", DEFAULT_ENDPOINT),
            release_stage=os.getenv("BUGSNAG_RELEASE_STAGE", "production"),
            notify_release_stages=_split(os.getenv("BUGSNAG_NOTIFY_RELEASE_STAGES")),
            enabled=os.getenv("BUGSNAG_ENABLED", "true").lower() == "true",
            filters=filters if filters is not None else DEFAULT_FILTERS,
            app_version=os.getenv("BUGSNAG_APP_VERSION"),
            app_type=os.getenv("BUGSNAG_APP_TYPE", "asgi"),
            hostname=os.getenv("BUGSNAG_HOSTNAME"),
            timeout=float(os.getenv("BUGSNAG_TIMEOUT", "10")),
        )

    @property
    def should_notify(self) -> bool:
        """Check if reports should be sent for the current release stage."""
        if not self.enabled:
            return False
        if self.notify_release_stages is None:
            return True
        return self.release_stage in self.notify_release_stages
