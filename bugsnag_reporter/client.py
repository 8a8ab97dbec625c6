"""
Connection Manager

Posts serialized payloads to the collection endpoint.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, Optional

import requests

from .config import ReporterConfig
from .exceptions import DeliveryError
from .payload import PAYLOAD_VERSION
from .types import Payload

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Sends payloads to the collector over HTTP.

    Usage:
        config = ReporterConfig.from_env()
        manager = ConnectionManager(config)
        manager.submit_payload(payload)  # raises DeliveryError on failure
    """

    def __init__(
        self,
        config: ReporterConfig,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize connection manager.

        Args:
            config: ReporterConfig with endpoint, API key and timeout
            session: Optional requests session (a new one is created if omitted)
        """
        self.config = config
        self._session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Bugsnag-Api-Key": self.config.api_key,
            "Bugsnag-Payload-Version": PAYLOAD_VERSION,
            "Bugsnag-Sent-At": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
        }

    def submit_payload(self, payload: Payload) -> None:
        """
        Submit a payload with a single POST request.

        Args:
            payload: Fully built payload

        Raises:
            DeliveryError: On any transport failure or non-2xx response
        """
        try:
            response = self._session.post(
                self.config.endpoint,
                data=payload.json.encode("utf-8"),
                headers=self._headers(),
                timeout=self.config.timeout,
                allow_redirects=False,
            )
        except requests.RequestException as e:
            raise DeliveryError(f"Failed to reach collector: {e}") from e

        # Only 2xx counts as delivered
        if not 200 <= response.status_code < 300:
            raise DeliveryError(
                f"Collector rejected payload with status {response.status_code}",
                status_code=response.status_code,
            )

        logger.debug("Payload delivered to %s (%s)", self.config.endpoint, response.status_code)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()
