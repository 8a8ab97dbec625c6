"""Exceptions raised by the reporter."""

from typing import Optional


class ReporterError(Exception):
    """Base class for reporter errors."""


class PayloadConstructionError(ReporterError):
    """Raised when an error report cannot be turned into a payload."""


class DeliveryError(ReporterError):
    """Raised when a payload could not be delivered to the collector."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
