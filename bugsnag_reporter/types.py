"""
Reporter Types

Data structures shared by the transformer, client and reporter.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import Any, Dict, Mapping, Optional, Protocol, runtime_checkable

DEFAULT_ERROR_MESSAGE = HTTPStatus.INTERNAL_SERVER_ERROR.phrase

_FALSE_STRINGS = {"false", "no", "0", "off"}


class Severity(Enum):
    """Importance of a report."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @classmethod
    def parse(cls, value: Any) -> "Severity":
        """Parse a severity, falling back to ERROR for anything unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.ERROR
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.ERROR


@runtime_checkable
class ReportableError(Protocol):
    """
    Capability of errors that carry their own report details.

    Any exception exposing ``message``, ``metadata`` and ``status_code``
    is reported with its own message and metadata.
    """

    message: str
    metadata: Optional[Mapping[str, Any]]
    status_code: int


def _is_false(value: Any) -> bool:
    if isinstance(value, bool):
        return not value
    if isinstance(value, str):
        return value.strip().lower() in _FALSE_STRINGS
    if isinstance(value, (int, float)):
        return value == 0
    return False


def is_reportable(error: BaseException) -> bool:
    """
    Check whether an error should be sent to the collector.

    Only a ReportableError whose metadata explicitly sets ``report`` to a
    false value is suppressed.
    """
    if not isinstance(error, ReportableError):
        return True

    metadata = error.metadata
    if not isinstance(metadata, Mapping) or "report" not in metadata:
        return True
    return not _is_false(metadata["report"])


class AbortError(Exception):
    """
    Application error carrying an HTTP status, message and report metadata.

    Usage:
        raise AbortError(404, "Order not found", metadata={"order_id": 12})
        raise AbortError(401, metadata={"report": False})
    """

    def __init__(
        self,
        status_code: int = 500,
        message: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.message = message or _reason_phrase(status_code)
        self.metadata = metadata
        super().__init__(self.message)

    @property
    def reportable(self) -> bool:
        return is_reportable(self)


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return DEFAULT_ERROR_MESSAGE


@dataclass(frozen=True)
class RequestContext:
    """Snapshot of the in-flight request at the moment of the error."""

    method: str
    url: str
    path: str
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    client_ip: Optional[str] = None
    referer: Optional[str] = None

    @property
    def context(self) -> str:
        """Short description used to group events, e.g. ``GET /orders``."""
        return f"{self.method} {self.path}"


@dataclass(frozen=True)
class Payload:
    """A fully built report, ready for delivery. The body is read-only."""

    body: Mapping[str, Any]
    json: str

    @property
    def severity(self) -> str:
        return self.body["events"][0]["severity"]

    def to_dict(self) -> Dict[str, Any]:
        """Return a mutable copy of the wire body."""
        return json.loads(self.json)
