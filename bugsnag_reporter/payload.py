"""
Payload Builders

Turns an error report into a notify API (payload version 4) body.
"""

import json
import traceback
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .config import ReporterConfig
from .exceptions import PayloadConstructionError
from .types import Payload, RequestContext, Severity

PAYLOAD_VERSION = "4"
FILTERED = "[FILTERED]"

NOTIFIER_NAME = "bugsnag-reporter"
NOTIFIER_URL = "https://github.com/bugsnag-reporter/bugsnag-reporter"


def _is_filtered(key: Any, filters: Sequence[str]) -> bool:
    lowered = str(key).lower()
    return any(f.lower() in lowered for f in filters)


def filter_values(value: Any, filters: Sequence[str]) -> Any:
    """
    Redact values whose keys match any filter, recursing into containers.

    Args:
        value: Mapping, list or scalar to filter
        filters: Case-insensitive substrings to match against keys

    Returns:
        A filtered copy; the input is left untouched

    Raises:
        PayloadConstructionError: If a container holds a reference to itself
    """
    return _filter(value, filters, frozenset())


def _filter(value: Any, filters: Sequence[str], parents: frozenset) -> Any:
    if not isinstance(value, (Mapping, list, tuple)):
        return value

    # ids of the containers enclosing value
    if id(value) in parents:
        raise PayloadConstructionError("metadata contains a circular reference")
    parents = parents | {id(value)}

    if isinstance(value, Mapping):
        return {
            k: FILTERED if _is_filtered(k, filters) else _filter(v, filters, parents)
            for k, v in value.items()
        }
    return [_filter(v, filters, parents) for v in value]


def _stacktrace(error: Optional[BaseException]) -> List[Dict[str, Any]]:
    """Build stack frames from an exception traceback, innermost first."""
    if error is None or error.__traceback__ is None:
        return []

    frames = traceback.extract_tb(error.__traceback__)
    return [
        {"file": frame.filename, "lineNumber": frame.lineno, "method": frame.name}
        for frame in reversed(frames)
    ]


def _exception(message: str, error: Optional[BaseException]) -> Dict[str, Any]:
    return {
        "errorClass": type(error).__name__ if error is not None else "Error",
        "message": message,
        "stacktrace": _stacktrace(error),
    }


def _app(config: ReporterConfig) -> Dict[str, Any]:
    app = {"releaseStage": config.release_stage, "type": config.app_type}
    if config.app_version:
        app["version"] = config.app_version
    return app


def _request(request: RequestContext, filters: Sequence[str]) -> Dict[str, Any]:
    return {
        "clientIp": request.client_ip,
        "headers": filter_values(request.headers, filters),
        "httpMethod": request.method,
        "url": request.url,
        "referer": request.referer,
    }


class PayloadTransformer:
    """
    Builds delivery payloads from report details.

    Usage:
        transformer = PayloadTransformer(config)
        payload = transformer.payload_for("Boom", None, None, Severity.ERROR)
    """

    def __init__(self, config: ReporterConfig):
        self.config = config

    def notifier(self) -> Dict[str, str]:
        from . import __version__

        return {"name": NOTIFIER_NAME, "version": __version__, "url": NOTIFIER_URL}

    def payload_for(
        self,
        message: str,
        metadata: Optional[Mapping[str, Any]],
        request: Optional[RequestContext],
        severity: Severity,
        error: Optional[BaseException] = None,
    ) -> Payload:
        """
        Build the payload for a single report.

        Args:
            message: Human-readable error message
            metadata: Extra data attached to the report (omitted when None)
            request: Request snapshot (request fields omitted when None)
            severity: Report severity
            error: Originating exception, used for the error class and stacktrace

        Returns:
            Fully serialized Payload

        Raises:
            PayloadConstructionError: If metadata is not a mapping, is circular or is not JSON serializable
        """
        if metadata is not None and not isinstance(metadata, Mapping):
            raise PayloadConstructionError(
                f"metadata must be a mapping, got {type(metadata).__name__}"
            )

        filters = self.config.filters
        severity = Severity.parse(severity)

        event: Dict[str, Any] = {
            "payloadVersion": PAYLOAD_VERSION,
            "exceptions": [_exception(message, error)],
            "severity": severity.value,
            "severityReason": {
                "type": "unhandledException" if severity is Severity.ERROR else "userSpecifiedSeverity",
            },
            "unhandled": severity is Severity.ERROR,
            "app": _app(self.config),
        }

        if self.config.hostname:
            event["device"] = {"hostname": self.config.hostname}

        meta_data: Dict[str, Any] = {}
        if metadata is not None:
            meta_data["metadata"] = filter_values(metadata, filters)

        if request is not None:
            event["context"] = request.context
            event["request"] = _request(request, filters)
            meta_data["request"] = {
                "path": request.path,
                "query": filter_values(request.query, filters),
            }

        event["metaData"] = meta_data

        body = {
            "apiKey": self.config.api_key,
            "payloadVersion": PAYLOAD_VERSION,
            "notifier": self.notifier(),
            "events": [event],
        }

        try:
            serialized = json.dumps(body, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise PayloadConstructionError(f"Report is not JSON serializable: {e}") from e

        return Payload(body=MappingProxyType(body), json=serialized)
