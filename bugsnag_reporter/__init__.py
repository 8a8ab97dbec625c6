"""
Bugsnag Error Reporter for ASGI applications

Provides:
- Crash-report payloads in the notify API format
- Fire-and-forget delivery to the collection endpoint
- Starlette/FastAPI middleware that reports request errors
"""

__version__ = "1.0.0"

from .config import ReporterConfig
from .types import (
    AbortError,
    Payload,
    ReportableError,
    RequestContext,
    Severity,
    is_reportable,
)
from .exceptions import (
    DeliveryError,
    PayloadConstructionError,
    ReporterError,
)
from .payload import PayloadTransformer
from .client import ConnectionManager
from .dispatch import ExecutorDispatcher, run_inline, spawn_thread
from .reporter import Reporter

__all__ = [
    '__version__',
    # Config
    'ReporterConfig',
    # Types
    'AbortError',
    'Payload',
    'ReportableError',
    'RequestContext',
    'Severity',
    'is_reportable',
    # Errors
    'DeliveryError',
    'PayloadConstructionError',
    'ReporterError',
    # Components
    'PayloadTransformer',
    'ConnectionManager',
    'ExecutorDispatcher',
    'run_inline',
    'spawn_thread',
    'Reporter',
]
