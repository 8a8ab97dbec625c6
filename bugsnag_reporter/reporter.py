"""
Error Reporter

Decides whether an error is reported, builds its payload and hands delivery
to a background job.
"""

import logging
from typing import Any, Callable, Mapping, Optional, Union

from .client import ConnectionManager
from .config import ReporterConfig
from .dispatch import Dispatcher, spawn_thread
from .exceptions import DeliveryError, PayloadConstructionError
from .payload import PayloadTransformer
from .types import (
    DEFAULT_ERROR_MESSAGE,
    Payload,
    ReportableError,
    RequestContext,
    Severity,
    is_reportable,
)

logger = logging.getLogger(__name__)

Completion = Callable[[], None]


class Reporter:
    """
    Reports errors to the collector without blocking the caller.

    Usage:
        config = ReporterConfig.from_env()
        reporter = Reporter(config)

        try:
            handle(request)
        except Exception as e:
            reporter.report(e, request_context)
            raise
    """

    def __init__(
        self,
        config: ReporterConfig,
        connection_manager: Optional[ConnectionManager] = None,
        transformer: Optional[PayloadTransformer] = None,
        dispatcher: Optional[Dispatcher] = None,
    ):
        """
        Initialize reporter.

        Args:
            config: ReporterConfig shared with the default collaborators
            connection_manager: Delivers payloads (built from config if omitted)
            transformer: Builds payloads (built from config if omitted)
            dispatcher: Runs delivery jobs in the background (a thread per job if omitted)
        """
        self.config = config
        self.connection_manager = connection_manager or ConnectionManager(config)
        self.transformer = transformer or PayloadTransformer(config)
        self.dispatcher = dispatcher or spawn_thread

    def report(
        self,
        error: BaseException,
        request: Optional[RequestContext] = None,
        severity: Union[Severity, str] = Severity.ERROR,
        completion: Optional[Completion] = None,
    ) -> bool:
        """
        Report an error.

        The payload is built on the caller's thread; delivery and the
        completion callback run in the background job.

        Args:
            error: The error to report
            request: Request snapshot, if the error came from a request
            severity: Report severity (strings are parsed, unknown values mean error)
            completion: Called after the submission attempt, whatever its outcome

        Returns:
            True if the report was dispatched, False if it was skipped or
            could not be scheduled

        Raises:
            PayloadConstructionError: If the payload could not be built
        """
        if not self.config.should_notify:
            logger.debug(
                "Reporting disabled for release stage %s, skipping", self.config.release_stage
            )
            return False

        if not is_reportable(error):
            logger.debug("Report suppressed by error metadata: %s", type(error).__name__)
            return False

        if isinstance(error, ReportableError):
            message = error.message
            metadata: Optional[Mapping[str, Any]] = error.metadata
        else:
            message = DEFAULT_ERROR_MESSAGE
            metadata = None

        try:
            payload = self.transformer.payload_for(
                message=message,
                metadata=metadata,
                request=request,
                severity=Severity.parse(severity),
                error=error,
            )
        except PayloadConstructionError as e:
            logger.error("Failed to build error report: %s", e)
            raise

        # Fire and forget.
        try:
            self.dispatcher(lambda: self._deliver(payload, completion))
        except Exception:
            logger.exception("Failed to schedule error report delivery")
            return False
        return True

    def _deliver(self, payload: Payload, completion: Optional[Completion]) -> None:
        """Background job: submit the payload, then run the completion callback."""
        try:
            self.connection_manager.submit_payload(payload)
        except DeliveryError as e:
            logger.warning("Failed to deliver error report: %s", e)
        except Exception:
            logger.exception("Unexpected error while delivering error report")
        finally:
            if completion is not None:
                try:
                    completion()
                except Exception:
                    logger.exception("Error report completion callback failed")
