"""Middleware for reporting errors raised while handling HTTP requests."""

import logging
from typing import Awaitable, Callable, Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from .exceptions import ReporterError
from .reporter import Reporter
from .types import RequestContext

logger = logging.getLogger(__name__)


def _joined_headers(request: Request) -> Dict[str, str]:
    # repeated headers are folded into one comma-separated value
    return {key: ", ".join(request.headers.getlist(key)) for key in request.headers.keys()}


def request_context_from(request: Request) -> RequestContext:
    """Snapshot a Starlette request into a RequestContext."""
    return RequestContext(
        method=request.method,
        url=str(request.url),
        path=request.url.path,
        query=dict(request.query_params),
        headers=_joined_headers(request),
        client_ip=request.client.host if request.client else None,
        referer=request.headers.get("referer"),
    )


class BugsnagMiddleware(BaseHTTPMiddleware):
    """Middleware that reports unhandled request errors.

    The error is re-raised after reporting so the application's own
    exception handling still produces the response.

    Usage:
        app = FastAPI()
        app.add_middleware(BugsnagMiddleware, reporter=Reporter(config))
    """

    def __init__(self, app: ASGIApp, reporter: Reporter) -> None:
        super().__init__(app)
        self.reporter = reporter

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            try:
                self.reporter.report(e, request_context_from(request))
            except ReporterError as report_error:
                logger.error(
                    "Could not report error for %s %s: %s",
                    request.method,
                    request.url.path,
                    report_error,
                )
            raise
