# 📄 File: freeexperience/api/middleware/error_handling.py
#
# 🧭 Purpose (Layman Explanation):
# Catches any error nobody else handled and turns it into a tidy error message, and stamps
# every answer with a tracking number and how long it took.
#
# 🧪 Purpose (Technical Summary):
# Request-correlation and last-resort error middleware. Binds a request id into the
# logging context, adds X-Request-ID and X-Response-Time headers, and converts unexpected
# exceptions into the standard error envelope with status 500.
#
# 🔗 Dependencies:
# starlette BaseHTTPMiddleware, shared exceptions, structured logging
#
# 🔄 Connected Modules / Calls From:
# freeexperience.main (middleware registration)

import time
import traceback
import uuid
from typing import Any, Dict, Optional

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from freeexperience.shared.config.settings import Settings, get_settings
from freeexperience.shared.core.exceptions import ErrorKind, exception_to_dict
from freeexperience.shared.utils.logging import get_logger, log_context

logger = get_logger(__name__)


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware for the FreeExperience API.

    FreeExperienceException subclasses are answered by the application's
    exception handler before they reach this middleware; anything else is
    logged with its traceback and answered with a 500 envelope.
    """

    def __init__(self, app: ASGIApp, settings: Optional[Settings] = None):
        super().__init__(app)
        self.settings = settings or get_settings()

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        with log_context(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception as exc:
                response = self._error_response(request, exc, request_id)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{time.perf_counter() - started:.3f}s"
        return response

    def _error_response(self, request: Request, exc: Exception, request_id: str) -> JSONResponse:
        logger.error(
            f"Unhandled error in {request.method} {request.url.path}: {exc}",
            extra={
                "method": request.method,
                "path": str(request.url.path),
                "exception_type": type(exc).__name__,
            },
            exc_info=True
        )

        body: Dict[str, Any] = exception_to_dict(exc)
        body["error"]["message"] = "An internal server error occurred"
        body["error"]["request_id"] = request_id

        if self.settings.DEBUG and not self.settings.is_production:
            body["error"]["debug"] = {
                "exception_type": type(exc).__name__,
                "exception_message": str(exc),
                "traceback": traceback.format_exc().split("\n"),
            }

        response = JSONResponse(status_code=500, content=body)
        response.headers["X-Error-Code"] = ErrorKind.INTERNAL.value
        return response
