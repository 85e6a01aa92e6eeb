"""
Error handlers for the FastAPI application.

Every failure is returned as a StandardErrorResponse body. Boundary errors
(PhrasebookException subclasses) keep their own status code; anything
unexpected becomes a 500 with a generic message and a logged traceback.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import time
import asyncio
from typing import Dict, Any, Optional

from phrasebook_api.core.exceptions import PhrasebookException, ErrorCode
from phrasebook_api.schemas.base import StandardErrorResponse

logger = logging.getLogger(__name__)

# Starlette raises these itself for unknown routes and methods
HTTP_STATUS_CODES = {
    400: ErrorCode.VALIDATION_ERROR,
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    408: ErrorCode.PROCESSING_TIMEOUT,
    413: ErrorCode.IMAGE_TOO_LARGE,
    503: ErrorCode.STORAGE_UNAVAILABLE,
}


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def _log_extra(request: Request, **fields: Any) -> Dict[str, Any]:
    extra = {
        "request_id": _request_id(request),
        "request_path": request.url.path,
        "request_method": request.method,
    }
    extra.update(fields)
    return extra


class ErrorHandler:
    """
    Turns exceptions into StandardErrorResponse bodies and counts them per
    error code for the verbose health check.
    """

    def __init__(self):
        self.error_counts: Dict[str, int] = {}
        self.last_error_time: Dict[str, float] = {}

    async def handle_phrasebook_exception(self, request: Request, exc: PhrasebookException) -> JSONResponse:
        """
        Boundary errors: bad sync keys, missing text or images, model and
        storage failures. Client errors log at warning, server errors at error.
        """
        code = exc.error_code.value
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra=_log_extra(request, error_code=code, status_code=exc.status_code),
        )

        return self._respond(request, exc.status_code, code, exc.message, exc.details or None)

    async def handle_validation_error(self, request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Malformed JSON and bodies of the wrong shape. Returned as 400 with
        one entry per offending field.
        """
        problems = [
            {
                "field": ".".join(str(part) for part in err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in exc.errors()
        ]
        logger.warning(
            f"Request body rejected ({len(problems)} problems)",
            extra=_log_extra(request, validation_errors=problems),
        )

        return self._respond(
            request, 400, ErrorCode.VALIDATION_ERROR.value,
            "Request validation failed", {"validation_errors": problems},
        )

    async def handle_http_exception(self, request: Request, exc: StarletteHTTPException) -> JSONResponse:
        code = HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.INTERNAL_SERVER_ERROR).value
        logger.warning(
            f"HTTP {exc.status_code}: {exc.detail}",
            extra=_log_extra(request, status_code=exc.status_code),
        )

        return self._respond(
            request, exc.status_code, code, str(exc.detail),
            headers=getattr(exc, "headers", None), track=False,
        )

    async def handle_timeout_error(self, request: Request, exc: asyncio.TimeoutError) -> JSONResponse:
        logger.error("Upstream call timed out", extra=_log_extra(request))
        return self._respond(request, 504, ErrorCode.PROCESSING_TIMEOUT.value, "Request processing timed out")

    async def handle_generic_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """Anything unexpected. The client never sees the exception text."""
        logger.error(
            f"Unhandled {type(exc).__name__}: {exc}",
            exc_info=exc,
            extra=_log_extra(request, exception_type=type(exc).__name__),
        )
        return self._respond(
            request, 500, ErrorCode.INTERNAL_SERVER_ERROR.value, "An internal server error occurred",
        )

    def _respond(
        self,
        request: Request,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        track: bool = True,
    ) -> JSONResponse:
        if track:
            self._track_error(error_code)

        body = StandardErrorResponse(
            error=message,
            error_code=error_code,
            details=details,
            request_id=_request_id(request),
        )
        return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"), headers=headers)

    def _track_error(self, error_code: str) -> None:
        count = self.error_counts.get(error_code, 0) + 1
        self.error_counts[error_code] = count
        self.last_error_time[error_code] = time.time()

        if count % 10 == 0:
            logger.warning(f"{error_code} has occurred {count} times")

    def get_error_statistics(self) -> Dict[str, Any]:
        """Error counts in total and for codes seen within the last hour."""
        hour_ago = time.time() - 3600
        return {
            "error_counts": dict(self.error_counts),
            "recent_errors": {
                code: count for code, count in self.error_counts.items()
                if self.last_error_time.get(code, 0) > hour_ago
            },
            "total_errors": sum(self.error_counts.values()),
        }

    def reset(self) -> None:
        self.error_counts.clear()
        self.last_error_time.clear()


error_handler = ErrorHandler()


def setup_error_handlers(app):
    """Register the shared ErrorHandler on a FastAPI application."""
    handlers = (
        (PhrasebookException, error_handler.handle_phrasebook_exception),
        (RequestValidationError, error_handler.handle_validation_error),
        (StarletteHTTPException, error_handler.handle_http_exception),
        (asyncio.TimeoutError, error_handler.handle_timeout_error),
        (Exception, error_handler.handle_generic_exception),
    )
    for exc_class, handler in handlers:
        app.add_exception_handler(exc_class, handler)
