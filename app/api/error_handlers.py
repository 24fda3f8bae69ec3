"""
Global exception handlers.

Every failure leaves the API as {"success": false, "message": ...}:
    WaitlistError           → its own status and message
    RequestValidationError  → 400 (malformed body / query)
    404 / 405               → 404 "API endpoint not found"
    anything else           → 500, details only in the logs
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import WaitlistError

logger = logging.getLogger(__name__)


def _envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
    )


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(WaitlistError)
    async def waitlist_error_handler(request: Request, exc: WaitlistError):
        if exc.http_status >= 500:
            logger.error(
                "%s: %s", type(exc).__name__, exc.message,
                extra={"path": request.url.path, "status_code": exc.http_status},
            )
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("Rejected request body on %s", request.url.path)
        return _envelope(status.HTTP_400_BAD_REQUEST, "Invalid request")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return _envelope(status.HTTP_404_NOT_FOUND, "API endpoint not found")
        return _envelope(exc.status_code, str(exc.detail))

    # Runs inside CORSMiddleware (registered before it), so 500s keep CORS headers
    @app.middleware("http")
    async def unhandled_error_middleware(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error", extra={"path": request.url.path})
            return _envelope(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
