import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.logging_config import get_logger


class AppError(Exception):
    """Base application error with status code and detail."""
    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: str | None = None, *, status_code: int | None = None):
        self.detail = detail or self.default_detail
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.detail)


class ValidationError(AppError):
    status_code = 400
    default_detail = "Validation error"


class NotFoundError(AppError):
    status_code = 404
    default_detail = "Not found"


class ConflictError(AppError):
    status_code = 400
    default_detail = "Conflict"


class InvalidStateError(AppError):
    status_code = 400
    default_detail = "Invalid state"


class InternalError(AppError):
    status_code = 500


def _request_logger(request: Request):
    return get_logger("app.exceptions", request_id=getattr(request.state, "request_id", None))


def setup_exception_handlers(app: FastAPI):
    """Configure global exception handlers for the application"""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        _request_logger(request).warning(
            f"HTTP exception: {exc.status_code} - {exc.detail}",
            extra={"http": {"status_code": exc.status_code, "path": request.url.path}},
        )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        readable_errors = []
        for error in exc.errors():
            location = " -> ".join(str(loc) for loc in error["loc"])
            readable_errors.append(f"{location}: {error['msg']}")

        _request_logger(request).warning(
            f"Validation error for {request.method} {request.url.path}",
            extra={"http": {"path": request.url.path, "method": request.method}},
        )
        return JSONResponse(
            status_code=400,
            content={"detail": "Validation error", "errors": readable_errors},
        )

    @app.exception_handler(AppError)
    async def app_exception_handler(request: Request, exc: AppError):
        log = _request_logger(request)
        log_method = log.error if exc.status_code >= 500 else log.warning
        log_method(
            f"Application error: {exc.status_code} - {exc.detail}",
            extra={"http": {"status_code": exc.status_code, "path": request.url.path}},
        )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        tb = traceback.format_exception(type(exc), exc, exc.__traceback__)
        _request_logger(request).error(
            f"Unhandled exception: {exc}",
            exc_info=exc,
            extra={"http": {"path": request.url.path, "method": request.method}},
        )

        if settings.is_production:
            return JSONResponse(status_code=500, content={"detail": "Internal server error"})

        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "message": str(exc),
                "traceback": tb,
            },
        )
