from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import ErrorKind, ModerationError
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)

STATUS_BY_KIND = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ALREADY_REVIEWED: 409,
    ErrorKind.STATUS_NOT_ALLOWED: 403,
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.UPSTREAM_SERVICE_ERROR: 502,
}


def setup_exception_handlers(app: FastAPI):
    @app.exception_handler(ModerationError)
    async def moderation_error_handler(request, exc: ModerationError):
        return JSONResponse(
            status_code=STATUS_BY_KIND.get(exc.kind, 400),
            content={"detail": exc.message, "kind": exc.kind.value},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        return JSONResponse(
            status_code=422,
            content={"detail": exc.errors()},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request, exc):
        logger.exception(f"Unhandled error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )
