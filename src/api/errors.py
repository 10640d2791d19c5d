"""Exception handlers mapping domain and request errors to `{"error": ...}` responses."""
import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.exceptions import ExportError, StoreError
from core.rate_limit_config import RateLimitExceededError

logger = logging.getLogger(__name__)


def error_response(
    status_code: int, message: str, headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def _describe(error: dict[str, Any]) -> str:
    loc = [str(part) for part in error.get("loc", ())]
    # Drop the "body"/"path"/"query" prefix unless it is all there is
    field = ".".join(loc[1:]) or ".".join(loc)
    return f"{field}: {error.get('msg', 'invalid value')}"


async def validation_error_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Bad body, path or query input -> 400."""
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        message = "failed to decode request body"
    else:
        message = "invalid request: " + "; ".join(_describe(err) for err in errors)
    logger.info("invalid_request", extra={"path": request.url.path, "errors": len(errors)})
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Conflict -> 409, NotFound -> 404, anything else from the store -> 500."""
    if exc.status_code >= 500:
        logger.error("store_failure", extra={"path": request.url.path, "error": exc.message})
    else:
        logger.info("store_client_error", extra={"path": request.url.path, "error": exc.message})
    return error_response(exc.status_code, exc.message)


async def export_error_handler(request: Request, exc: ExportError) -> JSONResponse:
    logger.error("export_failed", extra={"path": request.url.path, "error": str(exc)})
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "failed to marshal bookmarks to netscape format",
    )


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceededError,  # noqa: ARG001
) -> JSONResponse:
    return error_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        "rate limit exceeded",
        headers=exc.result.headers(),
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException,  # noqa: ARG001
) -> JSONResponse:
    """Unknown routes, wrong methods and explicit HTTPExceptions."""
    return error_response(exc.status_code, str(exc.detail), headers=exc.headers)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", extra={"path": request.url.path}, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(ExportError, export_error_handler)
    app.add_exception_handler(RateLimitExceededError, rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
