"""FastAPI middleware."""

import time
from typing import override

import structlog
from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from exam_prep.core.exceptions import MissingFileError

logger = structlog.get_logger()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and responses."""

    # Skip logging for health checks and docs to reduce noise
    SKIP_PATHS = {"/api/health", "/docs", "/redoc", "/openapi.json"}

    @override
    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        path = request.url.path

        if path in self.SKIP_PATHS:
            return await call_next(request)

        logger.info("request_started", method=request.method, path=path)

        try:
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.info(
                "request_completed",
                method=request.method,
                path=path,
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )

            response.headers["X-Process-Time-Ms"] = f"{duration_ms:.2f}"
            return response

        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "request_failed",
                method=request.method,
                path=path,
                error=str(e),
                duration_ms=round(duration_ms, 2),
            )
            raise


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """Turns exceptions into {"error": message} JSON responses."""

    @override
    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            # Application errors carry their own status code and message
            if hasattr(e, "to_dict"):
                status_code = getattr(e, "status_code", 500)
                if status_code >= 500:
                    logger.error(
                        "request_error",
                        path=request.url.path,
                        code=getattr(e, "code", None),
                        error=str(e),
                    )
                else:
                    logger.warning(
                        "request_rejected",
                        path=request.url.path,
                        code=getattr(e, "code", None),
                        error=str(e),
                    )
                return JSONResponse(status_code=status_code, content=e.to_dict())

            logger.exception("unhandled_exception", path=request.url.path, error=str(e))
            return JSONResponse(
                status_code=500,
                content={"error": f"Internal server error: {e}"},
            )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report FastAPI parameter validation failures as 400 {"error": message}."""
    first = exc.errors()[0] if exc.errors() else {}
    loc = [str(part) for part in first.get("loc", ()) if part != "body"]
    if loc and loc[-1] == "file":
        # A form field named "file" that is not a file part
        message = MissingFileError().message
    else:
        message = f"Invalid {'.'.join(loc) or 'request'}: {first.get('msg', 'validation failed')}"

    logger.warning("request_rejected", path=request.url.path, code="VALIDATION_ERROR", error=message)
    return JSONResponse(status_code=400, content={"error": message})
