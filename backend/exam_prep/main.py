"""FastAPI application entry point."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from exam_prep import __version__
from exam_prep.api.middleware import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    request_validation_handler,
)
from exam_prep.api.routes import router as api_router
from exam_prep.core.config import get_config
from exam_prep.core.di_container import container as di_container
from exam_prep.core.logging import setup_logging

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    config = get_config()

    setup_logging(
        log_level=config.log_level,
        json_format=not config.debug,
        log_to_file=config.log_to_file,
    )

    # The credential is only checked per chat request; startup never fails on it
    logger.info(
        "application_starting",
        app_name=config.app_name,
        llm_provider=config.llm.provider,
        llm_model=config.llm.model,
        credential_configured=bool(config.llm.openai_api_key),
        max_upload_bytes=config.upload.max_file_size_bytes,
    )

    yield

    logger.info("application_shutting_down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_config()

    # Routes resolve their collaborators through the container
    di_container.wire(modules=["exam_prep.api.routes"])

    app = FastAPI(
        title=config.app_name,
        description="Upload study material and chat about it with an LLM",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Middleware added last runs first: CORS wraps every response, errors included
    app.add_middleware(ExceptionHandlerMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api")

    @app.get("/")
    async def root():
        return {
            "name": config.app_name,
            "version": __version__,
            "docs": "/docs",
            "health": "/api/health",
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    config = get_config()
    uvicorn.run(
        "exam_prep.main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
    )
