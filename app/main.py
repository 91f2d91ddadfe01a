"""Private Chat Console API - Main Application Module.

This module initializes the FastAPI application with proper configuration,
middleware, routing, and lifecycle management for the chat console backend.
"""

import logging
import sys
import uuid
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path

# Add the project root to Python path if running directly
if __name__ == "__main__":
    project_root = Path(__file__).parent.parent
    sys.path.insert(0, str(project_root))

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings, get_config_summary
from app.database import create_engine, create_session_factory, create_tables
from app.exceptions.base import StorageError
from app.services.blob_storage import LocalBlobStore
from app.services.gemini_gateway import GeminiGateway

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle events."""
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.app_name} ({settings.environment.value})")

    if not settings.master_password:
        logger.warning("MASTER_PASSWORD is not set; logins will fail until it is configured")

    await create_tables(app.state.engine)
    logger.info("Database tables created/verified")

    yield

    logger.info(f"Shutting down {settings.app_name}")
    await app.state.engine.dispose()


def setup_logging(settings: Settings):
    """Configure root logging once per process."""
    logging.basicConfig(
        level=settings.log_level.value,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration for this process; read from the environment
            when omitted.
    """
    settings = settings or Settings()
    setup_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Single-operator chat console backed by Google Gemini",
        version=settings.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    app.state.settings = settings
    app.state.engine = create_engine(settings)
    app.state.session_factory = create_session_factory(app.state.engine)
    app.state.blob_store = LocalBlobStore(settings.blob_storage_path)
    app.state.generation_gateway = GeminiGateway(settings)

    # Add middleware
    setup_middleware(app)

    # Add exception handlers
    setup_exception_handlers(app)

    # Include routers
    setup_routers(app)

    return app


def setup_middleware(app: FastAPI):
    """Configure application middleware."""
    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app.state.settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID middleware
    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


def error_response(
    request: Request,
    status_code: int,
    message: str,
    error_code: str,
    details=None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "error",
            "message": message,
            "error_code": error_code,
            "details": details,
            "timestamp": datetime.now(UTC).isoformat(),
            "request_id": getattr(request.state, "request_id", None),
        },
        headers=headers,
    )


def setup_exception_handlers(app: FastAPI):
    """Configure global exception handlers."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Handle custom exceptions that have structured detail
        if isinstance(exc.detail, dict) and "message" in exc.detail:
            message = exc.detail["message"]
            error_code = exc.detail.get("error_code", "HTTP_ERROR")
            details = exc.detail.get("details")
        else:
            message = str(exc.detail) if exc.detail else "An error occurred"
            error_code = "HTTP_ERROR"
            details = None

        return error_response(
            request,
            exc.status_code,
            message,
            error_code,
            details,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        # Convert errors to JSON-serializable format
        errors = []
        for error in exc.errors():
            error_dict = {
                "loc": list(error.get("loc", [])),
                "msg": str(error.get("msg", "Validation error")),
                "type": error.get("type", "value_error"),
            }
            errors.append(error_dict)

        return error_response(request, 400, "Validation error", "VALIDATION_ERROR", errors)

    @app.exception_handler(SQLAlchemyError)
    async def storage_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.exception(f"Database error on {request.method} {request.url.path}", exc_info=exc)
        error = StorageError()
        return error_response(request, error.status_code, error.message, error.error_code)


def setup_routers(app: FastAPI):
    """Configure application routers."""
    # Import routers
    from app.domains.attachment.controller import router as attachment_router
    from app.domains.auth.controller import router as auth_router
    from app.domains.chat.controller import external_router as chat_external_router
    from app.domains.chat.controller import router as chat_router
    from app.domains.folder.controller import router as folder_router
    from app.domains.settings.controller import router as settings_router

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint."""
        db_status = "healthy"
        try:
            async with request.app.state.session_factory() as session:
                await session.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Health check database query failed: {str(e)}")
            db_status = "unhealthy"

        settings: Settings = request.app.state.settings
        body = {
            "status": "healthy" if db_status == "healthy" else "degraded",
            "version": settings.version,
            "environment": settings.environment.value,
            "timestamp": datetime.now(UTC).isoformat(),
            "services": {"database": db_status},
        }
        return JSONResponse(status_code=200 if db_status == "healthy" else 503, content=body)

    @app.get("/")
    async def root(request: Request):
        """Root endpoint with API information."""
        summary = get_config_summary(request.app.state.settings)
        return {
            "name": summary["app_name"],
            "version": summary["version"],
            "description": "Single-operator chat console backed by Google Gemini",
            "docs_url": "/docs" if request.app.state.settings.is_development else None,
        }

    # Include domain routers
    app.include_router(auth_router)
    app.include_router(settings_router)
    app.include_router(folder_router)
    app.include_router(chat_router)
    app.include_router(chat_external_router)
    app.include_router(attachment_router)


# Create the application instance
app = create_app()


def main():
    """Entry point for running the application directly."""
    import uvicorn

    settings: Settings = app.state.settings
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.value.lower(),
    )


if __name__ == "__main__":
    main()
