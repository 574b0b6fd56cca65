"""
Main FastAPI application for the MediConnect backend.
"""
from contextlib import asynccontextmanager
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from mediconnect.api.api_v1 import api_router
from mediconnect.core.config import Settings, settings as default_settings
from mediconnect.core.exceptions import AppError
from mediconnect.core.logging import get_logger, setup_logging
from mediconnect.db.init_db import init_db

logger = get_logger(__name__)


def format_validation_error(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into one readable message."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages) or "Invalid request"


def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Render every error as ``{"error": message}``."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": format_validation_error(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": str(exc) if settings.DEBUG else "Internal server error"}
        )


def create_app(settings: Settings = default_settings, initialize_db: bool = True) -> FastAPI:
    """Build the application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        setup_logging()
        logger.info("Starting MediConnect backend...")
        if initialize_db:
            logger.info(f"Initializing database at {settings.database_url_safe}")
            init_db(settings=settings)
        logger.info("Application startup completed")
        yield
        logger.info("Shutting down MediConnect backend...")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Healthcare coordination API: approvals, visit requests, vitals reports and doctor reviews",
        version=settings.VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_HOSTS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all requests."""
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.3f}s"
        )
        response.headers["X-Process-Time"] = str(process_time)
        return response

    register_exception_handlers(app, settings)
    app.include_router(api_router, prefix=settings.API_V1_STR)

    if not settings.USE_S3:
        app.mount(
            settings.UPLOAD_URL_PREFIX,
            StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
            name="uploads"
        )

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "status": "operational",
            "docs": "/docs",
            "health": f"{settings.API_V1_STR}/health/"
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "mediconnect.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG,
        log_level=default_settings.LOG_LEVEL.lower()
    )
