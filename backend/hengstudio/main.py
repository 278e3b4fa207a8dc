"""
Studio CMS API

FastAPI application entry point.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api import gallery_router, media_router, projects_router
from .config import Settings, settings as default_settings
from .errors import StudioError
from .security import ADMIN_TOKEN_HEADER, AdminGate
from .services.project_service import ProjectService
from .storage import GalleryManifestStore, MediaStore, ProjectStore
from .tracer import setup_follow_through_logging

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure logging based on mode."""
    if settings.debug:
        log_level = logging.DEBUG
    elif settings.follow_through:
        log_level = logging.WARNING  # Suppress normal logs, let tracer handle output
    else:
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Quiet down noisy loggers when not in debug mode
    if not settings.debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("multipart").setLevel(logging.WARNING)
        logging.getLogger("python_multipart").setLevel(logging.WARNING)

    setup_follow_through_logging(settings.follow_through)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings: Settings = app.state.settings
    logger.info("Starting studio CMS API...")

    if not app.state.admin_gate.configured:
        logger.warning("ADMIN_TOKEN is not set; admin endpoints will answer 503")

    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    projects = await app.state.project_store.read_all()
    logger.info(f"Loaded {len(projects)} projects from {settings.projects_file}")

    yield

    logger.info("Shutting down studio CMS API...")


async def studio_error_handler(request: Request, exc: StudioError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    issues = [
        {
            "path": ".".join(str(part) for part in err["loc"] if part != "body"),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Invalid payload", "issues": issues})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around one settings object."""
    settings = settings or default_settings
    configure_logging(settings)

    app = FastAPI(
        title="Studio CMS",
        description="""
    Portfolio backend for the studio website.

    ## Features
    - **Projects**: validated CRUD over a file-backed JSON document with rolling backups
    - **Media**: admin-only image uploads and listing
    - **Gallery**: directory-derived listing and a versioned ordering manifest
    """,
        version="1.0.0",
        lifespan=lifespan,
    )

    project_store = ProjectStore(
        settings.projects_file,
        settings.backup_dir,
        retention=settings.backup_retention,
    )
    app.state.settings = settings
    app.state.admin_gate = AdminGate(settings.admin_token)
    app.state.project_store = project_store
    app.state.project_service = ProjectService(project_store)
    app.state.media_store = MediaStore(settings.upload_dir, max_bytes=settings.max_upload_bytes)
    app.state.gallery_manifest = GalleryManifestStore(settings.gallery_manifest)

    app.add_exception_handler(StudioError, studio_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "If-Match", ADMIN_TOKEN_HEADER],
        expose_headers=["ETag"],
    )

    app.include_router(projects_router)
    app.include_router(media_router)
    app.include_router(gallery_router)

    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Studio CMS",
            "version": "1.0.0",
            "admin_configured": app.state.admin_gate.configured,
            "docs": "/docs",
        }

    @app.get("/api/health")
    async def health():
        """Health check endpoint."""
        return {"ok": True}

    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = default_settings
    uvicorn.run(
        "hengstudio.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
