import os
import sys
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Ensure local imports resolve
sys.path.append(os.path.dirname(__file__))

# Core
from core.config import settings
from core.config_validator import validate_config_on_startup
from core.errors import StorageError, handle_storage_error
from core.logging_config import logger

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers.objects import router as objects_router
from routers.assignments import router as assignments_router
from routers.projects import router as projects_router
from routers.media import router as media_router
from routers.folders import router as folders_router
from routers.comments import router as comments_router
from routers.health import router as health_router


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="SiteTrack API: construction site objects, assignments and visibility",
    )

    # -------------------------------------------------
    # CORS
    # -------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------
    # Startup
    # -------------------------------------------------
    @app.on_event("startup")
    async def on_startup():
        logger.info(f"Starting {settings.PROJECT_NAME} ({settings.ENV})")
        validate_config_on_startup()
        for route in app.routes:
            # Mounted sub-apps and included routers may carry no path
            path = getattr(route, "path", None)
            if path is None:
                continue
            methods = ",".join(sorted(getattr(route, "methods", None) or []))
            logger.debug(f"Route {methods:10s} {path}")

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403, 500):
            logger.warning(f"HTTP {exc.status_code} at {request.url}: {exc.detail}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(StorageError)
    async def handle_storage(request: Request, exc: StorageError):
        http_exc = handle_storage_error(exc, exc.operation)
        return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # -------------------------------------------------
    # Register Routers
    # -------------------------------------------------
    app.include_router(objects_router)
    app.include_router(assignments_router)
    app.include_router(projects_router)
    app.include_router(media_router)
    app.include_router(folders_router)
    app.include_router(comments_router)
    app.include_router(health_router)

    return app


# Create the global FastAPI instance
app = create_app()
