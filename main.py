import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError

from jobboard.core.config import Settings, settings
from jobboard.core.database import Database
from jobboard.core.logging_config import setup_logging
from jobboard.core.storage import LocalStorage
from jobboard.api.endpoints import health, jobs

setup_logging(settings.LOG_LEVEL, json_logs=settings.JSON_LOGS)
logger = logging.getLogger(__name__)


def check_configuration(app_settings: Settings) -> bool:
    """Log a configuration fault when required connection settings are missing."""
    missing = app_settings.missing_database_settings()
    if missing:
        logger.error(
            f"FATAL ERROR: Missing required database configuration: {', '.join(missing)}. "
            "Set them in the environment or the .env file."
        )
        return False
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    """
    # Startup
    logger.info("Starting up Job Board API...")
    check_configuration(app.state.settings)

    database: Database = app.state.database
    database.connect()
    if database.health_check():
        try:
            database.create_schema()
            logger.info("Database schema ready")
        except SQLAlchemyError as e:
            logger.error(f"Failed to create database schema: {e}")
    else:
        logger.error("Database unavailable at startup; serving with readiness=not_ready")

    yield

    # Shutdown
    logger.info("Shutting down Job Board API...")
    database.dispose()


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render every HTTPException as {"error": message}"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def create_app(
    app_settings: Settings = settings,
    database: Optional[Database] = None,
    storage: Optional[LocalStorage] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The database gateway and upload storage are created from settings unless
    given; the app owns their lifecycle through the lifespan handler.
    """
    app = FastAPI(
        title=app_settings.PROJECT_NAME,
        version="1.0.0",
        description="Job listing board API",
        lifespan=lifespan
    )

    app.state.settings = app_settings
    app.state.database = database or Database.from_settings(app_settings)
    app.state.storage = storage or LocalStorage.from_settings(app_settings)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.FRONTEND_ORIGIN,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(jobs.router, prefix=app_settings.API_PREFIX)
    app.include_router(health.router)

    # Uploaded company photos
    app.mount(
        "/uploads",
        StaticFiles(directory=app.state.storage.base_dir, check_dir=False),
        name="uploads",
    )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.PORT,
        log_level="info"
    )
