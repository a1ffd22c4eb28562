"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles

from carefit.api import pages
from carefit.api.errors import NO_STORE_HEADERS, register_exception_handlers
from carefit.api.v1 import measurements, users
from carefit.config import Settings, get_settings
from carefit.db.database import Database

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; the database is opened on start-up."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = Database.from_settings(settings)
        if settings.create_tables:
            database.create_all()
        app.state.database = database
        logger.info("[STARTUP] Database ready")
        yield
        database.dispose()

    app = FastAPI(
        title="Fitness Assessment API",
        description="Records elderly-care fitness assessments per user across visits",
        version="1.0.0",
        docs_url="/docs",  # Swagger UI at /docs
        redoc_url="/redoc",  # ReDoc at /redoc
        openapi_url="/openapi.json",  # OpenAPI JSON schema
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.middleware("http")
    async def disable_caching(request: Request, call_next):
        response = await call_next(request)
        if not request.url.path.startswith("/static"):
            response.headers.update(NO_STORE_HEADERS)
        return response

    register_exception_handlers(app)

    app.include_router(users.router, prefix=pages.API_BASE, tags=["users"])
    app.include_router(measurements.router, prefix=pages.API_BASE, tags=["measurements"])
    app.include_router(pages.router)
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @app.get("/health")
    def health():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("carefit.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
