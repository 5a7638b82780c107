import logging
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from sitewidgets.blocks.registry import block_registry, register_builtin_blocks
from sitewidgets.config import settings
from sitewidgets.database import Base, engine
from sitewidgets.exception_handlers import register_exception_handlers
from sitewidgets.middleware.logging import StructuredLoggingMiddleware, setup_structured_logging
from sitewidgets.routes import block_forms, blocks, curated, files, insights
from sitewidgets.routes import settings as settings_routes
from sitewidgets.scheduler import schedule_file_purge, scheduler
from sitewidgets.services.working_copy_store import close_working_copy_store

setup_structured_logging(log_level=settings.log_level, json_format=settings.structured_logging)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Tasks to run at application startup and shutdown."""
    logger.info("Starting up the application...")
    if settings.debug:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created (if not existing).")

    register_builtin_blocks(block_registry)
    schedule_file_purge()
    scheduler.start()

    yield

    logger.info("Shutting down the application...")
    scheduler.shutdown(wait=False)
    await close_working_copy_store()


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Content widgets, listings and their admin editors",
        debug=settings.debug,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(StructuredLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(insights.router, prefix="/api/v1/insights", tags=["Insights"])
    app.include_router(curated.router, prefix="/api/v1/curated", tags=["Curated content"])
    app.include_router(settings_routes.router, prefix="/api/v1/admin/settings", tags=["Settings"])
    app.include_router(blocks.router, prefix="/api/v1/blocks", tags=["Blocks"])
    app.include_router(files.router, prefix="/api/v1/files", tags=["Files"])
    app.include_router(block_forms.router, prefix="/admin/blocks", tags=["Block editor"], include_in_schema=False)

    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    app.mount(settings.files_url_prefix, StaticFiles(directory=settings.upload_dir, check_dir=False), name="files")

    @app.get("/health", tags=["Root"])
    async def health():
        return {"status": "ok"}

    if settings.debug:
        logger.info(f"Running in {settings.environment} mode")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
