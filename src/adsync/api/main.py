"""FastAPI application factory."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlmodel import SQLModel

from adsync.db.engine import get_engine
from adsync.api.routes import projects, sync as sync_routes


def create_app() -> FastAPI:
    """Build and return the FastAPI app."""

    engine = get_engine()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create tables on startup (idempotent)
        SQLModel.metadata.create_all(engine)
        yield

    app = FastAPI(
        title="Ad Sync API",
        description="Scheduled Meta Ads metrics sync for dashboard projects",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(projects.router, prefix="/projects", tags=["projects"])
    app.include_router(sync_routes.router, prefix="/sync", tags=["sync"])

    return app


# Module-level app instance for uvicorn
app = create_app()
