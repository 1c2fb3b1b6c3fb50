"""FastAPI application factory."""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from voicesync.db.engine import get_engine
from voicesync.api.routes import voices


def create_app(engine=None) -> FastAPI:
    """Build and return the FastAPI app.

    Args:
        engine: SQLAlchemy engine to serve from. Defaults to the configured
            engine singleton, resolved at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # get_engine() creates tables and runs migrations (idempotent)
        app.state.engine = engine if engine is not None else get_engine()
        yield

    app = FastAPI(
        title="Voice Sync API",
        description="Propagates shared voices across provider accounts",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(voices.router, prefix="/voices", tags=["voices"])

    return app


# Module-level app instance for uvicorn
app = create_app()
