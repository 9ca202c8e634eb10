import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tracker.api.calibration import router as calibration_router
from tracker.api.runs import router as runs_router
from tracker.core.config import settings
from tracker.db import create_tables, make_engine, make_session_factory


def create_app(database_url: str | None = None) -> FastAPI:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    engine = make_engine(database_url or settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create DB tables (runs, route points, ...) on startup
        create_tables(engine)
        yield
        engine.dispose()

    app = FastAPI(lifespan=lifespan)
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    # Allow CORS for local frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(runs_router)
    app.include_router(calibration_router)

    @app.get("/")
    def root():
        return {"message": "Run tracker is running"}

    return app


app = create_app()
