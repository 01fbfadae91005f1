"""BoardSync API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map BoardSyncError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - The BoardApplication is built, started and closed by the lifespan and
      lives on app.state.board_app; nothing is module-global except `app`

Design Decisions:
    - create_app(settings) factory so tests can build apps against their own settings
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Startup load failures do not abort boot: /health/ready reports not_ready
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from boardsync.api.error_handlers import register_error_handlers
from boardsync.api.routes import authors, board, columns, health, meetings, tasks
from boardsync.config import Settings, get_settings
from boardsync.infrastructure.observability import setup_logging
from boardsync.services.board_application import BoardApplication

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_logging(settings.log_level, settings.log_format)
        board_app = BoardApplication.from_settings(settings)
        app.state.board_app = board_app
        await board_app.start(
            provision=settings.provision_on_startup,
            load=settings.load_on_startup,
        )
        logger.info("BoardSync API started (%s store)", settings.store_backend.value)
        yield
        logger.info("BoardSync API shutting down")
        await board_app.close()

    app = FastAPI(title="BoardSync API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(board.router)
    app.include_router(tasks.router)
    app.include_router(columns.router)
    app.include_router(meetings.router)
    app.include_router(authors.router)

    register_error_handlers(app)
    return app


app = create_app()
