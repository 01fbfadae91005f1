"""Board Application: the owned application-state value wiring store, coordinator and persistence.

Invariants:
    - One BoardApplication per running app; nothing lives at module level
    - Lifecycle is explicit: construct -> start() -> ... -> close()
    - start() never raises on store failures: provisioning and the initial load
      are logged and the app comes up with an empty board (not ready)
    - is_ready flips to True after the first successful load and stays True

Design Decisions:
    - from_settings() is the only place that knows which TabularStore backs the app
    - FastAPI keeps the instance on app.state; tests build one around a fake store
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from boardsync.config import Settings
from boardsync.core.board import Board
from boardsync.core.board_store import BoardStore
from boardsync.core.domain_types import (
    DEFAULT_BOARD_ID, DEFAULT_BOARD_TITLE, RETENTION_DAYS, StoreBackend,
)
from boardsync.core.errors import BoardSyncError
from boardsync.core.repository_protocols import TabularStore
from boardsync.core.timestamps import utc_now
from boardsync.infrastructure.board_persistence import BoardPersistence
from boardsync.infrastructure.memory_table_store import MemoryTableStore
from boardsync.infrastructure.sheets_client import SheetsTableStore
from boardsync.infrastructure.sql_table_store import SqlTableStore
from boardsync.services.sync_coordinator import SyncCoordinator

logger = logging.getLogger(__name__)


class BoardApplication:
    """Owns the active board and everything that keeps it in sync."""

    def __init__(
        self,
        table_store: TabularStore,
        *,
        retention: timedelta = timedelta(days=RETENTION_DAYS),
        board_id: str = DEFAULT_BOARD_ID,
        board_title: str = DEFAULT_BOARD_TITLE,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.persistence = BoardPersistence(table_store)
        self.store = BoardStore(Board(id=board_id, title=board_title))
        self.coordinator = SyncCoordinator(
            self.store,
            self.persistence,
            retention=retention,
            board_id=board_id,
            board_title=board_title,
            clock=clock,
        )
        self.is_ready = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "BoardApplication":
        return cls(
            build_table_store(settings),
            retention=timedelta(days=settings.retention_days),
            board_id=settings.board_id,
            board_title=settings.board_title,
        )

    async def start(self, *, provision: bool = True, load: bool = True) -> None:
        if provision:
            try:
                await self.persistence.ensure_structure()
            except BoardSyncError as e:
                logger.error(
                    f"Table provisioning failed: {e.message}",
                    extra={"error_code": e.code, "table": e.context.table_name},
                )
        if load:
            try:
                await self.load()
            except BoardSyncError:
                logger.warning("Starting with an empty board; initial load failed")

    async def load(self) -> Board:
        board = await self.coordinator.load()
        self.is_ready = True
        return board

    async def close(self) -> None:
        await self.coordinator.close()
        await self.persistence.close()


def build_table_store(settings: Settings) -> TabularStore:
    """Instantiate the TabularStore named by settings.store_backend."""
    if settings.store_backend is StoreBackend.SHEETS:
        return SheetsTableStore(
            settings.spreadsheet_id,
            access_token=settings.sheets_access_token,
            base_url=settings.sheets_api_base_url,
            timeout_seconds=settings.sheets_timeout_seconds,
        )
    if settings.store_backend is StoreBackend.SQL:
        return SqlTableStore.from_url(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
    return MemoryTableStore()
