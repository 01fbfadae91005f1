"""Sync Coordinator: load-at-start and save-after-mutation cycles between store and tables.

Invariants:
    - State is SYNCING while at least one cycle is in flight, IDLE otherwise
    - load() replaces the store's Board only after all six reads and the decode
      succeed; on failure the error is recorded, reported and raised, board untouched
    - Every store mutation encodes the Board immediately (snapshot at mutation
      time) and starts an independent save cycle; cycles are never queued,
      coalesced or cancelled, so concurrent cycles race table by table
    - A failed save never rolls back the store; it is recorded as last_error,
      logged, and handed to error listeners
    - A mutation made with no running event loop is applied locally, logged, and
      not saved; the next save (any later mutation, or save()) carries it
    - Status (is_syncing, last_successful_sync_at) is observability only: it gates
      neither mutations nor new cycles

Design Decisions:
    - asyncio tasks held in a set until done (no fire-and-forget garbage collection)
    - Monotonic cycle numbers in log records to tell racing cycles apart
"""

import asyncio
import itertools
import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import AsyncIterator

from boardsync.core.board import Board
from boardsync.core.board_store import BoardStore
from boardsync.core.domain_types import (
    DEFAULT_BOARD_ID, DEFAULT_BOARD_TITLE, RETENTION_DAYS, Row, SyncState, TableName,
)
from boardsync.core.errors import BoardSyncError
from boardsync.core.table_codec import decode_board, encode_board
from boardsync.core.timestamps import utc_now
from boardsync.infrastructure.board_persistence import BoardPersistence

logger = logging.getLogger(__name__)

ErrorListener = Callable[[BoardSyncError], None]


@dataclass(frozen=True)
class SyncStatus:
    """Point-in-time view of the coordinator for observability."""
    state: SyncState
    in_flight: int
    last_successful_sync_at: datetime | None
    last_error: BoardSyncError | None

    @property
    def is_syncing(self) -> bool:
        return self.state is SyncState.SYNCING


class SyncCoordinator:
    """Orchestrates codec and persistence around the BoardStore."""

    def __init__(
        self,
        store: BoardStore,
        persistence: BoardPersistence,
        *,
        retention: timedelta = timedelta(days=RETENTION_DAYS),
        board_id: str = DEFAULT_BOARD_ID,
        board_title: str = DEFAULT_BOARD_TITLE,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.store = store
        self.persistence = persistence
        self.retention = retention
        self.board_id = board_id
        self.board_title = board_title
        self._clock = clock
        self._cycles = itertools.count(1)
        self._in_flight = 0
        self._tasks: set[asyncio.Task] = set()
        self._last_success: datetime | None = None
        self._last_error: BoardSyncError | None = None
        self._error_listeners: list[ErrorListener] = []
        self._unsubscribe = store.subscribe(self._on_board_changed)

    # --- Public API -----------------------------------------------------------

    async def load(self) -> Board:
        """Read all six tables, decode, and replace the store's Board."""
        async with self._cycle("load"):
            tables = await self.persistence.read_all()
            board = decode_board(
                tables,
                now=self._clock(),
                retention=self.retention,
                board_id=self.board_id,
                board_title=self.board_title,
            )
            self.store.replace(board)
        logger.info(
            "Board loaded: %d column(s), %d task(s)",
            len(board.columns), len(board.tasks),
        )
        return board

    async def save(self) -> None:
        """Write the current Board now and wait for the result (manual retry)."""
        await self._write(encode_board(self.store.board))

    def schedule_save(self, tables: dict[TableName, list[Row]]) -> asyncio.Task:
        """Start an independent background save cycle for an encoded snapshot."""
        task = asyncio.get_running_loop().create_task(self._run_save(tables))
        self._tasks.add(task)
        task.add_done_callback(self._on_save_done)
        return task

    def get_sync_status(self) -> SyncStatus:
        return SyncStatus(
            state=SyncState.SYNCING if self._in_flight else SyncState.IDLE,
            in_flight=self._in_flight,
            last_successful_sync_at=self._last_success,
            last_error=self._last_error,
        )

    def on_error(self, listener: ErrorListener) -> None:
        """Register a callback for failed cycles (load or save)."""
        self._error_listeners.append(listener)

    async def drain(self) -> None:
        """Wait until every background save cycle started so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        self._unsubscribe()
        await self.drain()

    # --- Internals ------------------------------------------------------------

    def _on_board_changed(self, board: Board) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(
                "Board changed outside the event loop; save not scheduled",
                extra={"operation": "save"},
            )
            return
        self.schedule_save(encode_board(board))

    async def _run_save(self, tables: dict[TableName, list[Row]]) -> bool:
        try:
            await self._write(tables)
        except BoardSyncError:
            return False
        return True

    async def _write(self, tables: dict[TableName, list[Row]]) -> None:
        async with self._cycle("save"):
            await self.persistence.write_all(tables)

    def _on_save_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Save cycle crashed", exc_info=error)

    @asynccontextmanager
    async def _cycle(self, kind: str) -> AsyncIterator[int]:
        cycle = next(self._cycles)
        self._in_flight += 1
        logger.debug(
            "Sync %s started", kind, extra={"cycle": cycle, "operation": kind},
        )
        try:
            yield cycle
        except BoardSyncError as e:
            self._last_error = e
            logger.error(
                f"Sync {kind} failed: {e.message}",
                extra={
                    "cycle": cycle,
                    "operation": kind,
                    "error_code": e.code,
                    "table": e.context.table_name,
                },
            )
            self._report(e)
            raise
        else:
            self._last_success = self._clock()
            self._last_error = None
            logger.info(
                "Sync %s succeeded", kind, extra={"cycle": cycle, "operation": kind},
            )
        finally:
            self._in_flight -= 1

    def _report(self, error: BoardSyncError) -> None:
        for listener in list(self._error_listeners):
            listener(error)
