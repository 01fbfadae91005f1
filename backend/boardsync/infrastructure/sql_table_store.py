"""SQL Table Store: TabularStore emulating six spreadsheet tabs on async SQLAlchemy.

Invariants:
    - Each operation runs in its own session and commits on its own
      (no transaction spans clear and write, or two tables)
    - write_table_body overwrites positions 0..len(rows)-1 and leaves later rows,
      like a sheet update anchored at A2; callers clear first for a full replace
    - Cells are stored as strings; reads return rows in position order
    - A table exists once its header row record exists
    - On SQLite, writing operations of one store run one at a time (single writer);
      server databases take them concurrently

Design Decisions:
    - Schema created lazily on first use (create_all is idempotent)
    - SQLAlchemy failures surface as TransientIOError tagged with table and operation
"""

import asyncio
import logging
from contextlib import asynccontextmanager, nullcontext
from typing import AsyncIterator

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from boardsync.core.domain_types import Row
from boardsync.infrastructure.database import DatabaseSessionManager
from boardsync.models.table_row import TableHeader, TableRow

logger = logging.getLogger(__name__)


class SqlTableStore:
    """TabularStore over the generic table_rows/table_headers tables."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db
        self._schema_ready = False
        self._schema_lock = asyncio.Lock()
        self._write_lock = asyncio.Lock() if db.is_sqlite else None

    @classmethod
    def from_url(cls, database_url: str, **kwargs) -> "SqlTableStore":
        return cls(DatabaseSessionManager(database_url, **kwargs))

    async def read_table(self, name: str) -> list[Row]:
        await self._ensure_schema()
        async with self._db.session("read", name) as db:
            result = await db.execute(
                select(TableRow.cells)
                .where(TableRow.table_name == name)
                .order_by(TableRow.position),
            )
            return [list(cells) for cells in result.scalars().all()]

    async def clear_table_body(self, name: str) -> None:
        async with self._writing("clear", name) as db:
            await db.execute(delete(TableRow).where(TableRow.table_name == name))
            await db.commit()

    async def write_table_body(self, name: str, rows: list[Row]) -> None:
        async with self._writing("write", name) as db:
            await db.execute(
                delete(TableRow).where(
                    TableRow.table_name == name,
                    TableRow.position < len(rows),
                ),
            )
            db.add_all(
                TableRow(
                    table_name=name, position=i,
                    cells=["" if c is None else str(c) for c in row],
                )
                for i, row in enumerate(rows)
            )
            await db.commit()

    async def ensure_table_exists(self, name: str) -> None:
        async with self._writing("create", name) as db:
            if await db.get(TableHeader, name) is None:
                db.add(TableHeader(table_name=name, headers=[]))
                await db.commit()
                logger.info("Created table %s", name, extra={"table": name})

    async def ensure_header_row(self, name: str, headers: list[str]) -> None:
        async with self._writing("header", name) as db:
            await db.merge(TableHeader(table_name=name, headers=list(headers)))
            await db.commit()

    async def read_header_row(self, name: str) -> list[str]:
        await self._ensure_schema()
        async with self._db.session("read", name) as db:
            header = await db.get(TableHeader, name)
            return list(header.headers) if header else []

    async def close(self) -> None:
        await self._db.dispose()

    @asynccontextmanager
    async def _writing(self, operation: str, name: str) -> AsyncIterator[AsyncSession]:
        await self._ensure_schema()
        async with self._write_lock or nullcontext():
            async with self._db.session(operation, name) as db:
                yield db

    async def _ensure_schema(self) -> None:
        if self._schema_ready:
            return
        async with self._schema_lock:
            if not self._schema_ready:
                await self._db.create_schema()
                self._schema_ready = True
