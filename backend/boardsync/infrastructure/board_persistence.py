"""Board Persistence: six-table read/replace fan-out over a TabularStore.

Invariants:
    - read_all and write_all issue one independent operation per table,
      concurrently, and wait for all six to settle
    - A table replace is "clear body, then write body" (write skipped when empty);
      nothing spans the two calls or two tables
    - A failure fails the whole call, but tables already replaced stay replaced;
      a failure between clear and write leaves that table's body empty
    - ConfigurationError passes through; every other failure is a TransientIOError
      tagged with table and operation
    - No retries, no ordering between tables

Design Decisions:
    - gather(return_exceptions=True): no sibling is abandoned mid-flight, and the
      error raised is deterministic (configuration first, then table order)
    - No domain knowledge beyond table names and header rows
"""

import asyncio
import logging
from collections.abc import Awaitable, Mapping
from typing import TypeVar

from boardsync.core.domain_types import TABLE_ORDER, Row, TableName
from boardsync.core.errors import BoardSyncError, ConfigurationError, TransientIOError
from boardsync.core.repository_protocols import TabularStore
from boardsync.core.table_schema import SCHEMAS

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BoardPersistence:
    """Persistence adapter: whole-table reads and full-replace writes."""

    def __init__(self, store: TabularStore):
        self.store = store

    async def read_all(self) -> dict[TableName, list[Row]]:
        """Read the six table bodies concurrently."""
        results = await asyncio.gather(
            *(
                self._call(table, "read", self.store.read_table(table.value))
                for table in TABLE_ORDER
            ),
            return_exceptions=True,
        )
        _raise_first_failure(results)
        return dict(zip(TABLE_ORDER, results))

    async def write_all(self, tables: Mapping[TableName, list[Row]]) -> None:
        """Clear and rewrite the six table bodies concurrently."""
        results = await asyncio.gather(
            *(self._replace(table, tables.get(table, [])) for table in TABLE_ORDER),
            return_exceptions=True,
        )
        _raise_first_failure(results)

    async def ensure_structure(self) -> None:
        """Make sure every table exists and carries its current header row."""
        for table in TABLE_ORDER:
            await self._call(
                table, "create", self.store.ensure_table_exists(table.value),
            )
            await self._call(
                table, "header",
                self.store.ensure_header_row(table.value, SCHEMAS[table].headers),
            )
        logger.info("Table structure verified")

    async def close(self) -> None:
        await self.store.close()

    async def _replace(self, table: TableName, rows: list[Row]) -> None:
        await self._call(table, "clear", self.store.clear_table_body(table.value))
        if rows:
            await self._call(
                table, "write", self.store.write_table_body(table.value, rows),
            )
        logger.debug(
            "Replaced %s body", table.value,
            extra={"table": table.value, "rows": len(rows)},
        )

    @staticmethod
    async def _call(table: TableName, operation: str, call: Awaitable[T]) -> T:
        """Await one store call, normalizing its failure."""
        try:
            return await call
        except BoardSyncError as e:
            if e.context.table_name is None:
                e.context.table_name = table.value
            raise
        except Exception as e:
            raise TransientIOError(
                str(e) or type(e).__name__, operation, table.value,
            ) from e


def _raise_first_failure(results: list) -> None:
    failures = [r for r in results if isinstance(r, BaseException)]
    if not failures:
        return
    for failure in failures:
        if isinstance(failure, BoardSyncError):
            logger.warning(
                failure.message,
                extra={
                    "table": failure.context.table_name,
                    "operation": failure.context.operation,
                    "error_code": failure.code,
                },
            )
    configuration = [f for f in failures if isinstance(f, ConfigurationError)]
    raise (configuration or failures)[0]
