"""Boundary Protocols: contracts between the sync engine and the tabular store.

Invariants:
    - Core NEVER imports from infrastructure; dependency arrows point inward only
    - A table body is every row below the header row, in stored order
    - No partial-update primitive exists: bodies are cleared and rewritten whole

Design Decisions:
    - Protocol over ABC: structural subtyping, backends share no base class
    - Async in Protocol: implementations do IO; codec and store never await
"""

from typing import Protocol

from boardsync.core.domain_types import Row


class TabularStore(Protocol):
    """Contract for the external table store, implemented by infrastructure."""
    async def read_table(self, name: str) -> list[Row]: ...
    async def clear_table_body(self, name: str) -> None: ...
    async def write_table_body(self, name: str, rows: list[Row]) -> None: ...
    async def ensure_table_exists(self, name: str) -> None: ...
    async def ensure_header_row(self, name: str, headers: list[str]) -> None: ...
    async def close(self) -> None: ...
