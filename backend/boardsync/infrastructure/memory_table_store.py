"""In-Memory Table Store: dict-backed TabularStore for development and tests.

Invariants:
    - Reads return copies; callers never alias stored rows
    - Headers and bodies are kept separately, like a sheet's row 1 vs rows 2+
    - Reading a table that was never created returns an empty body
"""

from boardsync.core.domain_types import Row


class MemoryTableStore:
    """TabularStore over plain dicts."""

    def __init__(self, tables: dict[str, list[Row]] | None = None):
        self.bodies: dict[str, list[Row]] = {
            name: [list(r) for r in rows] for name, rows in (tables or {}).items()
        }
        self.headers: dict[str, list[str]] = {}

    async def read_table(self, name: str) -> list[Row]:
        return [list(r) for r in self.bodies.get(name, [])]

    async def clear_table_body(self, name: str) -> None:
        self.bodies[name] = []

    async def write_table_body(self, name: str, rows: list[Row]) -> None:
        self.bodies[name] = [list(r) for r in rows]

    async def ensure_table_exists(self, name: str) -> None:
        self.bodies.setdefault(name, [])

    async def ensure_header_row(self, name: str, headers: list[str]) -> None:
        self.headers[name] = list(headers)

    async def close(self) -> None:
        return None
