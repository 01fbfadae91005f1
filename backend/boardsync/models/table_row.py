"""Table Row ORM: a schema-less sheet emulated on a relational database.

Invariants:
    - (table_name, position) is unique; position is the 0-based body row index
    - cells is a JSON array of strings, stored exactly as encoded
    - Headers live in table_headers, one row per table (row 1 of a sheet)
    - No foreign keys: rows of different tables are unrelated at this level

Design Decisions:
    - One generic table for all six sheets: the store stays as schema-less as a
      spreadsheet, and the codec owns every column meaning
    - Integer surrogate id + position column: bodies are replaced whole, never patched
"""

from sqlalchemy import Integer, JSON, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from boardsync.db.base import Base


class TableRow(Base):
    """One body row of one logical table."""
    __tablename__ = "table_rows"
    __table_args__ = (
        UniqueConstraint("table_name", "position", name="uq_table_rows_position"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    table_name: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    cells: Mapped[list] = mapped_column(JSON, nullable=False, default=list)


class TableHeader(Base):
    """Header row of one logical table; its presence means the table exists."""
    __tablename__ = "table_headers"

    table_name: Mapped[str] = mapped_column(String(64), primary_key=True)
    headers: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
