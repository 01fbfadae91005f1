"""ORM Models: SQLAlchemy declarative models for the SQL table store.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so Base.metadata is complete before create_all
"""

from boardsync.models.table_row import TableHeader, TableRow  # noqa: F401
