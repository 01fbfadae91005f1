"""Database Declarations: SQLAlchemy Base for the SQL table store models.

Invariants:
    - Engines and sessions live in infrastructure/database.py, never here
"""
