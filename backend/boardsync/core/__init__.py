"""Core Layer: board graph, codec and mutators. No IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Codec functions are pure and deterministic given `now`

Design Decisions:
    - Functional core separated from the imperative shell (persistence + coordinator)
"""
