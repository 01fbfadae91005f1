"""BoardSync: Kanban board engine kept in sync with six spreadsheet-style tables.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
