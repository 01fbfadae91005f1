"""Root conftest: shared test configuration.

Invariants:
    - Tests never reach a real spreadsheet: the memory backend is the default
    - Startup provisioning/loading is left to each test (app lifespan is not run
      by ASGITransport)
"""

import os

os.environ.setdefault("STORE_BACKEND", "memory")
os.environ.setdefault("SPREADSHEET_ID", "")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
