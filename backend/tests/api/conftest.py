"""API test fixtures: a loaded BoardApplication behind an httpx ASGI client.

Invariants:
    - Every test gets a fresh app and a fresh fault-injecting table store
    - The lifespan is not run; app.state.board_app is set directly

Design Decisions:
    - create_app() per test instead of the module-level app: no state leaks between tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from boardsync.config import Settings
from boardsync.main import create_app
from boardsync.services.board_application import BoardApplication

from tests.support.fake_table_store import FaultyTableStore
from tests.support.table_rows import NOW, sample_tables


@pytest.fixture
def table_store():
    return FaultyTableStore(sample_tables())


@pytest.fixture
async def board_app(table_store):
    board_app = BoardApplication(table_store, clock=lambda: NOW)
    await board_app.load()
    yield board_app
    await board_app.close()


@pytest.fixture
async def client(board_app):
    app = create_app(Settings(store_backend="memory", _env_file=None))
    app.state.board_app = board_app
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
