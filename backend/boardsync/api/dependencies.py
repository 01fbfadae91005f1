"""Request Dependencies: access to the BoardApplication owned by the running app.

Invariants:
    - The BoardApplication lives on app.state (set by lifespan or by tests)
    - Missing application state is a startup bug, reported as a 500
"""

from fastapi import Request

from boardsync.core.board_store import BoardStore
from boardsync.services.board_application import BoardApplication


def get_board_app(request: Request) -> BoardApplication:
    board_app = getattr(request.app.state, "board_app", None)
    if board_app is None:
        raise RuntimeError("BoardApplication not initialized")
    return board_app


def get_board_store(request: Request) -> BoardStore:
    return get_board_app(request).store
