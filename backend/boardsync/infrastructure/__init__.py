"""Infrastructure Layer: tabular store backends, persistence fan-out and logging.

Invariants:
    - Every backend satisfies core.repository_protocols.TabularStore
    - All external calls map their failures onto core/errors.py

Design Decisions:
    - No retries at this layer; a failed call fails the sync cycle it belongs to
"""
