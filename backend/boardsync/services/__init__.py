"""Services Layer: sync coordination and application wiring.

Invariants:
    - Services orchestrate core and infrastructure; they hold no cell-level knowledge
"""
