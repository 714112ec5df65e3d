"""Core Layer — pure domain logic for the decision journal: no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - All functions are deterministic given their inputs (the clock is injectable)

Design Decisions:
    - Functional core separated from the async storage shell
"""
