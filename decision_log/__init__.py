"""Decision Log — local-first data layer for a personal decision journal.

Invariants:
    - Package root holds only the version constant (import side-effects prohibited)
"""

__version__ = "1.0.0"
