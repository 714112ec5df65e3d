"""ORM Models — SQLAlchemy declarative models for the two persisted collections.

Invariants:
    - All models inherit from Base (db/base.py)
    - decisions and custom_categories are the only tables; backups and credentials live
      in the key-value file store

Design Decisions:
    - All models imported here so Base.metadata is complete before create_all
"""

from decision_log.models.decision import DecisionRow  # noqa: F401
from decision_log.models.custom_category import CustomCategory  # noqa: F401
