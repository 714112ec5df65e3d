"""Custom Category ORM — user-defined category names.

Invariants:
    - name is lowercase, trimmed and unique among custom categories
    - A category name may also exist only through decisions.category (no row needed)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from decision_log.db.base import Base


class CustomCategory(Base):
    __tablename__ = "custom_categories"

    id: Mapped[str] = mapped_column(
        String(64), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(
        String(100), nullable=False, unique=True, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at.isoformat(),
        }
