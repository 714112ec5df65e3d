"""Initial schema — decisions and custom_categories.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "decisions",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("date", sa.String(10), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("decision_type", sa.String(10), nullable=False),
        sa.Column("options", sa.JSON, nullable=False),
        sa.Column("chosen_option", sa.Text, nullable=False),
        sa.Column("reasoning", sa.Text, nullable=False, server_default=""),
        sa.Column("expected_outcome", sa.Text, nullable=False, server_default=""),
        sa.Column("confidence", sa.Integer, nullable=False),
        sa.Column("stakes", sa.String(10), nullable=False),
        sa.Column("horizon_days", sa.Integer, nullable=False),
        sa.Column("review_date", sa.String(10), nullable=False),
        sa.Column("tags", sa.JSON, nullable=False),
        sa.Column("reviewed_at", sa.String(40), nullable=True),
        sa.Column("actual_outcome", sa.Text, nullable=True),
        sa.Column("rating", sa.Integer, nullable=True),
        sa.Column("lessons_learned", sa.Text, nullable=True),
        sa.Column("same_choice_again", sa.Boolean, nullable=True),
    )
    op.create_index("ix_decisions_date", "decisions", ["date"])
    op.create_index("ix_decisions_category", "decisions", ["category"])
    op.create_index("ix_decisions_stakes", "decisions", ["stakes"])
    op.create_index("ix_decisions_review_date", "decisions", ["review_date"])
    op.create_index("ix_decisions_reviewed_at", "decisions", ["reviewed_at"])

    op.create_table(
        "custom_categories",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "ix_custom_categories_name", "custom_categories", ["name"], unique=True,
    )


def downgrade() -> None:
    op.drop_index("ix_custom_categories_name", table_name="custom_categories")
    op.drop_table("custom_categories")
    op.drop_index("ix_decisions_reviewed_at", table_name="decisions")
    op.drop_index("ix_decisions_review_date", table_name="decisions")
    op.drop_index("ix_decisions_stakes", table_name="decisions")
    op.drop_index("ix_decisions_category", table_name="decisions")
    op.drop_index("ix_decisions_date", table_name="decisions")
    op.drop_table("decisions")
