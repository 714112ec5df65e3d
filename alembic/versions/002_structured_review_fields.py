"""Structured review fields — outcome match, contributing factors, decision quality.

Revision ID: 002_structured_review
Revises: 001_initial
Create Date: 2026-10-17

Additive only: three nullable columns, existing rows read as "not assessed".
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002_structured_review"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column(
        "decisions",
        sa.Column("outcome_matched_expectation", sa.String(10), nullable=True),
    )
    op.add_column(
        "decisions", sa.Column("contributing_factors", sa.JSON, nullable=True),
    )
    op.add_column(
        "decisions", sa.Column("decision_quality", sa.String(10), nullable=True),
    )


def downgrade() -> None:
    with op.batch_alter_table("decisions") as batch:
        batch.drop_column("decision_quality")
        batch.drop_column("contributing_factors")
        batch.drop_column("outcome_matched_expectation")
