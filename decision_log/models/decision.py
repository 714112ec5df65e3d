"""Decision ORM — persists the journaled decision aggregate.

Invariants:
    - id is an opaque string primary key (uuid4 for decisions created locally)
    - date, category, stakes, review_date, reviewed_at are indexed (list/due-review lookups)
    - review columns are all NULL (pending) or reviewed_at/actual_outcome/rating all set
    - date and review_date are zero-padded ISO strings (string order == date order)

Design Decisions:
    - JSON columns for options/tags/contributing_factors: stored as the lists they are
    - to_domain/from_domain keep ORM rows out of core/ (core never imports models/)
"""

from sqlalchemy import Boolean, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from decision_log.core.decision import Decision, Review
from decision_log.db.base import Base


class DecisionRow(Base):
    """Decision aggregate root row."""
    __tablename__ = "decisions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    decision_type: Mapped[str] = mapped_column(String(10), nullable=False)
    options: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    chosen_option: Mapped[str] = mapped_column(Text, nullable=False)
    reasoning: Mapped[str] = mapped_column(Text, nullable=False, default="")
    expected_outcome: Mapped[str] = mapped_column(Text, nullable=False, default="")
    confidence: Mapped[int] = mapped_column(Integer, nullable=False)
    stakes: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    horizon_days: Mapped[int] = mapped_column(Integer, nullable=False)
    review_date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    # Review — NULL until reviewed
    reviewed_at: Mapped[str | None] = mapped_column(
        String(40), nullable=True, index=True,
    )
    actual_outcome: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    lessons_learned: Mapped[str | None] = mapped_column(Text, nullable=True)
    same_choice_again: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    # Structured review (added in 002, all optional)
    outcome_matched_expectation: Mapped[str | None] = mapped_column(
        String(10), nullable=True,
    )
    contributing_factors: Mapped[list | None] = mapped_column(JSON, nullable=True)
    decision_quality: Mapped[str | None] = mapped_column(String(10), nullable=True)

    def to_domain(self) -> Decision:
        review = None
        if self.reviewed_at is not None:
            review = Review(
                reviewed_at=self.reviewed_at,
                actual_outcome=self.actual_outcome,
                rating=self.rating,
                lessons_learned=self.lessons_learned,
                same_choice_again=self.same_choice_again,
                outcome_matched_expectation=self.outcome_matched_expectation,
                contributing_factors=self.contributing_factors,
                decision_quality=self.decision_quality,
            )
        return Decision(
            id=self.id,
            title=self.title,
            date=self.date,
            category=self.category,
            decision_type=self.decision_type,
            options=list(self.options),
            chosen_option=self.chosen_option,
            reasoning=self.reasoning,
            expected_outcome=self.expected_outcome,
            confidence=self.confidence,
            stakes=self.stakes,
            horizon_days=self.horizon_days,
            review_date=self.review_date,
            tags=list(self.tags),
            review=review,
        )

    @classmethod
    def from_domain(cls, decision: Decision) -> "DecisionRow":
        row = cls(id=decision.id)
        row.apply_domain(decision)
        return row

    def apply_domain(self, decision: Decision) -> None:
        """Copy every non-id field from the domain object onto this row."""
        self.title = decision.title
        self.date = decision.date
        self.category = decision.category
        self.decision_type = decision.decision_type.value
        self.options = list(decision.options)
        self.chosen_option = decision.chosen_option
        self.reasoning = decision.reasoning
        self.expected_outcome = decision.expected_outcome
        self.confidence = decision.confidence
        self.stakes = decision.stakes.value
        self.horizon_days = decision.horizon_days
        self.review_date = decision.review_date
        self.tags = list(decision.tags)
        self.apply_review(decision.review)

    def apply_review(self, review: Review | None) -> None:
        """Set or clear all review columns together."""
        self.reviewed_at = review.reviewed_at if review else None
        self.actual_outcome = review.actual_outcome if review else None
        self.rating = review.rating if review else None
        self.lessons_learned = review.lessons_learned if review else None
        self.same_choice_again = review.same_choice_again if review else None
        self.outcome_matched_expectation = (
            review.outcome_matched_expectation.value
            if review and review.outcome_matched_expectation else None
        )
        self.contributing_factors = (
            list(review.contributing_factors)
            if review and review.contributing_factors is not None else None
        )
        self.decision_quality = (
            review.decision_quality.value
            if review and review.decision_quality else None
        )

    def __repr__(self) -> str:
        return f"<DecisionRow(id={self.id}, title='{self.title}')>"
