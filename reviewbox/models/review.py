"""
SQLModel-based review models.

Reviews
    One per (user, subject) while active. total_score is the mean of the
    review's evaluation scores, rounded to two decimals.

EvaluationScores
    One row per (review, criterion). These rows have no soft-delete marker:
    editing a review replaces them and deleting a review removes them.
"""

from datetime import datetime

from sqlalchemy import JSON, CheckConstraint, Column, ForeignKeyConstraint, Index
from sqlmodel import Field, SQLModel

from reviewbox.models.base import new_id, utcnow


class Reviews(SQLModel, table=True):
    __tablename__ = "reviews"  # type: ignore[assignment]
    __table_args__ = (
        Index("ix_reviews_subject_user", "review_subject_id", "user_id"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    review_subject_id: str = Field(foreign_key="review_subjects.id", max_length=36)
    user_id: str = Field(foreign_key="users.id", max_length=36, index=True)
    comment: str | None = Field(default=None)
    images: list[str] | None = Field(default=None, sa_column=Column(JSON, nullable=True))
    total_score: float = Field(default=0.0)

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    deleted_at: datetime | None = Field(default=None)


class EvaluationScores(SQLModel, table=True):
    __tablename__ = "evaluation_scores"  # type: ignore[assignment]
    __table_args__ = (
        ForeignKeyConstraint(
            ["review_id"],
            ["reviews.id"],
            ondelete="CASCADE",
            name="fk_evaluation_scores_review_id",
        ),
        ForeignKeyConstraint(
            ["criteria_id"],
            ["evaluation_criteria.id"],
            name="fk_evaluation_scores_criteria_id",
        ),
        Index("ix_evaluation_scores_review_id", "review_id"),
        CheckConstraint("score BETWEEN 1 AND 5", name="ck_evaluation_scores_score_range"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=36)
    review_id: str = Field(max_length=36)
    criteria_id: str = Field(max_length=36)
    score: int
