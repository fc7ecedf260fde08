"""
Review reads and aggregation.

Statistics are computed on every request from the active reviews of a
subject and their evaluation scores; nothing here is cached.
"""

from collections import defaultdict
from dataclasses import dataclass, field

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from reviewbox.models import EvaluationCriteria, EvaluationScores, Reviews, Users
from reviewbox.schemas.common import LatestReview, UserSummary
from reviewbox.schemas.review import ReviewResponse, ScoreResponse
from reviewbox.schemas.subject import CriterionAverage
from reviewbox.services.scoring import mean


@dataclass
class SubjectStats:
    review_count: int = 0
    average_score: float = 0.0
    latest_review: LatestReview | None = None
    score_breakdown: list[CriterionAverage] = field(default_factory=list)


async def get_active_review(
    db: AsyncSession, subject_id: str, user_id: str
) -> Reviews | None:
    """The caller's active review of a subject, if any."""
    result = await db.execute(
        select(Reviews).where(
            Reviews.review_subject_id == subject_id,  # type: ignore[arg-type]
            Reviews.user_id == user_id,  # type: ignore[arg-type]
            Reviews.deleted_at.is_(None),  # type: ignore[union-attr]
        )
    )
    return result.scalars().first()


async def load_scores(
    db: AsyncSession, review_ids: list[str]
) -> dict[str, list[ScoreResponse]]:
    """Scores per review id, in criterion order, with the criterion names."""
    if not review_ids:
        return {}
    result = await db.execute(
        select(EvaluationScores, EvaluationCriteria)
        .join(
            EvaluationCriteria,
            EvaluationCriteria.id == EvaluationScores.criteria_id,  # type: ignore[arg-type]
        )
        .where(EvaluationScores.review_id.in_(review_ids))  # type: ignore[attr-defined]
        .order_by(EvaluationCriteria.order_index)  # type: ignore[arg-type]
    )
    scores: dict[str, list[ScoreResponse]] = defaultdict(list)
    for score, criterion in result.all():
        scores[score.review_id].append(
            ScoreResponse(criteria_id=criterion.id, criteria_name=criterion.name, score=score.score)
        )
    return scores


def build_review_response(
    review: Reviews, user: Users, scores: list[ScoreResponse]
) -> ReviewResponse:
    return ReviewResponse(
        id=review.id,
        comment=review.comment,
        total_score=review.total_score,
        images=review.images,
        created_at=review.created_at,
        updated_at=review.updated_at,
        user=UserSummary.model_validate(user),
        evaluation_scores=scores,
    )


async def list_subject_reviews(db: AsyncSession, subject_id: str) -> list[ReviewResponse]:
    """Active reviews of a subject, newest first."""
    result = await db.execute(
        select(Reviews, Users)
        .join(Users, Users.id == Reviews.user_id)  # type: ignore[arg-type]
        .where(
            Reviews.review_subject_id == subject_id,  # type: ignore[arg-type]
            Reviews.deleted_at.is_(None),  # type: ignore[union-attr]
        )
        .order_by(Reviews.created_at.desc())  # type: ignore[attr-defined]
    )
    rows = result.all()
    scores = await load_scores(db, [review.id for review, _ in rows])
    return [build_review_response(review, user, scores.get(review.id, [])) for review, user in rows]


def add_scores(db: AsyncSession, review_id: str, scores: dict[str, int]) -> None:
    for criteria_id, score in scores.items():
        db.add(EvaluationScores(review_id=review_id, criteria_id=criteria_id, score=score))


async def replace_scores(db: AsyncSession, review_id: str, scores: dict[str, int]) -> None:
    """Swap a review's score rows for a new set inside the current transaction."""
    await delete_scores(db, review_id)
    add_scores(db, review_id, scores)


async def delete_scores(db: AsyncSession, review_id: str) -> None:
    await db.execute(
        delete(EvaluationScores).where(
            EvaluationScores.review_id == review_id  # type: ignore[arg-type]
        )
    )


async def subject_stats(
    db: AsyncSession,
    subject_ids: list[str],
    criteria: list[EvaluationCriteria] | None = None,
) -> dict[str, SubjectStats]:
    """
    Review statistics for each subject id.

    review_count and average_score (mean of the reviews' total scores) are
    always filled in, as is latest_review. When criteria are given, the
    per-criterion mean of the scores is added as score_breakdown, in the
    criteria's order; criteria nobody has scored yet average 0.0.
    """
    stats = {subject_id: SubjectStats() for subject_id in subject_ids}
    if not subject_ids:
        return stats

    result = await db.execute(
        select(Reviews, Users)
        .join(Users, Users.id == Reviews.user_id)  # type: ignore[arg-type]
        .where(
            Reviews.review_subject_id.in_(subject_ids),  # type: ignore[attr-defined]
            Reviews.deleted_at.is_(None),  # type: ignore[union-attr]
        )
        .order_by(Reviews.created_at.desc())  # type: ignore[attr-defined]
    )
    rows = result.all()

    totals: dict[str, list[float]] = defaultdict(list)
    for review, user in rows:
        entry = stats[review.review_subject_id]
        if entry.latest_review is None:
            entry.latest_review = LatestReview(
                comment=review.comment,
                total_score=review.total_score,
                created_at=review.created_at,
                user=UserSummary.model_validate(user),
            )
        totals[review.review_subject_id].append(review.total_score)

    for subject_id, values in totals.items():
        stats[subject_id].review_count = len(values)
        stats[subject_id].average_score = mean(values)

    if criteria is not None:
        subject_of = {review.id: review.review_subject_id for review, _ in rows}
        per_criterion: dict[tuple[str, str], list[float]] = defaultdict(list)
        if subject_of:
            score_result = await db.execute(
                select(EvaluationScores).where(
                    EvaluationScores.review_id.in_(list(subject_of))  # type: ignore[attr-defined]
                )
            )
            for score in score_result.scalars():
                key = (subject_of[score.review_id], score.criteria_id)
                per_criterion[key].append(score.score)

        for subject_id, entry in stats.items():
            entry.score_breakdown = [
                CriterionAverage(
                    criteria_id=criterion.id,
                    criteria_name=criterion.name,
                    average_score=mean(per_criterion.get((subject_id, criterion.id), [])),
                )
                for criterion in criteria
            ]

    return stats
