"""
Feedback insights aggregation.

Pure read over the FeedbackStore. Each number comes from its own query;
there is no surrounding transaction, so concurrent writes may make the
numbers drift slightly relative to each other. That is acceptable for a
dashboard, as is a project deleted mid-computation showing up as
"Unknown Project".

Scope:
  • project_id=None → everything, one feedbackByProject entry per project
    referenced plus one for unassigned feedback.
  • project_id=X    → only X's feedback, a single feedbackByProject entry,
    totalProjects = 1 regardless of X's active flag.
"""

from __future__ import annotations

import datetime
import logging
import uuid
from decimal import ROUND_HALF_UP, Decimal

from app.schemas.analytics import (
    FeedbackInsightsOut,
    ProjectFeedbackCountOut,
    RatingBucketOut,
)
from app.services.store import FeedbackFilter, FeedbackStore

logger = logging.getLogger(__name__)

RATINGS = (1, 2, 3, 4, 5)
UNASSIGNED_PROJECT_NAME = "No Project"
UNKNOWN_PROJECT_NAME = "Unknown Project"


def round_rating(value: float | None) -> float:
    """Half-up to 2 decimals; no rated feedback → 0."""
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


async def _rating_distribution(
    store: FeedbackStore,
    project_id: uuid.UUID | None,
) -> list[RatingBucketOut]:
    """Always five buckets, zero-filled."""
    buckets = []
    for rating in RATINGS:
        count = await store.count_feedback(
            FeedbackFilter(project_id=project_id, rating=rating)
        )
        buckets.append(RatingBucketOut(rating=rating, count=count))
    return buckets


async def _project_name(store: FeedbackStore, project_id: uuid.UUID) -> str:
    project = await store.find_project_by_id(project_id)
    return project.name if project is not None else UNKNOWN_PROJECT_NAME


async def _feedback_by_project(
    store: FeedbackStore,
    project_id: uuid.UUID | None,
    total_feedback: int,
) -> list[ProjectFeedbackCountOut]:
    if project_id is not None:
        return [
            ProjectFeedbackCountOut(
                project_id=project_id,
                project_name=await _project_name(store, project_id),
                count=total_feedback,
            )
        ]

    groups = await store.group_feedback_by_project(FeedbackFilter())
    entries = []
    for group_project_id, count in groups:
        if group_project_id is None:
            name = UNASSIGNED_PROJECT_NAME
        else:
            name = await _project_name(store, group_project_id)
        entries.append(
            ProjectFeedbackCountOut(
                project_id=group_project_id,
                project_name=name,
                count=count,
            )
        )
    return entries


async def compute_feedback_insights(
    store: FeedbackStore,
    project_id: uuid.UUID | None = None,
    now: datetime.datetime | None = None,
) -> FeedbackInsightsOut:
    """
    Compute every dashboard statistic for the given scope.

    Store errors propagate. The caller answers with a generic failure
    rather than a partial aggregate.
    """
    now = now or datetime.datetime.now(datetime.timezone.utc)
    scope = FeedbackFilter(project_id=project_id)

    total_feedback = await store.count_feedback(scope)
    average = await store.average_rating(scope)
    distribution = await _rating_distribution(store, project_id)
    by_project = await _feedback_by_project(store, project_id, total_feedback)

    recent_7_days = await store.count_feedback(
        FeedbackFilter(project_id=project_id, created_since=now - datetime.timedelta(days=7))
    )
    recent_30_days = await store.count_feedback(
        FeedbackFilter(project_id=project_id, created_since=now - datetime.timedelta(days=30))
    )

    if project_id is not None:
        total_projects = 1
    else:
        total_projects = await store.count_projects(active=True)

    logger.debug(
        "Insights computed (project=%s, total=%d)",
        project_id or "all",
        total_feedback,
    )

    return FeedbackInsightsOut(
        total_feedback=total_feedback,
        average_rating=round_rating(average),
        # Ratings are constrained to 1..5, so the buckets cover every rated row.
        rated_feedback_count=sum(bucket.count for bucket in distribution),
        rating_distribution=distribution,
        feedback_by_project=by_project,
        recent_7_days=recent_7_days,
        recent_30_days=recent_30_days,
        total_projects=total_projects,
    )
