"""
Pydantic v2 response schemas for the feedback insights endpoint.

One response object carries every dashboard number, so the dashboard
renders from a single request. Keys are camelCase on the wire.
"""

from __future__ import annotations

import uuid

from pydantic import Field

from app.schemas.common import CamelModel


class RatingBucketOut(CamelModel):
    """How many in-scope entries have exactly this rating."""

    rating: int
    count: int


class ProjectFeedbackCountOut(CamelModel):
    """Feedback count for one project; project_id is None for unassigned."""

    project_id: uuid.UUID | None
    project_name: str
    count: int


class FeedbackInsightsOut(CamelModel):
    """Aggregate statistics, optionally scoped to one project."""

    total_feedback: int
    average_rating: float
    rated_feedback_count: int
    rating_distribution: list[RatingBucketOut]
    feedback_by_project: list[ProjectFeedbackCountOut]
    recent_7_days: int = Field(alias="recent7Days")
    recent_30_days: int = Field(alias="recent30Days")
    total_projects: int
