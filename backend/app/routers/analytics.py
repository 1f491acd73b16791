"""
Analytics router — aggregated feedback insights for the dashboard.

All counting happens in SQL through the FeedbackStore, never as Python-side
loops over feedback rows.

Endpoints:
  GET /analytics/insights              — everything
  GET /analytics/insights?projectId=…  — one project
"""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.schemas.analytics import FeedbackInsightsOut
from app.services.analytics import compute_feedback_insights
from app.services.store import FeedbackStore, get_feedback_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Analytics"])

Store = Annotated[FeedbackStore, Depends(get_feedback_store)]


@router.get(
    "/insights",
    response_model=FeedbackInsightsOut,
    summary="Feedback statistics",
    description=(
        "Total and recent feedback counts, average rating, rating "
        "distribution, and feedback per project. Pass projectId to "
        "scope every number to a single project."
    ),
)
async def get_feedback_insights(
    store: Store,
    project_id: uuid.UUID | None = Query(
        default=None,
        alias="projectId",
        description="Restrict statistics to this project.",
    ),
) -> FeedbackInsightsOut:
    """No partial results: any store failure becomes a generic 500."""
    try:
        return await compute_feedback_insights(store, project_id)
    except Exception as exc:
        logger.exception("Failed to compute feedback insights")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch feedback insights",
        ) from exc
