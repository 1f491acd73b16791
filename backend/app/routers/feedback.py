"""
Feedback router — the entry point for widget submissions.

POST /feedback
  1. Resolves the optional X-API-Key to an active project.
  2. Validates the payload (Pydantic + "message is required").
  3. Persists the feedback row.
  4. Returns the stored record with 201 Created.
  5. Emails a notification AFTER the response, as a background task.
     Its outcome is logged only and never changes the response.

GET /feedback
  Newest first, optionally scoped to one project.

GET /feedback/{id}
  One record, whatever its age. Backs the dashboard page linked from
  notification emails.
"""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status

from app.auth.dependencies import get_optional_project
from app.core.config import settings
from app.models.feedback import Feedback
from app.models.project import Project
from app.schemas.feedback import FeedbackCreate, FeedbackOut
from app.services.ingestion import (
    FeedbackIngestionService,
    FeedbackPersistenceError,
    FeedbackValidationError,
)
from app.services.notifications import (
    NotificationDispatcher,
    get_notification_dispatcher,
    notify_new_feedback,
)
from app.services.store import FeedbackFilter, FeedbackStore, get_feedback_store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Feedback"])

# Type aliases for cleaner signatures
Store = Annotated[FeedbackStore, Depends(get_feedback_store)]
Dispatcher = Annotated[NotificationDispatcher, Depends(get_notification_dispatcher)]
WidgetProject = Annotated[Project | None, Depends(get_optional_project)]


@router.post(
    "",
    response_model=FeedbackOut,
    status_code=status.HTTP_201_CREATED,
    summary="Submit feedback",
    description=(
        "Stores one feedback submission. Send the project's widget key in "
        "X-API-Key to attach it to a project. A notification email is sent "
        "after the response; delivery problems never fail the submission."
    ),
)
async def submit_feedback(
    payload: FeedbackCreate,
    background_tasks: BackgroundTasks,
    store: Store,
    dispatcher: Dispatcher,
    project: WidgetProject,
) -> Feedback:
    service = FeedbackIngestionService(store, dashboard_base_url=settings.DASHBOARD_BASE_URL)

    # ── 1. Validate + persist ───────────────────────────────
    try:
        feedback = await service.submit(payload, project)
    except FeedbackValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except FeedbackPersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save feedback",
        ) from exc

    # ── 2. Notify (after the response) ──────────────────────
    # Snapshot plain values now: the DB session is gone by the time
    # the background task runs.
    email_data = service.build_email_data(feedback, project)
    background_tasks.add_task(
        notify_new_feedback,
        dispatcher,
        email_data,
        settings.NOTIFICATION_EMAIL,
    )

    return feedback


@router.get(
    "",
    response_model=list[FeedbackOut],
    summary="List feedback, newest first",
)
async def list_feedback(
    store: Store,
    project_id: uuid.UUID | None = Query(
        default=None,
        alias="projectId",
        description="Only feedback for this project.",
    ),
    limit: int = Query(default=100, ge=1, le=500),
) -> list[Feedback]:
    try:
        return await store.list_feedback(FeedbackFilter(project_id=project_id), limit=limit)
    except Exception as exc:
        logger.exception("Failed to fetch feedback")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch feedback",
        ) from exc


@router.get(
    "/{feedback_id}",
    response_model=FeedbackOut,
    summary="Get one feedback record",
    description="Backs the dashboard page linked from notification emails.",
)
async def get_feedback(feedback_id: uuid.UUID, store: Store) -> Feedback:
    try:
        feedback = await store.get_feedback(feedback_id)
    except Exception as exc:
        logger.exception("Failed to fetch feedback %s", feedback_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch feedback",
        ) from exc

    if feedback is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Feedback not found",
        )
    return feedback
