"""
Feedback ingestion service.

Order of operations (never reversed):
  1. Validate — message must be present and non-empty.
  2. Persist  — the Store commits the row.
  3. Notify   — only after a durable write, and never able to fail it.

The service returns the stored record; scheduling the notification is
left to the caller (the router hands it to BackgroundTasks).
"""

from __future__ import annotations

import logging

from app.models.feedback import Feedback
from app.models.project import Project
from app.schemas.feedback import FeedbackCreate
from app.services.analytics import UNASSIGNED_PROJECT_NAME
from app.services.email_content import FeedbackEmailData
from app.services.store import FeedbackStore

logger = logging.getLogger(__name__)


class FeedbackValidationError(Exception):
    """The submission is missing its message."""


class FeedbackPersistenceError(Exception):
    """The store failed to write the submission. Details are in the logs."""


class FeedbackIngestionService:
    """Validates and stores feedback, and prepares its notification."""

    def __init__(self, store: FeedbackStore, dashboard_base_url: str = "") -> None:
        self.store = store
        self.dashboard_base_url = dashboard_base_url.rstrip("/")

    async def submit(
        self,
        submission: FeedbackCreate,
        project: Project | None = None,
    ) -> Feedback:
        """
        Store one submission, scoped to `project` when the widget key
        resolved to one.

        Raises:
            FeedbackValidationError:  message missing or empty.
            FeedbackPersistenceError: the store write failed.
        """
        if not submission.message:
            raise FeedbackValidationError("Message is required")

        try:
            feedback = await self.store.create_feedback(
                message=submission.message,
                name=submission.name,
                email=submission.email,
                rating=submission.rating,
                metadata=submission.metadata,
                project_id=project.id if project is not None else None,
            )
        except Exception as exc:
            logger.exception("Failed to persist feedback")
            raise FeedbackPersistenceError("Failed to save feedback") from exc

        logger.info(
            "Stored feedback %s (project=%s, rating=%s)",
            feedback.id,
            project.id if project is not None else "none",
            feedback.rating,
        )
        return feedback

    def build_email_data(
        self,
        feedback: Feedback,
        project: Project | None = None,
    ) -> FeedbackEmailData:
        """Snapshot the stored record as plain values for the email templates."""
        dashboard_url = None
        if self.dashboard_base_url:
            dashboard_url = f"{self.dashboard_base_url}/dashboard/feedback/{feedback.id}"

        return FeedbackEmailData(
            project_name=project.name if project is not None else UNASSIGNED_PROJECT_NAME,
            project_domain=project.domain if project is not None else "",
            feedback_id=str(feedback.id),
            message=feedback.message,
            created_at=feedback.created_at,
            submitter_name=feedback.name,
            submitter_email=feedback.email,
            rating=feedback.rating,
            metadata=feedback.metadata_,
            dashboard_url=dashboard_url,
        )
