"""
Feedback store — the query interface the ingestion and analytics
services depend on.

The services never touch AsyncSession directly; they receive a
FeedbackStore, so tests can hand them an in-memory double.

All aggregation happens in SQL (COUNT / AVG / GROUP BY). Every read
takes the same FeedbackFilter:
    optional project_id equality
  + optional rating equality
  + optional created_since lower bound (inclusive)
"""

from __future__ import annotations

import datetime
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Protocol

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.models.feedback import Feedback
from app.models.project import Project

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FeedbackFilter:
    """Scope of a feedback read. None means "no restriction"."""

    project_id: uuid.UUID | None = None
    rating: int | None = None
    created_since: datetime.datetime | None = None


class FeedbackStore(Protocol):
    """Operations the core needs from the record store."""

    async def create_feedback(
        self,
        *,
        message: str,
        name: str | None = None,
        email: str | None = None,
        rating: int | None = None,
        metadata: dict[str, Any] | None = None,
        project_id: uuid.UUID | None = None,
    ) -> Feedback: ...

    async def list_feedback(
        self, where: FeedbackFilter, limit: int = 100,
    ) -> list[Feedback]: ...

    async def get_feedback(self, feedback_id: uuid.UUID) -> Feedback | None: ...

    async def count_feedback(self, where: FeedbackFilter) -> int: ...

    async def average_rating(self, where: FeedbackFilter) -> float | None: ...

    async def group_feedback_by_project(
        self, where: FeedbackFilter,
    ) -> list[tuple[uuid.UUID | None, int]]: ...

    async def find_project_by_id(self, project_id: uuid.UUID) -> Project | None: ...

    async def count_projects(self, active: bool | None = None) -> int: ...


def _conditions(where: FeedbackFilter) -> list[Any]:
    """Translate a FeedbackFilter into SQLAlchemy WHERE clauses."""
    clauses: list[Any] = []
    if where.project_id is not None:
        clauses.append(Feedback.project_id == where.project_id)
    if where.rating is not None:
        clauses.append(Feedback.rating == where.rating)
    if where.created_since is not None:
        clauses.append(Feedback.created_at >= where.created_since)
    return clauses


class SqlFeedbackStore:
    """FeedbackStore backed by the request-scoped AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_feedback(
        self,
        *,
        message: str,
        name: str | None = None,
        email: str | None = None,
        rating: int | None = None,
        metadata: dict[str, Any] | None = None,
        project_id: uuid.UUID | None = None,
    ) -> Feedback:
        """Insert one row and commit. Rolls back and re-raises on failure."""
        feedback = Feedback(
            name=name,
            email=email,
            message=message,
            rating=rating,
            metadata_=metadata,
            project_id=project_id,
        )
        try:
            self.session.add(feedback)
            await self.session.commit()
            await self.session.refresh(feedback)
        except Exception:
            await self.session.rollback()
            raise
        return feedback

    async def list_feedback(
        self, where: FeedbackFilter, limit: int = 100,
    ) -> list[Feedback]:
        stmt = (
            select(Feedback)
            .where(*_conditions(where))
            .order_by(Feedback.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_feedback(self, feedback_id: uuid.UUID) -> Feedback | None:
        return await self.session.get(Feedback, feedback_id)

    async def count_feedback(self, where: FeedbackFilter) -> int:
        stmt = select(func.count(Feedback.id)).where(*_conditions(where))
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def average_rating(self, where: FeedbackFilter) -> float | None:
        """AVG(rating) over in-scope rows; NULL ratings are ignored by AVG."""
        stmt = select(func.avg(Feedback.rating)).where(*_conditions(where))
        result = await self.session.execute(stmt)
        value = result.scalar_one()
        return float(value) if value is not None else None

    async def group_feedback_by_project(
        self, where: FeedbackFilter,
    ) -> list[tuple[uuid.UUID | None, int]]:
        """
        SQL: SELECT project_id, COUNT(*) FROM feedback
             WHERE … GROUP BY project_id ORDER BY COUNT(*) DESC

        Unassigned feedback comes back as a single (None, n) group.
        """
        count_col = func.count(Feedback.id).label("feedback_count")
        stmt = (
            select(Feedback.project_id, count_col)
            .where(*_conditions(where))
            .group_by(Feedback.project_id)
            .order_by(count_col.desc())
        )
        result = await self.session.execute(stmt)
        return [(project_id, count) for project_id, count in result.all()]

    async def find_project_by_id(self, project_id: uuid.UUID) -> Project | None:
        return await self.session.get(Project, project_id)

    async def count_projects(self, active: bool | None = None) -> int:
        stmt = select(func.count(Project.id))
        if active is not None:
            stmt = stmt.where(Project.is_active == active)
        result = await self.session.execute(stmt)
        return result.scalar_one()


# ── Dependency ──────────────────────────────────────────────
async def get_feedback_store(
    session: AsyncSession = Depends(get_db_session),
) -> FeedbackStore:
    """FastAPI dependency — overridden with an in-memory store in tests."""
    return SqlFeedbackStore(session)
