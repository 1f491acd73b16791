"""
SQLAlchemy model for the `feedback` table.

Each row is one widget submission. Rows are written once by the ingestion
handler and never touched by the notification pipeline.

Design notes:
  • message is NOT NULL and CHECKed non-empty at the DB level too.
  • rating is nullable; when present a CHECK keeps it in 1..5.
  • metadata_ is JSONB for free-form widget context (page URL, browser, …).
  • project_id is nullable: feedback collected before projects existed,
    or whose project was deleted, stays around unassigned.
"""

import datetime
import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID, TIMESTAMP
from sqlalchemy.sql import func
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class Feedback(Base):
    """One feedback submission."""

    __tablename__ = "feedback"

    # ── Primary key ─────────────────────────────────────────
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        server_default=func.gen_random_uuid(),
    )

    # ── Submitter (opaque, unvalidated) ─────────────────────
    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    email: Mapped[str | None] = mapped_column(Text, nullable=True)

    # ── Content ─────────────────────────────────────────────
    message: Mapped[str] = mapped_column(Text, nullable=False)
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Column named `metadata_` because `metadata` is reserved on
    # declarative classes; maps to DB column `metadata`.
    metadata_: Mapped[dict | None] = mapped_column(
        "metadata",
        JSONB,
        nullable=True,
    )

    # ── Ownership ───────────────────────────────────────────
    project_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("projects.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime.datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        CheckConstraint("length(message) > 0", name="ck_feedback_message_not_empty"),
        CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 5)",
            name="ck_feedback_rating_range",
        ),
        Index("ix_feedback_project_id", "project_id"),
        Index("ix_feedback_created_at", "created_at"),
        Index("ix_feedback_rating", "rating"),
    )

    def __repr__(self) -> str:
        return (
            f"<Feedback id={self.id!s:.8} project={self.project_id!s:.8} "
            f"rating={self.rating}>"
        )
