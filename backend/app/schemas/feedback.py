"""
Pydantic v2 schemas for feedback ingestion.

Separation:
  • FeedbackCreate — what the WIDGET sends.
  • FeedbackOut    — what the SERVER returns after persistence.

message is deliberately Optional here: the ingestion service owns the
"message is required" rule so non-HTTP callers get the same check, and
the router can answer with a plain 400 instead of a schema dump.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field

from app.schemas.common import CamelModel


# ── Request schema ──────────────────────────────────────────
class FeedbackCreate(CamelModel):
    """
    Payload accepted by POST /feedback.

    name and email are opaque strings with no format validation.
    extra="forbid" rejects unknown fields with 422.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(
        default=None,
        examples=["Jane Doe"],
        description="Submitter name (optional).",
    )
    email: str | None = Field(
        default=None,
        examples=["jane@example.com"],
        description="Submitter email (optional, not validated).",
    )
    message: str | None = Field(
        default=None,
        examples=["The checkout button does nothing on Safari."],
        description="Feedback text. Required and non-empty.",
    )
    rating: int | None = Field(
        default=None,
        ge=1,
        le=5,
        examples=[4],
        description="Star rating 1-5 (optional).",
    )
    metadata: dict[str, Any] | None = Field(
        default=None,
        examples=[{"page": "/checkout", "browser": "Safari 17"}],
        description="Free-form widget context (JSONB).",
    )


# ── Response schema ─────────────────────────────────────────
class FeedbackOut(CamelModel):
    """Stored feedback, including server-generated id and createdAt."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str | None
    email: str | None
    message: str
    rating: int | None
    metadata: dict[str, Any] | None = Field(
        default=None,
        # Maps to the ORM attribute `metadata_` (column name is `metadata`)
        validation_alias="metadata_",
        serialization_alias="metadata",
    )
    project_id: uuid.UUID | None
    created_at: datetime
