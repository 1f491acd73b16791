"""
Pydantic v2 schemas for project administration.

The API key is server-generated. Clients can ask for a new one
(regenerateApiKey) but can never choose its value.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, ConfigDict, Field

from app.schemas.common import CamelModel


def _strip_required(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be blank")
    return value


def _strip_optional(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


RequiredText = Annotated[str, AfterValidator(_strip_required)]
OptionalText = Annotated[str | None, AfterValidator(_strip_optional)]


class ProjectCreate(CamelModel):
    """Payload accepted by POST /projects."""

    model_config = ConfigDict(extra="forbid")

    name: RequiredText = Field(..., examples=["Marketing site"])
    domain: RequiredText = Field(..., examples=["https://example.com"])
    description: OptionalText = None
    is_active: bool = True


class ProjectUpdate(CamelModel):
    """Payload accepted by PATCH /projects/{id}. Omitted fields are unchanged."""

    model_config = ConfigDict(extra="forbid")

    name: RequiredText | None = None
    domain: RequiredText | None = None
    description: OptionalText = None
    is_active: bool | None = None
    regenerate_api_key: bool = False


class ProjectOut(CamelModel):
    """Project as shown in the dashboard, with its derived feedback count."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    domain: str
    description: str | None
    api_key: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    feedback_count: int = 0
