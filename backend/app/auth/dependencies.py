"""
FastAPI dependency resolving the widget API key to a Project.

Flow:
  1. Read the X-API-Key header (optional)
  2. No header → None (unassigned, legacy-compatible feedback)
  3. Look up projects by api_key
  4. Verify is_active = true
  5. Return the Project

Security:
  • Generic 401 for every failure mode (unknown key, inactive project)
  • Raw keys are NEVER logged
"""

from __future__ import annotations

import logging

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.models.project import Project

logger = logging.getLogger(__name__)

# One generic 401 for every key failure
_AUTH_FAILED = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or inactive API key.",
    headers={"WWW-Authenticate": "ApiKey"},
)


async def get_optional_project(
    api_key: str | None = Header(default=None, alias="X-API-Key"),
    session: AsyncSession = Depends(get_db_session),
) -> Project | None:
    """
    FastAPI dependency — resolves the widget key to its Project.

    Usage in routers:
        WidgetProject = Annotated[Project | None, Depends(get_optional_project)]

    Returns None when no key was sent. Raises 401 for:
      - Unknown key
      - Inactive project
    """
    if not api_key:
        return None

    stmt = select(Project).where(Project.api_key == api_key)
    result = await session.execute(stmt)
    project = result.scalar_one_or_none()

    if project is None:
        raise _AUTH_FAILED

    if not project.is_active:
        logger.info("Rejected feedback for inactive project %s", project.id)
        raise _AUTH_FAILED

    return project
