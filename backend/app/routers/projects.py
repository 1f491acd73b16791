"""
Projects router — administration of widget projects.

GET   /projects        — all projects, newest first, with feedbackCount
POST  /projects        — create a project and issue its widget key
PATCH /projects/{id}   — edit fields, optionally regenerate the key

The widget key only changes through an explicit regenerateApiKey=true.
"""

import logging
import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.keys import generate_api_key
from app.core.database import get_db_session
from app.models.feedback import Feedback
from app.models.project import Project
from app.schemas.project import ProjectCreate, ProjectOut, ProjectUpdate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Projects"])

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def _feedback_count(session: AsyncSession, project_id: uuid.UUID) -> int:
    stmt = select(func.count(Feedback.id)).where(Feedback.project_id == project_id)
    result = await session.execute(stmt)
    return result.scalar_one()


def _project_out(project: Project, feedback_count: int) -> ProjectOut:
    out = ProjectOut.model_validate(project)
    out.feedback_count = feedback_count
    return out


@router.get(
    "",
    response_model=list[ProjectOut],
    summary="List projects with feedback counts",
)
async def list_projects(session: DbSession) -> list[ProjectOut]:
    """
    SQL: SELECT projects.*, COUNT(feedback.id) FROM projects
         LEFT JOIN feedback ON feedback.project_id = projects.id
         GROUP BY projects.id ORDER BY projects.created_at DESC
    """
    count_col = func.count(Feedback.id).label("feedback_count")
    stmt = (
        select(Project, count_col)
        .outerjoin(Feedback, Feedback.project_id == Project.id)
        .group_by(Project.id)
        .order_by(Project.created_at.desc())
    )
    result = await session.execute(stmt)
    return [_project_out(project, count) for project, count in result.all()]


@router.post(
    "",
    response_model=ProjectOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a project",
)
async def create_project(payload: ProjectCreate, session: DbSession) -> ProjectOut:
    project = Project(
        name=payload.name,
        domain=payload.domain,
        description=payload.description,
        is_active=payload.is_active,
        api_key=generate_api_key(),
    )

    try:
        session.add(project)
        await session.commit()
        await session.refresh(project)
    except Exception:
        await session.rollback()
        logger.exception("Failed to create project")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create project",
        )

    logger.info("Created project %s (%s)", project.id, project.name)
    return _project_out(project, 0)


@router.patch(
    "/{project_id}",
    response_model=ProjectOut,
    summary="Update a project",
)
async def update_project(
    project_id: uuid.UUID,
    payload: ProjectUpdate,
    session: DbSession,
) -> ProjectOut:
    project = await session.get(Project, project_id)
    if project is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Project not found",
        )

    changes = payload.model_dump(exclude_unset=True, exclude={"regenerate_api_key"})
    for field, value in changes.items():
        # name/domain/is_active are NOT NULL; explicit null leaves them unchanged
        if value is None and field != "description":
            continue
        setattr(project, field, value)

    if payload.regenerate_api_key:
        project.api_key = generate_api_key()
        logger.info("Regenerated API key for project %s", project.id)

    try:
        await session.commit()
        await session.refresh(project)
    except Exception:
        await session.rollback()
        logger.exception("Failed to update project %s", project_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update project",
        )

    return _project_out(project, await _feedback_count(session, project.id))
