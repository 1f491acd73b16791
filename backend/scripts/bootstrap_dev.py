"""
Dev bootstrap script — default project for local development and for
feedback collected before projects existed.

Usage:
    python -m scripts.bootstrap_dev

This will:
  1. Reuse the project named "Default Project", or create it
  2. Attach every unassigned feedback row to it
  3. Print the project's widget API key

Safe to run repeatedly.
"""

import asyncio
import sys

# Ensure the project root is on the path
sys.path.insert(0, ".")

from sqlalchemy import select, update

from app.auth.keys import generate_api_key
from app.core.database import engine, session_scope
from app.models.feedback import Feedback
from app.models.project import Project

DEFAULT_PROJECT_NAME = "Default Project"


async def main() -> None:
    async with session_scope() as session:
        # ── Find or create the default project ──────────────
        result = await session.execute(
            select(Project).where(Project.name == DEFAULT_PROJECT_NAME).limit(1)
        )
        project = result.scalar_one_or_none()
        created = project is None

        if created:
            project = Project(
                name=DEFAULT_PROJECT_NAME,
                domain="http://localhost:3000",
                description="Default project for existing feedback entries",
                api_key=generate_api_key(),
            )
            session.add(project)
            await session.flush()  # get project.id

        # ── Adopt legacy feedback ───────────────────────────
        result = await session.execute(
            update(Feedback)
            .where(Feedback.project_id.is_(None))
            .values(project_id=project.id)
        )
        adopted = result.rowcount

    # ── Print results ───────────────────────────────────────
    print()
    print("=" * 60)
    print("  Dev Bootstrap Complete")
    print("=" * 60)
    print()
    print(f"  Project:    {project.name} ({'created' if created else 'existing'})")
    print(f"  Project ID: {project.id}")
    print(f"  Adopted:    {adopted} unassigned feedback entries")
    print()
    print(f"  Widget key: {project.api_key}")
    print("  Send it as the X-API-Key header from the widget.")
    print("=" * 60)
    print()

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
