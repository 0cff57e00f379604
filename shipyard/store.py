"""Project persistence.

Every method opens its own session and commits before returning, so each
status transition and log line is durable before the pipeline moves on.
"""

from collections.abc import Iterable
from enum import Enum
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shipyard.logging_config import get_logger
from shipyard.models import LogLevel, Project, ProjectLog, ProjectStatus, Review
from shipyard.models.base import utcnow

logger = get_logger(__name__)


def _column_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class ProjectStore:
    """Data access for projects, their logs and reviews."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def create(
        self, project: Project, logs: Iterable[tuple[str, LogLevel]] = ()
    ) -> str:
        """Insert a project with its initial log lines and return its ID.

        Raises:
            IntegrityError: If the subdomain is already taken.
        """
        for message, level in logs:
            project.logs.append(ProjectLog(message=message, level=level.value))

        async with self.session_maker() as session:
            session.add(project)
            await session.commit()

        logger.info("project_created", project_id=project.id, status=project.status)
        return project.id

    async def find_by_id(self, project_id: str) -> Project | None:
        async with self.session_maker() as session:
            return await session.get(Project, project_id)

    async def list_projects(self, status: ProjectStatus | None = None) -> list[Project]:
        """List projects, newest first, optionally filtered by status."""
        query = select(Project).order_by(Project.created_at.desc(), Project.id)
        if status is not None:
            query = query.where(Project.status == status.value)

        async with self.session_maker() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def update_fields(self, project_id: str, **fields: Any) -> bool:
        """Overwrite the given columns. Last writer wins."""
        values = {name: _column_value(value) for name, value in fields.items()}
        values["updated_at"] = utcnow()

        async with self.session_maker() as session:
            result = await session.execute(
                update(Project).where(Project.id == project_id).values(**values)
            )
            await session.commit()

        if result.rowcount == 0:
            logger.warning("project_update_missed", project_id=project_id, fields=list(fields))
            return False
        return True

    async def set_status(self, project_id: str, status: ProjectStatus, **fields: Any) -> bool:
        return await self.update_fields(project_id, status=status, **fields)

    async def append_log(
        self, project_id: str, message: str, level: LogLevel = LogLevel.INFO
    ) -> bool:
        """Append one entry to the project's log.

        Returns False when the project no longer exists.
        """
        async with self.session_maker() as session:
            session.add(ProjectLog(project_id=project_id, message=message, level=level.value))
            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                logger.warning(
                    "project_log_dropped",
                    project_id=project_id,
                    message=message,
                    level=level.value,
                )
                return False
        return True

    async def get_logs(self, project_id: str) -> list[ProjectLog]:
        async with self.session_maker() as session:
            result = await session.execute(
                select(ProjectLog)
                .where(ProjectLog.project_id == project_id)
                .order_by(ProjectLog.id)
            )
            return list(result.scalars().all())

    async def add_review(
        self,
        project_id: str,
        rating: int,
        comment: str | None = None,
        reviewer_name: str | None = None,
    ) -> Review | None:
        """Append a review. Returns None when the project does not exist."""
        async with self.session_maker() as session:
            if await session.get(Project, project_id) is None:
                return None

            review = Review(
                project_id=project_id,
                rating=rating,
                comment=comment,
                reviewer_name=reviewer_name or "Anonymous",
            )
            session.add(review)
            await session.commit()
            return review

    async def delete(self, project_id: str) -> bool:
        """Delete a project together with its logs and reviews."""
        async with self.session_maker() as session:
            project = await session.get(Project, project_id)
            if project is None:
                return False
            await session.delete(project)
            await session.commit()

        logger.info("project_deleted", project_id=project_id)
        return True
