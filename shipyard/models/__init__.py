"""Database models package."""

from .base import Base
from .project import LogLevel, Project, ProjectLog, ProjectStatus, Review

__all__ = [
    "Base",
    "LogLevel",
    "Project",
    "ProjectLog",
    "ProjectStatus",
    "Review",
]
