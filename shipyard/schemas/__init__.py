"""Pydantic schemas for external APIs and the HTTP surface."""

from .github import GitHubAccount, GitHubRepository
from .project import (
    MessageResponse,
    ProjectCreated,
    ProjectLogRead,
    ProjectPublic,
    ProjectRead,
    ProjectUpdate,
    ReviewCreate,
    ReviewRead,
)
from .vercel import DeploymentRequest, GitSource, ProjectSettings, VercelDeployment

__all__ = [
    "DeploymentRequest",
    "GitHubAccount",
    "GitHubRepository",
    "GitSource",
    "MessageResponse",
    "ProjectCreated",
    "ProjectLogRead",
    "ProjectPublic",
    "ProjectRead",
    "ProjectSettings",
    "ProjectUpdate",
    "ReviewCreate",
    "ReviewRead",
    "VercelDeployment",
]
