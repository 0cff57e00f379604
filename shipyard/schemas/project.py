"""Project and review schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from shipyard.models import LogLevel, ProjectStatus


class ReviewCreate(BaseModel):
    """Schema for submitting a review."""

    rating: int = Field(..., ge=1, le=5)
    comment: str | None = None
    reviewer_name: str | None = None


class ReviewRead(BaseModel):
    """Schema for reading a review."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    rating: int
    comment: str | None = None
    reviewer_name: str | None = None
    created_at: datetime


class ProjectLogRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    timestamp: datetime
    message: str
    level: LogLevel


class ProjectPublic(BaseModel):
    """Project as shown to anonymous visitors: no logs, no local paths."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None
    repo_url: str | None = None
    subdomain: str | None = None
    status: ProjectStatus
    deployment_url: str | None = None
    reviews: list[ReviewRead] = []
    created_at: datetime
    updated_at: datetime


class ProjectRead(ProjectPublic):
    """Full project view for admins."""

    file_path: str | None = None
    vercel_project_id: str | None = None
    github_repo_name: str | None = None
    github_repo_id: int | None = None
    github_repo_created: bool = False
    logs: list[ProjectLogRead] = []


class ProjectUpdate(BaseModel):
    """Schema for an admin update of a project.

    ``deployment_url`` is only accepted for projects that already have a Vercel
    project ID, so the URL never exists without the project it points to.
    """

    name: str | None = None
    description: str | None = None
    status: ProjectStatus | None = None
    deployment_url: str | None = None


class ProjectCreated(BaseModel):
    message: str
    project: ProjectRead


class MessageResponse(BaseModel):
    message: str
