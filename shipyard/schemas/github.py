"""Response models for the GitHub repositories API.

Only the fields the pipeline reads are declared; everything else GitHub sends
is kept as extra attributes.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class GitHubAccount(BaseModel):
    """Owner of a repository."""

    model_config = ConfigDict(extra="allow")

    login: str
    id: int
    type: str | None = Field(None, description="'User' or 'Organization'")


class GitHubRepository(BaseModel):
    """Repository as returned by ``POST /user/repos`` and ``GET /repos/{owner}/{repo}``."""

    model_config = ConfigDict(extra="allow")

    id: int = Field(..., description="Immutable numeric ID, used as Vercel's gitSource.repoId")
    name: str
    full_name: str = Field(..., description="owner/repo")
    private: bool = True
    description: str | None = None
    html_url: str
    clone_url: str = Field(..., description="HTTPS URL the push executor authenticates against")
    owner: GitHubAccount | None = None
    default_branch: str | None = None
    created_at: datetime | None = None
