"""Pydantic schemas for the Vercel REST API.

Vercel API Documentation: https://vercel.com/docs/rest-api
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class GitSource(BaseModel):
    """Git source of a deployment, referencing a GitHub repository by ID."""

    type: Literal["github"] = "github"
    repo_id: int = Field(..., alias="repoId", description="Opaque GitHub repository ID")
    repo: str = Field(..., description="Full name: owner/repo")
    ref: str = Field("main", description="Branch to deploy")

    model_config = ConfigDict(populate_by_name=True)


class ProjectSettings(BaseModel):
    """Build overrides. All left unset so platform defaults apply."""

    model_config = ConfigDict(populate_by_name=True)

    framework: str | None = None
    build_command: str | None = Field(None, alias="buildCommand")
    install_command: str | None = Field(None, alias="installCommand")
    output_directory: str | None = Field(None, alias="outputDirectory")
    root_directory: str | None = Field(None, alias="rootDirectory")
    dev_command: str | None = Field(None, alias="devCommand")


class DeploymentRequest(BaseModel):
    """Body of POST /v13/deployments."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    git_source: GitSource = Field(..., alias="gitSource")
    project_settings: ProjectSettings = Field(
        default_factory=ProjectSettings, alias="projectSettings"
    )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class VercelProjectRef(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str


class VercelDeployment(BaseModel):
    """Subset of the deployment object returned by POST /v13/deployments."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = None
    url: str | None = None
    alias: list[str] | None = None
    project_id: str | None = Field(None, alias="projectId")
    project: VercelProjectRef | None = None

    @property
    def resolved_project_id(self) -> str | None:
        if self.project_id:
            return self.project_id
        return self.project.id if self.project else None
