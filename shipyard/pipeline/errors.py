"""Stage errors raised by the pipeline components.

Each error class maps to exactly one terminal error status; the coordinator
persists that status when it catches the error at the stage boundary.
"""

from typing import ClassVar

from shipyard.models import ProjectStatus


class PipelineError(Exception):
    """Base class for stage failures."""

    status: ClassVar[ProjectStatus] = ProjectStatus.ERROR


class ExtractionError(PipelineError):
    """The uploaded archive could not be extracted."""

    status = ProjectStatus.ERROR_ZIP_EXTRACTION


class InvalidRepoReferenceError(PipelineError):
    """The repository URL does not resolve to an owner/repo pair."""

    status = ProjectStatus.ERROR_INVALID_REPO_URL


class RepoCreationError(PipelineError):
    """GitHub refused to create the repository."""

    status = ProjectStatus.ERROR_GITHUB_CREATION


class RepoFetchError(PipelineError):
    """Metadata for an existing repository could not be fetched."""

    status = ProjectStatus.ERROR_GITHUB_FETCH_ID


class PushError(PipelineError):
    """A git command failed while pushing the staged tree."""

    status = ProjectStatus.ERROR_GITHUB_PUSH

    def __init__(self, message: str, command: list[str] | None = None, stderr: str = ""):
        super().__init__(message)
        self.command = command or []
        self.stderr = stderr


class MissingRepoDetailsError(PipelineError):
    """Repository name or ID is missing when deployment is about to start."""

    status = ProjectStatus.ERROR_MISSING_GH_DETAILS


class DeploymentError(PipelineError):
    """Vercel rejected the deployment request."""

    status = ProjectStatus.ERROR_VERCEL_DEPLOYMENT
