"""Repository provisioning: create a new GitHub repo or resolve an existing one."""

from collections.abc import Callable
from dataclasses import dataclass
import time

import httpx
from pydantic import ValidationError

from shipyard.clients.github import GitHubClient
from shipyard.logging_config import get_logger
from shipyard.models import Project
from shipyard.schemas.github import GitHubRepository

from .errors import RepoCreationError, RepoFetchError
from .naming import REPO_SLUG_MAX_LENGTH, project_slug
from .staging import RepoReference

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProvisionedRepo:
    """Repository details the push and deploy stages depend on."""

    full_name: str
    id: int
    clone_url: str
    html_url: str

    @classmethod
    def from_github(cls, repo: GitHubRepository) -> "ProvisionedRepo":
        return cls(
            full_name=repo.full_name,
            id=repo.id,
            clone_url=repo.clone_url,
            html_url=repo.html_url,
        )


def describe_http_error(error: Exception) -> str:
    """Prefer GitHub's own error message over the generic httpx text."""
    if isinstance(error, httpx.HTTPStatusError):
        try:
            message = error.response.json().get("message")
        except (ValueError, AttributeError):
            message = None
        status = error.response.status_code
        return f"{message} (HTTP {status})" if message else f"HTTP {status}"
    return str(error) or type(error).__name__


class RepositoryProvisioner:
    """Ensures a GitHub repository exists for a project."""

    def __init__(
        self,
        github: GitHubClient,
        repo_prefix: str = "wz-",
        clock: Callable[[], float] = time.time,
    ):
        self.github = github
        self.repo_prefix = repo_prefix
        self.clock = clock

    def repo_name_for(self, project: Project) -> str:
        """``<prefix><slug>-<last five digits of the millisecond clock>``."""
        slug = project_slug(project.subdomain, project.name, REPO_SLUG_MAX_LENGTH)
        suffix = str(int(self.clock() * 1000))[-5:]
        return f"{self.repo_prefix}{slug}-{suffix}"

    async def provision_from_archive(
        self, project: Project, name: str | None = None
    ) -> ProvisionedRepo:
        """Create a private, empty repository for an uploaded archive.

        ``name`` defaults to a freshly generated ``repo_name_for`` result.

        Raises:
            RepoCreationError: If GitHub rejects the request.
        """
        name = name or self.repo_name_for(project)
        description = f"Shipyard deploy: {project.name} - {project.description or ''}"
        try:
            repo = await self.github.create_repo(
                name=name,
                description=description,
                private=True,
                auto_init=False,
            )
        except (httpx.HTTPError, ValidationError) as e:
            logger.error("github_repo_creation_failed", name=name, error=describe_http_error(e))
            raise RepoCreationError(
                f"Failed to create GitHub repository {name}: {describe_http_error(e)}"
            ) from e

        return ProvisionedRepo.from_github(repo)

    async def resolve_existing(self, reference: RepoReference) -> ProvisionedRepo:
        """Fetch the numeric ID of a repository the user already owns.

        Raises:
            RepoFetchError: If the repository cannot be read.
        """
        try:
            repo = await self.github.get_repo(reference.owner, reference.repo)
        except (httpx.HTTPError, ValidationError) as e:
            logger.error(
                "github_repo_fetch_failed",
                full_name=reference.full_name,
                error=describe_http_error(e),
            )
            raise RepoFetchError(
                f"Error fetching ID for existing GitHub repo {reference.full_name}: "
                f"{describe_http_error(e)}"
            ) from e

        return ProvisionedRepo.from_github(repo)
