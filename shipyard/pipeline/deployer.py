"""Trigger a Vercel deployment for a provisioned GitHub repository."""

from dataclasses import dataclass

import httpx
from pydantic import ValidationError

from shipyard.clients.vercel import VercelAPIError, VercelClient
from shipyard.logging_config import get_logger
from shipyard.models import Project
from shipyard.schemas.vercel import DeploymentRequest, GitSource

from .errors import DeploymentError, MissingRepoDetailsError
from .git import BRANCH
from .naming import VERCEL_NAME_MAX_LENGTH, project_slug

logger = get_logger(__name__)


@dataclass(frozen=True)
class DeploymentResult:
    deployment_url: str
    vercel_project_id: str | None


class DeploymentTrigger:
    """Submits deployments and derives the public URL from the response."""

    def __init__(self, vercel: VercelClient, platform_domain: str = "vercel.app"):
        self.vercel = vercel
        self.platform_domain = platform_domain

    def build_request(
        self, project: Project, repo_full_name: str, repo_id: int
    ) -> DeploymentRequest:
        name = project_slug(project.subdomain, project.name, VERCEL_NAME_MAX_LENGTH)
        return DeploymentRequest(
            name=name,
            git_source=GitSource(repo_id=repo_id, repo=repo_full_name, ref=BRANCH),
        )

    async def deploy(
        self, project: Project, repo_full_name: str | None, repo_id: int | None
    ) -> DeploymentResult:
        """Deploy ``main`` of the given repository.

        Raises:
            MissingRepoDetailsError: If the repository name or ID is unknown.
            DeploymentError: If Vercel rejects the request or cannot be reached.
        """
        if not repo_full_name or not repo_id:
            raise MissingRepoDetailsError(
                "GitHub repository details (name or ID) not available for Vercel deployment."
            )

        request = self.build_request(project, repo_full_name, repo_id)
        try:
            deployment = await self.vercel.create_deployment(request)
        except (VercelAPIError, httpx.HTTPError, ValidationError) as e:
            raise DeploymentError(f"Vercel deployment failed: {e}") from e

        if deployment.alias:
            host = deployment.alias[0]
        else:
            host = f"{request.name}.{self.platform_domain}"
        return DeploymentResult(
            deployment_url=f"https://{host}",
            vercel_project_id=deployment.resolved_project_id,
        )
