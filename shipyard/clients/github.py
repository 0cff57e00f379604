"""GitHub REST client authenticated with a personal access token."""

import httpx

from shipyard.config import Settings, get_settings
from shipyard.logging_config import get_logger
from shipyard.schemas.github import GitHubRepository

logger = get_logger(__name__)


class GitHubClient:
    """Client for the subset of the GitHub API the pipeline needs."""

    def __init__(self, token: str | None = None, settings: Settings | None = None):
        settings = settings or get_settings()
        self.base_url = settings.github_api_url.rstrip("/")
        self.token = token if token is not None else settings.github_token
        self.timeout = settings.http_timeout

        if not self.token:
            logger.warning("github_token_missing", env_var="GITHUB_TOKEN")

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github+json",
        }

    async def create_repo(
        self,
        name: str,
        description: str = "",
        private: bool = True,
        auto_init: bool = False,
    ) -> GitHubRepository:
        """Create a repository owned by the authenticated user."""
        payload = {
            "name": name,
            "description": description,
            "private": private,
            "auto_init": auto_init,
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(
                f"{self.base_url}/user/repos",
                headers=self._headers(),
                json=payload,
            )
            resp.raise_for_status()
            repo = GitHubRepository.model_validate(resp.json())

        logger.info(
            "github_repo_created",
            name=name,
            full_name=repo.full_name,
            repo_id=repo.id,
            repo_url=repo.html_url,
        )
        return repo

    async def get_repo(self, owner: str, repo: str) -> GitHubRepository:
        """Get repository information."""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(
                f"{self.base_url}/repos/{owner}/{repo}", headers=self._headers()
            )
            resp.raise_for_status()
            return GitHubRepository.model_validate(resp.json())

    async def delete_repo(self, owner: str, repo: str) -> None:
        """Delete a repository. Requires the delete_repo scope."""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.delete(
                f"{self.base_url}/repos/{owner}/{repo}", headers=self._headers()
            )
            resp.raise_for_status()

        logger.info("github_repo_deleted", owner=owner, repo=repo)
