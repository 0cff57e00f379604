"""Vercel REST client."""

from typing import Any

import httpx

from shipyard.config import Settings, get_settings
from shipyard.logging_config import get_logger
from shipyard.schemas.vercel import DeploymentRequest, VercelDeployment

logger = get_logger(__name__)


class VercelAPIError(Exception):
    """Vercel returned a non-success response or an error payload."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


def _error_message(data: Any, status_code: int) -> str:
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        message = data["error"].get("message")
        if message:
            return message
    return f"Vercel API responded with status {status_code}"


class VercelClient:
    """Client for Vercel deployments and projects."""

    def __init__(
        self,
        token: str | None = None,
        team_id: str | None = None,
        settings: Settings | None = None,
    ):
        settings = settings or get_settings()
        self.base_url = settings.vercel_api_url.rstrip("/")
        self.token = token if token is not None else settings.vercel_token
        self.team_id = team_id if team_id is not None else settings.vercel_team_id
        self.timeout = settings.http_timeout

        if not self.token:
            logger.warning("vercel_token_missing", env_var="VERCEL_TOKEN")

    def _headers(self) -> dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }
        if self.team_id:
            headers["X-Vercel-Team-Id"] = self.team_id
        return headers

    def _params(self) -> dict[str, str]:
        return {"teamId": self.team_id} if self.team_id else {}

    async def create_deployment(self, request: DeploymentRequest) -> VercelDeployment:
        """Create a deployment from a GitHub source.

        Raises:
            VercelAPIError: On a non-2xx status or an ``error`` object in the body.
        """
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(
                f"{self.base_url}/v13/deployments",
                headers=self._headers(),
                params=self._params(),
                json=request.to_payload(),
            )

        try:
            data = resp.json()
        except ValueError:
            data = None

        if not resp.is_success or (isinstance(data, dict) and data.get("error")):
            logger.error(
                "vercel_deployment_rejected",
                status_code=resp.status_code,
                response=data if data is not None else resp.text[:2000],
            )
            raise VercelAPIError(_error_message(data, resp.status_code), resp.status_code)

        deployment = VercelDeployment.model_validate(data)
        logger.info(
            "vercel_deployment_created",
            name=request.name,
            deployment_id=deployment.id,
            project_id=deployment.resolved_project_id,
        )
        return deployment

    async def delete_project(self, project_id: str) -> None:
        """Delete a Vercel project and all of its deployments."""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.delete(
                f"{self.base_url}/v9/projects/{project_id}",
                headers=self._headers(),
                params=self._params(),
            )

        if not resp.is_success:
            try:
                data = resp.json()
            except ValueError:
                data = None
            raise VercelAPIError(_error_message(data, resp.status_code), resp.status_code)

        logger.info("vercel_project_deleted", project_id=project_id)
