from .github import GitHubClient
from .vercel import VercelAPIError, VercelClient

__all__ = ["GitHubClient", "VercelAPIError", "VercelClient"]
