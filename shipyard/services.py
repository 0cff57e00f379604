"""Wiring of clients, store and pipeline components."""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shipyard.clients.github import GitHubClient
from shipyard.clients.vercel import VercelClient
from shipyard.config import Settings
from shipyard.pipeline.coordinator import PipelineCoordinator
from shipyard.pipeline.deployer import DeploymentTrigger
from shipyard.pipeline.git import GitRunner, PushExecutor, run_git
from shipyard.pipeline.provisioner import RepositoryProvisioner
from shipyard.pipeline.runner import PipelineRunner
from shipyard.pipeline.teardown import TeardownExecutor
from shipyard.store import ProjectStore


@dataclass
class Services:
    settings: Settings
    store: ProjectStore
    coordinator: PipelineCoordinator
    runner: PipelineRunner
    teardown: TeardownExecutor


def build_services(
    settings: Settings,
    session_maker: async_sessionmaker[AsyncSession],
    github: GitHubClient | None = None,
    vercel: VercelClient | None = None,
    git_runner: GitRunner = run_git,
) -> Services:
    """Build the service graph. Clients can be swapped for fakes in tests."""
    github = github or GitHubClient(settings=settings)
    vercel = vercel or VercelClient(settings=settings)
    store = ProjectStore(session_maker)

    coordinator = PipelineCoordinator(
        store=store,
        provisioner=RepositoryProvisioner(github, repo_prefix=settings.repo_prefix),
        pusher=PushExecutor(
            username=settings.github_username,
            token=settings.github_token,
            runner=git_runner,
        ),
        deployer=DeploymentTrigger(vercel, platform_domain=settings.vercel_domain),
        staging_root=settings.staging_dir,
    )
    teardown = TeardownExecutor(
        store=store,
        github=github,
        vercel=vercel,
        staging_root=settings.staging_dir,
        repos_owner=settings.github_username,
        repo_prefix=settings.repo_prefix,
    )

    return Services(
        settings=settings,
        store=store,
        coordinator=coordinator,
        runner=PipelineRunner(coordinator),
        teardown=teardown,
    )
