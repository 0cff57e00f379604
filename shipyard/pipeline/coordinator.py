"""Deployment pipeline coordinator.

Drives a project through the fixed stage sequence::

    processing
      -> processing_zip -> creating_github_repo -> pushing_to_github -> deploying_to_vercel
      -> linking_to_vercel -> deploying_to_vercel
      -> pending_manual_setup
    deploying_to_vercel -> deployed

Every transition is committed before the next stage starts, so the stored
status is always the furthest stage reached. Stage errors end the run in the
error status their class declares; anything unexpected ends it in ``error``.
Local resources (staging directory, uploaded archive) are released on every
exit path.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from shipyard.logging_config import bind_project_context, get_logger
from shipyard.models import LogLevel, Project, ProjectStatus
from shipyard.store import ProjectStore

from .deployer import DeploymentTrigger
from .errors import PipelineError
from .git import ProgressCallback, PushExecutor
from .provisioner import ProvisionedRepo, RepositoryProvisioner
from .staging import parse_repo_reference, remove_path, stage_archive, staging_path

logger = get_logger(__name__)


class PipelineCoordinator:
    """Runs the deployment stages for one project at a time."""

    def __init__(
        self,
        store: ProjectStore,
        provisioner: RepositoryProvisioner,
        pusher: PushExecutor,
        deployer: DeploymentTrigger,
        staging_root: Path,
    ):
        self.store = store
        self.provisioner = provisioner
        self.pusher = pusher
        self.deployer = deployer
        self.staging_root = Path(staging_root)

    async def run(self, project_id: str) -> ProjectStatus | None:
        """Run the pipeline and return the terminal status it reached.

        Returns None when the project does not exist. Callers must not start a
        second run for a project whose previous run is still in flight.
        """
        project = await self.store.find_by_id(project_id)
        if project is None:
            logger.error("pipeline_project_not_found", project_id=project_id)
            return None

        bind_project_context(project_id)
        logger.info("pipeline_started", source=_source_kind(project))
        await self.store.append_log(project_id, "Deployment pipeline started.")
        await self.store.set_status(project_id, ProjectStatus.PROCESSING)

        async with self._local_resources(project):
            try:
                status = await self._run_stages(project)
            except PipelineError as e:
                status = e.status
                logger.warning("pipeline_stage_failed", status=status.value, error=str(e))
                await self.store.append_log(project_id, str(e), LogLevel.ERROR)
                await self.store.set_status(project_id, status)
            except Exception as e:
                status = ProjectStatus.ERROR
                logger.exception("pipeline_crashed", error=str(e))
                await self.fail(project_id, e)

        logger.info("pipeline_finished", status=status.value)
        return status

    async def fail(self, project_id: str, error: Exception) -> None:
        """Record an unexpected failure as the generic ``error`` status."""
        await self.store.append_log(
            project_id, f"Critical pipeline error: {error}", LogLevel.ERROR
        )
        await self.store.set_status(project_id, ProjectStatus.ERROR)

    async def _run_stages(self, project: Project) -> ProjectStatus:
        if project.file_path:
            repo = await self._provision_from_archive(project)
        elif project.repo_url:
            repo = await self._link_existing(project)
        else:
            await self.store.append_log(
                project.id, "No ZIP file or GitHub repository URL provided.", LogLevel.WARN
            )
            await self.store.set_status(project.id, ProjectStatus.PENDING_MANUAL_SETUP)
            return ProjectStatus.PENDING_MANUAL_SETUP

        return await self._deploy(project, repo)

    async def _provision_from_archive(self, project: Project) -> ProvisionedRepo:
        staging_dir = staging_path(self.staging_root, project.id)

        await self.store.set_status(project.id, ProjectStatus.PROCESSING_ZIP)
        await self.store.append_log(project.id, "Processing uploaded ZIP file.")
        await stage_archive(project.file_path, staging_dir)
        await self.store.append_log(project.id, f"ZIP file extracted to {staging_dir}.")

        repo_name = self.provisioner.repo_name_for(project)
        await self.store.set_status(project.id, ProjectStatus.CREATING_GITHUB_REPO)
        await self.store.append_log(
            project.id, f"Attempting to create GitHub repository: {repo_name}"
        )
        repo = await self.provisioner.provision_from_archive(project, repo_name)
        await self.store.update_fields(
            project.id,
            github_repo_name=repo.full_name,
            github_repo_id=repo.id,
            github_repo_created=True,
            repo_url=repo.clone_url,
        )
        await self.store.append_log(
            project.id, f"GitHub repository created: {repo.html_url} (ID: {repo.id})"
        )

        await self.store.set_status(project.id, ProjectStatus.PUSHING_TO_GITHUB)
        await self.store.append_log(
            project.id,
            f"Initializing local repository and pushing to {repo.full_name}...",
        )
        await self.pusher.push(staging_dir, repo, project, on_progress=self._progress(project.id))
        await self.store.append_log(project.id, "Code pushed to GitHub successfully.")
        return repo

    async def _link_existing(self, project: Project) -> ProvisionedRepo:
        reference = parse_repo_reference(project.repo_url)

        await self.store.set_status(project.id, ProjectStatus.LINKING_TO_VERCEL)
        repo = await self.provisioner.resolve_existing(reference)
        await self.store.update_fields(
            project.id, github_repo_name=repo.full_name, github_repo_id=repo.id
        )
        await self.store.append_log(
            project.id, f"Using existing GitHub repository: {repo.full_name} (ID: {repo.id})"
        )
        return repo

    async def _deploy(self, project: Project, repo: ProvisionedRepo) -> ProjectStatus:
        await self.store.set_status(project.id, ProjectStatus.DEPLOYING_TO_VERCEL)
        await self.store.append_log(
            project.id,
            f"Starting Vercel deployment for {repo.full_name} (ID: {repo.id})...",
        )

        result = await self.deployer.deploy(project, repo.full_name, repo.id)

        await self.store.append_log(
            project.id,
            f"Vercel deployment initiated. URL (eventually): {result.deployment_url}. "
            f"Vercel Project ID: {result.vercel_project_id}",
            LogLevel.DEPLOY,
        )
        await self.store.set_status(
            project.id,
            ProjectStatus.DEPLOYED,
            deployment_url=result.deployment_url,
            vercel_project_id=result.vercel_project_id,
        )
        return ProjectStatus.DEPLOYED

    def _progress(self, project_id: str) -> ProgressCallback:
        async def report(message: str, level: LogLevel) -> None:
            await self.store.append_log(project_id, message, level)

        return report

    @asynccontextmanager
    async def _local_resources(self, project: Project) -> AsyncIterator[None]:
        """Release the uploaded archive and staging directory however the run ends."""
        try:
            yield
        finally:
            resources = [staging_path(self.staging_root, project.id)]
            if project.file_path:
                resources.insert(0, Path(project.file_path))
            for path in resources:
                await self._release(project.id, path)

    async def _release(self, project_id: str, path: Path) -> None:
        try:
            removed = remove_path(path)
        except OSError as e:
            logger.warning("cleanup_failed", path=str(path), error=str(e))
            await self.store.append_log(
                project_id, f"Warning: Could not remove {path}: {e}", LogLevel.WARN
            )
            return
        if removed:
            logger.debug("cleanup_removed", path=str(path))


def _source_kind(project: Project) -> str:
    if project.file_path:
        return "archive"
    if project.repo_url:
        return "repository"
    return "none"
