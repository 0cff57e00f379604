"""Project teardown: undo provisioning, then delete the record.

Each step is best-effort. Outcomes are appended to the project log, which is
deleted together with the record at the end, so they survive only in the
service logs afterwards.
"""

from dataclasses import dataclass, field
from pathlib import Path

from shipyard.clients.github import GitHubClient
from shipyard.clients.vercel import VercelClient
from shipyard.logging_config import get_logger
from shipyard.models import LogLevel, Project
from shipyard.store import ProjectStore

from .provisioner import describe_http_error
from .staging import remove_path, staging_path

logger = get_logger(__name__)


@dataclass
class TeardownStep:
    name: str
    ok: bool
    detail: str = ""


@dataclass
class TeardownResult:
    found: bool
    project_name: str | None = None
    steps: list[TeardownStep] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return all(step.ok for step in self.steps)


class TeardownExecutor:
    """Deletes the Vercel project, the system-created repository and local files."""

    def __init__(
        self,
        store: ProjectStore,
        github: GitHubClient,
        vercel: VercelClient,
        staging_root: Path,
        repos_owner: str = "",
        repo_prefix: str = "wz-",
    ):
        self.store = store
        self.github = github
        self.vercel = vercel
        self.staging_root = Path(staging_root)
        self.repos_owner = repos_owner
        self.repo_prefix = repo_prefix

    def is_system_repo(self, full_name: str | None) -> bool:
        """True for ``<repos_owner>/<prefix>...`` names.

        Without a configured owner no name matches.
        """
        if not self.repos_owner or not full_name or "/" not in full_name:
            return False
        owner, _, repo = full_name.partition("/")
        return owner.lower() == self.repos_owner.lower() and repo.startswith(self.repo_prefix)

    def owns_repository(self, project: Project) -> bool:
        """Only repositories the pipeline created itself may be deleted.

        Linked repositories never carry the provenance flag, whatever their name.
        """
        return bool(project.github_repo_created) and self.is_system_repo(
            project.github_repo_name
        )

    async def teardown(self, project_id: str) -> TeardownResult:
        """Run every teardown step, then remove the record.

        Returns ``found=False`` without any remote calls when the project is absent.
        """
        project = await self.store.find_by_id(project_id)
        if project is None:
            return TeardownResult(found=False)

        result = TeardownResult(found=True, project_name=project.name)
        await self.store.append_log(
            project_id, f"Deletion process initiated for project {project.name}"
        )

        if project.vercel_project_id:
            result.steps.append(await self._delete_vercel_project(project))

        if self.owns_repository(project):
            result.steps.append(await self._delete_github_repo(project))

        local_paths = [staging_path(self.staging_root, project.id)]
        if project.file_path:
            local_paths.insert(0, Path(project.file_path))
        for path in local_paths:
            step = await self._remove_local(project.id, path)
            if step is not None:
                result.steps.append(step)

        await self.store.delete(project_id)
        logger.info(
            "project_teardown_complete",
            project_id=project_id,
            clean=result.clean,
            steps=[(step.name, step.ok) for step in result.steps],
        )
        return result

    async def _delete_vercel_project(self, project: Project) -> TeardownStep:
        vercel_id = project.vercel_project_id
        await self.store.append_log(
            project.id, f"Attempting to delete Vercel project ID: {vercel_id}"
        )
        try:
            await self.vercel.delete_project(vercel_id)
        except Exception as e:
            logger.warning(
                "vercel_project_delete_failed", vercel_project_id=vercel_id, error=str(e)
            )
            await self.store.append_log(
                project.id, f"Warning: Failed to delete Vercel project. {e}", LogLevel.ERROR
            )
            return TeardownStep("vercel_project", ok=False, detail=str(e))

        await self.store.append_log(
            project.id, f"Vercel project {vercel_id} deleted successfully."
        )
        return TeardownStep("vercel_project", ok=True)

    async def _delete_github_repo(self, project: Project) -> TeardownStep:
        full_name = project.github_repo_name
        owner, _, repo = full_name.partition("/")
        await self.store.append_log(
            project.id, f"Attempting to delete GitHub repository: {full_name}"
        )
        try:
            await self.github.delete_repo(owner, repo)
        except Exception as e:
            detail = describe_http_error(e)
            logger.warning("github_repo_delete_failed", full_name=full_name, error=detail)
            await self.store.append_log(
                project.id, f"Warning: Failed to delete GitHub repo. {detail}", LogLevel.ERROR
            )
            return TeardownStep("github_repo", ok=False, detail=detail)

        await self.store.append_log(
            project.id, f"GitHub repository {full_name} deleted successfully."
        )
        return TeardownStep("github_repo", ok=True)

    async def _remove_local(self, project_id: str, path: Path) -> TeardownStep | None:
        try:
            if not remove_path(path):
                return None
        except OSError as e:
            logger.warning("local_cleanup_failed", path=str(path), error=str(e))
            await self.store.append_log(
                project_id, f"Warning: Could not remove {path}: {e}", LogLevel.WARN
            )
            return TeardownStep(f"local:{path}", ok=False, detail=str(e))

        await self.store.append_log(project_id, f"Removed local path {path}.")
        return TeardownStep(f"local:{path}", ok=True)
