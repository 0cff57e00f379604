"""Push a staged source tree to its GitHub repository with the git CLI."""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
import shutil
import subprocess

from shipyard.logging_config import get_logger
from shipyard.models import LogLevel, Project

from .errors import PushError
from .provisioner import ProvisionedRepo

logger = get_logger(__name__)

BRANCH = "main"
REMOTE = "origin"
COMMIT_MESSAGE = "Initial commit by Shipyard"

GitRunner = Callable[..., subprocess.CompletedProcess[str]]
ProgressCallback = Callable[[str, LogLevel], Awaitable[None]]


def run_git(*args: str, cwd: Path | None = None) -> subprocess.CompletedProcess[str]:
    """Run git command with full path for security."""
    git_path = shutil.which("git")
    if not git_path:
        raise RuntimeError("git not found in PATH")

    return subprocess.run(
        [git_path, *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=False,
    )


def authenticated_url(clone_url: str, username: str, token: str) -> str:
    user = username or "x-access-token"
    return clone_url.replace("https://", f"https://{user}:{token}@", 1)


def render_readme(project: Project, repo: ProvisionedRepo) -> str:
    return (
        f"# {project.name}\n\n"
        "Deployed via Shipyard.\n"
        f"Subdomain: {project.subdomain or 'N/A'}\n"
        f"GitHub Repo: {repo.html_url}\n"
    )


async def _no_progress(message: str, level: LogLevel) -> None:
    return None


class PushExecutor:
    """Initializes a repository in the staging directory and force-pushes ``main``."""

    def __init__(
        self,
        username: str,
        token: str,
        runner: GitRunner = run_git,
        committer_name: str = "Shipyard Bot",
        committer_email: str = "deploy@shipyard.local",
    ):
        self.username = username
        self.token = token
        self.runner = runner
        self.committer_name = committer_name
        self.committer_email = committer_email

    def _redact(self, text: str) -> str:
        return text.replace(self.token, "***") if self.token else text

    async def _git(self, cwd: Path, *args: str) -> subprocess.CompletedProcess[str]:
        shown = [self._redact(arg) for arg in args]
        try:
            result = await asyncio.to_thread(self.runner, *args, cwd=cwd)
        except (OSError, RuntimeError) as e:
            raise PushError(f"git {shown[0]} could not run: {e}", command=shown) from e

        if result.returncode != 0:
            stderr = self._redact((result.stderr or result.stdout or "").strip())
            logger.error(
                "git_command_failed",
                command=shown,
                exit_code=result.returncode,
                stderr=stderr,
            )
            raise PushError(
                f"git {' '.join(shown)} failed (exit {result.returncode}): {stderr}",
                command=shown,
                stderr=stderr,
            )
        return result

    async def push(
        self,
        staging_dir: Path,
        repo: ProvisionedRepo,
        project: Project,
        on_progress: ProgressCallback = _no_progress,
    ) -> None:
        """Commit the staged tree and push it to ``repo``.

        Partial local history is left in place on failure; the coordinator
        removes the staging directory afterwards.

        Raises:
            PushError: If any required git command fails.
        """
        try:
            (staging_dir / "README.md").write_text(render_readme(project, repo), encoding="utf-8")
        except OSError as e:
            raise PushError(f"Could not write README.md: {e}") from e
        await on_progress("README.md created/updated in staging.", LogLevel.INFO)

        await self._git(staging_dir, "init")
        await on_progress("Git repository initialized.", LogLevel.INFO)

        try:
            await self._git(
                staging_dir, "config", "--local", "safe.directory", str(staging_dir)
            )
            await on_progress(
                f"Git config safe.directory set locally for {staging_dir}.", LogLevel.INFO
            )
        except PushError as e:
            logger.warning("git_safe_directory_failed", error=str(e))
            await on_progress(
                f"Could not set local safe.directory: {e}. "
                "Subsequent Git operations might fail.",
                LogLevel.WARN,
            )

        await self._git(staging_dir, "config", "user.name", self.committer_name)
        await self._git(staging_dir, "config", "user.email", self.committer_email)

        await self._git(staging_dir, "add", "-A")
        await on_progress("All files added to git staging.", LogLevel.INFO)

        await self._git(staging_dir, "commit", "-m", COMMIT_MESSAGE)
        await on_progress("Initial commit created.", LogLevel.INFO)

        await self._git(staging_dir, "branch", "-M", BRANCH)
        await on_progress(f"Branch renamed/set to {BRANCH}.", LogLevel.INFO)

        remote_url = authenticated_url(repo.clone_url, self.username, self.token)
        remotes = await self._git(staging_dir, "remote")
        if REMOTE in (remotes.stdout or "").split():
            await self._git(staging_dir, "remote", "set-url", REMOTE, remote_url)
            await on_progress(f'GitHub remote "{REMOTE}" URL updated.', LogLevel.INFO)
        else:
            await self._git(staging_dir, "remote", "add", REMOTE, remote_url)
            await on_progress(f'GitHub remote "{REMOTE}" added.', LogLevel.INFO)

        await self._git(staging_dir, "push", "-u", REMOTE, BRANCH, "--force")
        logger.info("git_push_complete", repo=repo.full_name, branch=BRANCH)
