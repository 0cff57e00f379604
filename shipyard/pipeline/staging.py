"""Source staging: archive extraction and repository URL parsing."""

import asyncio
from dataclasses import dataclass
from pathlib import Path
import re
import shutil
import zipfile

from shipyard.logging_config import get_logger

from .errors import ExtractionError, InvalidRepoReferenceError

logger = get_logger(__name__)

_GITHUB_URL_RE = re.compile(
    r"^(?:https?://|git@)?(?:www\.)?github\.com[/:]"
    r"(?P<owner>[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?)/"
    r"(?P<repo>[A-Za-z0-9._-]+?)"
    r"(?:\.git)?/?$"
)


@dataclass(frozen=True)
class RepoReference:
    """An existing GitHub repository identified by owner and name."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def parse_repo_reference(url: str) -> RepoReference:
    """Parse ``https://github.com/<owner>/<repo>[.git]`` into a reference.

    Raises:
        InvalidRepoReferenceError: If the URL is not a GitHub repository URL.
    """
    match = _GITHUB_URL_RE.match(url.strip()) if url else None
    if not match or match.group("repo") in {".", ".."}:
        raise InvalidRepoReferenceError(f"Invalid GitHub repository URL: {url}")
    return RepoReference(owner=match.group("owner"), repo=match.group("repo"))


def staging_path(staging_root: Path, project_id: str) -> Path:
    return Path(staging_root) / project_id


def _check_members(archive: zipfile.ZipFile, destination: Path) -> None:
    root = destination.resolve()
    for member in archive.namelist():
        target = (root / member).resolve()
        if target != root and root not in target.parents:
            raise ExtractionError(f"Archive member escapes staging directory: {member}")


def _extract(archive_path: Path, destination: Path) -> int:
    if destination.exists():
        shutil.rmtree(destination)
    destination.mkdir(parents=True)

    with zipfile.ZipFile(archive_path) as archive:
        _check_members(archive, destination)
        archive.extractall(destination)
        return len(archive.infolist())


async def stage_archive(archive_path: str | Path, destination: Path) -> Path:
    """Extract ``archive_path`` into a freshly emptied ``destination``.

    Raises:
        ExtractionError: For missing, corrupt or unsupported archives and I/O failures.
    """
    archive_path = Path(archive_path)
    try:
        count = await asyncio.to_thread(_extract, archive_path, destination)
    except (zipfile.BadZipFile, OSError, zipfile.LargeZipFile, NotImplementedError) as e:
        raise ExtractionError(f"Failed to extract ZIP: {e}") from e

    logger.info(
        "archive_extracted",
        archive=str(archive_path),
        destination=str(destination),
        files=count,
    )
    return destination


def remove_path(path: str | Path) -> bool:
    """Remove a file or directory tree. Returns False when nothing was there."""
    path = Path(path)
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return True
    if path.exists() or path.is_symlink():
        path.unlink()
        return True
    return False
