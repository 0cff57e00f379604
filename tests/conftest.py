"""Shared fixtures: settings, database, store and fake collaborators."""

from collections.abc import AsyncGenerator
from pathlib import Path
import uuid
import zipfile

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from shipyard.config import Settings
from shipyard.database import create_engine, create_session_maker, init_models
from shipyard.models import Project, ProjectStatus
from shipyard.store import ProjectStore
from tests.mocks.git import FakeGitRunner
from tests.mocks.github import FakeGitHubClient
from tests.mocks.store import RecordingProjectStore
from tests.mocks.vercel import FakeVercelClient

ADMIN_TOKEN = "test-admin-token"  # noqa: S105
GITHUB_TOKEN = "ghp_supersecret"  # noqa: S105


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'shipyard.sqlite'}",
        uploads_dir=tmp_path / "uploads",
        staging_dir=tmp_path / "staging",
        github_token=GITHUB_TOKEN,
        github_username="shipyard-bot",
        vercel_token="vercel-test-token",  # noqa: S106
        admin_token=ADMIN_TOKEN,
    )


@pytest.fixture
async def db_engine(settings: Settings) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_engine(settings.database_url)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine: AsyncEngine):
    return create_session_maker(db_engine)


@pytest.fixture
def store(session_maker) -> ProjectStore:
    return ProjectStore(session_maker)


@pytest.fixture
def recording_store(session_maker) -> RecordingProjectStore:
    return RecordingProjectStore(session_maker)


@pytest.fixture
def github() -> FakeGitHubClient:
    return FakeGitHubClient(owner="shipyard-bot")


@pytest.fixture
def vercel() -> FakeVercelClient:
    return FakeVercelClient()


@pytest.fixture
def git_runner() -> FakeGitRunner:
    return FakeGitRunner()


@pytest.fixture
def make_project(store: ProjectStore):
    """Insert a project and return it."""

    async def _make(
        name: str = "Demo",
        subdomain: str | None = "demo",
        status: ProjectStatus = ProjectStatus.PENDING_SETUP,
        **fields,
    ) -> Project:
        project = Project(
            id=uuid.uuid4().hex,
            name=name,
            subdomain=subdomain,
            status=status.value,
            **fields,
        )
        await store.create(project)
        return await store.find_by_id(project.id)

    return _make


@pytest.fixture
def make_archive(tmp_path: Path):
    """Write a zip archive with the given members and return its path."""

    def _make(files: dict[str, str] | None = None, name: str = "site.zip") -> Path:
        files = files if files is not None else {"index.html": "<h1>hello</h1>"}
        path = tmp_path / "uploads" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w") as archive:
            for member, content in files.items():
                archive.writestr(member, content)
        return path

    return _make
