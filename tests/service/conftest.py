from collections.abc import AsyncGenerator

import httpx
import pytest

from shipyard.api.main import create_app
from shipyard.services import Services, build_services
from tests.conftest import ADMIN_TOKEN


@pytest.fixture
def services(settings, session_maker, github, vercel, git_runner) -> Services:
    return build_services(
        settings, session_maker, github=github, vercel=vercel, git_runner=git_runner
    )


@pytest.fixture
async def client(services) -> AsyncGenerator[httpx.AsyncClient, None]:
    app = create_app(settings=services.settings, services=services)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    await services.runner.drain()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}
