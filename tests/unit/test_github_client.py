import json

import httpx
import pytest
import respx

from shipyard.clients.github import GitHubClient


def _repo_json(full_name: str, repo_id: int = 42) -> dict:
    owner, _, name = full_name.partition("/")
    return {
        "id": repo_id,
        "name": name,
        "full_name": full_name,
        "private": True,
        "html_url": f"https://github.com/{full_name}",
        "clone_url": f"https://github.com/{full_name}.git",
        "owner": {"login": owner, "id": 7, "type": "User"},
        "default_branch": "main",
        "created_at": "2024-01-01T00:00:00Z",
    }


@pytest.fixture
def client(settings):
    return GitHubClient(settings=settings)


@pytest.mark.asyncio
async def test_create_repo_posts_private_empty_repo(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        route = respx_mock.post("/user/repos").mock(
            return_value=httpx.Response(
                httpx.codes.CREATED, json=_repo_json("shipyard-bot/wz-demo-12345")
            )
        )

        repo = await client.create_repo("wz-demo-12345", description="demo")

        assert repo.full_name == "shipyard-bot/wz-demo-12345"
        assert repo.id == 42  # noqa: PLR2004
        sent = route.calls.last.request
        assert sent.headers["Authorization"] == "token ghp_supersecret"
        assert json.loads(sent.content) == {
            "name": "wz-demo-12345",
            "description": "demo",
            "private": True,
            "auto_init": False,
        }


@pytest.mark.asyncio
async def test_create_repo_raises_on_conflict(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        respx_mock.post("/user/repos").mock(
            return_value=httpx.Response(
                httpx.codes.UNPROCESSABLE_ENTITY,
                json={"message": "Repository creation failed."},
            )
        )

        with pytest.raises(httpx.HTTPStatusError) as exc:
            await client.create_repo("wz-demo-12345")
        assert exc.value.response.status_code == httpx.codes.UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
async def test_get_repo(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        respx_mock.get("/repos/acme/widgets").mock(
            return_value=httpx.Response(httpx.codes.OK, json=_repo_json("acme/widgets", 99))
        )

        repo = await client.get_repo("acme", "widgets")

        assert repo.id == 99  # noqa: PLR2004
        assert repo.owner.login == "acme"


@pytest.mark.asyncio
async def test_get_repo_not_found(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        respx_mock.get("/repos/acme/missing").mock(
            return_value=httpx.Response(httpx.codes.NOT_FOUND, json={"message": "Not Found"})
        )

        with pytest.raises(httpx.HTTPStatusError):
            await client.get_repo("acme", "missing")


@pytest.mark.asyncio
async def test_delete_repo(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        route = respx_mock.delete("/repos/shipyard-bot/wz-demo-12345").mock(
            return_value=httpx.Response(httpx.codes.NO_CONTENT)
        )

        await client.delete_repo("shipyard-bot", "wz-demo-12345")

        assert route.called
