import httpx
import pytest
import respx

from devspace.clients.github import (
    GitHubClient,
    engineer_branch_name,
    parse_engineer_branch,
)
from devspace.errors import Forbidden, NotFound, RemoteError

TOKEN = "ghp_test_token"  # noqa: S105


def repo_json(owner="acme", name="app", default_branch="main"):
    return {
        "id": 42,
        "name": name,
        "full_name": f"{owner}/{name}",
        "private": True,
        "html_url": f"https://github.com/{owner}/{name}",
        "owner": {"login": owner, "id": 1, "type": "Organization"},
        "default_branch": default_branch,
        "updated_at": "2024-11-22T12:00:00Z",
        "stargazers_count": 3,
    }


def branch_json(name, sha="a" * 40):
    return {"name": name, "commit": {"sha": sha, "url": "https://api.github.com/x"}}


@pytest.fixture
def client():
    return GitHubClient()


class TestEngineerBranchNames:
    def test_build(self):
        assert engineer_branch_name("abc123", "Alex  Smith") == "ai-engineer-abc123-alex-smith"

    def test_parse(self):
        assert parse_engineer_branch("ai-engineer-abc123-alex-smith") == ("abc123", "alex smith")

    @pytest.mark.parametrize("name", ["main", "feature/login", "ai-engineer-", "ai-engineer-abc"])
    def test_parse_rejects_other_branches(self, name):
        assert parse_engineer_branch(name) is None


@pytest.mark.asyncio
async def test_get_repository_success(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        route = respx_mock.get("/repos/acme/app").mock(
            return_value=httpx.Response(httpx.codes.OK, json=repo_json())
        )

        repo = await client.get_repository("acme", "app", TOKEN)

        assert repo.full_name == "acme/app"
        assert repo.default_branch == "main"
        assert repo.owner.login == "acme"
        # Unknown fields are kept
        assert repo.stargazers_count == 3

        request = route.calls.last.request
        assert request.headers["Authorization"] == f"Bearer {TOKEN}"
        assert request.headers["Accept"] == "application/vnd.github+json"


@pytest.mark.asyncio
async def test_get_repository_not_found(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        respx_mock.get("/repos/acme/missing").mock(
            return_value=httpx.Response(httpx.codes.NOT_FOUND, json={"message": "Not Found"})
        )

        with pytest.raises(NotFound):
            await client.get_repository("acme", "missing", TOKEN)


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [httpx.codes.UNAUTHORIZED, httpx.codes.FORBIDDEN])
async def test_get_repository_forbidden(client, status):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        respx_mock.get("/repos/acme/app").mock(
            return_value=httpx.Response(status, json={"message": "Bad credentials"})
        )

        with pytest.raises(Forbidden, match="Bad credentials"):
            await client.get_repository("acme", "app", TOKEN)


@pytest.mark.asyncio
async def test_get_repository_server_error(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        respx_mock.get("/repos/acme/app").mock(
            return_value=httpx.Response(
                httpx.codes.INTERNAL_SERVER_ERROR, json={"message": "Server Error"}
            )
        )

        with pytest.raises(RemoteError) as exc_info:
            await client.get_repository("acme", "app", TOKEN)

        assert exc_info.value.status_code == 500
        assert "Server Error" in exc_info.value.message


@pytest.mark.asyncio
async def test_get_repository_timeout(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        respx_mock.get("/repos/acme/app").mock(side_effect=httpx.ConnectTimeout("timed out"))

        with pytest.raises(RemoteError, match="timed out"):
            await client.get_repository("acme", "app", TOKEN)


@pytest.mark.asyncio
async def test_get_repository_unreachable(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        respx_mock.get("/repos/acme/app").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(RemoteError, match="unreachable"):
            await client.get_repository("acme", "app", TOKEN)


@pytest.mark.asyncio
async def test_get_repository_malformed_body(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        respx_mock.get("/repos/acme/app").mock(
            return_value=httpx.Response(httpx.codes.OK, json={"unexpected": True})
        )

        with pytest.raises(RemoteError, match="Unexpected GitHub response"):
            await client.get_repository("acme", "app", TOKEN)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "owner,repo,raw_path",
    [
        ("acme", "app#frag", b"/repos/acme/app%23frag"),
        ("acme", "app?x=1", b"/repos/acme/app%3Fx%3D1"),
        ("ac/me", "app", b"/repos/ac%2Fme/app"),
    ],
)
async def test_owner_and_repo_are_escaped(client, owner, repo, raw_path):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        route = respx_mock.get(path__startswith="/repos/").mock(
            return_value=httpx.Response(httpx.codes.NOT_FOUND, json={"message": "Not Found"})
        )

        with pytest.raises(NotFound):
            await client.get_repository(owner, repo, TOKEN)
        with pytest.raises(NotFound):
            await client.get_branch(owner, repo, "main", TOKEN)
        with pytest.raises(NotFound):
            await client.list_branches(owner, repo, TOKEN)

        repo_request, branch_request, list_request = (call.request for call in route.calls)
        assert repo_request.url.raw_path == raw_path
        assert branch_request.url.raw_path == raw_path + b"/branches/main"
        assert list_request.url.raw_path.startswith(raw_path + b"/branches?")


@pytest.mark.asyncio
async def test_get_branch_quotes_name(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        respx_mock.get("/repos/acme/app/branches/feature/login").mock(
            return_value=httpx.Response(httpx.codes.OK, json=branch_json("feature/login"))
        )

        branch = await client.get_branch("acme", "app", "feature/login", TOKEN)
        assert branch.name == "feature/login"
        assert branch.commit.sha == "a" * 40


@pytest.mark.asyncio
async def test_get_branch_not_found(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        respx_mock.get("/repos/acme/app/branches/develop").mock(
            return_value=httpx.Response(httpx.codes.NOT_FOUND, json={"message": "Branch not found"})
        )

        with pytest.raises(NotFound, match="Branch develop"):
            await client.get_branch("acme", "app", "develop", TOKEN)


@pytest.mark.asyncio
async def test_list_branches_follows_pages(client):
    first_page = [branch_json(f"b{i}") for i in range(100)]
    second_page = [branch_json("last")]

    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        route = respx_mock.get("/repos/acme/app/branches")
        route.side_effect = [
            httpx.Response(httpx.codes.OK, json=first_page),
            httpx.Response(httpx.codes.OK, json=second_page),
        ]

        branches = await client.list_branches("acme", "app", TOKEN)

        assert len(branches) == 101
        assert branches[-1].name == "last"
        assert route.call_count == 2
        assert route.calls[1].request.url.params["page"] == "2"
        assert route.calls[1].request.url.params["per_page"] == "100"


@pytest.mark.asyncio
async def test_list_engineer_branches_filters_convention(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        respx_mock.get("/repos/acme/app/branches").mock(
            return_value=httpx.Response(
                httpx.codes.OK,
                json=[
                    branch_json("main"),
                    branch_json("ai-engineer-abc123-alex", sha="b" * 40),
                    branch_json("feature/x"),
                    branch_json("ai-engineer-def456-jordan-lee"),
                ],
            )
        )

        result = await client.list_engineer_branches("acme", "app", TOKEN)

        assert [b.name for b in result] == [
            "ai-engineer-abc123-alex",
            "ai-engineer-def456-jordan-lee",
        ]
        assert result[0].engineer_id == "abc123"
        assert result[0].sha == "b" * 40
        assert result[1].engineer_name == "jordan lee"


@pytest.mark.asyncio
async def test_list_engineer_branches_is_best_effort(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        respx_mock.get("/repos/acme/app/branches").mock(
            return_value=httpx.Response(httpx.codes.BAD_GATEWAY, json={"message": "Bad Gateway"})
        )

        assert await client.list_engineer_branches("acme", "app", TOKEN) == []


@pytest.mark.asyncio
async def test_list_repositories(client):
    async with respx.mock(base_url="https://api.github.com") as respx_mock:
        route = respx_mock.get("/user/repos").mock(
            return_value=httpx.Response(
                httpx.codes.OK, json=[repo_json(name="one"), repo_json(name="two")]
            )
        )

        repos = await client.list_repositories(TOKEN)

        assert [r.full_name for r in repos] == ["acme/one", "acme/two"]
        assert route.calls.last.request.url.params["sort"] == "updated"


@pytest.mark.asyncio
async def test_custom_base_url():
    client = GitHubClient(base_url="https://github.example.com/api/v3/")

    async with respx.mock(base_url="https://github.example.com/api/v3") as respx_mock:
        respx_mock.get("/repos/acme/app").mock(
            return_value=httpx.Response(httpx.codes.OK, json=repo_json())
        )

        repo = await client.get_repository("acme", "app", TOKEN)
        assert repo.name == "app"
