"""
Blog endpoint tests — covers the CRUD lifecycle, pagination, ownership
checks, error status codes and diagnostic response headers.

Each test creates the posts it needs via the API rather than relying on
shared fixtures, so test order does not matter.
"""
import pytest
from httpx import AsyncClient

from blog_api.auth import create_access_token


def auth_headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


ALICE = auth_headers("alice")
BOB = auth_headers("bob")


async def _create_post(client: AsyncClient, headers=ALICE, **fields) -> dict:
    payload = {"title": "A post", "content": "Body text"}
    payload.update(fields)
    resp = await client.post("/api/v1/blog/create", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


# ---------------------------------------------------------------------------
# Infrastructure / health
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_health(async_client: AsyncClient):
    """Health endpoint returns 200 with status=healthy."""
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_response_timing_headers(async_client: AsyncClient):
    """Every response carries X-Response-Time-Ms and an integer X-Query-Count."""
    resp = await async_client.get("/api/v1/blog")
    assert "x-response-time-ms" in resp.headers
    assert int(resp.headers["x-query-count"]) >= 0


@pytest.mark.asyncio
async def test_openapi_documents_blog_routes(async_client: AsyncClient):
    """API docs are generated from the route definitions."""
    resp = await async_client.get("/openapi.json")
    assert resp.status_code == 200
    paths = resp.json()["paths"]
    assert "post" in paths["/api/v1/blog/create"]
    assert {"get", "put", "delete"} <= set(paths["/api/v1/blog/{blog_id}"])


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_blog(async_client: AsyncClient, taxonomy: dict):
    """Creating a post returns 201 with the full Blog shape attributed to the caller."""
    post = await _create_post(
        async_client,
        title="First post",
        content="Hello",
        author="someone-else",
        image_url="https://example.com/cover.png",
        categories=[taxonomy["python"]],
        tags=[taxonomy["async"], taxonomy["orm"]],
    )
    assert post["id"]
    assert post["title"] == "First post"
    assert post["author"] == "alice"
    assert post["image_url"] == "https://example.com/cover.png"
    assert [c["name"] for c in post["categories"]] == ["python"]
    assert [t["name"] for t in post["tags"]] == ["async", "orm"]
    assert post["likes"] == []
    assert post["comments"] == []
    assert post["like_count"] == 0


@pytest.mark.asyncio
async def test_create_requires_authentication(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/blog/create", json={"title": "t", "content": "c"}
    )
    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_create_with_invalid_token(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/blog/create",
        json={"title": "t", "content": "c"},
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_create_missing_title_returns_400(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/blog/create", json={"content": "no title"}, headers=ALICE
    )
    assert resp.status_code == 400
    assert resp.json()["errors"]


@pytest.mark.asyncio
async def test_create_blank_content_returns_400(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/blog/create", json={"title": "t", "content": "  "}, headers=ALICE
    )
    assert resp.status_code == 400
    assert "content" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_create_unknown_tag_returns_400(async_client: AsyncClient):
    resp = await async_client.post(
        "/api/v1/blog/create",
        json={"title": "t", "content": "c", "tags": ["ghost-tag"]},
        headers=ALICE,
    )
    assert resp.status_code == 400
    assert "ghost-tag" in resp.json()["detail"]

    listing = await async_client.get("/api/v1/blog")
    assert listing.json()["total"] == 0


# ---------------------------------------------------------------------------
# Get
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_blog_is_public(async_client: AsyncClient):
    post = await _create_post(async_client, title="Public")
    resp = await async_client.get(f"/api/v1/blog/{post['id']}")
    assert resp.status_code == 200
    assert resp.json()["title"] == "Public"


@pytest.mark.asyncio
async def test_get_missing_blog_returns_404(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/blog/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"detail": "Blog post not found"}


# ---------------------------------------------------------------------------
# List / pagination
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_blogs_empty(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/blog")
    assert resp.status_code == 200
    data = resp.json()
    assert data["items"] == []
    assert data["total"] == 0
    assert data["page"] == 1
    assert data["limit"] == 10
    assert data["has_next"] is False


@pytest.mark.asyncio
async def test_list_blogs_pagination(async_client: AsyncClient):
    for i in range(12):
        await _create_post(async_client, title=f"Post {i}")

    resp = await async_client.get("/api/v1/blog?page=2&limit=5")
    data = resp.json()
    assert resp.status_code == 200
    assert [b["title"] for b in data["items"]] == [f"Post {i}" for i in (6, 5, 4, 3, 2)]
    assert data["total"] == 12
    assert data["has_next"] is True


@pytest.mark.asyncio
async def test_list_blogs_offset_overrides_page(async_client: AsyncClient):
    for i in range(8):
        await _create_post(async_client, title=f"Post {i}")

    resp = await async_client.get("/api/v1/blog?page=3&limit=2&offset=5")
    data = resp.json()
    assert [b["title"] for b in data["items"]] == ["Post 2", "Post 1"]
    assert data["offset"] == 5


@pytest.mark.asyncio
async def test_list_blogs_coerces_bad_values(async_client: AsyncClient):
    await _create_post(async_client)
    resp = await async_client.get("/api/v1/blog?page=0&limit=-4&offset=-1")
    data = resp.json()
    assert resp.status_code == 200
    assert (data["page"], data["limit"], data["offset"]) == (1, 10, 0)
    assert len(data["items"]) == 1


@pytest.mark.asyncio
async def test_list_blogs_clamps_limit(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/blog?limit=1000")
    assert resp.json()["limit"] == 100


@pytest.mark.asyncio
async def test_list_blogs_non_integer_query_returns_400(async_client: AsyncClient):
    resp = await async_client.get("/api/v1/blog?page=abc")
    assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_update_blog_partial(async_client: AsyncClient, taxonomy: dict):
    post = await _create_post(
        async_client, title="Original", content="Keep me", categories=[taxonomy["web"]]
    )

    resp = await async_client.put(
        f"/api/v1/blog/{post['id']}", json={"title": "Renamed"}, headers=ALICE
    )
    assert resp.status_code == 200
    updated = resp.json()
    assert updated["title"] == "Renamed"
    assert updated["content"] == "Keep me"
    assert [c["name"] for c in updated["categories"]] == ["web"]


@pytest.mark.asyncio
async def test_update_blog_replaces_tags(async_client: AsyncClient, taxonomy: dict):
    post = await _create_post(async_client, tags=[taxonomy["async"]])

    resp = await async_client.put(
        f"/api/v1/blog/{post['id']}", json={"tags": [taxonomy["orm"]]}, headers=ALICE
    )
    assert resp.status_code == 200
    assert [t["name"] for t in resp.json()["tags"]] == ["orm"]


@pytest.mark.asyncio
async def test_update_by_non_author_returns_403(async_client: AsyncClient):
    post = await _create_post(async_client, title="Mine")

    resp = await async_client.put(
        f"/api/v1/blog/{post['id']}", json={"title": "Hijacked"}, headers=BOB
    )
    assert resp.status_code == 403

    resp = await async_client.get(f"/api/v1/blog/{post['id']}")
    assert resp.json()["title"] == "Mine"


@pytest.mark.asyncio
async def test_update_requires_authentication(async_client: AsyncClient):
    post = await _create_post(async_client)
    resp = await async_client.put(f"/api/v1/blog/{post['id']}", json={"title": "x"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_update_missing_blog_returns_404(async_client: AsyncClient):
    resp = await async_client.put("/api/v1/blog/missing", json={"title": "x"}, headers=ALICE)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_blank_title_returns_400(async_client: AsyncClient):
    post = await _create_post(async_client)
    resp = await async_client.put(
        f"/api/v1/blog/{post['id']}", json={"title": ""}, headers=ALICE
    )
    assert resp.status_code == 400


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_delete_blog(async_client: AsyncClient, taxonomy: dict):
    """Deleting returns 204, the post is gone and its categories survive."""
    post = await _create_post(async_client, categories=[taxonomy["python"]])

    resp = await async_client.delete(f"/api/v1/blog/{post['id']}", headers=ALICE)
    assert resp.status_code == 204
    assert resp.content == b""

    resp = await async_client.get(f"/api/v1/blog/{post['id']}")
    assert resp.status_code == 404

    categories = await async_client.get("/api/v1/categories")
    assert {c["name"] for c in categories.json()} == {"python", "web"}


@pytest.mark.asyncio
async def test_delete_requires_authentication(async_client: AsyncClient):
    post = await _create_post(async_client)
    resp = await async_client.delete(f"/api/v1/blog/{post['id']}")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_delete_by_non_author_returns_403(async_client: AsyncClient):
    post = await _create_post(async_client)

    resp = await async_client.delete(f"/api/v1/blog/{post['id']}", headers=BOB)
    assert resp.status_code == 403

    resp = await async_client.get(f"/api/v1/blog/{post['id']}")
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_delete_missing_blog_returns_404(async_client: AsyncClient):
    resp = await async_client.delete("/api/v1/blog/missing", headers=ALICE)
    assert resp.status_code == 404
