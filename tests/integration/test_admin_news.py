"""Integration tests for admin news management and the public news feed."""

from __future__ import annotations

from datetime import datetime

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from tests.integration.auth_helpers import create_user_row, login

EDITOR_EMAIL = "editor@example.com"
EDITOR_PASSWORD = "correct horse battery staple"

ARTICLE = {
    "slug": "  Grand Opening ",
    "title": "  Grand opening  ",
    "content": "We are open.",
    "excerpt": "   ",
    "image_url": " https://cdn.example.com/a.png ",
}


@pytest_asyncio.fixture
async def editor_client(app_client: AsyncClient, db_session: AsyncSession) -> AsyncClient:
    """The app client logged in as an editor."""
    await create_user_row(
        db_session, email=EDITOR_EMAIL, role="editor", password=EDITOR_PASSWORD
    )
    response = await login(app_client, email=EDITOR_EMAIL, password=EDITOR_PASSWORD)
    assert response.status_code == 200
    return app_client


async def _create(client: AsyncClient, **overrides) -> dict:
    response = await client.post("/admin/news", json={**ARTICLE, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


async def _published_at(db_session: AsyncSession, article_id: int):
    async with db_session.begin():
        result = await db_session.execute(
            text("SELECT published_at FROM news WHERE id = :id"), {"id": article_id}
        )
        return result.scalar_one()


@pytest.mark.asyncio
class TestAdminNewsAccess:
    async def test_member_is_forbidden(
        self, app_client: AsyncClient, db_session: AsyncSession
    ):
        await create_user_row(
            db_session, email="member@example.com", role="member", password="pw"
        )
        await login(app_client, email="member@example.com", password="pw")

        response = await app_client.get("/admin/news")
        assert response.status_code == 403

    async def test_anonymous_is_unauthorized(self, app_client: AsyncClient):
        response = await app_client.post("/admin/news", json=ARTICLE)
        assert response.status_code == 401


@pytest.mark.asyncio
class TestAdminNews:
    async def test_create_normalizes_and_trims(
        self, editor_client: AsyncClient, db_session: AsyncSession
    ):
        created = await _create(editor_client)
        assert created["slug"] == "grand-opening"
        assert created["status"] == "draft"

        listing = (await editor_client.get("/admin/news")).json()
        assert listing["count"] == 1
        item = listing["items"][0]
        assert item["title"] == "Grand opening"
        assert item["excerpt"] is None
        assert item["image_url"] == "https://cdn.example.com/a.png"
        assert item["published_at"] is None

    async def test_create_validation(self, editor_client: AsyncClient):
        missing = await editor_client.post("/admin/news", json={"slug": "x"})
        assert missing.status_code == 400
        assert missing.json()["error"] == "missing_fields"
        assert set(missing.json()["required"]) == {"title", "content"}

        blank = await editor_client.post(
            "/admin/news", json={"slug": "x", "title": "   ", "content": "c"}
        )
        assert blank.status_code == 400
        assert blank.json()["error"] == "missing_fields"

        bad_slug = await editor_client.post(
            "/admin/news", json={"slug": "???", "title": "t", "content": "c"}
        )
        assert bad_slug.status_code == 400
        assert bad_slug.json()["error"] == "invalid_slug"

    async def test_duplicate_slug_conflicts(self, editor_client: AsyncClient):
        await _create(editor_client)
        response = await editor_client.post("/admin/news", json=ARTICLE)
        assert response.status_code == 409
        assert response.json() == {"ok": False, "error": "slug_already_exists"}

    async def test_patch(self, editor_client: AsyncClient):
        created = await _create(editor_client)
        url = f"/admin/news/{created['id']}"

        response = await editor_client.patch(
            url, json={"title": " New title ", "excerpt": "Short", "image_url": ""}
        )
        assert response.status_code == 200
        item = response.json()["item"]
        assert item["title"] == "New title"
        assert item["excerpt"] == "Short"
        assert item["image_url"] is None

        for body, code in (
            ({}, "no_fields_to_update"),
            ({"title": None}, "no_fields_to_update"),
            ({"title": "  "}, "invalid_title"),
            ({"content": ""}, "invalid_content"),
            ({"slug": "***"}, "invalid_slug"),
        ):
            response = await editor_client.patch(url, json=body)
            assert response.status_code == 400, body
            assert response.json()["error"] == code

        missing = await editor_client.patch("/admin/news/999999", json={"title": "x"})
        assert missing.status_code == 404
        assert missing.json()["error"] == "not_found"

    async def test_patch_slug_conflict(self, editor_client: AsyncClient):
        first = await _create(editor_client, slug="first")
        await _create(editor_client, slug="second")

        response = await editor_client.patch(
            f"/admin/news/{first['id']}", json={"slug": "Second"}
        )
        assert response.status_code == 409

    async def test_invalid_ids(self, editor_client: AsyncClient):
        for raw in ("abc", "0", "-3", "1.5"):
            response = await editor_client.post(f"/admin/news/{raw}/publish")
            assert response.status_code == 400, raw
            assert response.json()["error"] == "invalid_id"

    async def test_publish_cycle(
        self, editor_client: AsyncClient, db_session: AsyncSession
    ):
        created = await _create(editor_client)
        article_id = created["id"]

        published = await editor_client.post(f"/admin/news/{article_id}/publish")
        assert published.status_code == 200
        assert published.json()["item"]["status"] == "published"
        first_published_at = await _published_at(db_session, article_id)
        assert first_published_at is not None

        again = await editor_client.post(f"/admin/news/{article_id}/publish")
        assert again.status_code == 404
        assert again.json()["error"] == "not_found_or_not_draft"

        unpublished = await editor_client.post(f"/admin/news/{article_id}/unpublish")
        assert unpublished.status_code == 200
        assert unpublished.json()["item"]["status"] == "draft"
        assert await _published_at(db_session, article_id) is None

        not_published = await editor_client.post(f"/admin/news/{article_id}/unpublish")
        assert not_published.status_code == 404
        assert not_published.json()["error"] == "not_found_or_not_published"

    async def test_publish_keeps_existing_published_at(
        self, editor_client: AsyncClient, db_session: AsyncSession
    ):
        created = await _create(editor_client)
        async with db_session.begin():
            await db_session.execute(
                text("UPDATE news SET published_at = '2024-01-01 10:00:00' WHERE id = :id"),
                {"id": created["id"]},
            )

        await editor_client.post(f"/admin/news/{created['id']}/publish")

        published_at = await _published_at(db_session, created["id"])
        assert published_at.isoformat() == "2024-01-01T10:00:00"

    async def test_delete(self, editor_client: AsyncClient):
        created = await _create(editor_client)

        response = await editor_client.delete(f"/admin/news/{created['id']}")
        assert response.status_code == 200
        assert response.json() == {"ok": True, "deleted": created["id"]}

        again = await editor_client.delete(f"/admin/news/{created['id']}")
        assert again.status_code == 404


@pytest.mark.asyncio
class TestPublicNews:
    async def test_only_published_articles_are_visible(self, editor_client: AsyncClient):
        draft = await _create(editor_client, slug="draft-one")
        live = await _create(editor_client, slug="live-one")
        await editor_client.post(f"/admin/news/{live['id']}/publish")

        feed = await editor_client.get("/content/news")
        assert feed.status_code == 200
        assert [item["slug"] for item in feed.json()["items"]] == ["live-one"]

        article = await editor_client.get("/content/news/  LIVE-ONE ")
        assert article.status_code == 200
        assert article.json()["item"]["id"] == live["id"]

        hidden = await editor_client.get(f"/content/news/{draft['slug']}")
        assert hidden.status_code == 404
        assert hidden.json() == {"ok": False, "error": "not_found"}

    async def test_feed_is_newest_first(
        self, editor_client: AsyncClient, db_session: AsyncSession
    ):
        older = await _create(editor_client, slug="older")
        newer = await _create(editor_client, slug="newer")
        for article_id, stamp in (
            (older["id"], datetime(2024, 1, 1)),
            (newer["id"], datetime(2024, 2, 1)),
        ):
            async with db_session.begin():
                await db_session.execute(
                    text(
                        "UPDATE news SET status = 'published', published_at = :stamp"
                        " WHERE id = :id"
                    ),
                    {"id": article_id, "stamp": stamp},
                )

        feed = await editor_client.get("/content/news")
        assert [item["slug"] for item in feed.json()["items"]] == ["newer", "older"]
