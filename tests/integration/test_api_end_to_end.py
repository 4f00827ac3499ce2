"""
End-to-end API tests: HTTP requests through the real service and a
SQLite database.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from feedtags.api.deps import get_db
from feedtags.api.main import app
from feedtags.config.database import DatabaseManager
from tests.factories.entry_factory import FeedSeed

pytestmark = [pytest.mark.asyncio, pytest.mark.integration]

ALICE = {"X-User-ID": "1"}
BOB = {"X-User-ID": "2"}


@pytest.fixture
async def client(
    test_db_manager: DatabaseManager, seeded: FeedSeed
) -> AsyncGenerator[AsyncClient, None]:
    async def db_override() -> AsyncGenerator[AsyncSession, None]:
        async for session in test_db_manager.get_session():
            yield session

    app.dependency_overrides[get_db] = db_override
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test/api/v1") as c:
            yield c
    finally:
        app.dependency_overrides.clear()


async def test_golang_devops_walkthrough(client: AsyncClient) -> None:
    golang = await client.post("/user-tags", json={"title": "golang"}, headers=ALICE)
    devops = await client.post("/user-tags", json={"title": "devops"}, headers=ALICE)
    assert golang.status_code == devops.status_code == 201
    golang_id, devops_id = golang.json()["id"], devops.json()["id"]

    response = await client.put(
        "/entries/50/user-tags", json={"user_tag_ids": [golang_id, devops_id]}, headers=ALICE
    )
    assert response.status_code == 204

    tags = (await client.get("/user-tags", headers=ALICE)).json()
    assert [(t["title"], t["entry_count"]) for t in tags] == [("devops", 1), ("golang", 1)]

    duplicate = await client.post("/user-tags", json={"title": "GoLang"}, headers=ALICE)
    assert duplicate.status_code == 400
    assert duplicate.json()["reason"] == "error.tag_already_exists"

    await client.put("/entries/52/user-tags", json={"user_tag_ids": [golang_id]}, headers=ALICE)
    entries = await client.get(
        f"/user-tags/{golang_id}/entries", params={"order": "id", "direction": "asc"}, headers=ALICE
    )
    assert entries.json()["total"] == 2
    assert [e["id"] for e in entries.json()["entries"]] == [50, 52]

    assert (await client.delete(f"/user-tags/{golang_id}", headers=ALICE)).status_code == 204
    remaining = await client.get("/entries/50/user-tags", headers=ALICE)
    assert remaining.json() == {"user_tag_ids": [devops_id]}


async def test_users_cannot_see_each_others_tags(client: AsyncClient) -> None:
    created = await client.post("/user-tags", json={"title": "golang"}, headers=ALICE)
    tag_id = created.json()["id"]

    assert (await client.get("/user-tags", headers=BOB)).json() == []
    assert (await client.get(f"/user-tags/{tag_id}/entries", headers=BOB)).status_code == 404
    rename = await client.put(f"/user-tags/{tag_id}", json={"title": "mine"}, headers=BOB)
    assert rename.status_code == 404

    # Bob's own entry; Alice's tag ID is silently dropped
    assign = await client.put(
        "/entries/60/user-tags", json={"user_tag_ids": [tag_id]}, headers=BOB
    )
    assert assign.status_code == 204
    assert (await client.get("/entries/60/user-tags", headers=BOB)).json() == {"user_tag_ids": []}

    foreign_entry = await client.get("/entries/60/user-tags", headers=ALICE)
    assert foreign_entry.status_code == 404


async def test_rename_validation_and_noop(client: AsyncClient) -> None:
    golang = (await client.post("/user-tags", json={"title": "golang"}, headers=ALICE)).json()
    await client.post("/user-tags", json={"title": "devops"}, headers=ALICE)

    empty = await client.put(f"/user-tags/{golang['id']}", json={"title": ""}, headers=ALICE)
    assert empty.status_code == 400
    assert empty.json()["reason"] == "error.tag_title_required"

    clash = await client.put(f"/user-tags/{golang['id']}", json={"title": "DevOps"}, headers=ALICE)
    assert clash.json()["reason"] == "error.tag_already_exists"

    noop = await client.put(f"/user-tags/{golang['id']}", json={}, headers=ALICE)
    assert noop.status_code == 201
    assert noop.json()["title"] == "golang"

    recase = await client.put(f"/user-tags/{golang['id']}", json={"title": "GoLang"}, headers=ALICE)
    assert recase.json()["title"] == "GoLang"


async def test_health(client: AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
