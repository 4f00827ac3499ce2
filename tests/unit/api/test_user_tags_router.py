"""
Tests for the user tag endpoints with a mocked service.

Covers identity handling, status codes, the RFC 7807 error bodies and
how query parameters reach the service.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from feedtags.api.deps import get_db, get_user_tag_service
from feedtags.api.main import app
from feedtags.exceptions import (
    ConflictError,
    NotFoundError,
    RepositoryError,
    TagValidationError,
    TagValidationReason,
)
from feedtags.models.entry import EntryFilters, EntryListResult
from feedtags.models.enums import EntryOrder, EntryStatus, SortDirection
from feedtags.services.user_tag_service import UserTagService
from tests.factories.entry_factory import EntryFactory
from tests.factories.user_tag_factory import UserTagFactory

pytestmark = pytest.mark.asyncio

ALICE = {"X-User-ID": "1"}


@pytest.fixture
def service() -> AsyncMock:
    return AsyncMock(spec=UserTagService)


@pytest.fixture
async def async_client(service: AsyncMock) -> AsyncGenerator[AsyncClient, None]:
    """Client with the database and the service replaced by doubles."""
    session = MagicMock(spec=AsyncSession)

    async def mock_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield session

    app.dependency_overrides[get_db] = mock_get_db
    app.dependency_overrides[get_user_tag_service] = lambda: service
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


class TestIdentity:
    """X-User-ID handling."""

    async def test_missing_header_is_401(self, async_client, service) -> None:
        response = await async_client.get("/api/v1/user-tags")

        assert response.status_code == 401
        assert response.headers["content-type"] == "application/problem+json"
        assert response.json()["code"] == "NOT_AUTHENTICATED"
        service.list_tags.assert_not_awaited()

    @pytest.mark.parametrize("value", ["abc", "0", "-3"])
    async def test_invalid_header_is_401(self, async_client, value: str) -> None:
        response = await async_client.get("/api/v1/user-tags", headers={"X-User-ID": value})
        assert response.status_code == 401

    async def test_user_id_reaches_service(self, async_client, service) -> None:
        service.list_tags.return_value = []
        await async_client.get("/api/v1/user-tags", headers={"X-User-ID": "42"})
        assert service.list_tags.await_args.args[1] == 42


class TestListUserTags:
    """GET /user-tags."""

    async def test_lists_tags_with_counts(self, async_client, service) -> None:
        service.list_tags.return_value = [
            UserTagFactory(id=2, title="devops", entry_count=0),
            UserTagFactory(id=1, title="golang", entry_count=3),
        ]

        response = await async_client.get("/api/v1/user-tags", headers=ALICE)

        assert response.status_code == 200
        assert response.json() == [
            {"id": 2, "user_id": 1, "title": "devops", "entry_count": 0},
            {"id": 1, "user_id": 1, "title": "golang", "entry_count": 3},
        ]


class TestCreateUserTag:
    """POST /user-tags."""

    async def test_created(self, async_client, service) -> None:
        service.create_tag.return_value = UserTagFactory(id=7, title="golang")

        response = await async_client.post(
            "/api/v1/user-tags", json={"title": "golang"}, headers=ALICE
        )

        assert response.status_code == 201
        assert response.json() == {"id": 7, "user_id": 1, "title": "golang"}
        request = service.create_tag.await_args.args[2]
        assert request.title == "golang"

    @pytest.mark.parametrize(
        "reason", [TagValidationReason.TITLE_REQUIRED, TagValidationReason.ALREADY_EXISTS]
    )
    async def test_validation_failure_carries_reason(
        self, async_client, service, reason: TagValidationReason
    ) -> None:
        service.create_tag.side_effect = TagValidationError(reason)

        response = await async_client.post(
            "/api/v1/user-tags", json={"title": ""}, headers=ALICE
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_FAILED"
        assert body["reason"] == reason.value
        assert body["instance"] == "/api/v1/user-tags"

    async def test_store_conflict_is_409(self, async_client, service) -> None:
        service.create_tag.side_effect = ConflictError("A tag with this title already exists")

        response = await async_client.post(
            "/api/v1/user-tags", json={"title": "go"}, headers=ALICE
        )

        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    async def test_missing_title_is_422(self, async_client, service) -> None:
        response = await async_client.post("/api/v1/user-tags", json={}, headers=ALICE)

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["errors"][0]["loc"] == ["body", "title"]
        service.create_tag.assert_not_awaited()

    async def test_storage_failure_is_generic_500(self, async_client, service) -> None:
        service.create_tag.side_effect = RepositoryError(
            message="Unable to create UserTag",
            operation="create",
            entity_type="UserTag",
            original_error=RuntimeError("password authentication failed for user"),
        )

        response = await async_client.post(
            "/api/v1/user-tags", json={"title": "go"}, headers=ALICE
        )

        assert response.status_code == 500
        body = response.json()
        assert body["code"] == "DATABASE_ERROR"
        assert body["detail"] == "A database error occurred"
        assert "password" not in response.text


class TestUpdateUserTag:
    """PUT /user-tags/{tag_id}."""

    async def test_updated_with_201(self, async_client, service) -> None:
        service.rename_tag.return_value = UserTagFactory(id=3, title="rust")

        response = await async_client.put(
            "/api/v1/user-tags/3", json={"title": "rust"}, headers=ALICE
        )

        assert response.status_code == 201
        assert response.json()["title"] == "rust"

    async def test_body_without_title_is_not_provided(self, async_client, service) -> None:
        service.rename_tag.return_value = UserTagFactory(id=3)

        await async_client.put("/api/v1/user-tags/3", json={}, headers=ALICE)

        request = service.rename_tag.await_args.args[3]
        assert request.title_provided is False

    async def test_other_users_tag_is_404(self, async_client, service) -> None:
        service.rename_tag.side_effect = NotFoundError("UserTag", "3")

        response = await async_client.put(
            "/api/v1/user-tags/3", json={"title": "x"}, headers=ALICE
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "UserTag '3' not found"


class TestDeleteUserTag:
    """DELETE /user-tags/{tag_id}."""

    async def test_deleted(self, async_client, service) -> None:
        response = await async_client.delete("/api/v1/user-tags/3", headers=ALICE)

        assert response.status_code == 204
        assert response.content == b""
        service.delete_tag.assert_awaited_once()

    async def test_missing_is_404(self, async_client, service) -> None:
        service.delete_tag.side_effect = NotFoundError("UserTag", "3")
        response = await async_client.delete("/api/v1/user-tags/3", headers=ALICE)
        assert response.status_code == 404


class TestUserTagEntries:
    """GET /user-tags/{tag_id}/entries."""

    async def test_query_parameters_become_filters(self, async_client, service) -> None:
        service.list_entries_by_tag.return_value = EntryListResult(
            total=5, entries=EntryFactory.build_batch(2)
        )

        response = await async_client.get(
            "/api/v1/user-tags/3/entries",
            params=[
                ("status", "unread"),
                ("status", "read"),
                ("order", "title"),
                ("direction", "asc"),
                ("limit", "2"),
                ("offset", "4"),
                ("search", "go"),
                ("published_after", "2024-01-01T00:00:00"),
            ],
            headers=ALICE,
        )

        assert response.status_code == 200
        assert response.json()["total"] == 5
        assert len(response.json()["entries"]) == 2
        filters: EntryFilters = service.list_entries_by_tag.await_args.args[3]
        assert filters.statuses == [EntryStatus.UNREAD, EntryStatus.READ]
        assert filters.order == EntryOrder.TITLE
        assert filters.direction == SortDirection.ASC
        assert (filters.limit, filters.offset) == (2, 4)
        assert filters.search == "go"
        assert filters.published_after == datetime(2024, 1, 1)

    async def test_inverted_dates_are_400(self, async_client, service) -> None:
        response = await async_client.get(
            "/api/v1/user-tags/3/entries",
            params={
                "published_after": "2024-02-01T00:00:00",
                "published_before": "2024-01-01T00:00:00",
            },
            headers=ALICE,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "BAD_REQUEST"
        service.list_entries_by_tag.assert_not_awaited()

    @pytest.mark.parametrize("params", [{"limit": "-1"}, {"offset": "-1"}, {"order": "rank"}])
    async def test_invalid_parameters_are_422(self, async_client, params) -> None:
        response = await async_client.get(
            "/api/v1/user-tags/3/entries", params=params, headers=ALICE
        )
        assert response.status_code == 422


class TestEntryUserTags:
    """GET and PUT /entries/{entry_id}/user-tags."""

    async def test_get_returns_sorted_ids(self, async_client, service) -> None:
        service.get_entry_tag_ids.return_value = {3, 1, 2}

        response = await async_client.get("/api/v1/entries/50/user-tags", headers=ALICE)

        assert response.status_code == 200
        assert response.json() == {"user_tag_ids": [1, 2, 3]}

    @pytest.mark.parametrize(
        ("payload", "expected"),
        [({"user_tag_ids": [2, 1]}, [2, 1]), ({"user_tag_ids": None}, []), ({}, [])],
    )
    async def test_put_replaces(self, async_client, service, payload, expected) -> None:
        service.set_entry_tags.return_value = set(expected)

        response = await async_client.put(
            "/api/v1/entries/50/user-tags", json=payload, headers=ALICE
        )

        assert response.status_code == 204
        service.set_entry_tags.assert_awaited_once()
        assert service.set_entry_tags.await_args.args[1:] == (1, 50, expected)

    async def test_foreign_entry_is_404(self, async_client, service) -> None:
        service.set_entry_tags.side_effect = NotFoundError("Entry", "60")

        response = await async_client.put(
            "/api/v1/entries/60/user-tags", json={"user_tag_ids": [1]}, headers=ALICE
        )

        assert response.status_code == 404


class TestRequestId:
    """Correlation IDs on responses and error bodies."""

    async def test_generated_when_missing(self, async_client, service) -> None:
        service.list_tags.return_value = []
        response = await async_client.get("/api/v1/user-tags", headers=ALICE)
        assert len(response.headers["X-Request-ID"]) == 36

    async def test_client_id_echoed_in_error_body(self, async_client, service) -> None:
        service.delete_tag.side_effect = NotFoundError("UserTag", "9")

        response = await async_client.delete(
            "/api/v1/user-tags/9", headers={**ALICE, "X-Request-ID": "trace-123"}
        )

        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"
