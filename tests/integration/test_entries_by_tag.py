"""
Tests for listing entries through a user tag.

The tag predicate is composed with the listing's own status, date,
search, sorting and pagination options.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from feedtags.exceptions import NotFoundError
from feedtags.models.entry import EntryFilters
from feedtags.models.enums import EntryOrder, EntryStatus, SortDirection
from feedtags.models.user_tag import UserTagCreationRequest
from feedtags.repositories.entry_query import EntryQueryBuilder
from feedtags.services.user_tag_service import UserTagService
from tests.factories.entry_factory import FeedSeed

pytestmark = [pytest.mark.asyncio, pytest.mark.integration]


@pytest.fixture
def service() -> UserTagService:
    return UserTagService()


@pytest.fixture
async def tagged(run, service: UserTagService, seeded: FeedSeed) -> dict[str, int]:
    """Tag "go" on the Go entries (removed one included), "k8s" on kubernetes."""
    go = await run(
        lambda s: service.create_tag(s, seeded.alice, UserTagCreationRequest(title="go"))
    )
    k8s = await run(
        lambda s: service.create_tag(s, seeded.alice, UserTagCreationRequest(title="k8s"))
    )
    for entry_id in (seeded.go_generics, seeded.go_modules, seeded.removed):
        await run(
            lambda s, e=entry_id: service.set_entry_tags(s, seeded.alice, e, [go.id])
        )
    await run(
        lambda s: service.set_entry_tags(s, seeded.alice, seeded.kubernetes, [k8s.id])
    )
    return {"go": go.id, "k8s": k8s.id}


async def _list(run, service, seed: FeedSeed, tag_id: int, **filters):
    return await run(
        lambda s: service.list_entries_by_tag(
            s, seed.alice, tag_id, EntryFilters(**filters)
        )
    )


class TestListEntriesByTag:
    """UserTagService.list_entries_by_tag."""

    async def test_defaults_newest_first_without_removed(
        self, run, service, seeded: FeedSeed, tagged: dict[str, int]
    ) -> None:
        result = await _list(run, service, seeded, tagged["go"])

        assert result.total == 2
        assert [e.id for e in result.entries] == [seeded.go_modules, seeded.go_generics]

    async def test_status_filter(
        self, run, service, seeded: FeedSeed, tagged: dict[str, int]
    ) -> None:
        read_go = await _list(
            run, service, seeded, tagged["go"], statuses=[EntryStatus.READ]
        )
        read_k8s = await _list(
            run, service, seeded, tagged["k8s"], statuses=[EntryStatus.READ]
        )

        assert read_go.total == 0
        assert [e.id for e in read_k8s.entries] == [seeded.kubernetes]

    async def test_removed_status_is_never_listed(
        self, run, service, seeded: FeedSeed, tagged: dict[str, int]
    ) -> None:
        result = await _list(
            run, service, seeded, tagged["go"], statuses=[EntryStatus.REMOVED]
        )
        assert result.total == 0

    async def test_sorting_by_title_ascending(
        self, run, service, seeded: FeedSeed, tagged: dict[str, int]
    ) -> None:
        result = await _list(
            run,
            service,
            seeded,
            tagged["go"],
            order=EntryOrder.TITLE,
            direction=SortDirection.ASC,
        )
        assert [e.title for e in result.entries] == [
            "A deep dive into Go modules",
            "Go generics in practice",
        ]

    async def test_pagination_keeps_total(
        self, run, service, seeded: FeedSeed, tagged: dict[str, int]
    ) -> None:
        result = await _list(run, service, seeded, tagged["go"], limit=1, offset=1)

        assert result.total == 2
        assert [e.id for e in result.entries] == [seeded.go_generics]

    async def test_zero_limit_returns_everything(
        self, run, service, seeded: FeedSeed, tagged: dict[str, int]
    ) -> None:
        result = await _list(run, service, seeded, tagged["go"], limit=0)
        assert len(result.entries) == 2

    async def test_search_is_case_insensitive(
        self, run, service, seeded: FeedSeed, tagged: dict[str, int]
    ) -> None:
        result = await _list(run, service, seeded, tagged["go"], search="GENERICS")
        assert [e.id for e in result.entries] == [seeded.go_generics]

    @pytest.mark.parametrize("search", ["%", "_", "Go%modules"])
    async def test_search_wildcards_match_literally(
        self, run, service, seeded: FeedSeed, tagged: dict[str, int], search: str
    ) -> None:
        result = await _list(run, service, seeded, tagged["go"], search=search)
        assert result.total == 0
        assert result.entries == []

    async def test_published_date_range(
        self, run, service, seeded: FeedSeed, tagged: dict[str, int]
    ) -> None:
        result = await _list(
            run,
            service,
            seeded,
            tagged["go"],
            published_after=datetime(2024, 1, 12),
            published_before=datetime(2024, 1, 31),
        )
        assert [e.id for e in result.entries] == [seeded.go_modules]

    async def test_another_users_tag_is_not_found(
        self, run, service, seeded: FeedSeed, tagged: dict[str, int]
    ) -> None:
        with pytest.raises(NotFoundError):
            await run(
                lambda s: service.list_entries_by_tag(s, seeded.bob, tagged["go"])
            )


class TestUserTagFilter:
    """The tag predicate inside the entry query builder."""

    async def test_predicate_alone_includes_every_status(
        self, run, seeded: FeedSeed, tagged: dict[str, int]
    ) -> None:
        count = await run(
            lambda s: EntryQueryBuilder(s, seeded.alice)
            .with_user_tag_id(tagged["go"])
            .count_entries()
        )
        assert count == 3

    async def test_foreign_tag_matches_nothing(
        self, run, seeded: FeedSeed, tagged: dict[str, int]
    ) -> None:
        entries = await run(
            lambda s: EntryQueryBuilder(s, seeded.bob)
            .with_user_tag_id(tagged["go"])
            .get_entries()
        )
        assert entries == []

    async def test_predicate_composes_with_other_conditions(
        self, run, seeded: FeedSeed, tagged: dict[str, int]
    ) -> None:
        entries = await run(
            lambda s: EntryQueryBuilder(s, seeded.alice)
            .with_user_tag_id(tagged["go"])
            .with_statuses([EntryStatus.UNREAD])
            .with_search_query("modules")
            .get_entries()
        )
        assert [e.id for e in entries] == [seeded.go_modules]
