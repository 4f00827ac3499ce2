"""
Entry repository implementation.

Entries belong to the feed reader; the tag engine only needs to know
whether an entry belongs to the caller before touching its tags.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from feedtags.db.models import Entry as EntryDB
from feedtags.repositories.base import BaseSQLAlchemyRepository
from feedtags.repositories.entry_query import EntryQueryBuilder


class EntryRepository(BaseSQLAlchemyRepository[EntryDB]):
    """Read-only access to the caller's entries."""

    entity_type = "Entry"

    def __init__(self) -> None:
        super().__init__(EntryDB)

    async def exists(self, session: AsyncSession, user_id: int, entry_id: int) -> bool:
        """Check whether the user owns an entry with this ID."""
        async with self._storage_errors("fetch"):
            result = await session.execute(
                select(EntryDB.id)
                .where(EntryDB.user_id == user_id, EntryDB.id == entry_id)
                .limit(1)
            )
            return result.first() is not None

    def query_builder(self, session: AsyncSession, user_id: int) -> EntryQueryBuilder:
        """Start a user-scoped entry query."""
        return EntryQueryBuilder(session, user_id)
