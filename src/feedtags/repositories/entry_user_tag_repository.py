"""
Entry user tag repository implementation.

Owns the many-to-many relation between entries and user tags. There is
no single-association insert or delete: the tag set of an entry is only
ever replaced as a whole, or shrunk by deleting a tag.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Set

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from feedtags.db.models import EntryUserTag as EntryUserTagDB
from feedtags.db.models import UserTag as UserTagDB
from feedtags.repositories.base import BaseSQLAlchemyRepository

logger = logging.getLogger(__name__)


class EntryUserTagRepository(BaseSQLAlchemyRepository[EntryUserTagDB]):
    """Repository for entry <-> user tag associations."""

    entity_type = "EntryUserTag"

    def __init__(self) -> None:
        super().__init__(EntryUserTagDB)

    async def tag_ids_for_entry(
        self, session: AsyncSession, user_id: int, entry_id: int
    ) -> Set[int]:
        """Return the IDs of the user's own tags attached to an entry."""
        async with self._storage_errors("fetch"):
            result = await session.execute(
                select(EntryUserTagDB.user_tag_id)
                .join(UserTagDB, UserTagDB.id == EntryUserTagDB.user_tag_id)
                .where(UserTagDB.user_id == user_id, EntryUserTagDB.entry_id == entry_id)
            )
            return set(result.scalars().all())

    async def owned_tag_ids(
        self, session: AsyncSession, user_id: int, tag_ids: Iterable[int]
    ) -> Set[int]:
        """Keep only the IDs of tags the user actually owns."""
        wanted = set(tag_ids)
        if not wanted:
            return set()
        async with self._storage_errors("fetch"):
            result = await session.execute(
                select(UserTagDB.id).where(
                    UserTagDB.user_id == user_id, UserTagDB.id.in_(wanted)
                )
            )
            return set(result.scalars().all())

    async def replace_entry_tags(
        self,
        session: AsyncSession,
        user_id: int,
        entry_id: int,
        tag_ids: Iterable[int],
    ) -> Set[int]:
        """
        Replace every tag the user has on an entry.

        IDs of tags the user does not own are dropped silently. The clear
        and the insert run in the session's transaction; if either fails
        the whole transaction is rolled back before the error propagates,
        so no reader ever sees a half-applied tag set.

        Parameters
        ----------
        session : AsyncSession
            Database session; the caller commits it.
        user_id : int
            User performing the change.
        entry_id : int
            Entry whose tags are replaced.
        tag_ids : Iterable[int]
            Requested tag IDs, untrusted. Duplicates collapse.

        Returns
        -------
        Set[int]
            The tag IDs now attached to the entry.

        Raises
        ------
        RepositoryError
            If any statement fails; the transaction has been rolled back.
        """
        async with self._storage_errors("replace"):
            try:
                applied = await self.owned_tag_ids(session, user_id, tag_ids)

                # Other users' tags on the same entry are left alone.
                await session.execute(
                    delete(EntryUserTagDB).where(
                        EntryUserTagDB.entry_id == entry_id,
                        EntryUserTagDB.user_tag_id.in_(
                            select(UserTagDB.id).where(UserTagDB.user_id == user_id)
                        ),
                    )
                    .execution_options(synchronize_session=False)
                )

                if applied:
                    await self._insert_associations(session, entry_id, applied)
            except BaseException:
                await session.rollback()
                raise

        logger.debug(
            "Replaced tags of entry %d for user %d: %s",
            entry_id,
            user_id,
            sorted(applied),
        )
        return applied

    async def _insert_associations(
        self, session: AsyncSession, entry_id: int, tag_ids: Set[int]
    ) -> None:
        await session.execute(
            insert(EntryUserTagDB),
            [{"entry_id": entry_id, "user_tag_id": tag_id} for tag_id in sorted(tag_ids)],
        )

    async def delete_tag_cascade(self, session: AsyncSession, tag_id: int) -> int:
        """
        Delete every association referencing a tag.

        Called by the tag repository in the same unit of work as the tag
        row deletion. Returns the number of associations removed.
        """
        async with self._storage_errors("remove"):
            result = await session.execute(
                delete(EntryUserTagDB).where(EntryUserTagDB.user_tag_id == tag_id)
            )
            return result.rowcount or 0
