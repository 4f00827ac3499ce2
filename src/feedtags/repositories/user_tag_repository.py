"""
User tag repository implementation.

Owns tag identity and the per-user, case-insensitive uniqueness of tag
titles. Every read and write is scoped by the owning user's ID; a tag
belonging to someone else is indistinguishable from a missing one.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from feedtags.db.models import EntryUserTag as EntryUserTagDB
from feedtags.db.models import USER_TAG_TITLE_INDEX
from feedtags.db.models import UserTag as UserTagDB
from feedtags.exceptions import ConflictError, NotFoundError
from feedtags.models.user_tag import UserTag
from feedtags.repositories.base import BaseSQLAlchemyRepository
from feedtags.repositories.entry_user_tag_repository import EntryUserTagRepository

logger = logging.getLogger(__name__)


def _is_unique_violation(error: IntegrityError) -> bool:
    """
    Tell a title-index violation apart from other integrity failures.

    SQLite and PostgreSQL both name the violated index in the message.
    """
    return USER_TAG_TITLE_INDEX in str(error.orig)


class UserTagRepository(BaseSQLAlchemyRepository[UserTagDB]):
    """Repository for user tag operations."""

    entity_type = "UserTag"

    def __init__(self, associations: Optional[EntryUserTagRepository] = None) -> None:
        super().__init__(UserTagDB)
        self._associations = associations or EntryUserTagRepository()

    async def get(
        self, session: AsyncSession, user_id: int, tag_id: int
    ) -> Optional[UserTagDB]:
        """Get a user tag by ID, or None when the user owns no such tag."""
        async with self._storage_errors("fetch"):
            result = await session.execute(
                select(UserTagDB).where(
                    UserTagDB.user_id == user_id, UserTagDB.id == tag_id
                )
            )
            return result.scalar_one_or_none()

    async def get_by_title(
        self, session: AsyncSession, user_id: int, title: str
    ) -> Optional[UserTagDB]:
        """Get a user tag by title, ignoring case."""
        async with self._storage_errors("fetch"):
            result = await session.execute(
                select(UserTagDB).where(
                    UserTagDB.user_id == user_id,
                    func.lower(UserTagDB.title) == func.lower(title),
                )
            )
            return result.scalar_one_or_none()

    async def list_for_user(self, session: AsyncSession, user_id: int) -> List[UserTag]:
        """
        List all tags of a user ordered by title, with live entry counts.

        The count is a correlated subquery over the association table and
        is recomputed on every call.

        Parameters
        ----------
        session : AsyncSession
            Database session.
        user_id : int
            Owning user.

        Returns
        -------
        List[UserTag]
            Tags ordered by title ascending, each with ``entry_count`` set.
        """
        entry_count = (
            select(func.count())
            .select_from(EntryUserTagDB)
            .where(EntryUserTagDB.user_tag_id == UserTagDB.id)
            .correlate(UserTagDB)
            .scalar_subquery()
            .label("entry_count")
        )
        async with self._storage_errors("list"):
            result = await session.execute(
                select(UserTagDB.id, UserTagDB.user_id, UserTagDB.title, entry_count)
                .where(UserTagDB.user_id == user_id)
                .order_by(UserTagDB.title.asc())
            )
            return [
                UserTag(
                    id=row.id,
                    user_id=row.user_id,
                    title=row.title,
                    entry_count=row.entry_count,
                )
                for row in result
            ]

    async def exists(self, session: AsyncSession, user_id: int, tag_id: int) -> bool:
        """Check whether the user owns a tag with this ID."""
        async with self._storage_errors("fetch"):
            result = await session.execute(
                select(UserTagDB.id)
                .where(UserTagDB.user_id == user_id, UserTagDB.id == tag_id)
                .limit(1)
            )
            return result.first() is not None

    async def title_exists(
        self, session: AsyncSession, user_id: int, title: str
    ) -> bool:
        """Check whether the user has a tag with this title, ignoring case."""
        async with self._storage_errors("fetch"):
            result = await session.execute(
                select(UserTagDB.id)
                .where(
                    UserTagDB.user_id == user_id,
                    func.lower(UserTagDB.title) == func.lower(title),
                )
                .limit(1)
            )
            return result.first() is not None

    async def another_tag_with_title_exists(
        self, session: AsyncSession, user_id: int, tag_id: int, title: str
    ) -> bool:
        """Check whether a tag other than ``tag_id`` already uses this title."""
        async with self._storage_errors("fetch"):
            result = await session.execute(
                select(UserTagDB.id)
                .where(
                    UserTagDB.user_id == user_id,
                    UserTagDB.id != tag_id,
                    func.lower(UserTagDB.title) == func.lower(title),
                )
                .limit(1)
            )
            return result.first() is not None

    async def create(self, session: AsyncSession, user_id: int, title: str) -> UserTagDB:
        """
        Create a tag for the user.

        Raises
        ------
        ConflictError
            If the unique title index rejects the row.
        RepositoryError
            On any other storage failure.
        """
        db_obj = UserTagDB(user_id=user_id, title=title)
        async with self._storage_errors("create"):
            session.add(db_obj)
            try:
                await session.flush()
            except IntegrityError as e:
                if not _is_unique_violation(e):
                    raise
                logger.info(
                    "Title conflict creating tag %r for user %d", title, user_id
                )
                raise ConflictError(
                    message="A tag with this title already exists",
                    details={"title": title},
                ) from e
            await session.refresh(db_obj)
        logger.debug("Created user tag %s for user %d", db_obj.id, user_id)
        return db_obj

    async def rename(self, session: AsyncSession, tag: UserTagDB, title: str) -> UserTagDB:
        """
        Change the title of a tag previously loaded for its owner.

        No uniqueness probe runs here; the unique index still rejects a
        clashing title, which surfaces as ConflictError.
        """
        tag_id, owner_id = tag.id, tag.user_id
        tag.title = title
        async with self._storage_errors("update"):
            try:
                await session.flush()
            except IntegrityError as e:
                if not _is_unique_violation(e):
                    raise
                logger.info(
                    "Title conflict renaming tag %d for user %d", tag_id, owner_id
                )
                raise ConflictError(
                    message="A tag with this title already exists",
                    details={"title": title},
                ) from e
        return tag

    async def remove(self, session: AsyncSession, user_id: int, tag_id: int) -> None:
        """
        Delete a tag and every association referencing it.

        Raises
        ------
        NotFoundError
            If no tag was removed; deletion is checked, not silently idempotent.
        """
        async with self._storage_errors("remove"):
            result = await session.execute(
                delete(UserTagDB).where(
                    UserTagDB.id == tag_id, UserTagDB.user_id == user_id
                )
            )
            if result.rowcount == 0:
                raise NotFoundError(resource_type="UserTag", identifier=str(tag_id))
            await self._associations.delete_tag_cascade(session, tag_id)
        logger.debug("Removed user tag %d for user %d", tag_id, user_id)
