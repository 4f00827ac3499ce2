"""
User tag service.

The operation set exposed to the API and CLI: tag lifecycle, entries by
tag, and bulk tag assignment on an entry. Every method takes the
caller's session and the authenticated user's ID; the service never
commits, the session owner does.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, List, Optional, Set

from sqlalchemy.ext.asyncio import AsyncSession

from feedtags.exceptions import NotFoundError
from feedtags.models.entry import EntryFilters, EntryListResult
from feedtags.models.enums import EntryStatus
from feedtags.models.user_tag import (
    UserTag,
    UserTagCreationRequest,
    UserTagModificationRequest,
    UserTags,
)
from feedtags.repositories.entry_repository import EntryRepository
from feedtags.repositories.entry_user_tag_repository import EntryUserTagRepository
from feedtags.repositories.user_tag_repository import UserTagRepository
from feedtags.services.user_tag_validation import (
    validate_user_tag_creation,
    validate_user_tag_modification,
)

logger = logging.getLogger(__name__)


def parse_tag_ids(values: Optional[Iterable[Any]]) -> List[int]:
    """
    Convert raw submitted values to tag IDs.

    Values that are not integers (or integer strings) are skipped and
    duplicates collapse, keeping first-seen order.

    Examples
    --------
    >>> parse_tag_ids(["3", "x", 1, "3", None])
    [3, 1]
    """
    ids: List[int] = []
    seen: Set[int] = set()
    for value in values or ():
        if isinstance(value, bool):
            continue
        try:
            tag_id = int(value)
        except (TypeError, ValueError):
            continue
        if tag_id not in seen:
            seen.add(tag_id)
            ids.append(tag_id)
    return ids


class UserTagService:
    """
    Facade over the tag registry, association store and entry queries.

    Parameters
    ----------
    user_tag_repo : UserTagRepository, optional
        Tag registry.
    entry_user_tag_repo : EntryUserTagRepository, optional
        Association store; shared with the registry for delete cascades.
    entry_repo : EntryRepository, optional
        Entry ownership checks and the entry query builder.
    """

    def __init__(
        self,
        user_tag_repo: Optional[UserTagRepository] = None,
        entry_user_tag_repo: Optional[EntryUserTagRepository] = None,
        entry_repo: Optional[EntryRepository] = None,
    ) -> None:
        self._entry_user_tag_repo = entry_user_tag_repo or EntryUserTagRepository()
        self._user_tag_repo = user_tag_repo or UserTagRepository(
            self._entry_user_tag_repo
        )
        self._entry_repo = entry_repo or EntryRepository()

    async def list_tags(self, session: AsyncSession, user_id: int) -> UserTags:
        """List the user's tags by title, each with its entry count."""
        return await self._user_tag_repo.list_for_user(session, user_id)

    async def tag_exists(self, session: AsyncSession, user_id: int, tag_id: int) -> bool:
        return await self._user_tag_repo.exists(session, user_id, tag_id)

    async def get_tag(self, session: AsyncSession, user_id: int, tag_id: int) -> UserTag:
        """Get one of the user's tags or raise NotFoundError."""
        tag = await self._user_tag_repo.get(session, user_id, tag_id)
        if tag is None:
            raise NotFoundError(resource_type="UserTag", identifier=str(tag_id))
        return UserTag.model_validate(tag)

    async def create_tag(
        self, session: AsyncSession, user_id: int, request: UserTagCreationRequest
    ) -> UserTag:
        """
        Validate and create a tag.

        Raises
        ------
        TagValidationError
            Empty title or a title the user already has.
        ConflictError
            The unique index rejected the title after validation passed.
        """
        error = await validate_user_tag_creation(
            session, self._user_tag_repo, user_id, request
        )
        if error is not None:
            raise error

        tag = await self._user_tag_repo.create(session, user_id, request.title)
        result = UserTag.model_validate(tag)
        logger.info("Created user tag: %s", result)
        return result

    async def rename_tag(
        self,
        session: AsyncSession,
        user_id: int,
        tag_id: int,
        request: UserTagModificationRequest,
    ) -> UserTag:
        """
        Apply a modification request to one of the user's tags.

        The tag is looked up for its owner first, so a foreign tag ID is
        reported as NotFoundError before any validation runs.
        """
        tag = await self._user_tag_repo.get(session, user_id, tag_id)
        if tag is None:
            raise NotFoundError(resource_type="UserTag", identifier=str(tag_id))

        error = await validate_user_tag_modification(
            session, self._user_tag_repo, user_id, tag_id, request
        )
        if error is not None:
            raise error

        if request.title_provided and request.title != tag.title:
            old_title = tag.title
            tag = await self._user_tag_repo.rename(session, tag, request.title or "")
            logger.info(
                "Renamed user tag %d for user %d: %r -> %r",
                tag_id,
                user_id,
                old_title,
                tag.title,
            )
        return UserTag.model_validate(tag)

    async def delete_tag(self, session: AsyncSession, user_id: int, tag_id: int) -> None:
        """Delete a tag and all of its entry associations."""
        if not await self._user_tag_repo.exists(session, user_id, tag_id):
            raise NotFoundError(resource_type="UserTag", identifier=str(tag_id))
        await self._user_tag_repo.remove(session, user_id, tag_id)
        logger.info("Deleted user tag %d for user %d", tag_id, user_id)

    async def list_entries_by_tag(
        self,
        session: AsyncSession,
        user_id: int,
        tag_id: int,
        filters: Optional[EntryFilters] = None,
    ) -> EntryListResult:
        """
        List the user's entries carrying a tag.

        Removed entries are never listed. The total ignores ``limit`` and
        ``offset``.

        Parameters
        ----------
        session : AsyncSession
            Database session.
        user_id : int
            Requesting user.
        tag_id : int
            One of the user's tags.
        filters : EntryFilters, optional
            Status, date range, search, sorting and pagination.

        Returns
        -------
        EntryListResult
            The page of entries and the total count.

        Raises
        ------
        NotFoundError
            If the user owns no such tag.
        """
        if not await self._user_tag_repo.exists(session, user_id, tag_id):
            raise NotFoundError(resource_type="UserTag", identifier=str(tag_id))

        filters = filters or EntryFilters()
        builder = (
            self._entry_repo.query_builder(session, user_id)
            .with_user_tag_id(tag_id)
            .without_status(EntryStatus.REMOVED)
            .with_filters(filters)
        )
        entries = await builder.get_entries()
        total = await builder.count_entries()
        return EntryListResult(total=total, entries=entries)

    async def get_entry_tag_ids(
        self, session: AsyncSession, user_id: int, entry_id: int
    ) -> Set[int]:
        """IDs of the user's tags on one of the user's entries."""
        await self._require_entry(session, user_id, entry_id)
        return await self._entry_user_tag_repo.tag_ids_for_entry(
            session, user_id, entry_id
        )

    async def set_entry_tags(
        self,
        session: AsyncSession,
        user_id: int,
        entry_id: int,
        tag_ids: Optional[Iterable[Any]],
    ) -> Set[int]:
        """
        Replace the user's tags on an entry.

        ``tag_ids`` is untrusted input: non-integer values are skipped and
        IDs of tags the user does not own are dropped. ``None`` or an empty
        sequence removes every tag.

        Returns
        -------
        Set[int]
            The tag IDs now on the entry.
        """
        await self._require_entry(session, user_id, entry_id)
        requested = parse_tag_ids(tag_ids)
        applied = await self._entry_user_tag_repo.replace_entry_tags(
            session, user_id, entry_id, requested
        )
        logger.info(
            "Set tags on entry %d for user %d: requested=%d applied=%d",
            entry_id,
            user_id,
            len(requested),
            len(applied),
        )
        return applied

    async def _require_entry(
        self, session: AsyncSession, user_id: int, entry_id: int
    ) -> None:
        if not await self._entry_repo.exists(session, user_id, entry_id):
            raise NotFoundError(resource_type="Entry", identifier=str(entry_id))
