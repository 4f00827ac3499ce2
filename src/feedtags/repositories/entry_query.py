"""
Entry query building.

``user_tag_filter`` is the predicate the tag engine contributes to entry
listings. ``EntryQueryBuilder`` is the listing collaborator: it scopes
every query to one user and folds the tag predicate in conjunctively with
its own status, date, search, sorting and pagination options.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Optional, Sequence

from sqlalchemy import ColumnElement, and_, exists, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from feedtags.db.models import Entry as EntryDB
from feedtags.db.models import EntryUserTag as EntryUserTagDB
from feedtags.db.models import UserTag as UserTagDB
from feedtags.exceptions import RepositoryError
from feedtags.models.entry import Entry, EntryFilters
from feedtags.models.enums import EntryOrder, EntryStatus, SortDirection

logger = logging.getLogger(__name__)

_ORDER_COLUMNS = {
    EntryOrder.ID: EntryDB.id,
    EntryOrder.STATUS: EntryDB.status,
    EntryOrder.PUBLISHED_AT: EntryDB.published_at,
    EntryOrder.CREATED_AT: EntryDB.created_at,
    EntryOrder.TITLE: EntryDB.title,
}


def user_tag_filter(user_id: int, user_tag_id: int) -> ColumnElement[bool]:
    """
    Restrict entries to those carrying one of the user's tags.

    The tag must belong to ``user_id``; a foreign tag ID matches nothing.
    The returned clause is correlated to the ``entries`` table and can be
    combined with any other ``WHERE`` condition on it.
    """
    return exists(
        select(EntryUserTagDB.entry_id)
        .join(UserTagDB, UserTagDB.id == EntryUserTagDB.user_tag_id)
        .where(
            EntryUserTagDB.entry_id == EntryDB.id,
            EntryUserTagDB.user_tag_id == user_tag_id,
            UserTagDB.user_id == user_id,
        )
    )


class EntryQueryBuilder:
    """Builds user-scoped entry queries from composable conditions."""

    def __init__(self, session: AsyncSession, user_id: int) -> None:
        self._session = session
        self._user_id = user_id
        self._conditions: List[ColumnElement[bool]] = [EntryDB.user_id == user_id]
        self._order: List[Any] = []
        self._limit: Optional[int] = None
        self._offset: int = 0

    def with_user_tag_id(self, user_tag_id: int) -> EntryQueryBuilder:
        """Only entries tagged with this tag of the current user."""
        self._conditions.append(user_tag_filter(self._user_id, user_tag_id))
        return self

    def with_statuses(self, statuses: Sequence[EntryStatus | str]) -> EntryQueryBuilder:
        """Only entries whose status is one of ``statuses`` (ignored if empty)."""
        if statuses:
            self._conditions.append(
                EntryDB.status.in_([EntryStatus(s).value for s in statuses])
            )
        return self

    def without_status(self, status: EntryStatus | str) -> EntryQueryBuilder:
        """Exclude entries with this status."""
        self._conditions.append(EntryDB.status != EntryStatus(status).value)
        return self

    def with_published_after(self, moment: datetime) -> EntryQueryBuilder:
        self._conditions.append(EntryDB.published_at >= moment)
        return self

    def with_published_before(self, moment: datetime) -> EntryQueryBuilder:
        self._conditions.append(EntryDB.published_at <= moment)
        return self

    def with_search_query(self, text: str) -> EntryQueryBuilder:
        """Case-insensitive substring match on the entry title, wildcards escaped."""
        self._conditions.append(EntryDB.title.icontains(text, autoescape=True))
        return self

    def with_sorting(
        self, order: EntryOrder | str, direction: SortDirection | str = SortDirection.ASC
    ) -> EntryQueryBuilder:
        """Append a sort key; calls accumulate in order."""
        column = _ORDER_COLUMNS[EntryOrder(order)]
        if SortDirection(direction) == SortDirection.DESC:
            self._order.append(column.desc())
        else:
            self._order.append(column.asc())
        return self

    def with_limit(self, limit: int) -> EntryQueryBuilder:
        """Page size; 0 disables the limit."""
        self._limit = limit if limit > 0 else None
        return self

    def with_offset(self, offset: int) -> EntryQueryBuilder:
        self._offset = max(offset, 0)
        return self

    def with_filters(self, filters: EntryFilters) -> EntryQueryBuilder:
        """Apply every option carried by an ``EntryFilters`` model."""
        self.with_statuses(filters.statuses)
        if filters.published_after is not None:
            self.with_published_after(filters.published_after)
        if filters.published_before is not None:
            self.with_published_before(filters.published_before)
        if filters.search:
            self.with_search_query(filters.search)
        self.with_sorting(filters.order, filters.direction)
        # Stable tie-break so pages never overlap
        self.with_sorting(EntryOrder.ID, filters.direction)
        self.with_offset(filters.offset)
        self.with_limit(filters.limit)
        return self

    def _where(self) -> ColumnElement[bool]:
        return and_(*self._conditions)

    async def get_entries(self) -> List[Entry]:
        """Fetch the page of entries matching all conditions."""
        query = select(EntryDB).where(self._where())
        if self._order:
            query = query.order_by(*self._order)
        if self._offset:
            query = query.offset(self._offset)
        if self._limit is not None:
            query = query.limit(self._limit)

        try:
            result = await self._session.execute(query)
        except SQLAlchemyError as e:
            raise _query_error("list", e) from e
        return [Entry.model_validate(row) for row in result.scalars().all()]

    async def count_entries(self) -> int:
        """Count entries matching all conditions, ignoring pagination."""
        query = select(func.count()).select_from(EntryDB).where(self._where())
        try:
            result = await self._session.execute(query)
        except SQLAlchemyError as e:
            raise _query_error("count", e) from e
        return result.scalar_one()


def _query_error(operation: str, error: SQLAlchemyError) -> RepositoryError:
    logger.error("Entry query failed: operation=%s: %s", operation, error)
    return RepositoryError(
        message=f"Unable to {operation} Entry",
        operation=operation,
        entity_type="Entry",
        original_error=error,
    )
