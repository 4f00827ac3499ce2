"""
Repository layer for data access patterns.

Repositories take the caller's ``AsyncSession`` on every call and never
commit; the unit of work belongs to whoever opened the session.
"""

from .base import BaseSQLAlchemyRepository
from .entry_query import EntryQueryBuilder, user_tag_filter
from .entry_repository import EntryRepository
from .entry_user_tag_repository import EntryUserTagRepository
from .user_tag_repository import UserTagRepository

__all__ = [
    "BaseSQLAlchemyRepository",
    "EntryQueryBuilder",
    "EntryRepository",
    "EntryUserTagRepository",
    "UserTagRepository",
    "user_tag_filter",
]
