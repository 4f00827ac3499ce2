"""
Enums for feedtags models.

Defines enumeration types used across the application for consistent
type safety and validation.
"""

from __future__ import annotations

from enum import Enum


class EntryStatus(str, Enum):
    """Read state of a feed entry."""

    UNREAD = "unread"
    READ = "read"
    REMOVED = "removed"


class EntryOrder(str, Enum):
    """Columns an entry listing can be sorted by."""

    ID = "id"
    STATUS = "status"
    PUBLISHED_AT = "published_at"
    CREATED_AT = "created_at"
    TITLE = "title"


class SortDirection(str, Enum):
    """Sort direction for entry listings."""

    ASC = "asc"
    DESC = "desc"
