"""
Data models module for feedtags.

Defines Pydantic models for user tags, tag requests and entry listings.
"""

from __future__ import annotations

from .entry import Entry, EntryFilters, EntryListResult
from .enums import EntryOrder, EntryStatus, SortDirection
from .user_tag import (
    EntryUserTagsRequest,
    UserTag,
    UserTagCreationRequest,
    UserTagModificationRequest,
    UserTags,
)

__all__ = [
    "Entry",
    "EntryFilters",
    "EntryListResult",
    "EntryOrder",
    "EntryStatus",
    "EntryUserTagsRequest",
    "SortDirection",
    "UserTag",
    "UserTagCreationRequest",
    "UserTagModificationRequest",
    "UserTags",
]
