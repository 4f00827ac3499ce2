"""
Entry models.

Read-side models for feed entries listed through a user tag, and the
filters the entry listing accepts.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import EntryOrder, EntryStatus, SortDirection


class Entry(BaseModel):
    """Feed entry summary."""

    id: int
    user_id: int
    title: str
    url: str
    status: EntryStatus
    published_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class EntryFilters(BaseModel):
    """Filters composed with the tag predicate when listing entries."""

    statuses: List[EntryStatus] = Field(
        default_factory=list, description="Only entries with one of these statuses"
    )
    order: EntryOrder = Field(default=EntryOrder.PUBLISHED_AT)
    direction: SortDirection = Field(default=SortDirection.DESC)
    limit: int = Field(default=100, ge=0, description="0 means no limit")
    offset: int = Field(default=0, ge=0)
    published_after: Optional[datetime] = None
    published_before: Optional[datetime] = None
    search: Optional[str] = Field(
        default=None, min_length=1, description="Case-insensitive title match"
    )

    model_config = ConfigDict(validate_assignment=True)

    @model_validator(mode="after")
    def date_range_is_ordered(self) -> EntryFilters:
        """Validate that the published date range is not inverted."""
        if (
            self.published_after is not None
            and self.published_before is not None
            and self.published_after > self.published_before
        ):
            raise ValueError("published_after must not be later than published_before")
        return self


class EntryListResult(BaseModel):
    """Page of entries plus the total ignoring pagination."""

    total: int = Field(..., ge=0)
    entries: List[Entry] = Field(default_factory=list)
