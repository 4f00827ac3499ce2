"""User tag API schemas.

Request bodies reuse the domain request models; these are the response
shapes of the user tag and entry tag endpoints.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from feedtags.models.entry import Entry


class EntryUserTagIdsResponse(BaseModel):
    """Tag IDs the caller has on one entry, ascending."""

    model_config = ConfigDict(strict=True)

    user_tag_ids: List[int] = Field(default_factory=list)


class UserTagEntriesResponse(BaseModel):
    """Entries carrying a tag.

    ``total`` counts every match, ignoring ``limit`` and ``offset``.
    """

    total: int = Field(..., ge=0, description="Total matching entries")
    entries: List[Entry]
