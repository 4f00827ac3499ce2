"""
User tag models.

Defines Pydantic models for user-owned tags and the requests that create
or modify them.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class UserTagCreationRequest(BaseModel):
    """Request to create a user tag.

    The title is not checked for emptiness here; that belongs to the
    validation layer so the failure carries a localization key.
    """

    title: str = Field(..., max_length=255, description="Tag title")


class UserTagModificationRequest(BaseModel):
    """Request to modify a user tag (PATCH-style).

    A title that was never supplied is distinct from a title supplied as
    an empty string: only the former is a no-op. An explicit ``null`` is
    treated the same as an absent field.
    """

    title: Optional[str] = Field(default=None, max_length=255)

    @property
    def title_provided(self) -> bool:
        """Whether the request carries a title at all."""
        return "title" in self.model_fields_set and self.title is not None


class UserTag(BaseModel):
    """User tag as exposed to callers."""

    id: int = Field(..., description="Tag ID")
    user_id: int = Field(..., description="Owning user ID")
    title: str = Field(..., description="Tag title")
    entry_count: Optional[int] = Field(
        default=None, ge=0, description="Number of entries carrying this tag"
    )

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
    )

    def __str__(self) -> str:
        return f"ID={self.id}, UserID={self.user_id}, Title={self.title}"


UserTags = List[UserTag]


class EntryUserTagsRequest(BaseModel):
    """Request replacing every tag on an entry.

    ``None`` and an empty list both mean "remove all tags".
    """

    user_tag_ids: Optional[List[int]] = Field(
        default=None, description="IDs of the caller's tags to attach"
    )

    def tag_ids(self) -> list[int]:
        """Requested IDs, or an empty list when none were sent."""
        return list(self.user_tag_ids or [])
