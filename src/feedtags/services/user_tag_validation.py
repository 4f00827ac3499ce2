"""
User tag validation.

Checks run before the registry is touched. They only read, through the
repository's existence probes, and report failures as a value instead of
raising so callers can render them next to the submitted form. The
unique index remains the real guarantee; these checks exist to produce a
friendly, localizable reason.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from feedtags.exceptions import TagValidationError, TagValidationReason
from feedtags.models.user_tag import UserTagCreationRequest, UserTagModificationRequest
from feedtags.repositories.user_tag_repository import UserTagRepository


async def validate_user_tag_creation(
    session: AsyncSession,
    repository: UserTagRepository,
    user_id: int,
    request: UserTagCreationRequest,
) -> Optional[TagValidationError]:
    """
    Validate a tag creation request.

    Parameters
    ----------
    session : AsyncSession
        Database session used by the existence probe.
    repository : UserTagRepository
        Registry providing ``title_exists``.
    user_id : int
        Owner of the new tag.
    request : UserTagCreationRequest
        The submitted title. Whitespace is not trimmed.

    Returns
    -------
    Optional[TagValidationError]
        ``None`` when the request is valid, otherwise the failure.
    """
    if request.title == "":
        return TagValidationError(TagValidationReason.TITLE_REQUIRED)

    if await repository.title_exists(session, user_id, request.title):
        return TagValidationError(TagValidationReason.ALREADY_EXISTS)

    return None


async def validate_user_tag_modification(
    session: AsyncSession,
    repository: UserTagRepository,
    user_id: int,
    tag_id: int,
    request: UserTagModificationRequest,
) -> Optional[TagValidationError]:
    """
    Validate a tag modification request.

    An absent title means nothing will change, so nothing is checked. A
    title equal to the tag's own current one (in any case) is not a
    duplicate: the tag being modified is excluded from the probe.
    """
    if not request.title_provided:
        return None

    title = request.title or ""
    if title == "":
        return TagValidationError(TagValidationReason.TITLE_REQUIRED)

    if await repository.another_tag_with_title_exists(session, user_id, tag_id, title):
        return TagValidationError(TagValidationReason.ALREADY_EXISTS)

    return None
