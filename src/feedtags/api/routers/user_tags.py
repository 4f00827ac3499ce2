"""User tag and entry tag endpoints.

Every route is scoped to the user named by the upstream ``X-User-ID``
header. A tag or entry belonging to another user answers 404 exactly
like a missing one.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from feedtags.api.deps import get_current_user_id, get_db, get_user_tag_service
from feedtags.api.routers.responses import ITEM_ERRORS, LIST_ERRORS, TAG_WRITE_ERRORS
from feedtags.api.schemas.user_tags import EntryUserTagIdsResponse, UserTagEntriesResponse
from feedtags.config.settings import settings
from feedtags.exceptions import BadRequestError
from feedtags.models.entry import EntryFilters
from feedtags.models.enums import EntryOrder, EntryStatus, SortDirection
from feedtags.models.user_tag import (
    EntryUserTagsRequest,
    UserTag,
    UserTagCreationRequest,
    UserTagModificationRequest,
)
from feedtags.services.user_tag_service import UserTagService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/user-tags",
    response_model=List[UserTag],
    response_model_exclude_none=True,
    responses=LIST_ERRORS,
)
async def list_user_tags(
    session: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    service: UserTagService = Depends(get_user_tag_service),
) -> List[UserTag]:
    """List the caller's tags ordered by title, with entry counts."""
    return await service.list_tags(session, user_id)


@router.post(
    "/user-tags",
    response_model=UserTag,
    response_model_exclude_none=True,
    status_code=201,
    responses=TAG_WRITE_ERRORS,
)
async def create_user_tag(
    request: UserTagCreationRequest,
    session: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    service: UserTagService = Depends(get_user_tag_service),
) -> UserTag:
    """
    Create a tag.

    Returns 400 with ``reason`` ``error.tag_title_required`` or
    ``error.tag_already_exists`` when validation fails, and 409 when the
    store rejects a title a concurrent request just took.
    """
    return await service.create_tag(session, user_id, request)


@router.put(
    "/user-tags/{tag_id}",
    response_model=UserTag,
    response_model_exclude_none=True,
    status_code=201,
    responses={**TAG_WRITE_ERRORS, **ITEM_ERRORS},
)
async def update_user_tag(
    request: UserTagModificationRequest,
    tag_id: int = Path(..., ge=1, description="Tag ID"),
    session: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    service: UserTagService = Depends(get_user_tag_service),
) -> UserTag:
    """Rename a tag. A body without ``title`` changes nothing."""
    return await service.rename_tag(session, user_id, tag_id, request)


@router.delete(
    "/user-tags/{tag_id}",
    status_code=204,
    response_class=Response,
    responses=ITEM_ERRORS,
)
async def delete_user_tag(
    tag_id: int = Path(..., ge=1, description="Tag ID"),
    session: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    service: UserTagService = Depends(get_user_tag_service),
) -> Response:
    """Delete a tag and remove it from every entry."""
    await service.delete_tag(session, user_id, tag_id)
    return Response(status_code=204)


@router.get(
    "/user-tags/{tag_id}/entries",
    response_model=UserTagEntriesResponse,
    responses={**ITEM_ERRORS, 400: {"description": "Invalid filter combination"}},
)
async def list_user_tag_entries(
    tag_id: int = Path(..., ge=1, description="Tag ID"),
    status: Optional[List[EntryStatus]] = Query(
        None, description="Only entries with one of these statuses"
    ),
    order: EntryOrder = Query(EntryOrder.PUBLISHED_AT, description="Sort column"),
    direction: SortDirection = Query(SortDirection.DESC, description="Sort direction"),
    limit: int = Query(
        settings.entries_per_page,
        ge=0,
        le=settings.max_entries_per_page,
        description="Page size, 0 for no limit",
    ),
    offset: int = Query(0, ge=0, description="Pagination offset"),
    published_after: Optional[datetime] = Query(None),
    published_before: Optional[datetime] = Query(None),
    search: Optional[str] = Query(None, min_length=1, max_length=255),
    session: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    service: UserTagService = Depends(get_user_tag_service),
) -> UserTagEntriesResponse:
    """List the caller's entries carrying a tag. Removed entries are never listed."""
    try:
        filters = EntryFilters(
            statuses=status or [],
            order=order,
            direction=direction,
            limit=limit,
            offset=offset,
            published_after=published_after,
            published_before=published_before,
            search=search,
        )
    except ValidationError as e:
        raise BadRequestError(
            message="Invalid entry filters",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e

    result = await service.list_entries_by_tag(session, user_id, tag_id, filters)
    return UserTagEntriesResponse(total=result.total, entries=result.entries)


@router.get(
    "/entries/{entry_id}/user-tags",
    response_model=EntryUserTagIdsResponse,
    responses=ITEM_ERRORS,
)
async def get_entry_user_tags(
    entry_id: int = Path(..., ge=1, description="Entry ID"),
    session: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    service: UserTagService = Depends(get_user_tag_service),
) -> EntryUserTagIdsResponse:
    """IDs of the caller's tags on an entry."""
    tag_ids = await service.get_entry_tag_ids(session, user_id, entry_id)
    return EntryUserTagIdsResponse(user_tag_ids=sorted(tag_ids))


@router.put(
    "/entries/{entry_id}/user-tags",
    status_code=204,
    response_class=Response,
    responses=ITEM_ERRORS,
)
async def set_entry_user_tags(
    request: EntryUserTagsRequest,
    entry_id: int = Path(..., ge=1, description="Entry ID"),
    session: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
    service: UserTagService = Depends(get_user_tag_service),
) -> Response:
    """
    Replace the caller's tags on an entry.

    ``user_tag_ids`` of ``null`` or ``[]`` clears them. IDs of tags the
    caller does not own are ignored.
    """
    await service.set_entry_tags(session, user_id, entry_id, request.tag_ids())
    return Response(status_code=204)
