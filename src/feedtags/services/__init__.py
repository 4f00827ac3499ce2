"""
Services module for feedtags.

Contains the tag engine's business operations and its validation layer.
"""

from __future__ import annotations

from feedtags.services.user_tag_service import UserTagService, parse_tag_ids
from feedtags.services.user_tag_validation import (
    validate_user_tag_creation,
    validate_user_tag_modification,
)

__all__: list[str] = [
    "UserTagService",
    "parse_tag_ids",
    "validate_user_tag_creation",
    "validate_user_tag_modification",
]
