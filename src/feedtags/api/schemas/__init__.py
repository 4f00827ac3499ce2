"""API schema exports."""

from feedtags.api.schemas.responses import (
    ERROR_TITLES,
    ErrorCode,
    FieldError,
    HealthResponse,
    ProblemDetail,
    ProblemJSONResponse,
    ValidationProblemDetail,
    get_error_type_uri,
)
from feedtags.api.schemas.user_tags import (
    EntryUserTagIdsResponse,
    UserTagEntriesResponse,
)

__all__ = [
    "ERROR_TITLES",
    "EntryUserTagIdsResponse",
    "ErrorCode",
    "FieldError",
    "HealthResponse",
    "ProblemDetail",
    "ProblemJSONResponse",
    "UserTagEntriesResponse",
    "ValidationProblemDetail",
    "get_error_type_uri",
]
