"""Shared OpenAPI error response definitions (RFC 7807)."""

from __future__ import annotations

from typing import Any

from feedtags.api.schemas.responses import ProblemDetail, ValidationProblemDetail

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"

ResponsesType = dict[int | str, dict[str, Any]]


def _problem(description: str, model: type[ProblemDetail] = ProblemDetail) -> dict[str, Any]:
    return {
        "model": model,
        "description": description,
        "content": {PROBLEM_JSON_MEDIA_TYPE: {}},
    }


UNAUTHORIZED_RESPONSE: ResponsesType = {401: _problem("Missing or invalid user identity")}
NOT_FOUND_RESPONSE: ResponsesType = {404: _problem("Resource not found for this user")}
TAG_VALIDATION_RESPONSE: ResponsesType = {
    400: _problem("Tag title is empty or already used")
}
CONFLICT_RESPONSE: ResponsesType = {409: _problem("Tag title rejected by the store")}
VALIDATION_ERROR_RESPONSE: ResponsesType = {
    422: _problem("Request validation failed", ValidationProblemDetail)
}
SERVER_ERROR_RESPONSE: ResponsesType = {500: _problem("Internal server error")}

LIST_ERRORS: ResponsesType = {
    **UNAUTHORIZED_RESPONSE,
    **VALIDATION_ERROR_RESPONSE,
    **SERVER_ERROR_RESPONSE,
}
ITEM_ERRORS: ResponsesType = {**LIST_ERRORS, **NOT_FOUND_RESPONSE}
TAG_WRITE_ERRORS: ResponsesType = {
    **LIST_ERRORS,
    **TAG_VALIDATION_RESPONSE,
    **CONFLICT_RESPONSE,
}
