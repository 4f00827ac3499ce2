"""Exception handlers converting errors to RFC 7807 problem responses.

Every error leaving the API is an ``application/problem+json`` body with
the request's correlation ID. Domain errors keep their own message;
storage failures and unexpected exceptions are logged in full and
answered with a generic message so driver text never reaches clients.

RFC 7807 Reference: https://tools.ietf.org/html/rfc7807
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from feedtags.api.middleware.request_id import get_request_id
from feedtags.api.schemas.responses import (
    ERROR_TITLES,
    ErrorCode,
    FieldError,
    ProblemDetail,
    ProblemJSONResponse,
    ValidationProblemDetail,
    get_error_type_uri,
)
from feedtags.exceptions import APIError, RepositoryError

logger = logging.getLogger(__name__)

MAX_DETAIL_LENGTH = 4096
TRUNCATION_SUFFIX = "... (truncated)"


def _truncate_detail(detail: str) -> str:
    """Cut ``detail`` to ``MAX_DETAIL_LENGTH`` characters, suffix included."""
    if len(detail) <= MAX_DETAIL_LENGTH:
        return detail
    return detail[: MAX_DETAIL_LENGTH - len(TRUNCATION_SUFFIX)] + TRUNCATION_SUFFIX


def _request_id(request: Request) -> str:
    """Correlation ID from the context, then request state, else "-"."""
    request_id = get_request_id()
    if request_id:
        return request_id
    state_request_id = getattr(request.state, "request_id", None)
    return str(state_request_id) if state_request_id else "-"


def _problem_response(
    request: Request,
    problem: dict[str, Any],
    model: type[ProblemDetail] = ProblemDetail,
) -> ProblemJSONResponse:
    """Validate a problem dict and wrap it in a problem+json response.

    A problem that cannot be built or serialized degrades to a fixed 500
    body, so clients always get a well-formed error.
    """
    try:
        problem["detail"] = _truncate_detail(problem["detail"])
        body = model.model_validate(problem).model_dump(exclude_none=True)
        return ProblemJSONResponse(content=body, status_code=body["status"])
    except Exception as e:
        logger.error("Error serializing error response: %s", e, exc_info=True)
        return ProblemJSONResponse(
            content={
                "type": get_error_type_uri(ErrorCode.INTERNAL_ERROR),
                "title": ERROR_TITLES[ErrorCode.INTERNAL_ERROR],
                "status": 500,
                "detail": "An unexpected error occurred",
                "instance": str(request.url.path),
                "code": ErrorCode.INTERNAL_ERROR.value,
                "request_id": _request_id(request),
            },
            status_code=500,
        )


def _generic_problem(
    request: Request, code: ErrorCode, status: int, detail: str
) -> dict[str, Any]:
    return {
        "type": get_error_type_uri(code),
        "title": ERROR_TITLES.get(code, "Error"),
        "status": status,
        "detail": detail,
        "instance": str(request.url.path),
        "code": code.value,
        "request_id": _request_id(request),
    }


async def api_error_handler(request: Request, exc: APIError) -> ProblemJSONResponse:
    """Handle every APIError subclass (404, 400, 409, 401).

    Tag validation failures also carry their ``reason`` localization key.
    """
    if exc.status_code >= 500:
        logger.error("API error: %s (details=%s)", exc.message, exc.details)
    problem = exc.to_problem_detail(
        instance=str(request.url.path), request_id=_request_id(request)
    )
    return _problem_response(request, problem)


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> ProblemJSONResponse:
    """Handle request schema errors as a 422 listing every failing field."""
    problem = _generic_problem(
        request, ErrorCode.VALIDATION_ERROR, 422, "Request validation failed"
    )
    problem["errors"] = [
        FieldError(
            loc=list(error.get("loc", [])),
            msg=error.get("msg", ""),
            type=error.get("type", ""),
        )
        for error in exc.errors()
    ]
    return _problem_response(request, problem, ValidationProblemDetail)


async def repository_error_handler(
    request: Request, exc: RepositoryError
) -> ProblemJSONResponse:
    """Handle storage failures: log the cause, answer with a generic 500."""
    logger.error(
        "Repository error: %s (operation=%s, entity=%s)",
        exc.message,
        exc.operation,
        exc.entity_type,
        exc_info=exc.original_error,
    )
    return _problem_response(
        request,
        _generic_problem(
            request, ErrorCode.DATABASE_ERROR, 500, "A database error occurred"
        ),
    )


async def generic_error_handler(
    request: Request, exc: Exception
) -> ProblemJSONResponse:
    """Catch-all for unhandled exceptions."""
    logger.exception("Unhandled exception: %s", exc)
    return _problem_response(
        request,
        _generic_problem(
            request, ErrorCode.INTERNAL_ERROR, 500, "An unexpected error occurred"
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers on the FastAPI app.

    Examples
    --------
    >>> from fastapi import FastAPI
    >>> app = FastAPI()
    >>> register_exception_handlers(app)
    """
    app.add_exception_handler(APIError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RepositoryError, repository_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_error_handler)
