"""
Custom exceptions for the feedtags application.

This module defines the error taxonomy of the tag engine: storage
failures, ownership-scoped lookups that found nothing, validation
failures carrying a localization key, and uniqueness conflicts detected
by the store itself.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from feedtags.api.schemas.responses import (
    ERROR_TITLES,
    ErrorCode,
    get_error_type_uri,
)


class FeedtagsError(Exception):
    """Base exception for all feedtags errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize FeedtagsError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        """
        self.message = message
        super().__init__(message)


class RepositoryError(FeedtagsError):
    """
    Exception raised for repository/database operation failures.

    This exception wraps unexpected backing-store errors. The message names
    the entity kind and the operation; the driver's own text is kept on
    ``original_error`` for logging and never shown to end users.

    Attributes
    ----------
    message : str
        Human-readable error message.
    operation : str | None
        The database operation that failed (e.g., "insert", "replace").
    entity_type : str | None
        The type of entity involved (e.g., "UserTag", "EntryUserTag").
    original_error : Exception | None
        The original database exception that caused this error.

    Examples
    --------
    >>> try:
    ...     await user_tag_repository.create(session, user_id=1, title="go")
    ... except RepositoryError as e:
    ...     print(f"Failed to {e.operation} {e.entity_type}: {e.message}")
    """

    def __init__(
        self,
        message: str = "Repository operation failed",
        operation: str | None = None,
        entity_type: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """
        Initialize RepositoryError.

        Parameters
        ----------
        message : str, optional
            Human-readable error message (default: "Repository operation failed").
        operation : str | None, optional
            The database operation that failed (default: None).
        entity_type : str | None, optional
            The type of entity involved (default: None).
        original_error : Exception | None, optional
            The original database exception (default: None).
        """
        self.operation: str | None = operation
        self.entity_type: str | None = entity_type
        self.original_error: Exception | None = original_error
        super().__init__(message)


# =============================================================================
# API Layer Exceptions
# =============================================================================


class APIError(FeedtagsError):
    """Base exception for errors reported back to the caller.

    Attributes
    ----------
    status_code : int
        HTTP status code for the error response (default: 500).
    error_code : ErrorCode
        Machine-readable error code for API consumers.
    message : str
        Human-readable error message.
    details : dict[str, Any] | None
        Additional error context (e.g., resource_type, identifier).
    """

    status_code: int = 500
    _error_code_value: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize APIError.

        Parameters
        ----------
        message : str
            Human-readable error message.
        details : dict[str, Any] | None, optional
            Additional error context (default: None).
        """
        self.message = message
        self.details = details
        super().__init__(message)

    @property
    def error_code(self) -> ErrorCode:
        """Get the error code as an ErrorCode enum."""
        return ErrorCode(self._error_code_value)

    def to_problem_detail(self, instance: str, request_id: str) -> dict[str, Any]:
        """Convert to RFC 7807 Problem Detail dictionary.

        Parameters
        ----------
        instance : str
            URI reference of the specific occurrence (e.g., "/api/v1/user-tags/3").
        request_id : str
            Unique request identifier for correlation and debugging.

        Returns
        -------
        dict[str, Any]
            Dictionary with RFC 7807 fields suitable for ProblemDetail model.

        Examples
        --------
        >>> error = NotFoundError(resource_type="UserTag", identifier="3")
        >>> problem = error.to_problem_detail(
        ...     instance="/api/v1/user-tags/3",
        ...     request_id="550e8400-e29b-41d4-a716-446655440000"
        ... )
        >>> problem["type"]
        'https://api.feedtags.dev/errors/NOT_FOUND'
        """
        return {
            "type": get_error_type_uri(self.error_code),
            "title": ERROR_TITLES.get(self.error_code, "Error"),
            "status": self.status_code,
            "detail": self.message,
            "instance": instance,
            "code": self.error_code.value,
            "request_id": request_id,
        }


class NotFoundError(APIError):
    """Resource not found for the requesting user (404).

    Raised both when the resource does not exist and when it belongs to
    another user; the two cases are indistinguishable.

    Attributes
    ----------
    resource_type : str
        The type of resource that was not found (e.g., "UserTag", "Entry").
    identifier : str
        The identifier used to look up the resource.

    Examples
    --------
    >>> raise NotFoundError(resource_type="UserTag", identifier="42")
    """

    status_code: int = 404
    _error_code_value: str = "NOT_FOUND"

    def __init__(
        self,
        resource_type: str,
        identifier: str,
        hint: str | None = None,
    ) -> None:
        """
        Initialize NotFoundError.

        Parameters
        ----------
        resource_type : str
            The type of resource that was not found.
        identifier : str
            The identifier used to look up the resource.
        hint : str | None, optional
            Additional hint for the user (default: None).
        """
        self.resource_type = resource_type
        self.identifier = identifier
        message = f"{resource_type} '{identifier}' not found"
        if hint:
            message += f". {hint}"
        super().__init__(
            message=message,
            details={"resource_type": resource_type, "identifier": identifier},
        )


class BadRequestError(APIError):
    """Invalid request parameters (400).

    Examples
    --------
    >>> raise BadRequestError(
    ...     message="Invalid sort order 'rank'",
    ...     details={"field": "order"}
    ... )
    """

    status_code: int = 400
    _error_code_value: str = "BAD_REQUEST"


class TagValidationReason(str, Enum):
    """Machine-readable reasons for tag validation failures.

    Values are the localization keys the presentation layer translates.
    """

    TITLE_REQUIRED = "error.tag_title_required"
    ALREADY_EXISTS = "error.tag_already_exists"


_REASON_MESSAGES: dict[TagValidationReason, str] = {
    TagValidationReason.TITLE_REQUIRED: "The tag title is mandatory",
    TagValidationReason.ALREADY_EXISTS: "This tag already exists",
}


class TagValidationError(APIError):
    """Tag title failed validation before any mutation (400).

    Attributes
    ----------
    reason : TagValidationReason
        Why validation failed; ``reason.value`` is the localization key.

    Examples
    --------
    >>> raise TagValidationError(TagValidationReason.TITLE_REQUIRED)
    """

    status_code: int = 400
    _error_code_value: str = "VALIDATION_FAILED"

    def __init__(self, reason: TagValidationReason) -> None:
        """
        Initialize TagValidationError.

        Parameters
        ----------
        reason : TagValidationReason
            The validation failure reason.
        """
        self.reason = reason
        super().__init__(
            message=_REASON_MESSAGES[reason],
            details={"reason": reason.value},
        )

    def to_problem_detail(self, instance: str, request_id: str) -> dict[str, Any]:
        """Convert to RFC 7807 Problem Detail including the reason key."""
        problem = super().to_problem_detail(instance, request_id)
        problem["reason"] = self.reason.value
        return problem


class ConflictError(APIError):
    """Resource conflict detected by the store (409).

    Raised when the unique index on ``(user_id, lower(title))`` rejects a
    create or rename that slipped past the advisory pre-check, typically
    because of a concurrent identical request.

    Examples
    --------
    >>> raise ConflictError(
    ...     message="A tag with this title already exists",
    ...     details={"title": "golang"}
    ... )
    """

    status_code: int = 409
    _error_code_value: str = "CONFLICT"


class AuthenticationError(APIError):
    """No authenticated user identity was supplied (401).

    Examples
    --------
    >>> raise AuthenticationError(message="Missing X-User-ID header")
    """

    status_code: int = 401
    _error_code_value: str = "NOT_AUTHENTICATED"


# Exit codes for CLI integration
EXIT_CODE_SUCCESS = 0
EXIT_CODE_GENERAL_ERROR = 1
EXIT_CODE_INVALID_ARGS = 2
EXIT_CODE_NOT_FOUND = 3
EXIT_CODE_CONFLICT = 4
