"""
Base repository implementation.

Provides the error translation shared by all repositories. Every query a
repository issues is scoped by the owning user; there is no
unscoped ``get(id)`` on this base class.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Generic, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase

from feedtags.exceptions import RepositoryError

logger = logging.getLogger(__name__)

# Type variable for the mapped model
ModelType = TypeVar("ModelType", bound=DeclarativeBase)


class BaseSQLAlchemyRepository(Generic[ModelType]):
    """
    Base SQLAlchemy repository.

    Subclasses run their statements inside :meth:`_storage_errors` so that
    driver failures surface as :class:`RepositoryError` carrying the entity
    kind and the operation.
    """

    entity_type: str = "Entity"

    def __init__(self, model: type[ModelType]):
        self.model = model

    @asynccontextmanager
    async def _storage_errors(self, operation: str) -> AsyncIterator[None]:
        """Translate SQLAlchemy errors raised in the block into RepositoryError."""
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(
                "Storage failure: operation=%s, entity=%s: %s",
                operation,
                self.entity_type,
                e,
            )
            raise RepositoryError(
                message=f"Unable to {operation} {self.entity_type}",
                operation=operation,
                entity_type=self.entity_type,
                original_error=e,
            ) from e
