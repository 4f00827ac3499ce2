"""
Database module for feedtags.

Contains the SQLAlchemy models and Alembic migrations for the tag
engine's tables.
"""

from __future__ import annotations

__all__: list[str] = []
