"""
CLI interface module for feedtags.

Provides a Typer-based command-line interface for managing user tags and
entry tag assignments directly against the database.
"""

from __future__ import annotations

__all__: list[str] = []
