"""
feedtags - User tag association engine for a multi-user feed reader.

Manages per-user tags, their uniqueness rules, and the atomic replacement
of the tag set attached to an entry.
"""

from __future__ import annotations

__version__ = "0.3.0"
__author__ = "feedtags"
__email__ = "noreply@feedtags.dev"
__license__ = "Apache-2.0"

__all__ = ["__version__", "__author__", "__email__", "__license__"]
