"""
Database models for feedtags.

This module contains the SQLAlchemy models for user-owned tags and their
associations with feed entries. Users and entries belong to the wider
feed reader; only the columns the tag engine relies on are mapped here.
"""

from __future__ import annotations

import datetime
from typing import Optional

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship
from sqlalchemy.sql import func

# SQLite only autoincrements INTEGER PRIMARY KEY columns
IdType = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class User(Base):
    """Feed reader account; the owner of entries and tags."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    user_tags: Mapped[list["UserTag"]] = relationship(
        "UserTag", back_populates="user", passive_deletes=True
    )


class Entry(Base):
    """Feed entry as seen by the tag engine."""

    __tablename__ = "entries"
    __table_args__ = (Index("ix_entries_user_id_status", "user_id", "status"),)

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    title: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(String(15), nullable=False, default="unread")

    # Timestamps
    published_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class UserTag(Base):
    """User-defined tag; titles are unique per user, ignoring case."""

    __tablename__ = "user_tags"

    id: Mapped[int] = mapped_column(IdType, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="user_tags")


USER_TAG_TITLE_INDEX = "uq_user_tags_user_id_lower_title"

# Functional unique index; the pre-insert title probe is advisory only.
Index(
    USER_TAG_TITLE_INDEX,
    UserTag.user_id,
    func.lower(UserTag.title),
    unique=True,
)


class EntryUserTag(Base):
    """Association between an entry and one of its owner's tags."""

    __tablename__ = "entry_user_tags"
    __table_args__ = (Index("ix_entry_user_tags_user_tag_id", "user_tag_id"),)

    entry_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("entries.id", ondelete="CASCADE"), primary_key=True
    )
    user_tag_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("user_tags.id", ondelete="CASCADE"), primary_key=True
    )
