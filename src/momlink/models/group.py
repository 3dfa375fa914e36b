# src/momlink/models/group.py
"""SQLAlchemy models for groups, memberships and group chat."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from momlink.db.session import Base, sql_in_list
from momlink.db.time import utcnow

GROUP_TYPE_SEASON_OF_LIFE = "season_of_life"
GROUP_TYPE_INTEREST_BASED = "interest_based"
GROUP_TYPE_LOCAL = "local"
GROUP_TYPES = (GROUP_TYPE_SEASON_OF_LIFE, GROUP_TYPE_INTEREST_BASED, GROUP_TYPE_LOCAL)

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"
ROLE_PENDING = "pending"
MEMBER_ROLES = (ROLE_ADMIN, ROLE_MEMBER, ROLE_PENDING)
# Roles allowed to read and post in the group chat.
ACTIVE_ROLES = (ROLE_ADMIN, ROLE_MEMBER)


class Group(Base):
    """Topic, life-stage or local group."""

    __tablename__ = "groups"
    __table_args__ = (
        CheckConstraint(
            f"group_type IN ({sql_in_list(GROUP_TYPES)})",
            name="ck_groups_type",
        ),
        Index("ix_groups_city", "city"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    group_type: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Optional discriminators; NULL city means the group is not tied to a place.
    city: Mapped[str | None] = mapped_column(Text, nullable=True)
    min_age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    interest: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )


class GroupMember(Base):
    """Role-qualified membership of a profile in a group."""

    __tablename__ = "group_members"
    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_group_members_group_user"),
        CheckConstraint(
            f"role IN ({sql_in_list(MEMBER_ROLES)})", name="ck_group_members_role"
        ),
        Index("ix_group_members_user", "user_id", "role"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(Text, nullable=False, default=ROLE_PENDING)
    joined_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class GroupMessage(Base):
    """Chat message posted to a group.

    Soft-deleted rows keep their content but are hidden from every read path.
    """

    __tablename__ = "group_messages"
    __table_args__ = (
        CheckConstraint(
            "length(content) > 0 AND length(content) <= 2000",
            name="ck_group_messages_content_length",
        ),
        Index("ix_group_messages_group_time", "group_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    group_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False
    )
    sender_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    deleted_by: Mapped[str | None] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    )

    @property
    def is_deleted(self) -> bool:
        """Return True once the message has been soft-deleted."""
        return self.deleted_at is not None
