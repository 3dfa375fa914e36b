# src/momlink/models/profile.py
"""SQLAlchemy models for member profiles and their kids/interests."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from momlink.db.session import Base, sql_in_list
from momlink.db.time import utcnow

USER_TYPES = ("mom", "expecting", "caregiver")

VISIBILITY_PUBLIC = "public"
VISIBILITY_MATCHES_ONLY = "matches_only"
VISIBILITY_PRIVATE = "private"
PROFILE_VISIBILITIES = (VISIBILITY_PUBLIC, VISIBILITY_MATCHES_ONLY, VISIBILITY_PRIVATE)

KID_MIN_AGE = 0
KID_MAX_AGE = 18


class Profile(Base):
    """Identity-linked member profile.

    The primary key is the opaque identifier issued by the identity provider,
    so a profile row exists at most once per account.
    """

    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint(
            f"user_type IS NULL OR user_type IN ({sql_in_list(USER_TYPES)})",
            name="ck_profiles_user_type",
        ),
        CheckConstraint(
            f"profile_visibility IN ({sql_in_list(PROFILE_VISIBILITIES)})",
            name="ck_profiles_visibility",
        ),
        CheckConstraint("bio IS NULL OR length(bio) <= 500", name="ck_profiles_bio_length"),
        Index("ix_profiles_city", "city"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    user_type: Mapped[str | None] = mapped_column(Text, nullable=True)
    guidelines_accepted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    name: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Location is supplied by the client's reverse geocoder; stored verbatim.
    city: Mapped[str | None] = mapped_column(Text, nullable=True)
    state: Mapped[str | None] = mapped_column(Text, nullable=True)
    latitude: Mapped[float | None] = mapped_column(Numeric(10, 8, asdecimal=False), nullable=True)
    longitude: Mapped[float | None] = mapped_column(Numeric(11, 8, asdecimal=False), nullable=True)

    profile_visibility: Mapped[str] = mapped_column(
        Text, nullable=False, default=VISIBILITY_PUBLIC
    )
    onboarding_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    kids: Mapped[list[Kid]] = relationship(
        "Kid",
        order_by="Kid.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    interests: Mapped[list[UserInterest]] = relationship(
        "UserInterest",
        order_by="UserInterest.id",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def kid_ages(self) -> list[int]:
        """Return the ages of the member's kids in insertion order."""
        return [kid.age for kid in self.kids]

    @property
    def interest_tags(self) -> list[str]:
        """Return the member's interest tags in insertion order."""
        return [interest.interest for interest in self.interests]


class Kid(Base):
    """A child attached to a profile; only the age is recorded."""

    __tablename__ = "kids"
    __table_args__ = (
        CheckConstraint(
            f"age >= {KID_MIN_AGE} AND age <= {KID_MAX_AGE}", name="ck_kids_age_range"
        ),
        Index("ix_kids_user_age", "user_id", "age"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class UserInterest(Base):
    """Interest tag attached to a profile."""

    __tablename__ = "user_interests"
    __table_args__ = (
        UniqueConstraint("user_id", "interest", name="uq_user_interests_user_interest"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    interest: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
