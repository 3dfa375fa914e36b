# src/momlink/models/matching.py
"""Models capturing swipe decisions and mutual matches."""

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

SWIPE_LEFT = "left"
SWIPE_RIGHT = "right"
SWIPE_DIRECTIONS = (SWIPE_LEFT, SWIPE_RIGHT)

# Match ids compare by code point so the canonical-order check agrees with
# canonical_pair; Postgres would otherwise use the locale collation.
MatchUserId = String(64).with_variant(String(64, collation="C"), "postgresql")


class Swipe(Base):
    """One-way like/pass decision from ``swiper_id`` toward ``swiped_id``.

    Swipes are written once and never updated; the unique pair constraint is
    what makes a repeated swipe collapse into a no-op.
    """

    __tablename__ = "swipes"
    __table_args__ = (
        UniqueConstraint("swiper_id", "swiped_id", name="uq_swipes_pair"),
        CheckConstraint(
            f"direction IN ({sql_in_list(SWIPE_DIRECTIONS)})", name="ck_swipes_direction"
        ),
        Index("ix_swipes_swiper", "swiper_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    swiper_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    swiped_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    direction: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class Match(Base):
    """Mutual match between two profiles.

    ``user1_id`` is always the lexicographically smaller identifier so that
    (A, B) and (B, A) land on the same row.
    """

    __tablename__ = "matches"
    __table_args__ = (
        UniqueConstraint("user1_id", "user2_id", name="uq_matches_pair"),
        CheckConstraint("user1_id < user2_id", name="ck_matches_canonical_order"),
        Index("ix_matches_user2", "user2_id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user1_id: Mapped[str] = mapped_column(
        MatchUserId, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    user2_id: Mapped[str] = mapped_column(
        MatchUserId, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    def other_party(self, user_id: str) -> str:
        """Return the participant that is not ``user_id``."""
        return self.user2_id if self.user1_id == user_id else self.user1_id

    def involves(self, user_id: str) -> bool:
        """Return True when ``user_id`` is one of the two participants."""
        return user_id in (self.user1_id, self.user2_id)
