# src/momlink/models/message.py
"""Models describing direct messages between matched members."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from momlink.db.session import Base
from momlink.db.time import utcnow


class Message(Base):
    """Direct message from ``sender_id`` to ``recipient_id``.

    ``read_at`` moves from NULL to a timestamp exactly once.
    """

    __tablename__ = "messages"
    __table_args__ = (
        CheckConstraint(
            "length(content) > 0 AND length(content) <= 2000",
            name="ck_messages_content_length",
        ),
        Index("ix_messages_sender_recipient", "sender_id", "recipient_id", "created_at"),
        Index("ix_messages_recipient_read", "recipient_id", "read_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sender_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    recipient_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )
