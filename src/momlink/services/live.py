"""Live views that keep an aggregate fresh from the change feed.

A watcher subscribes to the tables its aggregate is derived from and, on
every event, re-reads the aggregate from the store with its own session.
Event payloads are never merged into the snapshot: the store stays the
single source of truth and a missed or reordered event heals on the next one.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy.orm import Session

from momlink.schemas.group import GroupMessageView
from momlink.schemas.message import ConversationSummary
from momlink.services.conversations import get_total_unread_count, list_conversations
from momlink.services.groups import list_group_messages
from momlink.services.realtime import ChangeEvent, ChangeFeed, Subscription

logger = logging.getLogger(__name__)

__all__ = ["ConversationSnapshot", "ConversationWatcher", "GroupChatWatcher"]

SessionFactory = Callable[[], Session]


@dataclass(frozen=True)
class ConversationSnapshot:
    """Conversation list and unread badge for one member."""

    conversations: list[ConversationSummary]
    total_unread: int


class _Watcher(ABC):
    """Shared subscribe/refresh/close plumbing."""

    def __init__(self, feed: ChangeFeed, session_factory: SessionFactory) -> None:
        self._feed = feed
        self._session_factory = session_factory
        self._subscriptions: list[Subscription] = []
        self._lock = threading.Lock()
        self._closed = False

    def _watch(self, table: str, filters: dict[str, object]) -> None:
        self._subscriptions.append(self._feed.subscribe(table, filters, self._on_event))

    def _on_event(self, event: ChangeEvent) -> None:
        if self._closed:
            return
        logger.debug("%s refreshing after %s on %s", type(self).__name__, event.kind, event.table)
        self.refresh()

    @abstractmethod
    def refresh(self) -> None:
        """Re-derive the watched aggregate and hand it to the callback."""

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Drop every subscription. Further events are ignored."""
        self._closed = True
        for subscription in self._subscriptions:
            subscription.close()
        self._subscriptions.clear()


class ConversationWatcher(_Watcher):
    """Keeps a member's conversation list and unread total current.

    Any message sent to or by the member and any match gained or lost
    triggers a full re-derivation, which is handed to ``on_change``.
    """

    def __init__(
        self,
        feed: ChangeFeed,
        session_factory: SessionFactory,
        user_id: str,
        on_change: Callable[[ConversationSnapshot], None],
    ) -> None:
        super().__init__(feed, session_factory)
        self.user_id = user_id
        self._on_change = on_change
        self.snapshot: ConversationSnapshot | None = None

        self._watch("messages", {"recipient_id": user_id})
        self._watch("messages", {"sender_id": user_id})
        self._watch("matches", {"user1_id": user_id})
        self._watch("matches", {"user2_id": user_id})

    def refresh(self) -> None:
        """Re-read the conversation list and unread count from the store."""
        with self._lock:
            db = self._session_factory()
            try:
                snapshot = ConversationSnapshot(
                    conversations=list_conversations(db, self.user_id),
                    total_unread=get_total_unread_count(db, self.user_id),
                )
            finally:
                db.close()
            self.snapshot = snapshot
        self._on_change(snapshot)


class GroupChatWatcher(_Watcher):
    """Keeps the visible message list of one group current."""

    def __init__(
        self,
        feed: ChangeFeed,
        session_factory: SessionFactory,
        group_id: int,
        on_change: Callable[[list[GroupMessageView]], None],
    ) -> None:
        super().__init__(feed, session_factory)
        self.group_id = group_id
        self._on_change = on_change
        self.messages: list[GroupMessageView] | None = None

        self._watch("group_messages", {"group_id": group_id})

    def refresh(self) -> None:
        """Re-read the group's visible messages from the store."""
        with self._lock:
            db = self._session_factory()
            try:
                messages = list_group_messages(db, self.group_id)
            finally:
                db.close()
            self.messages = messages
        self._on_change(messages)
