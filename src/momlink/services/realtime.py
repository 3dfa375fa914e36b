"""In-process change feed standing in for the realtime relay.

Services publish a :class:`ChangeEvent` after they commit a write to one of
the watched tables. Subscribers register a table, an equality filter on the
row's columns and a callback, and get back a :class:`Subscription` handle.

Consumers are expected to treat an event as a hint to re-read the store
(see ``momlink.services.live``), not as state to merge locally.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from sqlalchemy import inspect
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

ChangeKind = Literal["insert", "update", "delete"]
ChangeCallback = Callable[["ChangeEvent"], None]


@dataclass(frozen=True)
class ChangeEvent:
    """A single row-level change notification."""

    table: str
    kind: ChangeKind
    row: Mapping[str, Any]

    def matches(self, filters: Mapping[str, Any]) -> bool:
        """Return True when every filter column equals the row's value."""
        return all(self.row.get(column) == value for column, value in filters.items())


def row_snapshot(obj: Any) -> dict[str, Any]:
    """Return the mapped column values of an ORM instance as a plain dict."""
    mapper = inspect(obj).mapper
    return {attr.key: getattr(obj, attr.key) for attr in mapper.column_attrs}


def event_for(obj: Any, kind: ChangeKind) -> ChangeEvent:
    """Build a change event for an ORM instance."""
    return ChangeEvent(table=obj.__tablename__, kind=kind, row=row_snapshot(obj))


@dataclass
class Subscription:
    """Handle returned by :meth:`ChangeFeed.subscribe`."""

    id: int
    table: str
    filters: Mapping[str, Any]
    callback: ChangeCallback
    _feed: ChangeFeed | None = field(default=None, repr=False)

    @property
    def active(self) -> bool:
        """Return True while the subscription still receives events."""
        return self._feed is not None

    def close(self) -> None:
        """Stop receiving events. Closing twice is harmless."""
        if self._feed is not None:
            self._feed.unsubscribe(self)
            self._feed = None


class ChangeFeed:
    """Thread-safe publish/subscribe registry keyed by table name."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._subscriptions: dict[str, dict[int, Subscription]] = {}

    def subscribe(
        self,
        table: str,
        filters: Mapping[str, Any] | None,
        callback: ChangeCallback,
    ) -> Subscription:
        """Register ``callback`` for changes on ``table`` matching ``filters``."""
        subscription = Subscription(
            id=next(self._ids),
            table=table,
            filters=dict(filters or {}),
            callback=callback,
            _feed=self,
        )
        with self._lock:
            self._subscriptions.setdefault(table, {})[subscription.id] = subscription
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a subscription from the registry."""
        with self._lock:
            table_subs = self._subscriptions.get(subscription.table)
            if table_subs is not None:
                table_subs.pop(subscription.id, None)

    def subscriber_count(self, table: str | None = None) -> int:
        """Return the number of live subscriptions, optionally for one table."""
        with self._lock:
            if table is not None:
                return len(self._subscriptions.get(table, {}))
            return sum(len(subs) for subs in self._subscriptions.values())

    def publish(self, event: ChangeEvent) -> int:
        """Deliver ``event`` to every matching subscriber.

        Callbacks run outside the registry lock. A failing callback is logged
        and does not prevent delivery to the remaining subscribers.

        Returns:
            Number of subscribers the event was delivered to.
        """
        with self._lock:
            targets = [
                sub
                for sub in self._subscriptions.get(event.table, {}).values()
                if event.matches(sub.filters)
            ]

        delivered = 0
        for sub in targets:
            try:
                sub.callback(event)
            except Exception:  # noqa: BLE001 - one bad subscriber must not starve the rest
                logger.exception(
                    "Change feed callback failed for %s subscription %d", event.table, sub.id
                )
                continue
            delivered += 1
        return delivered


_feed: ChangeFeed | None = None


def get_change_feed() -> ChangeFeed:
    """Return the process-wide change feed."""
    global _feed
    if _feed is None:
        _feed = ChangeFeed()
    return _feed


def reset_change_feed() -> None:
    """Drop every subscription by replacing the process-wide feed."""
    global _feed
    _feed = ChangeFeed()


def commit_and_publish(db: Session, events: list[ChangeEvent]) -> None:
    """Commit the session, then announce the changes it carried.

    Events are built before the commit (after a flush) so that deleted rows
    can still be snapshotted; they are only published once the commit has
    succeeded.
    """
    db.commit()
    feed = get_change_feed()
    for event in events:
        feed.publish(event)
