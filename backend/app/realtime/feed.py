"""
In-process change feed.

Mirrors the hosted backend's realtime channel: subscribers register interest in
a table plus a row predicate and get told *that* something matching changed,
never *what* changed. Receivers are expected to re-query.
"""

import itertools
import threading
from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import Any

from app.core.enums import ChangeKind

__all__ = [
    "ChangeEvent",
    "ChangeFeed",
    "Subscription",
    "change_feed",
]

logger = getLogger(__name__)

RowPredicate = Callable[[Any], bool]


@dataclass(frozen=True)
class ChangeEvent:
    table: str
    kind: ChangeKind


ChangeCallback = Callable[[ChangeEvent], None]


@dataclass
class _Subscriber:
    table: str
    predicate: RowPredicate
    callback: ChangeCallback


class Subscription:
    def __init__(self, feed: "ChangeFeed", subscription_ids: list[int]):
        self._feed = feed
        self._subscription_ids = subscription_ids
        self.active = True

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        for subscription_id in self._subscription_ids:
            self._feed._remove(subscription_id)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *_: object) -> None:
        self.unsubscribe()


class ChangeFeed:
    def __init__(self) -> None:
        self._subscribers: dict[int, _Subscriber] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def subscribe(
        self,
        table: str,
        predicate: RowPredicate,
        callback: ChangeCallback,
    ) -> Subscription:
        """Call `callback` whenever a row of `table` matching `predicate` changes."""
        with self._lock:
            subscription_id = next(self._ids)
            self._subscribers[subscription_id] = _Subscriber(
                table=table, predicate=predicate, callback=callback
            )
        return Subscription(self, [subscription_id])

    def subscribe_many(
        self,
        filters: list[tuple[str, RowPredicate]],
        callback: ChangeCallback,
    ) -> Subscription:
        ids: list[int] = []
        with self._lock:
            for table, predicate in filters:
                subscription_id = next(self._ids)
                self._subscribers[subscription_id] = _Subscriber(
                    table=table, predicate=predicate, callback=callback
                )
                ids.append(subscription_id)
        return Subscription(self, ids)

    def publish(self, table: str, row: Any, kind: ChangeKind) -> None:
        """
        Notify subscribers of `table` whose predicate accepts `row`.

        The row is only used for matching and is not handed to callbacks.
        A failing predicate or callback is logged and skipped.
        """
        with self._lock:
            subscribers = [s for s in self._subscribers.values() if s.table == table]

        event = ChangeEvent(table=table, kind=kind)
        for subscriber in subscribers:
            try:
                if subscriber.predicate(row):
                    subscriber.callback(event)
            except Exception:
                logger.exception("Change feed subscriber for %s failed", table)

    def subscriber_count(self, table: str | None = None) -> int:
        with self._lock:
            if table is None:
                return len(self._subscribers)
            return sum(1 for s in self._subscribers.values() if s.table == table)

    def _remove(self, subscription_id: int) -> None:
        with self._lock:
            self._subscribers.pop(subscription_id, None)


change_feed = ChangeFeed()
