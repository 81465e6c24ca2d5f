"""Store — a single reactive value with subscribers.

When a Store is read inside a computed evaluation, the running computation is
subscribed automatically. When the Store changes, every subscriber is called
synchronously with (new_value, old_value).

A Store is also callable, following the Svelte store contract:
    store()        # read
    store(fn)      # update: fn(old) -> new
    store(value)   # set

Thread safety: call set_scheduler() once from the owner thread. After that,
any write from a background thread is auto-marshaled. Owner-thread writes
remain synchronous.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Generic, TypeVar

from konbini import _tracking

T = TypeVar("T")

Subscriber = Callable[..., Any]
Disposer = Callable[[], None]

logger = logging.getLogger("konbini.store")

_UNSET = object()

# ─── Auto-marshal ────────────────────────────────────────────────────────────
_scheduler = None
_scheduler_thread = None


def set_scheduler(scheduler: Callable[[Callable[[], Any]], Any] | None) -> None:
    """Set the global thread scheduler for cross-thread Store writes.

    Call once from the owner thread:
        konbini.set_scheduler(loop.call_soon_threadsafe)

    After this, any write from a background thread is handed to the scheduler
    instead of running in place. Pass None to go back to direct writes.
    """
    global _scheduler, _scheduler_thread
    _scheduler = scheduler
    _scheduler_thread = threading.current_thread() if scheduler is not None else None


def _on_foreign_thread() -> bool:
    return _scheduler is not None and threading.current_thread() is not _scheduler_thread


def _marshal(write: Callable[[Any], Any], arg: Any) -> None:
    logger.debug("Marshaling write from %s to scheduler", threading.current_thread().name)
    _scheduler(lambda: write(arg))


class Store(Generic[T]):
    """A mutable reactive cell with equality-gated writes.

    Subscribers are kept in a dict, so they must be hashable and are matched
    by hash and ==. Plain functions, lambdas and bound methods all work; a
    bound method can be unsubscribed through a fresh `obj.method` lookup.
    """

    __slots__ = ("_value", "_subscribers", "_added")

    def __init__(self, value: T | None = None) -> None:
        self._value = value
        # dict as an ordered set: notification follows registration order
        self._subscribers: dict[Subscriber, None] = {}
        self._added = 0

    def get(self) -> T:
        """Read the value. If inside a computation, subscribes it."""
        computation = _tracking.current()
        if computation is not None:
            self._add(computation)
        return self._value

    def set(self, value: T) -> T | None:
        """Write a value as-is. Returns the value after the write.

        Returns None when the write was marshaled to the scheduler thread.
        """
        if _on_foreign_thread():
            _marshal(self._write, value)
            return None
        return self._write(value)

    def update(self, updater: Callable[[T], T]) -> T | None:
        """Write updater(current value). The read is tracked like get()."""
        if _on_foreign_thread():
            _marshal(self._apply, updater)
            return None
        return self._apply(updater)

    def _apply(self, updater: Callable[[T], T]) -> T:
        return self._write(updater(self.get()))

    def _write(self, value: T) -> T:
        """Set value and notify. Runs on the scheduler thread when one is set.

        A write is a change unless the value is the same object, or has the
        same type and compares ==. Errors from that comparison propagate, so
        values whose == does not return a bool (numpy arrays) raise here when
        replaced by a value of the same type.
        """
        old = self._value
        if value is old or (type(value) is type(old) and value == old):
            return old
        self._value = value
        self._notify(value, old)
        return value

    def _notify(self, value: T, old: T) -> None:
        """Call every subscriber that is registered when its turn comes.

        Subscribers removed by an earlier one in the same pass are skipped;
        subscribers added during the pass are called at the end of it.
        """
        pending = list(self._subscribers)
        seen = set(pending)
        added = self._added
        i = 0
        while i < len(pending):
            subscriber = pending[i]
            i += 1
            if subscriber in self._subscribers:
                subscriber(value, old)
            if self._added != added:
                added = self._added
                for late in self._subscribers:
                    if late not in seen:
                        seen.add(late)
                        pending.append(late)

    def _add(self, subscriber: Subscriber) -> None:
        if subscriber not in self._subscribers:
            self._subscribers[subscriber] = None
            self._added += 1

    def subscribe(self, subscriber: Subscriber) -> Disposer:
        """Register subscriber and call it right away with the current value.

        Returns a function that removes it again.
        """
        self._add(subscriber)
        subscriber(self._value)

        def _dispose() -> None:
            self.unsubscribe(subscriber)

        return _dispose

    def unsubscribe(self, subscriber: Subscriber) -> None:
        self._subscribers.pop(subscriber, None)

    def __call__(self, arg: Any = _UNSET) -> Any:
        if arg is _UNSET:
            return self.get()
        if callable(arg):
            return self.update(arg)
        return self.set(arg)

    def __repr__(self) -> str:
        return f"Store({self._value!r})"


def konbini(value: T | None = None) -> Store[T]:
    """Create a new store.

    Usage:
        count = konbini(0)
        count()                    # 0
        count(2)
        count()                    # 2
        count(lambda v: v + 1)
        count()                    # 3
    """
    return Store(value)
