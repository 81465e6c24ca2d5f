"""Computed stores — derived state with automatic dependency tracking.

A computed store wraps an executor. Every run of the executor happens with
its Computation on top of the tracking stack, so each store it reads
subscribes the Computation. When any of those stores changes, the
Computation re-runs eagerly and writes the new result into its store.

Subscriptions are only ever added. A store that was read on an earlier run
but not on the latest one keeps triggering re-runs.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, TypeVar

from konbini._tracking import tracking
from konbini.store import Store

T = TypeVar("T")

logger = logging.getLogger("konbini.computed")


class Computation(Generic[T]):
    """The re-runnable body of a computed store.

    Instances are hashable by identity, which is what the tracking stack and
    the subscriber sets key on.
    """

    __slots__ = ("_executor", "_store")

    def __init__(self, executor: Callable[[], T], store: Store[T]) -> None:
        self._executor = executor
        self._store = store

    def __call__(self, *_args) -> None:
        """Re-run the executor. Called as a subscriber with (new, old), which are ignored."""
        try:
            with tracking(self):
                result = self._executor()
        except Exception:
            logger.debug("Computation %r failed", self, exc_info=True)
            raise
        self._store.set(result)

    def __repr__(self) -> str:
        name = getattr(self._executor, "__name__", repr(self._executor))
        return f"Computation({name})"


def computed(executor: Callable[[], T]) -> Store[T]:
    """Decorator/factory to create a store derived from other stores.

    The executor runs once immediately to establish the initial value. Its
    result goes through Store.set, so when set_scheduler() is active and
    computed() is called off the owner thread, the store reads None until
    the scheduler delivers that first write.

    Usage:
        count = konbini(1)

        @computed
        def doubled():
            return count() * 2

        doubled()  # 2
        count(5)
        doubled()  # 10
    """
    store: Store[T] = Store()
    Computation(executor, store)()
    return store
