"""from_() — stores whose value comes from a producer function.

The producer receives the store itself and may write to it at any time:
right away, from a subscription to another store, or later from a thread or
an asyncio task. Nothing here is tracked, so producers never take part in
circular-dependency detection.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from konbini.store import Store

T = TypeVar("T")


def from_(executor: Callable[[Store[T]], Any], initial_value: T | None = None) -> Store[T]:
    """Create a store seeded with initial_value and hand it to executor once.

    Usage:
        count = konbini(1)
        tripled = from_(lambda store: count.subscribe(lambda v, *_: store(v * 3)), 0)
        tripled()  # 3

    A producer doing blocking work can write later from a thread:
        status = from_(lambda store: watch(lambda: store(fetch_status())), {"online": False})
    """
    store = Store(initial_value)
    executor(store)
    return store
