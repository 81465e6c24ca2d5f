"""watch() — run a producer's blocking work in a managed daemon thread.

Store writes auto-marshal to the owner thread once set_scheduler() has been
called, so watch() is purely about thread lifecycle. Returns a WatchHandle for
cleanup via .dispose().
"""

from __future__ import annotations

from threading import Thread
from typing import Any, Callable


class WatchHandle:
    """Disposable handle for a managed daemon thread."""

    __slots__ = ("_disposed", "_thread")

    def __init__(self, thread: Thread) -> None:
        self._disposed = False
        self._thread = thread

    @property
    def disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Signal the thread to stop. Check .disposed in your loop."""
        self._disposed = True

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the thread to finish. Returns False if it is still running."""
        self._thread.join(timeout)
        return not self._thread.is_alive()


def watch(fn: Callable[..., Any], *args: Any) -> WatchHandle:
    """Run fn(*args) in a daemon thread. Returns WatchHandle.

    Usage:
        def load(store):
            store(fetch_status())

        status = from_(lambda store: watch(load, store), {"online": False})
        # status() is {"online": False} until load() writes
    """
    thread = Thread(target=fn, args=args, daemon=True)
    handle = WatchHandle(thread)
    thread.start()
    return handle
