"""konbini: a minimal reactive store with automatic dependency tracking."""

from importlib.metadata import version as _version

__version__ = _version("konbini")

from konbini._tracking import CircularDependencyError
from konbini.store import Store, Subscriber, Disposer, konbini, set_scheduler
from konbini.computed import Computation, computed
from konbini.producer import from_
from konbini.watch import watch, WatchHandle

__all__ = [
    "Store",
    "Subscriber",
    "Disposer",
    "konbini",
    "set_scheduler",
    "Computation",
    "computed",
    "from_",
    "CircularDependencyError",
    "watch",
    "WatchHandle",
]
