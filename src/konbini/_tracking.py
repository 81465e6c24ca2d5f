"""Dependency tracking engine — the heart of konbini.

Uses contextvars to hold the stack of computations currently being evaluated.
Any Store.get() call made while the stack is non-empty subscribes the top
computation to that store, building the dependency graph automatically.

The same stack doubles as the cycle guard: a computation that is already on
the stack may not be entered again until its first evaluation finishes.
"""

from __future__ import annotations

import contextvars
import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from konbini.computed import Computation

logger = logging.getLogger("konbini.tracking")

# Computations currently being evaluated, innermost last. Stored as a tuple so
# each thread / asyncio task sees its own stack.
_stack: contextvars.ContextVar[tuple[Computation, ...]] = contextvars.ContextVar(
    "computation_stack", default=()
)


class CircularDependencyError(RuntimeError):
    """Raised when a computation re-enters itself before finishing."""

    def __init__(self, computation: Computation) -> None:
        super().__init__(f"Circular computation: {computation!r}")
        self.computation = computation


def enter(computation: Computation) -> None:
    """Push computation onto the stack. Fails if it is already running."""
    stack = _stack.get()
    if computation in stack:
        logger.debug("Circular dependency detected at depth %d: %r", len(stack), computation)
        raise CircularDependencyError(computation)
    _stack.set(stack + (computation,))


def leave() -> None:
    """Pop the innermost computation."""
    _stack.set(_stack.get()[:-1])


def current() -> Computation | None:
    """The computation being evaluated right now, if any."""
    stack = _stack.get()
    return stack[-1] if stack else None


def depth() -> int:
    """Number of computations on the stack. Useful for testing."""
    return len(_stack.get())


@contextmanager
def tracking(computation: Computation) -> Iterator[None]:
    """Evaluate a block with computation on top of the stack.

    Usage:
        with tracking(computation):
            result = executor()  # every Store.get() in here subscribes computation
    """
    enter(computation)
    try:
        yield
    finally:
        leave()
