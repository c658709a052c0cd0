"""
Task handles: spawn an async operation on one element and await it later.

A handle wraps an ``asyncio.Task``. Spawning never suspends, and awaiting a
handle never cancels the task behind it, so a handle behaves like an
unstructured task: it runs to completion whether or not anyone collects it.
Handles that will never be collected can be detached into a background
registry that keeps them alive and quietly retrieves their outcome.
"""

from __future__ import annotations
from typing import TypeVar, Generic, Callable, Awaitable, Generator, Any
import asyncio

import structlog

E = TypeVar("E")
T = TypeVar("T")

_logger = structlog.get_logger("parseq.task")

# Strong references to detached tasks until they finish.
_background: set[asyncio.Task[Any]] = set()


def background_tasks() -> frozenset[asyncio.Task[Any]]:
    """Snapshot of detached tasks that are still running."""
    return frozenset(_background)


def _reap(task: asyncio.Task[Any]) -> None:
    _background.discard(task)
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        _logger.debug(
            "detached_task_failed",
            task=task.get_name(),
            error=repr(exc),
        )


class TaskHandle(Generic[T]):
    """
    One in-flight invocation of an operation on a single element.

    Awaiting is idempotent: a finished handle returns its stored value (or
    re-raises its stored exception) every time.

    Example:
        handle = spawn(url, fetch)
        ...  # other work runs while fetch(url) is in flight
        body = await handle
    """

    def __init__(self, task: asyncio.Task[T]):
        self._task = task
        self._collected = False

    @property
    def collected(self) -> bool:
        """True once the outcome has been awaited, or the handle detached."""
        return self._collected

    def done(self) -> bool:
        return self._task.done()

    async def value(self) -> T:
        """
        Wait for the task and return its result.

        The wait is shielded: cancelling the caller leaves the task running.

        Raises:
            Whatever exception the operation raised.
        """
        try:
            return await asyncio.shield(self._task)
        finally:
            if self._task.done():
                self._collected = True

    def __await__(self) -> Generator[Any, None, T]:
        return self.value().__await__()

    def detach(self) -> None:
        """
        Give up on collecting this handle.

        The task keeps running. A failure it ends with is logged at debug
        level and otherwise dropped. Detaching a collected handle is a no-op.
        """
        if self._collected:
            return
        self._collected = True
        _background.add(self._task)
        self._task.add_done_callback(_reap)

    def __repr__(self) -> str:
        state = "done" if self._task.done() else "pending"
        return f"<TaskHandle {self._task.get_name()} {state}>"


def spawn(
    element: E,
    operation: Callable[[E], Awaitable[T]],
    *,
    name: str | None = None,
) -> TaskHandle[T]:
    """
    Start ``operation(element)`` concurrently and return its handle.

    Returns without waiting; the operation starts on the next pass of the
    event loop. The element is bound now, not when the task runs.

    Args:
        element: Value passed to the operation.
        operation: Async callable taking one element.
        name: Optional task name, visible in ``repr`` and debug logs.

    Raises:
        RuntimeError: If called with no running event loop.
    """

    async def run(item: E) -> T:
        return await operation(item)

    return TaskHandle(asyncio.get_running_loop().create_task(run(element), name=name))
