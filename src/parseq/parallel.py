"""
Parallel traversal: launch everything, collect in input order.

Every element gets its own task up front, so all operations run concurrently
and the call takes roughly as long as the slowest one. The handles are then
awaited with the sequential primitives, index 0 first. Output order therefore
always matches input order, whatever order the tasks actually finish in.

The first failure in collection order is re-raised as-is. Handles that were
not collected yet are detached rather than cancelled: they keep running and
their outcomes, failures included, are dropped.
"""

from __future__ import annotations
from typing import TypeVar, Callable, Awaitable, Iterable, Any

import structlog

from .sequential import sequential_visit, sequential_map, sequential_filter_map
from .task import TaskHandle, spawn

E = TypeVar("E")
T = TypeVar("T")
R = TypeVar("R")

Collector = Callable[
    [list[TaskHandle[Any]], Callable[[TaskHandle[Any]], Awaitable[Any]]],
    Awaitable[R],
]

_logger = structlog.get_logger("parseq.parallel")


def _spawn_all(
    elements: Iterable[E],
    operation: Callable[[E], Awaitable[T]],
) -> list[TaskHandle[T]]:
    handles: list[TaskHandle[T]] = []
    try:
        for element in elements:
            handles.append(spawn(element, operation))
    except BaseException:
        # Iteration or spawning failed part-way; nobody will collect these.
        for handle in handles:
            handle.detach()
        raise
    return handles


async def _collect(kind: str, handles: list[TaskHandle[Any]], collector: Collector[R]) -> R:
    try:
        return await collector(handles, TaskHandle.value)
    except BaseException as exc:
        abandoned = [handle for handle in handles if not handle.collected]
        for handle in abandoned:
            handle.detach()
        _logger.debug(
            "parallel_collection_aborted",
            operation=kind,
            total=len(handles),
            detached=len(abandoned),
            error=repr(exc),
        )
        raise


async def parallel_visit(
    elements: Iterable[E],
    operation: Callable[[E], Awaitable[object]],
) -> None:
    """
    Run ``operation`` on every element concurrently and wait for all of them.

    Raises:
        The exception of the first failing element in input order.
    """
    await _collect("visit", _spawn_all(elements, operation), sequential_visit)


async def parallel_map(
    elements: Iterable[E],
    transform: Callable[[E], Awaitable[T]],
) -> list[T]:
    """
    Transform every element concurrently.

    Returns:
        One result per element, in input order.

    Example:
        async def fetch_title(url: str) -> str:
            ...

        titles = await parallel_map(urls, fetch_title)
    """
    return await _collect("map", _spawn_all(elements, transform), sequential_map)


async def parallel_filter_map(
    elements: Iterable[E],
    transform: Callable[[E], Awaitable[T | None]],
) -> list[T]:
    """
    Transform every element concurrently, dropping ``None`` results.

    Returns:
        Non-``None`` results, in input order.
    """
    return await _collect("filter_map", _spawn_all(elements, transform), sequential_filter_map)
