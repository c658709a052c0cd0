"""
Sequential traversal: one element at a time, in order.

Each operation is awaited to completion before the next element is touched.
The first exception aborts the traversal; later elements are never invoked
and no partial result is returned.
"""

from __future__ import annotations
from typing import TypeVar, Callable, Awaitable, Iterable

E = TypeVar("E")
T = TypeVar("T")


async def sequential_visit(
    elements: Iterable[E],
    operation: Callable[[E], Awaitable[object]],
) -> None:
    """Await ``operation(element)`` for each element in order, discarding results."""
    for element in elements:
        await operation(element)


async def sequential_map(
    elements: Iterable[E],
    transform: Callable[[E], Awaitable[T]],
) -> list[T]:
    """
    Await ``transform(element)`` for each element in order.

    Returns:
        One result per element, in input order.
    """
    results: list[T] = []
    for element in elements:
        results.append(await transform(element))
    return results


async def sequential_filter_map(
    elements: Iterable[E],
    transform: Callable[[E], Awaitable[T | None]],
) -> list[T]:
    """
    Like :func:`sequential_map`, but ``None`` results are dropped.

    Surviving results keep their relative input order.
    """
    results: list[T] = []
    for element in elements:
        result = await transform(element)
        if result is not None:
            results.append(result)
    return results
