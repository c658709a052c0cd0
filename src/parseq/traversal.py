"""Method-style access to the traversal primitives."""

from __future__ import annotations
from typing import TypeVar, Generic, Callable, Awaitable, Iterable, Iterator

from .sequential import sequential_visit, sequential_map, sequential_filter_map
from .parallel import parallel_visit, parallel_map, parallel_filter_map

E = TypeVar("E")
T = TypeVar("T")


class Traversal(Generic[E]):
    """
    A materialized, ordered collection with the six traversals as methods.

    The elements are copied into a tuple once, so the same traversal can be
    run repeatedly against the same order.

    Example:
        pages = traverse(urls)
        await pages.parallel_visit(warm_cache)
        bodies = await pages.parallel_map(fetch)
    """

    def __init__(self, elements: Iterable[E]):
        self._elements: tuple[E, ...] = tuple(elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[E]:
        return iter(self._elements)

    def __repr__(self) -> str:
        return f"Traversal({list(self._elements)!r})"

    async def sequential_visit(self, operation: Callable[[E], Awaitable[object]]) -> None:
        await sequential_visit(self._elements, operation)

    async def parallel_visit(self, operation: Callable[[E], Awaitable[object]]) -> None:
        await parallel_visit(self._elements, operation)

    async def sequential_map(self, transform: Callable[[E], Awaitable[T]]) -> list[T]:
        return await sequential_map(self._elements, transform)

    async def parallel_map(self, transform: Callable[[E], Awaitable[T]]) -> list[T]:
        return await parallel_map(self._elements, transform)

    async def sequential_filter_map(
        self, transform: Callable[[E], Awaitable[T | None]]
    ) -> list[T]:
        return await sequential_filter_map(self._elements, transform)

    async def parallel_filter_map(
        self, transform: Callable[[E], Awaitable[T | None]]
    ) -> list[T]:
        return await parallel_filter_map(self._elements, transform)


def traverse(elements: Iterable[E]) -> Traversal[E]:
    """Wrap ``elements`` for method-style traversal."""
    return Traversal(elements)
