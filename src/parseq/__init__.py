"""
Parseq: ordered sequential and parallel traversals for async operations.

Provides visit, map and filter-map over an ordered collection, each in a
sequential flavour (one operation at a time) and a parallel flavour (all
operations launched at once, results collected in input order).

Usage:
    from parseq import parallel_map, sequential_visit, parallel_filter_map

    # Concurrent, order-preserving transform
    titles = await parallel_map(urls, fetch_title)

    # Strictly one at a time
    await sequential_visit(migrations, apply_migration)

    # Concurrent transform that drops None results
    hits = await parallel_filter_map(keys, cache_lookup)
"""

from .sequential import sequential_visit, sequential_map, sequential_filter_map
from .parallel import parallel_visit, parallel_map, parallel_filter_map
from .task import TaskHandle, spawn, background_tasks
from .traversal import Traversal, traverse

__version__ = "0.1.0"
__all__ = [
    # Sequential primitives
    "sequential_visit",
    "sequential_map",
    "sequential_filter_map",
    # Parallel primitives (built on the sequential ones)
    "parallel_visit",
    "parallel_map",
    "parallel_filter_map",
    # Task handles
    "TaskHandle",
    "spawn",
    "background_tasks",
    # Method-style wrapper
    "Traversal",
    "traverse",
]
