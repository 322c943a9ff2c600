"""Lazy enumeration of fixed-size subsets.

All functions are *pure*.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TypeVar

T = TypeVar("T")


def combinations(items: Sequence[T], k: int) -> Iterator[tuple[T, ...]]:
    """Yield every size-*k* subset of *items*, keeping input order inside each.

    ``k == 0`` yields a single empty tuple (also for empty *items*);
    ``k > len(items)`` yields nothing. Otherwise exactly C(n, k) subsets are
    produced: ``items[i]`` is fixed for each ``i`` in ``0..n-k`` and the
    remaining ``k-1`` are drawn from ``items[i+1:]``.

    Each call returns a fresh generator, so the sequence is restartable.
    """
    if k == 0:
        yield ()
        return
    if k < 0 or k > len(items):
        return

    for i in range(len(items) - k + 1):
        first = items[i]
        for rest in combinations(items[i + 1:], k - 1):
            yield (first, *rest)
