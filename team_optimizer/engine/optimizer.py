"""Exhaustive search driver.

Pulls canonical partitions one at a time, scores each and keeps a bounded
list of tied-best assignments. Nothing beyond the current partition and the
best list is held in memory.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import logging
import math
import threading
import time

from team_optimizer.engine.partitions import (
    Partition,
    count_canonical_partitions,
    generate_partitions,
)
from team_optimizer.engine.scoring import score_partition
from team_optimizer.exceptions import (
    DeadlineExceeded,
    InvalidInputError,
    OptimizationCancelled,
)
from team_optimizer.models import (
    ConflictMatrix,
    OptimizationResult,
    Person,
    Team,
    TeamAssignment,
)


logger = logging.getLogger(__name__)

DEFAULT_MAX_RESULTS = 10
DEFAULT_PROGRESS_INTERVAL = 10_000
# Above this the exhaustive search is usually impractical.
RECOMMENDED_MAX_PEOPLE = 25

ProgressCallback = Callable[[int, int], None]


class CancellationToken:
    """Thread-safe flag checked by :func:`optimize` between partitions."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------
def validate_input(people: Sequence[Person], team_sizes: Sequence[int], max_results: int) -> None:
    """Raise :class:`InvalidInputError` if *team_sizes* cannot partition *people*."""
    if not team_sizes and people:
        raise InvalidInputError(f"No team sizes given for {len(people)} people")
    if any(s <= 0 for s in team_sizes):
        raise InvalidInputError(f"Team sizes must be positive, got {list(team_sizes)}")
    total = sum(team_sizes)
    if total != len(people):
        raise InvalidInputError(
            f"Team sizes sum ({total}) doesn't match number of people ({len(people)})"
        )
    if max_results < 1:
        raise InvalidInputError(f"max_results must be at least 1, got {max_results}")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def optimize(
    people: Sequence[Person],
    team_sizes: Sequence[int],
    conflict_matrix: ConflictMatrix,
    max_results: int = DEFAULT_MAX_RESULTS,
    *,
    cancel_token: CancellationToken | None = None,
    deadline_seconds: float | None = None,
    progress_callback: ProgressCallback | None = None,
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
) -> OptimizationResult:
    """Find the partitions of *people* into *team_sizes* with the lowest conflict.

    Every canonical partition is scored. A strictly better score replaces the
    best list; an equal score is appended while fewer than *max_results* are
    held. Later ties are dropped, so the kept ties are the first ones in
    generation order.

    Args:
        people: People to partition. Order determines enumeration order.
        team_sizes: Slot sizes, summing to ``len(people)``.
        conflict_matrix: Sparse pairwise collaboration counts.
        max_results: Cap on the number of tied-best assignments returned.
        cancel_token: Checked between partitions; stops the search when set.
        deadline_seconds: Wall-clock budget for the search.
        progress_callback: Called with ``(checked, best_score)`` every
            *progress_interval* partitions.
        progress_interval: Partitions between progress reports.

    Returns:
        OptimizationResult with the tied-best assignments and counters.

    Raises:
        InvalidInputError: Before any partition is examined.
        OptimizationCancelled: When *cancel_token* is set mid-search.
        DeadlineExceeded: When *deadline_seconds* elapses mid-search.
    """
    validate_input(people, team_sizes, max_results)
    if progress_interval < 1:
        raise InvalidInputError(f"progress_interval must be at least 1, got {progress_interval}")

    total = count_canonical_partitions(len(people), team_sizes)
    logger.info(
        "Optimizing %d people into teams %s (%d canonical partitions)",
        len(people), list(team_sizes), total,
    )
    if len(people) > RECOMMENDED_MAX_PEOPLE:
        logger.warning(
            "%d people exceeds the recommended %d for exhaustive search",
            len(people), RECOMMENDED_MAX_PEOPLE,
        )

    start = time.perf_counter()
    deadline = start + deadline_seconds if deadline_seconds is not None else None
    best: list[Partition] = []
    min_score = math.inf
    checked = 0

    for partition in generate_partitions(people, team_sizes):
        if cancel_token is not None and cancel_token.cancelled:
            raise OptimizationCancelled(
                f"Optimization cancelled after {checked} partitions",
                _build_result(best, min_score, checked, start),
            )
        if deadline is not None and time.perf_counter() >= deadline:
            raise DeadlineExceeded(
                f"Optimization exceeded {deadline_seconds}s after {checked} partitions",
                _build_result(best, min_score, checked, start),
            )

        checked += 1
        score = score_partition(partition, conflict_matrix)

        if score < min_score:
            min_score = score
            best = [partition]
        elif score == min_score and len(best) < max_results:
            best.append(partition)

        if checked % progress_interval == 0:
            logger.debug("Checked %d partitions, best score: %s", checked, min_score)
            if progress_callback is not None:
                progress_callback(checked, int(min_score))

    result = _build_result(best, min_score, checked, start)
    logger.info(
        "Optimization complete: checked=%d best_score=%s solutions=%d elapsed=%.1fms",
        checked, result.best_score, len(result.best_assignments), result.execution_time_ms,
    )
    return result


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------
def _build_result(
    best: list[Partition],
    min_score: float,
    checked: int,
    start: float,
) -> OptimizationResult:
    assignments = [
        TeamAssignment(
            teams=[Team(members=list(team)) for team in partition],
            conflict_score=int(min_score),
        )
        for partition in best
    ]
    return OptimizationResult(
        best_assignments=assignments,
        total_combinations_checked=checked,
        execution_time_ms=(time.perf_counter() - start) * 1000,
    )
