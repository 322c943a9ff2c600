"""Exceptions raised by the team optimizer."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from team_optimizer.models import OptimizationResult


class TeamOptimizerError(Exception):
    """Base exception for all team optimizer errors."""


class InvalidInputError(TeamOptimizerError, ValueError):
    """Raised before any search work when the input cannot be partitioned."""


class OptimizationCancelled(TeamOptimizerError):
    """Raised when a running search is cancelled between partitions.

    ``partial_result`` holds the best assignments found before the stop;
    its ``total_combinations_checked`` counts only the partitions examined.
    """

    def __init__(self, message: str, partial_result: OptimizationResult) -> None:
        super().__init__(message)
        self.partial_result = partial_result


class DeadlineExceeded(OptimizationCancelled):
    """Raised when a search runs past its deadline."""
