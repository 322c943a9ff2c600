"""Exhaustive team partitioning that minimizes historical collaboration overlap."""

from .engine.optimizer import CancellationToken, optimize
from .exceptions import (
    DeadlineExceeded,
    InvalidInputError,
    OptimizationCancelled,
    TeamOptimizerError,
)
from .models import OptimizationResult, Person, Team, TeamAssignment

__all__ = [
    "CancellationToken",
    "DeadlineExceeded",
    "InvalidInputError",
    "OptimizationCancelled",
    "OptimizationResult",
    "Person",
    "Team",
    "TeamAssignment",
    "TeamOptimizerError",
    "optimize",
]
