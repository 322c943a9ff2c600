"""Pairwise conflict scoring.

All functions are *pure*.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from itertools import combinations as pairs

from team_optimizer.models import ConflictMatrix, Person, TeamAssignment


def conflict_between(matrix: ConflictMatrix, a_id: str, b_id: str) -> int:
    """Collaboration count of two people, whichever direction is stored.

    Symmetric in its arguments: the larger of ``matrix[a][b]`` and
    ``matrix[b][a]``, missing entries counting as 0. The two directions are
    never added.
    """
    forward = matrix.get(a_id, {}).get(b_id, 0)
    backward = matrix.get(b_id, {}).get(a_id, 0)
    return max(forward, backward)


def score_team(members: Sequence[Person], matrix: ConflictMatrix) -> int:
    """Sum of conflicts over every unordered pair of distinct members."""
    return sum(conflict_between(matrix, a.id, b.id) for a, b in pairs(members, 2))


def score_partition(partition: Iterable[Sequence[Person]], matrix: ConflictMatrix) -> int:
    """Total conflict score of a partition: the sum of its team scores."""
    return sum(score_team(team, matrix) for team in partition)


def score_assignment(assignment: TeamAssignment, matrix: ConflictMatrix) -> int:
    """Recompute the score of a stored assignment against *matrix*."""
    return score_partition((t.members for t in assignment.teams), matrix)
