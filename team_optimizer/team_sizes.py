"""Team size sequences for a population.

All functions are *pure*.
"""

from __future__ import annotations

from team_optimizer.exceptions import InvalidInputError


def even_team_sizes(n_people: int, n_teams: int) -> list[int]:
    """Split *n_people* into *n_teams* sizes that differ by at most one.

    Larger teams come first, so equal sizes stay adjacent, e.g.
    ``even_team_sizes(10, 3) == [4, 3, 3]``.

    Raises:
        InvalidInputError: If the split is impossible.
    """
    if n_teams < 1:
        raise InvalidInputError(f"Number of teams must be at least 1, got {n_teams}")
    if n_people < 0:
        raise InvalidInputError(f"Number of people must not be negative, got {n_people}")
    if n_teams > n_people:
        raise InvalidInputError(
            f"Cannot split {n_people} people into {n_teams} non-empty teams"
        )
    base, extra = divmod(n_people, n_teams)
    return [base + 1] * extra + [base] * (n_teams - extra)


def suggest_team_sizes(n_people: int) -> list[list[int]]:
    """Suggested layouts favouring teams of four, then three.

    - all fours when *n_people* is divisible by 4
    - all threes when divisible by 3
    - from 7 people, a mixed layout absorbing the remainder of a split
      into fours: one five (remainder 1), two threes (remainder 2) or
      one three (remainder 3)
    """
    suggestions: list[list[int]] = []
    if n_people <= 0:
        return suggestions

    if n_people % 4 == 0:
        suggestions.append([4] * (n_people // 4))
    if n_people % 3 == 0:
        suggestions.append([3] * (n_people // 3))

    if n_people >= 7:
        fours, remainder = divmod(n_people, 4)
        if remainder == 1 and fours >= 2:
            suggestions.append([5] + [4] * (fours - 1))
        elif remainder == 2:
            suggestions.append([3, 3] + [4] * (fours - 1))
        elif remainder == 3:
            suggestions.append([3] + [4] * fours)

    return suggestions
