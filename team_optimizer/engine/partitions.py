"""Canonical team partitions with symmetry breaking.

For a run of *consecutive* team slots sharing the same size, every ordering
of the same grouping would otherwise be enumerated once per permutation.
Requiring the minimum member id to strictly increase along the run keeps a
single representative, e.g. for sizes ``[3, 3, 3, 3]``::

    {A,B,C} {D,E,F} {G,H,I} {J,K,L}    kept     (A < D < G < J)
    {D,E,F} {A,B,C} {G,H,I} {J,K,L}    skipped

The threshold is carried only into the next slot when that slot has the same
declared size; any size change resets it. Equal-size slots that are not
adjacent (``[3, 4, 3]``) are therefore not deduplicated against each other.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from itertools import groupby
from math import factorial, prod

from team_optimizer.engine.combinations import combinations
from team_optimizer.models import Person


TeamTuple = tuple[Person, ...]
Partition = tuple[TeamTuple, ...]


def generate_partitions(
    people: Sequence[Person],
    team_sizes: Sequence[int],
    last_min_id: str | None = None,
) -> Iterator[Partition]:
    """Lazily yield every canonical partition of *people* into *team_sizes*.

    Args:
        people: Remaining people, in input order.
        team_sizes: Remaining slot sizes, in slot order. Must be positive.
        last_min_id: Minimum id placed in the previous slot, only when that
            slot had the same size as ``team_sizes[0]``.

    Yields:
        Tuples of teams, one per slot, each team a tuple of people in input
        order.
    """
    if not team_sizes:
        yield ()
        return

    first_size, remaining_sizes = team_sizes[0], team_sizes[1:]
    same_next = bool(remaining_sizes) and remaining_sizes[0] == first_size

    for picked in combinations(range(len(people)), first_size):
        team = tuple(people[i] for i in picked)
        min_id = min(p.id for p in team)
        if last_min_id is not None and min_id <= last_min_id:
            continue

        chosen = set(picked)
        remaining = [p for i, p in enumerate(people) if i not in chosen]
        next_min_id = min_id if same_next else None
        for rest in generate_partitions(remaining, remaining_sizes, next_min_id):
            yield (team, *rest)


def count_canonical_partitions(n_people: int, team_sizes: Sequence[int]) -> int:
    """Number of partitions :func:`generate_partitions` yields, in closed form.

    multinomial(n; sizes) divided by ``k!`` for every maximal run of ``k``
    adjacent equal sizes. Returns 0 when the sizes do not cover *n_people*
    or contain a non-positive size.
    """
    if sum(team_sizes) != n_people or any(s <= 0 for s in team_sizes):
        return 0
    multinomial = factorial(n_people) // prod(factorial(s) for s in team_sizes)
    run_lengths = [len(list(run)) for _, run in groupby(team_sizes)]
    return multinomial // prod(factorial(k) for k in run_lengths)
