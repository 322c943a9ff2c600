"""Collaboration history: upload parsing and conflict matrix construction.

A history is a list of past teams, each a name plus member logins. Every
pair of logins that shared a past team gets +1 in the conflict matrix.
"""

from __future__ import annotations

import csv
from datetime import datetime, timezone
import io
import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from team_optimizer.engine.scoring import conflict_between
from team_optimizer.exceptions import InvalidInputError
from team_optimizer.models import ConflictMatrix, Person
from team_optimizer.team_sizes import suggest_team_sizes


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
class PastTeam(BaseModel):
    """One historical team. Accepts ``{"repo": ..., "team": [...]}`` too."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, validation_alias="repo")
    members: list[str] = Field(default_factory=list, validation_alias="team")


class HistoryDataset(BaseModel):
    """Everything the optimizer needs, derived from a history upload."""

    model_config = ConfigDict(populate_by_name=True)

    people: list[Person] = Field(default_factory=list)
    conflict_matrix: ConflictMatrix = Field(default_factory=dict, alias="conflictMatrix")
    team_history: list[PastTeam] = Field(default_factory=list, alias="teamHistory")
    suggested_team_sizes: list[list[int]] = Field(
        default_factory=list, alias="suggestedTeamSizes"
    )
    loaded_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        alias="loadedAt",
    )


class Collaboration(BaseModel):
    """A pair of people and how often they worked together."""

    person_a: Person
    person_b: Person
    count: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Matrix construction
# ---------------------------------------------------------------------------
def build_conflict_matrix(history: list[PastTeam]) -> HistoryDataset:
    """Turn past teams into people, a symmetric conflict matrix and id-mapped history.

    Logins are sorted and numbered ``"1".."n"``; both directions of every
    pair are stored and zero counts are omitted. A login listed twice in
    one team counts once.
    """
    logins = sorted({login for team in history for login in team.members})
    people = [Person(id=str(idx + 1), name=login) for idx, login in enumerate(logins)]
    id_of = {p.name: p.id for p in people}

    matrix: ConflictMatrix = {}
    id_history: list[PastTeam] = []
    for team in history:
        member_ids = [id_of[login] for login in dict.fromkeys(team.members)]
        for i, a in enumerate(member_ids):
            for b in member_ids[i + 1:]:
                _bump(matrix, a, b)
                _bump(matrix, b, a)
        id_history.append(PastTeam(name=team.name, members=member_ids))

    logger.info("Built conflict matrix: %d people from %d past teams", len(people), len(history))
    return HistoryDataset(
        people=people,
        conflict_matrix=matrix,
        team_history=id_history,
        suggested_team_sizes=suggest_team_sizes(len(people)),
    )


def _bump(matrix: ConflictMatrix, a: str, b: str) -> None:
    row = matrix.setdefault(a, {})
    row[b] = row.get(b, 0) + 1


def top_collaborations(dataset: HistoryDataset, limit: int = 10) -> list[Collaboration]:
    """Most frequent collaborating pairs, each pair once, highest count first."""
    found: list[Collaboration] = []
    people = dataset.people
    for i, a in enumerate(people):
        for b in people[i + 1:]:
            count = conflict_between(dataset.conflict_matrix, a.id, b.id)
            if count > 0:
                found.append(Collaboration(person_a=a, person_b=b, count=count))
    found.sort(key=lambda c: (-c.count, c.person_a.id, c.person_b.id))
    return found[:limit]


# ---------------------------------------------------------------------------
# Upload parsing
# ---------------------------------------------------------------------------
def parse_history_json(text: str) -> HistoryDataset:
    """Parse an uploaded JSON history.

    Accepted shapes:
        - a prepared dataset ``{"people": [...], "conflictMatrix": {...}}``
        - a list of past teams ``[{"repo": ..., "team": [...]}, ...]``
        - ``{"teamHistory": [...]}`` holding logins rather than ids

    Raises:
        InvalidInputError: If the text is not JSON or matches no shape.
    """
    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidInputError(f"History file is not valid JSON: {exc}") from exc

    try:
        if isinstance(data, list):
            return build_conflict_matrix([PastTeam.model_validate(t) for t in data])
        if isinstance(data, dict) and "people" in data:
            dataset = HistoryDataset.model_validate(data)
            if not dataset.suggested_team_sizes:
                dataset.suggested_team_sizes = suggest_team_sizes(len(dataset.people))
            return dataset
        if isinstance(data, dict) and "teamHistory" in data:
            return build_conflict_matrix(
                [PastTeam.model_validate(t) for t in data["teamHistory"]]
            )
    except ValidationError as exc:
        raise InvalidInputError(f"Malformed history file: {exc}") from exc

    raise InvalidInputError(
        "History JSON must be a list of past teams or an object with "
        "'people' and 'conflictMatrix'"
    )


def parse_history_csv(text: str) -> HistoryDataset:
    """Parse ``team,member`` rows (header optional) into a dataset.

    Teams keep the order in which their name first appears.
    """
    teams: dict[str, list[str]] = {}
    reader = csv.reader(io.StringIO(text))
    for line_no, row in enumerate(reader, start=1):
        cells = [c.strip() for c in row]
        if not any(cells):
            continue
        if len(cells) < 2 or not cells[0] or not cells[1]:
            raise InvalidInputError(f"CSV line {line_no}: expected 'team,member', got {row!r}")
        if line_no == 1 and [c.lower() for c in cells[:2]] == ["team", "member"]:
            continue
        teams.setdefault(cells[0], []).append(cells[1])

    if not teams:
        raise InvalidInputError("CSV history contains no rows")
    return build_conflict_matrix(
        [PastTeam(name=name, members=members) for name, members in teams.items()]
    )
