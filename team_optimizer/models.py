"""Data models shared by the search engine and its collaborators.

Field names are snake_case in Python and camelCase on the wire
(``model_dump(by_alias=True)``); both spellings are accepted on input.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


ConflictMatrix = dict[str, dict[str, int]]
"""Sparse person-id → person-id → collaboration count. May be one-directional."""


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
class Person(_WireModel):
    """A person to be placed on a team. Ids are compared as plain strings."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str


class Team(_WireModel):
    """One team slot of a partition."""

    members: list[Person] = Field(default_factory=list)


class TeamAssignment(_WireModel):
    """A full partition plus its total conflict score."""

    teams: list[Team]
    conflict_score: int = Field(ge=0)


class OptimizationResult(_WireModel):
    """Tied-best assignments and performance counters of one search."""

    best_assignments: list[TeamAssignment] = Field(default_factory=list)
    total_combinations_checked: int = Field(default=0, ge=0)
    execution_time_ms: float = Field(default=0.0, ge=0.0)

    @property
    def best_score(self) -> int | None:
        """Score shared by every best assignment, or ``None`` when empty."""
        if not self.best_assignments:
            return None
        return self.best_assignments[0].conflict_score
