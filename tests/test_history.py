"""Tests for team_optimizer/history.py."""

import json

import pytest

from team_optimizer.exceptions import InvalidInputError
from team_optimizer.history import (
    HistoryDataset,
    PastTeam,
    build_conflict_matrix,
    parse_history_csv,
    parse_history_json,
    top_collaborations,
)
from team_optimizer.models import Person


HISTORY = [
    PastTeam(name="alpha", members=["carol", "alice", "bob"]),
    PastTeam(name="beta", members=["alice", "bob"]),
    PastTeam(name="gamma", members=["dave", "carol"]),
]


# ---------------------------------------------------------------------------
# build_conflict_matrix
# ---------------------------------------------------------------------------
class TestBuildConflictMatrix:
    """Tests for build_conflict_matrix()."""

    def test_people_sorted_and_numbered(self):
        dataset = build_conflict_matrix(HISTORY)
        assert [(p.id, p.name) for p in dataset.people] == [
            ("1", "alice"), ("2", "bob"), ("3", "carol"), ("4", "dave"),
        ]

    def test_counts_are_symmetric(self):
        m = build_conflict_matrix(HISTORY).conflict_matrix
        assert m["1"]["2"] == 2 and m["2"]["1"] == 2
        assert m["1"]["3"] == 1 and m["3"]["1"] == 1
        assert m["3"]["4"] == 1 and m["4"]["3"] == 1

    def test_zero_pairs_omitted(self):
        m = build_conflict_matrix(HISTORY).conflict_matrix
        assert "4" not in m["1"]
        assert "1" not in m["4"]

    def test_history_mapped_to_ids(self):
        dataset = build_conflict_matrix(HISTORY)
        assert dataset.team_history[0].name == "alpha"
        assert dataset.team_history[0].members == ["3", "1", "2"]

    def test_duplicate_member_counts_once(self):
        dataset = build_conflict_matrix([PastTeam(name="x", members=["a", "b", "a"])])
        assert dataset.conflict_matrix == {"1": {"2": 1}, "2": {"1": 1}}

    def test_suggested_sizes_filled(self):
        dataset = build_conflict_matrix(HISTORY)
        assert dataset.suggested_team_sizes == [[4]]

    def test_empty_history(self):
        dataset = build_conflict_matrix([])
        assert dataset.people == []
        assert dataset.conflict_matrix == {}


class TestTopCollaborations:
    """Tests for top_collaborations()."""

    def test_sorted_by_count(self):
        pairs = top_collaborations(build_conflict_matrix(HISTORY))
        assert [(c.person_a.name, c.person_b.name, c.count) for c in pairs] == [
            ("alice", "bob", 2),
            ("alice", "carol", 1),
            ("bob", "carol", 1),
            ("carol", "dave", 1),
        ]

    def test_limit(self):
        assert len(top_collaborations(build_conflict_matrix(HISTORY), limit=2)) == 2

    def test_one_directional_matrix(self):
        dataset = HistoryDataset(
            people=[Person(id="1", name="a"), Person(id="2", name="b")],
            conflict_matrix={"2": {"1": 3}},
        )
        assert top_collaborations(dataset)[0].count == 3


# ---------------------------------------------------------------------------
# parse_history_json
# ---------------------------------------------------------------------------
class TestParseHistoryJson:
    """Tests for parse_history_json()."""

    def test_raw_list(self):
        text = json.dumps([{"repo": "alpha", "team": ["x", "y"]}])
        dataset = parse_history_json(text)
        assert [p.name for p in dataset.people] == ["x", "y"]
        assert dataset.conflict_matrix["1"]["2"] == 1

    def test_team_history_object(self):
        text = json.dumps({"teamHistory": [{"name": "alpha", "members": ["x", "y", "z"]}]})
        dataset = parse_history_json(text)
        assert len(dataset.people) == 3

    def test_prepared_dataset(self):
        text = json.dumps({
            "people": [{"id": "1", "name": "x"}, {"id": "2", "name": "y"}],
            "conflictMatrix": {"1": {"2": 4}},
            "teamHistory": [{"repo": "alpha", "team": ["1", "2"]}],
        })
        dataset = parse_history_json(text)
        assert dataset.conflict_matrix == {"1": {"2": 4}}
        assert dataset.team_history[0].name == "alpha"
        assert dataset.suggested_team_sizes == []  # nothing fits two people

    def test_prepared_dataset_keeps_given_suggestions(self):
        text = json.dumps({
            "people": [{"id": str(i), "name": str(i)} for i in range(1, 5)],
            "conflictMatrix": {},
            "suggestedTeamSizes": [[2, 2]],
        })
        assert parse_history_json(text).suggested_team_sizes == [[2, 2]]

    def test_invalid_json(self):
        with pytest.raises(InvalidInputError, match="not valid JSON"):
            parse_history_json("{nope")

    def test_unknown_shape(self):
        with pytest.raises(InvalidInputError):
            parse_history_json(json.dumps({"foo": 1}))

    def test_malformed_team(self):
        with pytest.raises(InvalidInputError, match="Malformed"):
            parse_history_json(json.dumps([{"team": ["x"]}]))


# ---------------------------------------------------------------------------
# parse_history_csv
# ---------------------------------------------------------------------------
class TestParseHistoryCsv:
    """Tests for parse_history_csv()."""

    def test_with_header(self):
        text = "team,member\nalpha,x\nalpha,y\nbeta,y\nbeta,z\n"
        dataset = parse_history_csv(text)
        assert [t.name for t in dataset.team_history] == ["alpha", "beta"]
        assert dataset.conflict_matrix["2"] == {"1": 1, "3": 1}

    def test_without_header_and_blank_lines(self):
        text = "alpha, x\n\nalpha ,y\n"
        dataset = parse_history_csv(text)
        assert [p.name for p in dataset.people] == ["x", "y"]

    def test_missing_member(self):
        with pytest.raises(InvalidInputError, match="line 2"):
            parse_history_csv("alpha,x\nbeta\n")

    def test_empty(self):
        with pytest.raises(InvalidInputError):
            parse_history_csv("team,member\n")
