"""Tests for team_optimizer/jobs.py."""

import threading

import pytest

from team_optimizer.engine import optimizer as optimizer_module
from team_optimizer.jobs import OptimizationJob
from team_optimizer.models import Person


def _people(n: int) -> list[Person]:
    return [Person(id=str(i), name=f"P{i}") for i in range(1, n + 1)]


class TestOptimizationJob:
    """Tests for OptimizationJob."""

    def test_runs_to_completion(self):
        job = OptimizationJob(_people(4), [2, 2], {"1": {"2": 5}})
        assert job.total == 3
        job.start()
        assert job.join(timeout=10)

        assert job.error is None
        assert not job.cancelled
        assert job.result.total_combinations_checked == 3
        assert job.progress() == {"checked": 3, "total": 3, "best_score": 0}

    def test_cannot_start_twice(self):
        job = OptimizationJob(_people(2), [2], {})
        job.start()
        job.join(timeout=10)
        with pytest.raises(RuntimeError):
            job.start()

    def test_invalid_input_recorded_as_error(self):
        job = OptimizationJob(_people(3), [2, 2], {})
        job.start()
        assert job.join(timeout=10)
        assert "doesn't match" in job.error
        assert job.result is None

    def test_cancel_keeps_partial_result(self, monkeypatch):
        reached = threading.Event()
        release = threading.Event()
        real_score = optimizer_module.score_partition

        def _slow_score(partition, matrix):
            reached.set()
            release.wait(timeout=10)
            return real_score(partition, matrix)

        monkeypatch.setattr(optimizer_module, "score_partition", _slow_score)

        job = OptimizationJob(_people(6), [2, 2, 2], {})
        job.start()
        assert reached.wait(timeout=10)
        job.cancel()
        release.set()
        assert job.join(timeout=10)

        assert job.cancelled
        assert job.error is None
        assert "cancelled" in job.stop_reason
        assert job.result.total_combinations_checked == 1
        assert len(job.result.best_assignments) == 1

    def test_deadline_marks_cancelled(self):
        job = OptimizationJob(_people(4), [2, 2], {}, deadline_seconds=0.0)
        job.start()
        assert job.join(timeout=10)
        assert job.cancelled
        assert "exceeded" in job.stop_reason
        assert job.result.total_combinations_checked == 0

    def test_not_done_before_start(self):
        job = OptimizationJob(_people(2), [2], {})
        assert not job.done
        assert job.progress()["checked"] == 0
