"""Background optimization job shared between a worker thread and the UI."""

from __future__ import annotations

from collections.abc import Sequence
import logging
import threading
import time

from team_optimizer.engine.optimizer import (
    DEFAULT_MAX_RESULTS,
    DEFAULT_PROGRESS_INTERVAL,
    CancellationToken,
    optimize,
)
from team_optimizer.engine.partitions import count_canonical_partitions
from team_optimizer.exceptions import OptimizationCancelled, TeamOptimizerError
from team_optimizer.models import ConflictMatrix, OptimizationResult, Person


logger = logging.getLogger(__name__)


class OptimizationJob:
    """Runs one :func:`optimize` call on a daemon thread.

    Progress, result and terminal state are guarded by a lock so the UI can
    poll them while the search runs. A cancelled or timed-out search keeps
    the partial result it had reached.
    """

    def __init__(
        self,
        people: Sequence[Person],
        team_sizes: Sequence[int],
        conflict_matrix: ConflictMatrix,
        max_results: int = DEFAULT_MAX_RESULTS,
        deadline_seconds: float | None = None,
        progress_interval: int = DEFAULT_PROGRESS_INTERVAL,
    ):
        self._people = list(people)
        self._team_sizes = list(team_sizes)
        self._matrix = conflict_matrix
        self._max_results = max_results
        self._deadline_seconds = deadline_seconds
        self._progress_interval = progress_interval

        self._lock = threading.Lock()
        self._token = CancellationToken()
        self._thread: threading.Thread | None = None
        self._checked = 0
        self._best_score: int | None = None
        self._result: OptimizationResult | None = None
        self._error: str | None = None
        self._cancelled = False
        self._stop_reason: str | None = None
        self._done = False
        self.total = count_canonical_partitions(len(self._people), self._team_sizes)
        self.started_at: float | None = None

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------
    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("Optimization job already started")
        self.started_at = time.time()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread.start()

    def cancel(self) -> None:
        self._token.cancel()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the worker; returns ``True`` once the job is done."""
        if self._thread is not None:
            self._thread.join(timeout)
        return self.done

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    def progress(self) -> dict[str, int | None]:
        with self._lock:
            return {
                "checked": self._checked,
                "total": self.total,
                "best_score": self._best_score,
            }

    @property
    def done(self) -> bool:
        with self._lock:
            return self._done

    @property
    def cancelled(self) -> bool:
        with self._lock:
            return self._cancelled

    @property
    def stop_reason(self) -> str | None:
        """Why a cancelled job stopped (user cancel or deadline)."""
        with self._lock:
            return self._stop_reason

    @property
    def error(self) -> str | None:
        with self._lock:
            return self._error

    @property
    def result(self) -> OptimizationResult | None:
        with self._lock:
            return self._result

    # ------------------------------------------------------------------
    # Worker
    # ------------------------------------------------------------------
    def _on_progress(self, checked: int, best_score: int) -> None:
        with self._lock:
            self._checked = checked
            self._best_score = best_score

    def _finish(
        self,
        result: OptimizationResult | None,
        error: str | None = None,
        cancelled: bool = False,
        stop_reason: str | None = None,
    ) -> None:
        with self._lock:
            self._stop_reason = stop_reason
            if result is not None:
                self._result = result
                self._checked = result.total_combinations_checked
                self._best_score = result.best_score
            self._error = error
            self._cancelled = cancelled
            self._done = True

    def _run(self) -> None:
        try:
            result = optimize(
                self._people,
                self._team_sizes,
                self._matrix,
                self._max_results,
                cancel_token=self._token,
                deadline_seconds=self._deadline_seconds,
                progress_callback=self._on_progress,
                progress_interval=self._progress_interval,
            )
        except OptimizationCancelled as exc:
            logger.info("Optimization job stopped: %s", exc)
            self._finish(exc.partial_result, cancelled=True, stop_reason=str(exc))
        except TeamOptimizerError as exc:
            logger.warning("Optimization job rejected input: %s", exc)
            self._finish(None, error=str(exc))
        except Exception as exc:
            logger.exception("Optimization job failed")
            self._finish(None, error=f"{type(exc).__name__}: {exc}")
        else:
            self._finish(result)
