"""Repository for the loaded history dataset and last result (JSON file)."""

from __future__ import annotations

import json
import logging
from pathlib import Path
import threading
from typing import Any

from team_optimizer.history import HistoryDataset
from team_optimizer.models import OptimizationResult


logger = logging.getLogger(__name__)

_DEFAULT_PATH = "team_history.json"


class HistoryRepository:
    """Thread-safe persistence of one dataset plus its latest optimization result.

    Saving a new dataset discards the stored result, which was computed
    against the previous conflict matrix.
    """

    def __init__(self, path: str = _DEFAULT_PATH) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def save_dataset(self, dataset: HistoryDataset) -> None:
        """Persist *dataset*, dropping any stored result."""
        with self._lock:
            self._atomic_write({"dataset": dataset.model_dump(by_alias=True), "result": None})
        logger.info("Saved history dataset with %d people to %s", len(dataset.people), self._path)

    def load_dataset(self) -> HistoryDataset | None:
        """Load the dataset. Returns ``None`` when nothing is stored."""
        with self._lock:
            data = self._read()
        if data is None or data.get("dataset") is None:
            return None
        try:
            return HistoryDataset.model_validate(data["dataset"])
        except Exception as exc:
            raise ValueError(f"Failed to load history dataset: {exc}") from exc

    def save_result(self, result: OptimizationResult) -> None:
        """Store *result* next to the current dataset."""
        with self._lock:
            data = self._read() or {"dataset": None}
            data["result"] = result.model_dump(by_alias=True)
            self._atomic_write(data)

    def load_result(self) -> OptimizationResult | None:
        """Load the last result. Returns ``None`` when nothing is stored."""
        with self._lock:
            data = self._read()
        if data is None or data.get("result") is None:
            return None
        try:
            return OptimizationResult.model_validate(data["result"])
        except Exception as exc:
            raise ValueError(f"Failed to load optimization result: {exc}") from exc

    def clear(self) -> None:
        """Remove the file if it exists."""
        with self._lock:
            if self._path.exists():
                self._path.unlink()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _read(self) -> dict[str, Any] | None:
        if not self._path.exists():
            return None
        try:
            with open(self._path, encoding="utf-8") as fh:
                return json.load(fh)
        except Exception as exc:
            raise ValueError(f"Failed to read {self._path}: {exc}") from exc

    def _atomic_write(self, data: dict[str, Any]) -> None:
        tmp = self._path.with_suffix(".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
            tmp.replace(self._path)
        except Exception as exc:
            if tmp.exists():
                tmp.unlink()
            raise ValueError(f"Failed to save {self._path}: {exc}") from exc
