"""Optimizer settings loaded from environment variables.

Reads an optional ``.env`` file, then the process environment:

    TEAM_OPTIMIZER_MAX_RESULTS         tied-best assignments to keep (default 10)
    TEAM_OPTIMIZER_DEADLINE_SECONDS    search budget in seconds (default: none)
    TEAM_OPTIMIZER_PROGRESS_INTERVAL   partitions between progress reports
    TEAM_OPTIMIZER_HISTORY_PATH        JSON file for the persisted dataset
    TEAM_OPTIMIZER_LOG_LEVEL           logging level name for the app
"""

from __future__ import annotations

import logging
import os

from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, Field, ValidationError

from team_optimizer.engine.optimizer import DEFAULT_MAX_RESULTS, DEFAULT_PROGRESS_INTERVAL


logger = logging.getLogger(__name__)

_ENV_PREFIX = "TEAM_OPTIMIZER_"


class OptimizerSettings(BaseModel):
    """Runtime configuration for the optimizer and its app."""

    max_results: int = Field(default=DEFAULT_MAX_RESULTS, ge=1)
    deadline_seconds: float | None = Field(default=None, gt=0)
    progress_interval: int = Field(default=DEFAULT_PROGRESS_INTERVAL, ge=1)
    history_path: str = Field(default="team_history.json", min_length=1)
    log_level: str = Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")


def load_settings(dotenv: bool = True) -> OptimizerSettings:
    """Build :class:`OptimizerSettings` from ``TEAM_OPTIMIZER_*`` variables.

    Values from a ``.env`` file in the working directory (or a parent) are
    used unless the process environment already sets them. Unset or empty
    variables fall back to the model defaults.

    Raises:
        ValueError: If a variable holds an invalid value.
    """
    env: dict[str, str | None] = {}
    dotenv_path = find_dotenv(usecwd=True) if dotenv else ""
    if dotenv_path:
        env.update(dotenv_values(dotenv_path))
    env.update(os.environ)

    raw: dict[str, str] = {}
    for name in OptimizerSettings.model_fields:
        value = (env.get(f"{_ENV_PREFIX}{name.upper()}") or "").strip()
        if value:
            raw[name] = value.upper() if name == "log_level" else value

    try:
        settings = OptimizerSettings(**raw)
    except ValidationError as exc:
        bad = ", ".join(f"{_ENV_PREFIX}{str(err['loc'][0]).upper()}" for err in exc.errors())
        raise ValueError(f"Invalid optimizer settings ({bad}): {exc}") from exc

    logger.debug("Optimizer settings: %s", settings.model_dump())
    return settings
