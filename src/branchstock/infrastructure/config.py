"""Runtime settings, resolved from the environment.

Priority order for the data directory:
1) explicit override (the CLI's ``--data-dir``)
2) ``BRANCHSTOCK_DATA_DIR``
3) ``./data`` under the current working directory
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from branchstock.domain.model.batch import DEFAULT_WARNING_DAYS

ENV_DATA_DIR = "BRANCHSTOCK_DATA_DIR"
ENV_LOG_LEVEL = "BRANCHSTOCK_LOG_LEVEL"
ENV_WARNING_DAYS = "BRANCHSTOCK_WARNING_DAYS"

DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    log_level: str = DEFAULT_LOG_LEVEL
    default_warning_days: int = DEFAULT_WARNING_DAYS

    @property
    def products_file(self) -> Path:
        return self.data_dir / "products.json"

    @property
    def branches_file(self) -> Path:
        return self.data_dir / "branches.json"

    @property
    def batches_file(self) -> Path:
        return self.data_dir / "batches.json"

    @property
    def branch_stock_file(self) -> Path:
        return self.data_dir / "branch_stock.json"


def _log_level(raw: str) -> str:
    level = raw.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"{ENV_LOG_LEVEL}: unknown log level {raw!r}")
    return level


def _warning_days(raw: str) -> int:
    try:
        days = int(raw)
    except ValueError:
        raise ValueError(f"{ENV_WARNING_DAYS} must be an integer, got {raw!r}")
    if days < 1:
        raise ValueError(f"{ENV_WARNING_DAYS} must be at least 1, got {days}")
    return days


def get_settings(
    data_dir: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Build the settings for this process.

    Raises ValueError when an environment variable holds an invalid value.
    """
    env = os.environ if environ is None else environ

    if data_dir is not None:
        resolved = Path(data_dir)
    elif env.get(ENV_DATA_DIR):
        resolved = Path(env[ENV_DATA_DIR])
    else:
        resolved = Path.cwd() / "data"

    return Settings(
        data_dir=resolved.expanduser().resolve(),
        log_level=_log_level(env.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)),
        default_warning_days=_warning_days(
            env.get(ENV_WARNING_DAYS, str(DEFAULT_WARNING_DAYS))
        ),
    )
