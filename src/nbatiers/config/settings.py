"""Run settings with environment overrides."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass


logger = logging.getLogger(__name__)

_ENV_PREFIX = "NBATIERS_"

DEFAULT_CLUSTER_SEED = 123456
DEFAULT_SELECTION_SEED = 1651654
DEFAULT_SIMULATION_SEED = 20210609


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


@dataclass(frozen=True)
class AnalysisSettings:
    cluster_seed: int = DEFAULT_CLUSTER_SEED
    selection_seed: int = DEFAULT_SELECTION_SEED
    simulation_seed: int = DEFAULT_SIMULATION_SEED
    k: int = 3
    k_max: int = 10
    restarts: int = 20
    bootstraps: int = 500
    trials: int = 10_000
    workers: int = 1

    @classmethod
    def from_env(cls) -> "AnalysisSettings":
        """Build settings from ``NBATIERS_*`` variables, falling back to defaults."""

        base = cls()
        return cls(
            cluster_seed=_env_int(_ENV_PREFIX + "CLUSTER_SEED", base.cluster_seed),
            selection_seed=_env_int(_ENV_PREFIX + "SELECTION_SEED", base.selection_seed),
            simulation_seed=_env_int(_ENV_PREFIX + "SIMULATION_SEED", base.simulation_seed),
            k=_env_int(_ENV_PREFIX + "K", base.k, min_value=2),
            k_max=_env_int(_ENV_PREFIX + "K_MAX", base.k_max, min_value=2),
            restarts=_env_int(_ENV_PREFIX + "RESTARTS", base.restarts, min_value=1),
            bootstraps=_env_int(_ENV_PREFIX + "BOOTSTRAPS", base.bootstraps, min_value=1),
            trials=_env_int(_ENV_PREFIX + "TRIALS", base.trials, min_value=0),
            workers=_env_int(_ENV_PREFIX + "WORKERS", base.workers, min_value=1),
        )
