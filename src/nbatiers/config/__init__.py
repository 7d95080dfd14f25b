"""Configuration helpers for draft scripts and run settings."""

from .settings import AnalysisSettings
from .strategy import (
    DEFAULT_SCRIPT,
    TIER_ROLES,
    DraftScript,
    DraftStep,
    TierMap,
    get_script,
    iter_scripts,
    parse_tier_map,
)

__all__ = [
    "AnalysisSettings",
    "DEFAULT_SCRIPT",
    "TIER_ROLES",
    "DraftScript",
    "DraftStep",
    "TierMap",
    "get_script",
    "iter_scripts",
    "parse_tier_map",
]
