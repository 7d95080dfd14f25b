"""Draft pool construction, summaries and export."""

from .draft_pool import (
    DraftPool,
    DuplicatePlayerError,
    PoolView,
    UnmatchedPlayerError,
    build_draft_pool,
)
from .export import export_pool_to_csv, write_pool_csv
from .summary import ClusterProfile, cluster_profiles, format_profiles

__all__ = [
    "ClusterProfile",
    "DraftPool",
    "DuplicatePlayerError",
    "PoolView",
    "UnmatchedPlayerError",
    "build_draft_pool",
    "cluster_profiles",
    "export_pool_to_csv",
    "format_profiles",
    "write_pool_csv",
]
