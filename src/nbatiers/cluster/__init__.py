"""Standardization, cluster-count diagnostics and tier assignment."""

from .assign import ClusterAssignment, assign_clusters
from .selection import ClusterDiagnostics, ReferenceBox, evaluate_cluster_counts, within_dispersion
from .standardize import (
    CLUSTER_COLUMNS,
    DegenerateColumnError,
    InsufficientDataError,
    Standardization,
    clustering_matrix,
    standardize,
    standardize_records,
)

__all__ = [
    "CLUSTER_COLUMNS",
    "ClusterAssignment",
    "ClusterDiagnostics",
    "DegenerateColumnError",
    "InsufficientDataError",
    "ReferenceBox",
    "Standardization",
    "assign_clusters",
    "clustering_matrix",
    "evaluate_cluster_counts",
    "standardize",
    "standardize_records",
    "within_dispersion",
]
