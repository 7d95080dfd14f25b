"""Fixed-k partitioning of standardized player stats."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Mapping, Tuple

import numpy as np
from sklearn.cluster import KMeans

from nbatiers.cluster.standardize import InsufficientDataError, Standardization


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClusterAssignment:
    """Player name to 1-based tier id, plus centroids in standardized space."""

    labels: Mapping[str, int] = field(hash=False)
    centroids: np.ndarray = field(compare=False)
    columns: Tuple[str, ...]
    inertia: float
    k: int
    seed: int
    restarts: int

    def members(self, label: int) -> Tuple[str, ...]:
        return tuple(name for name, value in self.labels.items() if value == label)

    def sizes(self) -> dict[int, int]:
        counts = {label: 0 for label in range(1, self.k + 1)}
        for value in self.labels.values():
            counts[value] += 1
        return counts


def fit_kmeans(values: np.ndarray, k: int, *, restarts: int, seed: int, max_iter: int = 300) -> KMeans:
    """Lloyd iterations from random initial centroids, best of ``restarts`` runs."""

    model = KMeans(
        n_clusters=k,
        init="random",
        n_init=restarts,
        max_iter=max_iter,
        algorithm="lloyd",
        random_state=seed,
    )
    return model.fit(values)


def assign_clusters(
    standardized: Standardization,
    *,
    k: int = 3,
    restarts: int = 20,
    seed: int = 123456,
    max_iter: int = 300,
) -> ClusterAssignment:
    n_rows = standardized.values.shape[0]
    if k < 1:
        raise ValueError(f"k must be positive, got {k}")
    if restarts < 1:
        raise ValueError(f"restarts must be positive, got {restarts}")
    if n_rows < k:
        raise InsufficientDataError(f"Cannot form {k} clusters from {n_rows} players")

    start = time.perf_counter()
    model = fit_kmeans(standardized.values, k, restarts=restarts, seed=seed, max_iter=max_iter)
    labels = {
        name: int(label) + 1 for name, label in zip(standardized.names, model.labels_)
    }
    assignment = ClusterAssignment(
        labels=labels,
        centroids=np.asarray(model.cluster_centers_, dtype=float),
        columns=standardized.columns,
        inertia=float(model.inertia_),
        k=k,
        seed=seed,
        restarts=restarts,
    )
    logger.info(
        "Assigned %s players to %s clusters (sizes %s, inertia %.2f, seed=%s, restarts=%s, %.2fs)",
        n_rows,
        k,
        assignment.sizes(),
        assignment.inertia,
        seed,
        restarts,
        time.perf_counter() - start,
    )
    return assignment
