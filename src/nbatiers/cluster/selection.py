"""Diagnostics for choosing the number of clusters.

Three signals are computed for every candidate k in ``[2, k_max]``:

* total within-cluster sum of squares (the "elbow" curve),
* mean silhouette width over all players,
* the gap statistic of Tibshirani, Walther & Hastie (2001), comparing
  ``log(W_k)`` against its expectation under uniform reference sets.

The gap statistic uses the same conventions as R's ``cluster::clusGap``
defaults: ``W_k`` is half the sum, over clusters, of the unsquared pairwise
Euclidean distances divided by the cluster size, and reference sets are drawn
uniformly in the bounding box of the centred data rotated onto its principal
axes, then rotated back.

Nothing here picks k.  The helpers on :class:`ClusterDiagnostics` only point
at the candidates each criterion favours so the operator can weigh them.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from scipy.spatial.distance import pdist
from sklearn.metrics import silhouette_score

from nbatiers.cluster.assign import fit_kmeans
from nbatiers.cluster.standardize import InsufficientDataError, Standardization


logger = logging.getLogger(__name__)

_MAX_SEED = 2 ** 31 - 1


@dataclass(frozen=True)
class ClusterDiagnostics:
    candidates: Tuple[int, ...]
    within_ss: Tuple[float, ...]
    silhouette: Tuple[float, ...]
    gap: Tuple[float, ...]
    gap_se: Tuple[float, ...]
    bootstraps: int
    seed: int

    def best_silhouette_k(self) -> int:
        return self.candidates[int(np.argmax(self.silhouette))]

    def gap_first_se_max_k(self) -> int:
        """Smallest k within one standard error of the first local gap maximum."""

        gap = self.gap
        first_max = len(gap) - 1
        for idx in range(len(gap) - 1):
            if gap[idx + 1] - gap[idx] <= 0:
                first_max = idx
                break
        threshold = gap[first_max] - self.gap_se[first_max]
        for idx in range(first_max):
            if gap[idx] >= threshold:
                return self.candidates[idx]
        return self.candidates[first_max]

    def as_rows(self) -> list[dict[str, float]]:
        return [
            {
                "k": k,
                "within_ss": wss,
                "silhouette": sil,
                "gap": gap,
                "gap_se": se,
            }
            for k, wss, sil, gap, se in zip(
                self.candidates, self.within_ss, self.silhouette, self.gap, self.gap_se
            )
        ]


def _seed_from(rng: np.random.Generator) -> int:
    return int(rng.integers(0, _MAX_SEED))


def within_dispersion(data: np.ndarray, labels: np.ndarray) -> float:
    """Pooled within-cluster dispersion ``W_k`` on unsquared distances."""

    total = 0.0
    for label in np.unique(labels):
        members = data[labels == label]
        if len(members) > 1:
            total += float(pdist(members).sum()) / len(members)
    return 0.5 * total


@dataclass(frozen=True, eq=False)
class ReferenceBox:
    """Uniform sampling box aligned with the principal axes of the data."""

    center: np.ndarray
    rotation: np.ndarray
    lower: np.ndarray
    upper: np.ndarray

    @classmethod
    def from_data(cls, data: np.ndarray) -> "ReferenceBox":
        center = data.mean(axis=0)
        centred = data - center
        _, _, vt = np.linalg.svd(centred, full_matrices=False)
        rotated = centred @ vt.T
        return cls(center=center, rotation=vt, lower=rotated.min(axis=0), upper=rotated.max(axis=0))

    def sample(self, rng: np.random.Generator, rows: int) -> np.ndarray:
        rotated = rng.uniform(self.lower, self.upper, size=(rows, len(self.lower)))
        return rotated @ self.rotation + self.center


def _log_dispersion(data: np.ndarray, k: int, *, restarts: int, seed: int) -> float:
    model = fit_kmeans(data, k, restarts=restarts, seed=seed)
    return float(np.log(max(within_dispersion(data, model.labels_), np.finfo(float).tiny)))


def evaluate_cluster_counts(
    standardized: Standardization | np.ndarray,
    *,
    k_max: int = 10,
    bootstraps: int = 500,
    restarts: int = 10,
    gap_restarts: int = 25,
    seed: int = 1651654,
) -> ClusterDiagnostics:
    values = standardized.values if isinstance(standardized, Standardization) else standardized
    data = np.asarray(values, dtype=float)
    n_rows = data.shape[0]
    if k_max < 2:
        raise ValueError(f"k_max must be at least 2, got {k_max}")
    if bootstraps < 1:
        raise ValueError(f"bootstraps must be at least 1, got {bootstraps}")
    if restarts < 1 or gap_restarts < 1:
        raise ValueError(f"restarts must be positive, got {restarts} and {gap_restarts}")
    if n_rows <= k_max:
        raise InsufficientDataError(
            f"Evaluating up to k={k_max} needs more than {k_max} rows, got {n_rows}"
        )

    candidates = tuple(range(2, k_max + 1))
    observed_seq, reference_seq = np.random.SeedSequence(seed).spawn(2)
    observed_rng = np.random.default_rng(observed_seq)
    reference_rng = np.random.default_rng(reference_seq)

    start = time.perf_counter()
    within_ss: list[float] = []
    silhouette: list[float] = []
    observed_logs: list[float] = []
    for k in candidates:
        model = fit_kmeans(data, k, restarts=restarts, seed=_seed_from(observed_rng))
        within_ss.append(float(model.inertia_))
        silhouette.append(float(silhouette_score(data, model.labels_)))
        observed_logs.append(
            _log_dispersion(data, k, restarts=gap_restarts, seed=_seed_from(observed_rng))
        )
        logger.debug(
            "k=%s within_ss=%.3f silhouette=%.4f log_w=%.4f", k, within_ss[-1], silhouette[-1], observed_logs[-1]
        )

    box = ReferenceBox.from_data(data)
    reference_logs = np.empty((bootstraps, len(candidates)), dtype=float)
    for b in range(bootstraps):
        reference = box.sample(reference_rng, n_rows)
        for idx, k in enumerate(candidates):
            reference_logs[b, idx] = _log_dispersion(
                reference, k, restarts=gap_restarts, seed=_seed_from(reference_rng)
            )
        if (b + 1) % 100 == 0:
            logger.info(
                "Gap reference sets %s/%s (elapsed %.2fs)", b + 1, bootstraps, time.perf_counter() - start
            )

    gap = reference_logs.mean(axis=0) - np.asarray(observed_logs)
    sd = reference_logs.std(axis=0, ddof=1) if bootstraps > 1 else np.zeros(len(candidates))
    gap_se = sd * np.sqrt(1.0 + 1.0 / bootstraps)

    diagnostics = ClusterDiagnostics(
        candidates=candidates,
        within_ss=tuple(within_ss),
        silhouette=tuple(silhouette),
        gap=tuple(float(value) for value in gap),
        gap_se=tuple(float(value) for value in gap_se),
        bootstraps=bootstraps,
        seed=seed,
    )
    logger.info(
        "Evaluated k=2..%s on %s players in %.2fs (silhouette favours k=%s, gap favours k=%s)",
        k_max,
        n_rows,
        time.perf_counter() - start,
        diagnostics.best_silhouette_k(),
        diagnostics.gap_first_se_max_k(),
    )
    return diagnostics
