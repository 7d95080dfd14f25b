"""Column-wise z-scoring of the clustering statistics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from nbatiers.models import PlayerRecord


CLUSTER_COLUMNS: Tuple[str, ...] = (
    "fg_pct",
    "three_pointers",
    "ft_pct",
    "rebounds",
    "assists",
    "steals",
    "blocks",
    "turnovers",
    "points",
)


class InsufficientDataError(ValueError):
    """Raised when a statistical operation has too few rows to be defined."""


class DegenerateColumnError(ValueError):
    """Raised when a column has zero variance and cannot be scaled."""

    def __init__(self, column: str):
        super().__init__(f"Column {column!r} has zero variance; drop it before standardizing")
        self.column = column


@dataclass(frozen=True, eq=False)
class Standardization:
    names: Tuple[str, ...]
    columns: Tuple[str, ...]
    values: np.ndarray
    mean: np.ndarray
    scale: np.ndarray

    def inverse_transform(self, values: np.ndarray | None = None) -> np.ndarray:
        data = self.values if values is None else np.asarray(values, dtype=float)
        return data * self.scale + self.mean


def clustering_matrix(
    records: Sequence[PlayerRecord],
    columns: Sequence[str] = CLUSTER_COLUMNS,
) -> Tuple[Tuple[str, ...], np.ndarray]:
    """Return player names and the raw stat matrix in ``columns`` order."""

    names = tuple(record.name for record in records)
    matrix = np.array(
        [[float(getattr(record, column)) for column in columns] for record in records],
        dtype=float,
    ).reshape(len(records), len(columns))
    return names, matrix


def standardize(
    names: Sequence[str],
    values: np.ndarray,
    columns: Sequence[str] = CLUSTER_COLUMNS,
) -> Standardization:
    data = np.asarray(values, dtype=float)
    if data.ndim != 2 or data.shape[1] != len(columns):
        raise ValueError(f"Expected a 2-D table with {len(columns)} columns, got shape {data.shape}")
    if data.shape[0] != len(names):
        raise ValueError(f"{len(names)} names supplied for {data.shape[0]} rows")
    if data.shape[0] < 2:
        raise InsufficientDataError(
            f"Standardization needs at least 2 rows, got {data.shape[0]}"
        )

    mean = data.mean(axis=0)
    scale = data.std(axis=0, ddof=1)
    # Constant float columns leave rounding noise in the sd, so check the raw range.
    spread = np.ptp(data, axis=0)
    for column, sd, width in zip(columns, scale, spread):
        if not np.isfinite(sd) or width == 0.0:
            raise DegenerateColumnError(column)

    return Standardization(
        names=tuple(names),
        columns=tuple(columns),
        values=(data - mean) / scale,
        mean=mean,
        scale=scale,
    )


def standardize_records(records: Sequence[PlayerRecord]) -> Standardization:
    names, matrix = clustering_matrix(records)
    return standardize(names, matrix)
