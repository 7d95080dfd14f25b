"""Per-tier profiles used by the operator to name clusters."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from statistics import fmean, median
from typing import Mapping, Sequence

from nbatiers.cluster.standardize import CLUSTER_COLUMNS
from nbatiers.pool.draft_pool import DraftPool


@dataclass(frozen=True)
class ClusterProfile:
    """Size, positional mix and raw-stat averages of one cluster."""

    label: int
    size: int
    positions: Mapping[str, int]
    means: Mapping[str, float]
    medians: Mapping[str, float]


def cluster_profiles(
    pool: DraftPool,
    columns: Sequence[str] = CLUSTER_COLUMNS,
) -> list[ClusterProfile]:
    profiles: list[ClusterProfile] = []
    for label in range(1, pool.k + 1):
        members = pool.candidates(lambda player, label=label: player.cluster == label)
        if not members:
            profiles.append(ClusterProfile(label, 0, {}, {}, {}))
            continue
        profiles.append(
            ClusterProfile(
                label=label,
                size=len(members),
                positions=dict(Counter(player.position for player in members)),
                means={
                    column: fmean(float(getattr(player, column)) for player in members)
                    for column in columns
                },
                medians={
                    column: float(median(float(getattr(player, column)) for player in members))
                    for column in columns
                },
            )
        )
    return profiles


def format_profiles(profiles: Sequence[ClusterProfile], columns: Sequence[str] = CLUSTER_COLUMNS) -> str:
    header = ["cluster", "size", *columns]
    lines = ["  ".join(f"{name:>14}" for name in header)]
    for profile in profiles:
        cells = [str(profile.label), str(profile.size)]
        for column in columns:
            value = profile.means.get(column)
            if value is None:
                cells.append("-")
            elif column.endswith("_pct"):
                cells.append(f"{value:.3f}")
            else:
                cells.append(f"{value:.1f}")
        lines.append("  ".join(f"{cell:>14}" for cell in cells))
    return "\n".join(lines)
