"""Draft script configuration for the supported strategy comparisons."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from nbatiers.models import PlayerRecord


TIER_ROLES: Tuple[str, ...] = ("top", "small_heavy", "big_heavy")


@dataclass(frozen=True)
class TierMap:
    """Operator-assigned meaning of the cluster labels.

    Cluster ids come out of k-means in arbitrary order, so the operator
    inspects the centroids and states which label is the top tier and which
    labels carry the small-stat and big-stat profiles.
    """

    top: int
    small_heavy: int
    big_heavy: int

    def __post_init__(self) -> None:
        labels = (self.top, self.small_heavy, self.big_heavy)
        if len(set(labels)) != len(labels):
            raise ValueError(f"Tier labels must be distinct, got {labels}")
        if any(label < 1 for label in labels):
            raise ValueError(f"Tier labels are 1-based cluster ids, got {labels}")

    def label_for(self, role: str) -> int:
        if role not in TIER_ROLES:
            raise KeyError(f"Unknown tier role {role!r}")
        return getattr(self, role)

    def validate_for(self, k: int) -> None:
        """Raise if the map cannot describe a k-cluster assignment."""

        if k != len(TIER_ROLES):
            raise ValueError(
                f"Draft scripts need exactly {len(TIER_ROLES)} clusters, assignment has k={k}"
            )
        for role in TIER_ROLES:
            if self.label_for(role) > k:
                raise ValueError(f"Tier {role} label {self.label_for(role)} is outside 1..{k}")


@dataclass(frozen=True)
class DraftStep:
    """One constrained pick in a draft script."""

    name: str
    tier: str
    count: int
    destinations: Tuple[str, ...]
    positions: Optional[FrozenSet[str]] = None
    exclude_positions: FrozenSet[str] = frozenset()

    def matches(self, player: PlayerRecord, tiers: TierMap) -> bool:
        if player.cluster != tiers.label_for(self.tier):
            return False
        if self.positions is not None and player.position not in self.positions:
            return False
        return player.position not in self.exclude_positions

    def describe(self) -> str:
        parts = [f"tier={self.tier}"]
        if self.positions is not None:
            parts.append("position in " + "/".join(sorted(self.positions)))
        if self.exclude_positions:
            parts.append("position not in " + "/".join(sorted(self.exclude_positions)))
        return ", ".join(parts)


@dataclass(frozen=True)
class DraftScript:
    key: str
    rosters: Tuple[str, ...]
    designated: str
    roster_size: int
    steps: Tuple[DraftStep, ...]


def _first_five() -> Tuple[DraftStep, ...]:
    return tuple(
        DraftStep(
            name=f"first_five_{pos}",
            tier="top",
            count=1,
            destinations=("small", "big"),
            positions=frozenset({pos}),
        )
        for pos in ("PG", "SG", "SF", "PF", "C")
    )


_DRAFT_SCRIPTS: Dict[str, DraftScript] = {
    "guards_vs_bigs": DraftScript(
        key="guards_vs_bigs",
        rosters=("small", "big"),
        designated="small",
        roster_size=10,
        steps=_first_five()
        + (
            DraftStep(
                name="small_sixth_man",
                tier="top",
                count=1,
                destinations=("small",),
                positions=frozenset({"SF", "PF"}),
            ),
            DraftStep(
                name="big_sixth_man",
                tier="top",
                count=1,
                destinations=("big",),
                positions=frozenset({"PG", "SG"}),
            ),
            DraftStep(
                name="small_utility",
                tier="small_heavy",
                count=4,
                destinations=("small",),
                exclude_positions=frozenset({"PF", "C"}),
            ),
            DraftStep(
                name="big_non_center",
                tier="big_heavy",
                count=1,
                destinations=("big",),
                exclude_positions=frozenset({"C"}),
            ),
            DraftStep(
                name="big_utility",
                tier="big_heavy",
                count=3,
                destinations=("big",),
                exclude_positions=frozenset({"PG", "SG"}),
            ),
        ),
    ),
}

DEFAULT_SCRIPT = "guards_vs_bigs"


def iter_scripts() -> Iterable[DraftScript]:
    """Return an iterator of all configured draft scripts."""

    return _DRAFT_SCRIPTS.values()


def get_script(key: str) -> DraftScript:
    """Fetch a draft script by key, raising KeyError if missing."""

    normalized = key.strip().lower()
    if normalized not in _DRAFT_SCRIPTS:
        raise KeyError(f"No draft script configured for key={key!r}")
    return _DRAFT_SCRIPTS[normalized]


def parse_tier_map(text: str) -> TierMap:
    """Parse ``top=3,small=1,big=2`` style CLI input."""

    aliases = {
        "top": "top",
        "small": "small_heavy",
        "small_heavy": "small_heavy",
        "big": "big_heavy",
        "big_heavy": "big_heavy",
    }
    values: dict[str, int] = {}
    for entry in text.split(","):
        if not entry.strip():
            continue
        if "=" not in entry:
            raise ValueError(f"Invalid tier entry '{entry}', expected role=label")
        role, label = entry.split("=", 1)
        role_key = aliases.get(role.strip().lower())
        if role_key is None:
            raise ValueError(f"Unknown tier role {role.strip()!r}")
        values[role_key] = int(label)
    missing = [role for role in TIER_ROLES if role not in values]
    if missing:
        raise ValueError(f"Tier map is missing roles: {', '.join(missing)}")
    return TierMap(**values)
