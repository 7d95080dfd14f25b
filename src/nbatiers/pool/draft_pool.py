"""Unified, tier-labelled player pool queried by the draft simulation."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Sequence, Tuple

from nbatiers.cluster.assign import ClusterAssignment
from nbatiers.models import PlayerRecord


logger = logging.getLogger(__name__)

PlayerPredicate = Callable[[PlayerRecord], bool]


class UnmatchedPlayerError(ValueError):
    """Raised when raw records and cluster labels do not join one-to-one."""

    def __init__(self, missing_labels: Sequence[str], missing_records: Sequence[str]):
        parts = []
        if missing_labels:
            parts.append(f"records without a cluster label: {', '.join(missing_labels)}")
        if missing_records:
            parts.append(f"cluster labels without a record: {', '.join(missing_records)}")
        super().__init__("; ".join(parts))
        self.missing_labels = list(missing_labels)
        self.missing_records = list(missing_records)


class DuplicatePlayerError(ValueError):
    """Raised when the same player name appears more than once."""


@dataclass(frozen=True)
class DraftPool:
    """Read-only pool of labelled players; trials draft from private views."""

    players: Tuple[PlayerRecord, ...]
    k: int
    _by_name: Dict[str, PlayerRecord] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_by_name", {player.name: player for player in self.players})

    def __len__(self) -> int:
        return len(self.players)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> PlayerRecord:
        return self._by_name[name]

    def candidates(self, predicate: PlayerPredicate) -> List[PlayerRecord]:
        return [player for player in self.players if predicate(player)]

    def tier_position_counts(self) -> Dict[Tuple[int, str], int]:
        counts: Counter[Tuple[int, str]] = Counter()
        for player in self.players:
            counts[(int(player.cluster or 0), player.position)] += 1
        return dict(counts)

    def view(self) -> "PoolView":
        return PoolView(self.players)


class PoolView:
    """Undrafted players for one trial; shrinks as picks are removed."""

    def __init__(self, players: Iterable[PlayerRecord]):
        self._remaining: List[PlayerRecord] = list(players)

    def __len__(self) -> int:
        return len(self._remaining)

    def __iter__(self):
        return iter(self._remaining)

    def candidates(self, predicate: PlayerPredicate) -> List[PlayerRecord]:
        return [player for player in self._remaining if predicate(player)]

    def remove(self, players: Iterable[PlayerRecord]) -> None:
        drafted = {player.name for player in players}
        self._remaining = [player for player in self._remaining if player.name not in drafted]


def build_draft_pool(records: Sequence[PlayerRecord], assignment: ClusterAssignment) -> DraftPool:
    """Join raw records to their tier labels by player name."""

    counts = Counter(record.name for record in records)
    duplicated = sorted(name for name, count in counts.items() if count > 1)
    if duplicated:
        raise DuplicatePlayerError(f"Duplicate player names in pool: {', '.join(duplicated)}")

    record_names = set(counts)
    label_names = set(assignment.labels)
    missing_labels = sorted(record_names - label_names)
    missing_records = sorted(label_names - record_names)
    if missing_labels or missing_records:
        raise UnmatchedPlayerError(missing_labels, missing_records)

    labelled = tuple(
        record.model_copy(update={"cluster": assignment.labels[record.name]}) for record in records
    )
    pool = DraftPool(players=labelled, k=assignment.k)
    logger.info("Built draft pool with %s players across %s tiers", len(pool), assignment.k)
    return pool
