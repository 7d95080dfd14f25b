"""Nine-category head-to-head scoring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

from nbatiers.models import PlayerRecord


CATEGORIES: Tuple[str, ...] = (
    "fg_pct",
    "three_pointers",
    "ft_pct",
    "rebounds",
    "assists",
    "steals",
    "blocks",
    "points",
    "turnovers",
)

LOWER_IS_BETTER = frozenset({"turnovers"})

# A side must take a strict majority of all nine categories.
WIN_THRESHOLD = len(CATEGORIES) // 2 + 1


@dataclass(frozen=True)
class CategoryTotals:
    fg_pct: float
    three_pointers: float
    ft_pct: float
    rebounds: float
    assists: float
    steals: float
    blocks: float
    points: float
    turnovers: float

    def value(self, category: str) -> float:
        return getattr(self, category)


@dataclass(frozen=True)
class MatchupResult:
    a_wins: int
    b_wins: int
    ties: int
    outcomes: Dict[str, str]

    @property
    def winner(self) -> Optional[str]:
        if self.a_wins >= WIN_THRESHOLD:
            return "a"
        if self.b_wins >= WIN_THRESHOLD:
            return "b"
        return None


def _ratio(made: int, attempted: int) -> float:
    return made / attempted if attempted else 0.0


def roster_totals(players: Sequence[PlayerRecord]) -> CategoryTotals:
    """Aggregate a roster; percentages are pooled makes over pooled attempts."""

    return CategoryTotals(
        fg_pct=_ratio(sum(p.fg_made for p in players), sum(p.fg_attempted for p in players)),
        three_pointers=sum(p.three_pointers for p in players),
        ft_pct=_ratio(sum(p.ft_made for p in players), sum(p.ft_attempted for p in players)),
        rebounds=sum(p.rebounds for p in players),
        assists=sum(p.assists for p in players),
        steals=sum(p.steals for p in players),
        blocks=sum(p.blocks for p in players),
        points=sum(p.points for p in players),
        turnovers=sum(p.turnovers for p in players),
    )


def score_matchup(a: CategoryTotals, b: CategoryTotals) -> MatchupResult:
    a_wins = b_wins = ties = 0
    outcomes: Dict[str, str] = {}
    for category in CATEGORIES:
        a_value = a.value(category)
        b_value = b.value(category)
        if a_value == b_value:
            ties += 1
            outcomes[category] = "tie"
            continue
        a_better = a_value < b_value if category in LOWER_IS_BETTER else a_value > b_value
        if a_better:
            a_wins += 1
            outcomes[category] = "a"
        else:
            b_wins += 1
            outcomes[category] = "b"
    return MatchupResult(a_wins=a_wins, b_wins=b_wins, ties=ties, outcomes=outcomes)


def score_rosters(a: Sequence[PlayerRecord], b: Sequence[PlayerRecord]) -> MatchupResult:
    return score_matchup(roster_totals(a), roster_totals(b))
