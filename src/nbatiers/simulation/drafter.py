"""Constrained sampling of fantasy rosters from a draft pool."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from nbatiers.config.strategy import DraftScript, DraftStep, TierMap
from nbatiers.models import PlayerRecord
from nbatiers.pool.draft_pool import DraftPool, PlayerPredicate, PoolView


logger = logging.getLogger(__name__)


class DraftError(RuntimeError):
    """Base class for failures that abort a single draft."""


class InsufficientCandidatesError(DraftError):
    def __init__(self, step: str, criteria: str, required: int, available: int):
        super().__init__(
            f"Draft step {step!r} ({criteria}) needs {required} players but only {available} remain"
        )
        self.step = step
        self.criteria = criteria
        self.required = required
        self.available = available


class InvalidRosterSizeError(DraftError):
    def __init__(self, roster: str, expected: int, actual: int, distinct: int):
        super().__init__(
            f"Roster {roster!r} finished with {actual} picks ({distinct} distinct), expected {expected}"
        )
        self.roster = roster
        self.expected = expected
        self.actual = actual
        self.distinct = distinct


@dataclass(frozen=True)
class DraftResult:
    rosters: Dict[str, Tuple[PlayerRecord, ...]]

    def roster(self, key: str) -> Tuple[PlayerRecord, ...]:
        return self.rosters[key]


def sample_without_replacement(
    view: PoolView,
    predicate: PlayerPredicate,
    count: int,
    rng: random.Random,
    *,
    step: str = "sample",
    criteria: str = "custom predicate",
) -> List[PlayerRecord]:
    """Draw ``count`` distinct matching players uniformly and remove them from ``view``."""

    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    candidates = view.candidates(predicate)
    if len(candidates) < count:
        raise InsufficientCandidatesError(step, criteria, count, len(candidates))
    picks = rng.sample(candidates, count)
    view.remove(picks)
    return picks


def draft_step(view: PoolView, step: DraftStep, tiers: TierMap, rng: random.Random) -> List[PlayerRecord]:
    return sample_without_replacement(
        view,
        lambda player: step.matches(player, tiers),
        step.count,
        rng,
        step=step.name,
        criteria=step.describe(),
    )


def _check_roster(key: str, players: List[PlayerRecord], expected: int) -> None:
    distinct = len({player.name for player in players})
    if len(players) != expected or distinct != expected:
        raise InvalidRosterSizeError(key, expected, len(players), distinct)


def draft_rosters(
    pool: DraftPool,
    script: DraftScript,
    tiers: TierMap,
    rng: random.Random,
    *,
    view: Optional[PoolView] = None,
) -> DraftResult:
    """Run every step of ``script`` against a fresh view of ``pool``."""

    active_view = view if view is not None else pool.view()
    rosters: Dict[str, List[PlayerRecord]] = {key: [] for key in script.rosters}
    for step in script.steps:
        picks = draft_step(active_view, step, tiers, rng)
        for destination in step.destinations:
            rosters[destination].extend(picks)
        logger.debug(
            "Step %s drafted %s -> %s",
            step.name,
            ", ".join(player.name for player in picks),
            "/".join(step.destinations),
        )

    for key, players in rosters.items():
        _check_roster(key, players, script.roster_size)
    return DraftResult({key: tuple(players) for key, players in rosters.items()})
