"""Roster drafting, matchup scoring and the Monte Carlo driver."""

from .drafter import (
    DraftError,
    DraftResult,
    InsufficientCandidatesError,
    InvalidRosterSizeError,
    draft_rosters,
    draft_step,
    sample_without_replacement,
)
from .scoring import (
    CATEGORIES,
    WIN_THRESHOLD,
    CategoryTotals,
    MatchupResult,
    roster_totals,
    score_matchup,
    score_rosters,
)
from .service import SimulationAborted, SimulationOutcome, run_simulation, run_trial, trial_seeds

__all__ = [
    "CATEGORIES",
    "WIN_THRESHOLD",
    "CategoryTotals",
    "DraftError",
    "DraftResult",
    "InsufficientCandidatesError",
    "InvalidRosterSizeError",
    "MatchupResult",
    "SimulationAborted",
    "SimulationOutcome",
    "draft_rosters",
    "draft_step",
    "roster_totals",
    "run_simulation",
    "run_trial",
    "sample_without_replacement",
    "score_matchup",
    "score_rosters",
    "trial_seeds",
]
