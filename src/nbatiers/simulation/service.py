"""Monte Carlo driver comparing the two draft strategies."""

from __future__ import annotations

from dataclasses import dataclass, replace
import logging
import multiprocessing as mp
import random
import time
from typing import List, Optional, Sequence

from nbatiers.config.strategy import DEFAULT_SCRIPT, DraftScript, TierMap, get_script
from nbatiers.pool.draft_pool import DraftPool
from nbatiers.simulation.drafter import DraftError, draft_rosters
from nbatiers.simulation.scoring import MatchupResult, score_rosters


logger = logging.getLogger(__name__)

_SEED_BITS = 63
_DEFAULT_TRIALS_PER_JOB = 1000


class SimulationAborted(RuntimeError):
    """Raised in the parent when a worker batch fails."""


@dataclass(frozen=True)
class SimulationOutcome:
    """Immutable tally of scored trials for the designated strategy."""

    trials: int = 0
    wins: int = 0
    losses: int = 0
    undecided: int = 0
    category_ties: int = 0
    aborted: int = 0

    @classmethod
    def from_matchup(cls, result: MatchupResult) -> "SimulationOutcome":
        winner = result.winner
        return cls(
            trials=1,
            wins=1 if winner == "a" else 0,
            losses=1 if winner == "b" else 0,
            undecided=1 if winner is None else 0,
            category_ties=result.ties,
        )

    def merge(self, other: "SimulationOutcome") -> "SimulationOutcome":
        return SimulationOutcome(
            trials=self.trials + other.trials,
            wins=self.wins + other.wins,
            losses=self.losses + other.losses,
            undecided=self.undecided + other.undecided,
            category_ties=self.category_ties + other.category_ties,
            aborted=self.aborted + other.aborted,
        )

    @property
    def win_rate(self) -> float:
        return self.wins / self.trials if self.trials else 0.0

    def as_pair(self) -> tuple[int, int]:
        return self.wins, self.trials


class SimulationJobConfig:
    def __init__(self, job_id: int, seeds: Sequence[int], pool: DraftPool, script_key: str,
                 tiers: TierMap, strict: bool):
        self.job_id = job_id
        self.seeds = list(seeds)
        self.pool = pool
        self.script_key = script_key
        self.tiers = tiers
        self.strict = strict


class SimulationJobResult:
    def __init__(self, job_id: int, outcome: SimulationOutcome, error: str | None = None):
        self.job_id = job_id
        self.outcome = outcome
        self.error = error


def run_trial(pool: DraftPool, script: DraftScript, tiers: TierMap, seed: int) -> SimulationOutcome:
    """Draft both rosters from a fresh view and score the designated side."""

    rng = random.Random(seed)
    draft = draft_rosters(pool, script, tiers, rng)
    opponent = next(key for key in script.rosters if key != script.designated)
    result = score_rosters(draft.roster(script.designated), draft.roster(opponent))
    return SimulationOutcome.from_matchup(result)


def _run_job(config: SimulationJobConfig) -> SimulationJobResult:
    script = get_script(config.script_key)
    outcome = SimulationOutcome()
    for seed in config.seeds:
        try:
            outcome = outcome.merge(run_trial(config.pool, script, config.tiers, seed))
        except DraftError as exc:
            if config.strict:
                raise
            logger.warning("Trial with seed %s aborted: %s", seed, exc)
            outcome = replace(outcome, aborted=outcome.aborted + 1)
    return SimulationJobResult(config.job_id, outcome)


def _simulation_worker(config: SimulationJobConfig, queue: mp.Queue) -> None:
    try:
        queue.put(_run_job(config))
    except Exception as exc:  # pragma: no cover - worker errors bubble to parent
        # Draft errors do not survive pickling with their extra fields; ship the message.
        queue.put(SimulationJobResult(config.job_id, SimulationOutcome(), error=f"{type(exc).__name__}: {exc}"))


def trial_seeds(seed: int, trials: int) -> List[int]:
    """Derive one independent seed per trial from the run seed."""

    master = random.Random(seed)
    return [master.getrandbits(_SEED_BITS) for _ in range(trials)]


def _batches(seeds: Sequence[int], per_job: int) -> List[List[int]]:
    return [list(seeds[start:start + per_job]) for start in range(0, len(seeds), per_job)]


def run_simulation(
    pool: DraftPool,
    tiers: TierMap,
    *,
    trials: int = 10_000,
    seed: int = 20210609,
    script: str = DEFAULT_SCRIPT,
    workers: int = 1,
    trials_per_job: Optional[int] = None,
    strict: bool = False,
) -> SimulationOutcome:
    """Run ``trials`` independent draft-and-score trials.

    Every trial gets its own seed derived from ``seed`` up front, so the tally
    does not depend on ``workers`` or on batch sizes. A failed draft aborts
    only its own trial, which is counted as aborted and left unscored. With
    ``strict=True`` the first failed draft aborts the whole run instead
    (re-raised as is when running in-process, wrapped in
    :class:`SimulationAborted` from a worker).
    """

    if trials < 0:
        raise ValueError(f"trials must be non-negative, got {trials}")
    draft_script = get_script(script)
    tiers.validate_for(pool.k)
    if trials == 0:
        return SimulationOutcome()

    workers = max(1, workers)
    seeds = trial_seeds(seed, trials)
    per_job = trials_per_job or max(1, min(_DEFAULT_TRIALS_PER_JOB, -(-trials // workers)))
    batches = _batches(seeds, max(1, per_job))
    counts = pool.tier_position_counts()
    pos_log = ", ".join(f"{tier}/{pos}:{count}" for (tier, pos), count in sorted(counts.items()))

    run_start = time.perf_counter()
    logger.info(
        "Starting simulation – trials=%s, workers=%s, per_job=%s, script=%s, seed=%s, pool=%s, tiers=%s",
        trials,
        workers,
        per_job,
        draft_script.key,
        seed,
        len(pool),
        pos_log,
    )

    outcome = SimulationOutcome()

    def apply_result(result: SimulationJobResult, batch_start: float) -> None:
        nonlocal outcome
        outcome = outcome.merge(result.outcome)
        logger.info(
            "Batch %s completed – %s trials (%s wins); total %s/%s (total %.2fs, batch %.2fs)",
            result.job_id,
            result.outcome.trials,
            result.outcome.wins,
            outcome.trials + outcome.aborted,
            trials,
            time.perf_counter() - run_start,
            time.perf_counter() - batch_start,
        )
        if result.error:
            raise SimulationAborted(f"Batch {result.job_id} failed: {result.error}")

    if workers == 1 or len(batches) == 1:
        for job_id, batch in enumerate(batches):
            batch_start = time.perf_counter()
            config = SimulationJobConfig(job_id, batch, pool, draft_script.key, tiers, strict)
            apply_result(_run_job(config), batch_start)
    else:
        ctx = mp.get_context("spawn")
        queue: mp.Queue = ctx.Queue()
        processes: dict[int, mp.Process] = {}
        started: dict[int, float] = {}
        pending = list(enumerate(batches))

        def start_job() -> None:
            job_id, batch = pending.pop(0)
            config = SimulationJobConfig(job_id, batch, pool, draft_script.key, tiers, strict)
            logger.info("Dispatching batch %s – %s trials", job_id, len(batch))
            proc = ctx.Process(target=_simulation_worker, args=(config, queue))
            proc.start()
            processes[job_id] = proc
            started[job_id] = time.perf_counter()

        try:
            while len(processes) < workers and pending:
                start_job()
            while processes:
                result = queue.get()
                proc = processes.pop(result.job_id, None)
                if proc is not None:
                    proc.join()
                apply_result(result, started.pop(result.job_id, run_start))
                while len(processes) < workers and pending:
                    start_job()
        finally:
            for proc in processes.values():
                if proc.is_alive():
                    proc.terminate()
                proc.join()

    logger.info(
        "Simulation finished – %s/%s wins (%.2f%%), %s losses, %s undecided, %s category ties, "
        "%s aborted in %.2fs",
        outcome.wins,
        outcome.trials,
        outcome.win_rate * 100.0,
        outcome.losses,
        outcome.undecided,
        outcome.category_ties,
        outcome.aborted,
        time.perf_counter() - run_start,
    )
    return outcome
