"""Significance of a strategy's win count against a fair coin."""

from __future__ import annotations

import math
from dataclasses import dataclass

from scipy import stats


@dataclass(frozen=True)
class WinCountTest:
    wins: int
    trials: int
    null_rate: float
    expected: float
    std_dev: float
    z_score: float
    p_value: float
    interval_95: tuple[int, int]
    interval_99: tuple[int, int]
    observed_pmf: float

    @property
    def reject_95(self) -> bool:
        low, high = self.interval_95
        return not low <= self.wins <= high

    @property
    def reject_99(self) -> bool:
        low, high = self.interval_99
        return not low <= self.wins <= high


def _binomial_interval(trials: int, rate: float, level: float) -> tuple[int, int]:
    tail = (1.0 - level) / 2.0
    return (
        int(stats.binom.ppf(tail, trials, rate)),
        int(stats.binom.ppf(1.0 - tail, trials, rate)),
    )


def win_count_test(wins: int, trials: int, *, null_rate: float = 0.5) -> WinCountTest:
    """Normal approximation and binomial quantiles for ``wins`` out of ``trials``."""

    if trials <= 0:
        raise ValueError("trials must be positive to test a win count")
    if not 0 <= wins <= trials:
        raise ValueError(f"wins must lie in [0, {trials}], got {wins}")
    if not 0.0 < null_rate < 1.0:
        raise ValueError(f"null_rate must lie in (0, 1), got {null_rate}")

    expected = trials * null_rate
    std_dev = math.sqrt(trials * null_rate * (1.0 - null_rate))
    z_score = (wins - expected) / std_dev
    return WinCountTest(
        wins=wins,
        trials=trials,
        null_rate=null_rate,
        expected=expected,
        std_dev=std_dev,
        z_score=z_score,
        p_value=float(2.0 * stats.norm.sf(abs(z_score))),
        interval_95=_binomial_interval(trials, null_rate, 0.95),
        interval_99=_binomial_interval(trials, null_rate, 0.99),
        observed_pmf=float(stats.binom.pmf(wins, trials, null_rate)),
    )
