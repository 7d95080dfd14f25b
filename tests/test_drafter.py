import random

import pytest

from nbatiers.config import get_script
from nbatiers.simulation import (
    InsufficientCandidatesError,
    InvalidRosterSizeError,
    draft_rosters,
    sample_without_replacement,
)
from nbatiers.config.strategy import DraftScript, DraftStep

from tests.factories import TIERS, labelled_pool


SCRIPT = get_script("guards_vs_bigs")


def test_sample_without_replacement_removes_picks():
    pool = labelled_pool()
    view = pool.view()
    rng = random.Random(5)

    picks = sample_without_replacement(view, lambda p: p.position == "C", 3, rng)

    assert len(picks) == 3
    assert len({p.name for p in picks}) == 3
    assert all(p.position == "C" for p in picks)
    assert len(view) == len(pool) - 3
    assert not any(p.name in {pick.name for pick in picks} for p in view)


def test_sample_without_replacement_surfaces_shortfall():
    view = labelled_pool().view()
    with pytest.raises(InsufficientCandidatesError) as excinfo:
        sample_without_replacement(view, lambda p: p.position == "C", 13, random.Random(1), step="centers")

    assert excinfo.value.step == "centers"
    assert excinfo.value.required == 13
    assert excinfo.value.available == 12
    assert len(view) == 44


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 42])
def test_rosters_have_ten_distinct_players(seed: int):
    result = draft_rosters(labelled_pool(), SCRIPT, TIERS, random.Random(seed))

    for key in ("small", "big"):
        roster = result.roster(key)
        assert len(roster) == 10
        assert len({p.name for p in roster}) == 10


@pytest.mark.parametrize("seed", [7, 8, 9])
def test_only_the_first_five_is_shared(seed: int):
    result = draft_rosters(labelled_pool(), SCRIPT, TIERS, random.Random(seed))
    small = result.roster("small")
    big = result.roster("big")

    first_five = {p.name for p in small[:5]}
    assert first_five == {p.name for p in big[:5]}
    assert {p.position for p in small[:5]} == {"PG", "SG", "SF", "PF", "C"}

    rest = [p.name for p in small[5:]] + [p.name for p in big[5:]]
    assert len(rest) == 10
    assert len(set(rest)) == 10
    assert not set(rest) & first_five


def test_each_pick_satisfies_its_step():
    result = draft_rosters(labelled_pool(), SCRIPT, TIERS, random.Random(11))
    small = result.roster("small")
    big = result.roster("big")

    assert all(p.cluster == TIERS.top for p in small[:6])
    assert small[5].position in {"SF", "PF"}
    assert all(p.cluster == TIERS.small_heavy and p.position not in {"PF", "C"} for p in small[6:])

    assert all(p.cluster == TIERS.top for p in big[:6])
    assert big[5].position in {"PG", "SG"}
    assert big[6].cluster == TIERS.big_heavy and big[6].position != "C"
    assert all(p.cluster == TIERS.big_heavy and p.position not in {"PG", "SG"} for p in big[7:])


def test_draft_is_reproducible_for_a_seed():
    pool = labelled_pool()
    first = draft_rosters(pool, SCRIPT, TIERS, random.Random(99))
    second = draft_rosters(pool, SCRIPT, TIERS, random.Random(99))

    assert first == second


def test_short_small_tier_raises_instead_of_short_roster():
    layout = {
        "top": {"PG": 2, "SG": 2, "SF": 2, "PF": 2, "C": 2},
        "small": {"PG": 1, "SG": 1, "SF": 1, "PF": 3},
        "big": {"SF": 2, "PF": 2, "C": 2},
    }
    pool = labelled_pool(layout)

    with pytest.raises(InsufficientCandidatesError) as excinfo:
        draft_rosters(pool, SCRIPT, TIERS, random.Random(0))

    assert excinfo.value.step == "small_utility"
    assert excinfo.value.required == 4
    assert excinfo.value.available == 3
    assert "small_heavy" in str(excinfo.value)


def test_short_script_fails_roster_size_check():
    script = DraftScript(
        key="short",
        rosters=("small", "big"),
        designated="small",
        roster_size=10,
        steps=(
            DraftStep(name="only", tier="top", count=2, destinations=("small", "big")),
        ),
    )
    with pytest.raises(InvalidRosterSizeError) as excinfo:
        draft_rosters(labelled_pool(), script, TIERS, random.Random(0))

    assert excinfo.value.expected == 10
    assert excinfo.value.actual == 2
