import csv
from io import StringIO
from pathlib import Path

import numpy as np
import pytest

from nbatiers.cluster import CLUSTER_COLUMNS, ClusterAssignment
from nbatiers.pool import (
    DuplicatePlayerError,
    UnmatchedPlayerError,
    build_draft_pool,
    cluster_profiles,
    export_pool_to_csv,
    format_profiles,
    write_pool_csv,
)

from tests.factories import PROFILES, labelled_pool, league_records, make_player


def _assignment(labels: dict[str, int]) -> ClusterAssignment:
    return ClusterAssignment(
        labels=labels,
        centroids=np.zeros((3, len(CLUSTER_COLUMNS))),
        columns=CLUSTER_COLUMNS,
        inertia=0.0,
        k=3,
        seed=0,
        restarts=1,
    )


def test_build_draft_pool_joins_labels_by_name():
    records = [
        make_player("Alpha", "PG", "top"),
        make_player("Bravo", "C", "big"),
    ]
    pool = build_draft_pool(records, _assignment({"Bravo": 3, "Alpha": 1}))

    assert len(pool) == 2
    assert pool.get("Alpha").cluster == 1
    assert pool.get("Bravo").cluster == 3
    assert "Charlie" not in pool
    assert records[0].cluster is None


def test_unmatched_players_are_reported_from_both_sides():
    records = [make_player("Alpha", "PG", "top"), make_player("Bravo", "C", "big")]

    with pytest.raises(UnmatchedPlayerError) as excinfo:
        build_draft_pool(records, _assignment({"Alpha": 1, "Zulu": 2}))

    assert excinfo.value.missing_labels == ["Bravo"]
    assert excinfo.value.missing_records == ["Zulu"]


def test_duplicate_names_are_rejected():
    records = [make_player("Alpha", "PG", "top"), make_player("Alpha", "SG", "small")]
    with pytest.raises(DuplicatePlayerError):
        build_draft_pool(records, _assignment({"Alpha": 1}))


def test_views_are_private_to_each_trial():
    pool = labelled_pool()
    first = pool.view()
    second = pool.view()

    first.remove([pool.get("top PG 1")])

    assert len(first) == len(pool) - 1
    assert len(second) == len(pool)
    assert "top PG 1" in pool


def test_tier_position_counts_reflect_layout():
    counts = labelled_pool().tier_position_counts()

    assert counts[(1, "PG")] == 4
    assert counts[(2, "SF")] == 4
    assert (2, "C") not in counts
    assert sum(counts.values()) == 44


def test_cluster_profiles_average_raw_stats():
    profiles = cluster_profiles(labelled_pool())

    assert [profile.label for profile in profiles] == [1, 2, 3]
    assert [profile.size for profile in profiles] == [20, 12, 12]
    big = profiles[2]
    assert big.positions == {"SF": 4, "PF": 4, "C": 4}
    assert big.means["blocks"] > profiles[1].means["blocks"]
    assert big.medians["three_pointers"] == pytest.approx(PROFILES["big"]["three_pointers"], abs=1)
    assert "cluster" in format_profiles(profiles).splitlines()[0]


def test_export_pool_to_csv_writes_labels(tmp_path: Path):
    pool = labelled_pool()
    rows = list(csv.DictReader(StringIO(export_pool_to_csv(pool))))

    assert len(rows) == len(league_records())
    assert list(rows[0])[:2] == ["name", "cluster"]
    assert rows[0]["name"] == "top PG 1"
    assert rows[0]["cluster"] == "1"

    path = tmp_path / "labelled.csv"
    write_pool_csv(pool, path)
    assert path.read_text(encoding="utf-8").startswith("name,cluster,position")
