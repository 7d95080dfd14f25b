from collections import defaultdict

import pytest

from nbatiers.cluster import InsufficientDataError, assign_clusters, standardize_records

from tests.factories import league_records


def _standardized():
    return standardize_records(league_records())


def test_assignment_is_deterministic_for_a_seed():
    standardized = _standardized()
    first = assign_clusters(standardized, k=3, restarts=20, seed=123456)
    second = assign_clusters(standardized, k=3, restarts=20, seed=123456)

    assert first.labels == second.labels
    assert first.inertia == pytest.approx(second.inertia)
    assert first == second
    assert hash(first) == hash(second)


def test_assignments_with_different_seeds_compare_unequal():
    standardized = _standardized()
    first = assign_clusters(standardized, k=3, seed=1)
    second = assign_clusters(standardized, k=3, seed=2)

    assert first != second


def test_every_player_gets_one_label_in_range():
    standardized = _standardized()
    assignment = assign_clusters(standardized, k=3)

    assert set(assignment.labels) == set(standardized.names)
    assert set(assignment.labels.values()) == {1, 2, 3}
    assert all(size > 0 for size in assignment.sizes().values())
    assert assignment.centroids.shape == (3, 9)


def test_separated_profiles_share_labels():
    assignment = assign_clusters(_standardized(), k=3)

    labels_by_profile = defaultdict(set)
    for name, label in assignment.labels.items():
        labels_by_profile[name.split()[0]].add(label)

    assert all(len(labels) == 1 for labels in labels_by_profile.values())
    assert len({next(iter(labels)) for labels in labels_by_profile.values()}) == 3
    assert sorted(assignment.sizes().values()) == [12, 12, 20]


def test_members_lists_names_for_label():
    assignment = assign_clusters(_standardized(), k=3)
    top_label = assignment.labels["top PG 1"]

    members = assignment.members(top_label)
    assert len(members) == 20
    assert all(name.startswith("top") for name in members)


def test_more_clusters_than_players_raises():
    standardized = standardize_records(league_records()[:2])
    with pytest.raises(InsufficientDataError):
        assign_clusters(standardized, k=3)
