import csv
import json
from pathlib import Path

import pytest

from nbatiers.cli import _parse_mapping, main

from tests.factories import write_league_csv


def _tier_labels(labelled_csv: Path) -> dict[str, int]:
    labels: dict[str, set[str]] = {}
    with labelled_csv.open(newline="", encoding="utf-8") as f:
        for row in csv.DictReader(f):
            labels.setdefault(row["name"].split()[0], set()).add(row["cluster"])
    assert all(len(values) == 1 for values in labels.values())
    return {profile: int(values.pop()) for profile, values in labels.items()}


def test_cluster_writes_labelled_csv(tmp_path: Path, capsys):
    season = write_league_csv(tmp_path / "season.csv")
    output = tmp_path / "labelled.csv"

    main(["cluster", str(season), "--output", str(output)])

    out = capsys.readouterr().out
    assert "Loaded 44 players from 44 rows" in out
    assert "cluster" in out
    labels = _tier_labels(output)
    assert sorted(labels.values()) == [1, 2, 3]


def test_simulate_reports_tally_and_hypothesis(tmp_path: Path, capsys):
    season = write_league_csv(tmp_path / "season.csv")
    labelled = tmp_path / "labelled.csv"
    main(["cluster", str(season), "--output", str(labelled)])
    labels = _tier_labels(labelled)
    capsys.readouterr()

    report = tmp_path / "report.json"
    profile = tmp_path / "profile.json"
    main([
        "simulate",
        str(season),
        "--tiers",
        f"top={labels['top']},small={labels['small']},big={labels['big']}",
        "--trials",
        "40",
        "--seed",
        "7",
        "--report",
        str(report),
        "--save-profile",
        str(profile),
    ])

    out = capsys.readouterr().out
    assert "Guard-heavy strategy won" in out
    payload = json.loads(report.read_text(encoding="utf-8"))
    assert payload["trials"] == 40
    assert 0 <= payload["wins"] <= 40
    assert payload["wins"] + payload["losses"] + payload["undecided"] == 40
    assert "z_score" in payload["hypothesis"]

    main(["simulate", str(season), "--load-profile", str(profile), "--trials", "40", "--seed", "7", "--strict"])
    assert f"won {payload['wins']}/40" in capsys.readouterr().out


def test_simulate_without_tiers_exits(tmp_path: Path):
    season = write_league_csv(tmp_path / "season.csv")
    with pytest.raises(SystemExit):
        main(["simulate", str(season), "--trials", "1"])


def test_diagnose_prints_candidate_table(tmp_path: Path, capsys):
    season = write_league_csv(tmp_path / "season.csv")
    output = tmp_path / "diagnostics.json"

    main(["diagnose", str(season), "--k-max", "4", "--bootstraps", "3", "--restarts", "2", "--output", str(output)])

    out = capsys.readouterr().out
    assert "Silhouette peaks at k=" in out
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert [row["k"] for row in payload["candidates"]] == [2, 3, 4]


def test_parse_mapping_rejects_bare_entries():
    assert _parse_mapping(["name=Player Name"]) == {"name": "Player Name"}
    with pytest.raises(ValueError):
        _parse_mapping(["name"])
