"""Command-line interface for tier clustering and draft strategy simulation."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

from nbatiers.analysis import win_count_test
from nbatiers.cluster import (
    ClusterAssignment,
    assign_clusters,
    evaluate_cluster_counts,
    standardize_records,
)
from nbatiers.config import AnalysisSettings, TierMap, parse_tier_map
from nbatiers.config_loader import TierProfile
from nbatiers.ingest import load_players_from_csv
from nbatiers.models import PlayerRecord
from nbatiers.pool import DraftPool, build_draft_pool, cluster_profiles, format_profiles, write_pool_csv
from nbatiers.simulation import run_simulation


def _parse_args(argv: Sequence[str] | None, settings: AnalysisSettings) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Cluster NBA players into tiers and simulate draft strategies")
    parser.add_argument("--log-level", default="INFO", help="Logging level (e.g., DEBUG, INFO, WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("season", type=Path, help="Path to season totals CSV")
        p.add_argument(
            "--column",
            action="append",
            default=[],
            help="Mapping for season CSV columns (e.g., name=Player)",
        )

    def add_clustering(p: argparse.ArgumentParser) -> None:
        p.add_argument("--k", type=int, default=settings.k, help="Number of clusters")
        p.add_argument("--restarts", type=int, default=settings.restarts, help="Random restarts for k-means")
        p.add_argument("--cluster-seed", type=int, default=settings.cluster_seed, help="Seed for k-means")

    diagnose = sub.add_parser("diagnose", help="Evaluate candidate cluster counts")
    add_common(diagnose)
    diagnose.add_argument("--k-max", type=int, default=settings.k_max, help="Largest k to evaluate")
    diagnose.add_argument("--bootstraps", type=int, default=settings.bootstraps, help="Gap reference sets")
    diagnose.add_argument("--restarts", type=int, default=10, help="Random restarts per k-means fit")
    diagnose.add_argument("--gap-restarts", type=int, default=25, help="Random restarts for gap statistic fits")
    diagnose.add_argument("--seed", type=int, default=settings.selection_seed, help="Seed for diagnostics")
    diagnose.add_argument("--output", type=Path, default=None, help="Optional path to write diagnostics JSON")

    cluster = sub.add_parser("cluster", help="Assign tiers and print cluster profiles")
    add_common(cluster)
    add_clustering(cluster)
    cluster.add_argument("--output", type=Path, default=None, help="Optional path to write the labelled CSV")

    simulate = sub.add_parser("simulate", help="Compare the guard-heavy and big-heavy draft strategies")
    add_common(simulate)
    add_clustering(simulate)
    simulate.add_argument("--tiers", default=None, help="Tier labels, e.g. top=3,small=1,big=2")
    simulate.add_argument("--load-profile", type=Path, default=None, help="Load tier profile JSON")
    simulate.add_argument("--save-profile", type=Path, default=None, help="Save tier profile JSON")
    simulate.add_argument("--trials", type=int, default=settings.trials, help="Number of simulated drafts")
    simulate.add_argument("--seed", type=int, default=settings.simulation_seed, help="Seed for the simulation")
    simulate.add_argument("--workers", type=int, default=settings.workers, help="Worker processes")
    simulate.add_argument("--trials-per-job", type=int, default=None, help="Trials per worker batch")
    simulate.add_argument(
        "--strict",
        action="store_true",
        help="Abort the whole run on the first failed draft instead of skipping that trial",
    )
    simulate.add_argument("--report", type=Path, default=None, help="Optional path to write result JSON")
    return parser.parse_args(argv)


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def _load_records(path: Path, mapping: dict[str, str]) -> list[PlayerRecord]:
    records, report = load_players_from_csv(path, mapping=mapping or None)
    print(
        f"Loaded {report.kept_players} players from {report.total_rows} rows "
        f"({report.duplicate_rows} duplicate rows, {report.low_minutes_dropped} below "
        f"{report.minutes_threshold:.0f} minutes)"
    )
    return records


def _cluster(records: list[PlayerRecord], args: argparse.Namespace) -> tuple[ClusterAssignment, DraftPool]:
    standardized = standardize_records(records)
    assignment = assign_clusters(standardized, k=args.k, restarts=args.restarts, seed=args.cluster_seed)
    return assignment, build_draft_pool(records, assignment)


def _run_diagnose(args: argparse.Namespace, records: list[PlayerRecord]) -> None:
    diagnostics = evaluate_cluster_counts(
        standardize_records(records),
        k_max=args.k_max,
        bootstraps=args.bootstraps,
        restarts=args.restarts,
        gap_restarts=args.gap_restarts,
        seed=args.seed,
    )
    print(f"{'k':>3}  {'within_ss':>12}  {'silhouette':>10}  {'gap':>8}  {'gap_se':>8}")
    for row in diagnostics.as_rows():
        print(
            f"{row['k']:>3}  {row['within_ss']:>12.2f}  {row['silhouette']:>10.4f}  "
            f"{row['gap']:>8.4f}  {row['gap_se']:>8.4f}"
        )
    print(
        f"Silhouette peaks at k={diagnostics.best_silhouette_k()}; "
        f"gap (first SE max) suggests k={diagnostics.gap_first_se_max_k()}"
    )
    if args.output:
        payload = {
            "bootstraps": diagnostics.bootstraps,
            "seed": diagnostics.seed,
            "candidates": diagnostics.as_rows(),
        }
        args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        print(f"Wrote diagnostics to {args.output}")


def _run_cluster(args: argparse.Namespace, records: list[PlayerRecord]) -> None:
    assignment, pool = _cluster(records, args)
    print(format_profiles(cluster_profiles(pool)))
    if args.output:
        write_pool_csv(pool, args.output)
        print(f"Wrote labelled players to {args.output}")


def _resolve_tiers(args: argparse.Namespace, mapping: dict[str, str]) -> TierMap:
    tiers: TierMap | None = None
    if args.load_profile:
        profile = TierProfile.load(args.load_profile)
        tiers = profile.tiers
        mapping.update({k: v for k, v in profile.column_mapping.items() if k not in mapping})
    if args.tiers:
        tiers = parse_tier_map(args.tiers)
    if tiers is None:
        raise SystemExit(
            "simulate needs tier labels: run `nbatiers cluster` first, then pass --tiers or --load-profile"
        )
    return tiers


def _run_simulate(args: argparse.Namespace, records: list[PlayerRecord], tiers: TierMap,
                  mapping: dict[str, str]) -> None:
    _, pool = _cluster(records, args)
    if args.save_profile:
        TierProfile(tiers, mapping).save(args.save_profile)
        print(f"Saved tier profile to {args.save_profile}")

    outcome = run_simulation(
        pool,
        tiers,
        trials=args.trials,
        seed=args.seed,
        workers=args.workers,
        trials_per_job=args.trials_per_job,
        strict=args.strict,
    )
    print(
        f"Guard-heavy strategy won {outcome.wins}/{outcome.trials} trials "
        f"({outcome.win_rate:.2%}); {outcome.losses} losses, {outcome.undecided} undecided, "
        f"{outcome.category_ties} tied categories"
    )
    if outcome.aborted:
        print(f"{outcome.aborted} trials aborted during the draft")

    report: dict[str, object] = {
        "trials": outcome.trials,
        "wins": outcome.wins,
        "losses": outcome.losses,
        "undecided": outcome.undecided,
        "category_ties": outcome.category_ties,
        "aborted": outcome.aborted,
        "seed": args.seed,
    }
    if outcome.trials:
        test = win_count_test(outcome.wins, outcome.trials)
        print(
            f"z={test.z_score:.2f} (p={test.p_value:.3g}); 95% range {test.interval_95[0]}-{test.interval_95[1]}, "
            f"99% range {test.interval_99[0]}-{test.interval_99[1]}"
        )
        report["hypothesis"] = {
            "z_score": test.z_score,
            "p_value": test.p_value,
            "interval_95": list(test.interval_95),
            "interval_99": list(test.interval_99),
            "observed_pmf": test.observed_pmf,
            "reject_95": test.reject_95,
            "reject_99": test.reject_99,
        }
    if args.report:
        args.report.write_text(json.dumps(report, indent=2), encoding="utf-8")
        print(f"Wrote simulation report to {args.report}")


def main(argv: Sequence[str] | None = None) -> None:
    settings = AnalysisSettings.from_env()
    args = _parse_args(argv, settings)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    mapping = _parse_mapping(args.column)
    tiers = _resolve_tiers(args, mapping) if args.command == "simulate" else None
    records = _load_records(args.season, mapping)

    if args.command == "diagnose":
        _run_diagnose(args, records)
    elif args.command == "cluster":
        _run_cluster(args, records)
    else:
        _run_simulate(args, records, tiers, mapping)


if __name__ == "__main__":
    main()
