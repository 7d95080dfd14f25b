"""Helpers to load season totals CSVs and emit cleaned player records."""

from __future__ import annotations

import csv
import logging
import statistics
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel

from nbatiers.models import PRIMARY_POSITIONS, PlayerRecord


logger = logging.getLogger(__name__)


# Column names as exported by basketball-reference season totals tables.
DEFAULT_SEASON_MAPPING: dict[str, str] = {
    "name": "Player",
    "position": "Pos",
    "team": "Tm",
    "games_played": "G",
    "minutes_played": "MP",
    "fg_made": "FG",
    "fg_attempted": "FGA",
    "fg_pct": "FG%",
    "three_pointers": "3P",
    "ft_made": "FT",
    "ft_attempted": "FTA",
    "ft_pct": "FT%",
    "rebounds": "TRB",
    "assists": "AST",
    "steals": "STL",
    "blocks": "BLK",
    "turnovers": "TOV",
    "points": "PTS",
}

_COUNT_FIELDS: tuple[str, ...] = (
    "games_played",
    "minutes_played",
    "fg_made",
    "fg_attempted",
    "three_pointers",
    "ft_made",
    "ft_attempted",
    "rebounds",
    "assists",
    "steals",
    "blocks",
    "turnovers",
    "points",
)

_PERCENT_FIELDS: tuple[str, ...] = ("fg_pct", "ft_pct")

# Hybrid listings collapse onto the position the player logs most minutes at.
POSITION_ALIASES: dict[str, str] = {
    "C-PF": "C",
    "PG-SG": "PG",
    "SF-SG": "SF",
    "SG-PG": "SG",
    "SG-SF": "SG",
    "SF-PF": "SF",
    "PF-C": "PF",
    "PF-SF": "PF",
}


class SeasonRow(BaseModel):
    raw_name: str
    raw_position: str
    raw_team: str
    raw_stats: dict[str, Optional[str]]

    @classmethod
    def from_mapping(cls, row: Mapping[str, str], mapping: Mapping[str, str]) -> "SeasonRow":
        def extract(key: str) -> Optional[str]:
            column = mapping.get(key, DEFAULT_SEASON_MAPPING[key])
            value = row.get(column)
            return value.strip() if value is not None else None

        return cls(
            raw_name=extract("name") or "",
            raw_position=extract("position") or "",
            raw_team=extract("team") or "",
            raw_stats={key: extract(key) for key in _COUNT_FIELDS + _PERCENT_FIELDS},
        )


@dataclass(frozen=True)
class CleaningReport:
    total_rows: int
    duplicate_rows: int
    consolidated_positions: int
    low_minutes_dropped: int
    minutes_threshold: float
    kept_players: int


def load_season_csv(path: Path, *, mapping: Mapping[str, str] | None = None) -> List[SeasonRow]:
    mapping = mapping or DEFAULT_SEASON_MAPPING
    with path.open(newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)
        rows = [SeasonRow.from_mapping(row, mapping) for row in reader]
    return rows


def _parse_count(raw: Optional[str], *, field: str, player: str) -> int:
    # Missing values are treated as zero production.
    if raw is None or not raw.strip():
        return 0
    try:
        return int(float(raw))
    except ValueError:
        raise ValueError(f"{field} '{raw}' for {player!r} is not numeric") from None


def _parse_percentage(raw: Optional[str], *, field: str, player: str) -> float:
    if raw is None or not raw.strip():
        return 0.0
    text = raw.strip()
    if text.startswith("."):
        text = "0" + text
    try:
        value = float(text)
    except ValueError:
        raise ValueError(f"{field} '{raw}' for {player!r} is not numeric") from None
    if value < 0:
        return 0.0
    return value if value <= 1.0 else value / 100.0


def canonical_position(raw_position: str) -> str:
    """Collapse a listed position onto one of the five primary codes."""

    token = raw_position.strip().upper()
    if token in PRIMARY_POSITIONS:
        return token
    if token in POSITION_ALIASES:
        return POSITION_ALIASES[token]
    primary = token.split("-", 1)[0]
    if primary in PRIMARY_POSITIONS:
        return primary
    raise ValueError(f"Unrecognized position {raw_position!r}")


def rows_to_records(rows: Sequence[SeasonRow]) -> List[PlayerRecord]:
    records: List[PlayerRecord] = []
    for row in rows:
        stats: dict[str, object] = {}
        for field in _COUNT_FIELDS:
            stats[field] = _parse_count(row.raw_stats.get(field), field=field, player=row.raw_name)
        for field in _PERCENT_FIELDS:
            stats[field] = _parse_percentage(row.raw_stats.get(field), field=field, player=row.raw_name)
        records.append(
            PlayerRecord(
                name=row.raw_name,
                position=canonical_position(row.raw_position),
                team=row.raw_team.upper(),
                **stats,
            )
        )
    return records


def clean_season_rows(rows: Sequence[SeasonRow]) -> Tuple[List[PlayerRecord], CleaningReport]:
    """Deduplicate traded players, consolidate positions and drop low-usage players."""

    seen: set[str] = set()
    unique_rows: list[SeasonRow] = []
    duplicates = 0
    unnamed = 0
    for row in rows:
        if not row.raw_name:
            unnamed += 1
            continue
        # Traded players list their season total row first.
        if row.raw_name in seen:
            duplicates += 1
            continue
        seen.add(row.raw_name)
        unique_rows.append(row)

    if unnamed:
        logger.warning("Skipped %s season rows without a player name", unnamed)

    consolidated = sum(
        1 for row in unique_rows if row.raw_position.strip().upper() not in PRIMARY_POSITIONS
    )
    records = rows_to_records(unique_rows)

    threshold = float(statistics.median(r.minutes_played for r in records)) if records else 0.0
    kept = [record for record in records if record.minutes_played >= threshold]

    report = CleaningReport(
        total_rows=len(rows),
        duplicate_rows=duplicates,
        consolidated_positions=consolidated,
        low_minutes_dropped=len(records) - len(kept),
        minutes_threshold=threshold,
        kept_players=len(kept),
    )
    logger.info(
        "Cleaned season table: %s rows -> %s players (%s duplicate rows, %s positions consolidated, "
        "%s below %.1f minutes)",
        report.total_rows,
        report.kept_players,
        report.duplicate_rows,
        report.consolidated_positions,
        report.low_minutes_dropped,
        report.minutes_threshold,
    )
    return kept, report


def load_players_from_csv(
    path: Path,
    *,
    mapping: Mapping[str, str] | None = None,
) -> Tuple[List[PlayerRecord], CleaningReport]:
    return clean_season_rows(load_season_csv(path, mapping=mapping))
