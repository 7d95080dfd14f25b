"""Input adapters that normalize raw season tables."""

from .season import (
    CleaningReport,
    SeasonRow,
    canonical_position,
    clean_season_rows,
    load_players_from_csv,
    load_season_csv,
    rows_to_records,
)

__all__ = [
    "CleaningReport",
    "SeasonRow",
    "canonical_position",
    "clean_season_rows",
    "load_players_from_csv",
    "load_season_csv",
    "rows_to_records",
]
