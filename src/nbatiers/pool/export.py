"""CSV export of the tier-labelled player table."""

from __future__ import annotations

import csv
from io import StringIO
from pathlib import Path

from nbatiers.models import PlayerRecord
from nbatiers.pool.draft_pool import DraftPool


def labelled_columns() -> tuple[str, ...]:
    fields = [name for name in PlayerRecord.model_fields if name not in {"name", "cluster"}]
    return ("name", "cluster", *fields)


def export_pool_to_csv(pool: DraftPool) -> str:
    """Render every pool player with its tier label, in pool order."""

    columns = labelled_columns()
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(columns)
    for player in pool.players:
        writer.writerow([getattr(player, column) for column in columns])
    return buffer.getvalue()


def write_pool_csv(pool: DraftPool, path: Path) -> None:
    with path.open("w", newline="", encoding="utf-8") as f:
        f.write(export_pool_to_csv(pool))


__all__ = [
    "export_pool_to_csv",
    "labelled_columns",
    "write_pool_csv",
]
