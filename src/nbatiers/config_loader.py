"""Persist and load operator tier profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Dict

from nbatiers.config.strategy import TierMap


@dataclass
class TierProfile:
    tiers: TierMap
    column_mapping: Dict[str, str]

    @classmethod
    def load(cls, path: Path) -> "TierProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        tiers = data.get("tiers", {})
        return cls(
            tiers=TierMap(
                top=int(tiers["top"]),
                small_heavy=int(tiers["small_heavy"]),
                big_heavy=int(tiers["big_heavy"]),
            ),
            column_mapping=data.get("column_mapping", {}),
        )

    def save(self, path: Path) -> None:
        payload = {
            "tiers": {
                "top": self.tiers.top,
                "small_heavy": self.tiers.small_heavy,
                "big_heavy": self.tiers.big_heavy,
            },
            "column_mapping": self.column_mapping,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
