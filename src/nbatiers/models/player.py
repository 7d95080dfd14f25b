"""Canonical player models shared across ingestion, clustering and simulation."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


PRIMARY_POSITIONS: tuple[str, ...] = ("PG", "SG", "SF", "PF", "C")

Position = Literal["PG", "SG", "SF", "PF", "C"]


class PlayerRecord(BaseModel):
    """Season totals for one player after cleaning."""

    name: str = Field(..., min_length=1)
    position: Position
    team: str
    games_played: int = Field(..., ge=0)
    minutes_played: int = Field(..., ge=0)
    fg_made: int = Field(..., ge=0)
    fg_attempted: int = Field(..., ge=0)
    fg_pct: float = Field(..., ge=0.0, le=1.0)
    three_pointers: int = Field(..., ge=0)
    ft_made: int = Field(..., ge=0)
    ft_attempted: int = Field(..., ge=0)
    ft_pct: float = Field(..., ge=0.0, le=1.0)
    rebounds: int = Field(..., ge=0)
    assists: int = Field(..., ge=0)
    steals: int = Field(..., ge=0)
    blocks: int = Field(..., ge=0)
    turnovers: int = Field(..., ge=0)
    points: int = Field(..., ge=0)
    cluster: Optional[int] = Field(default=None, ge=1)

    model_config = ConfigDict(frozen=True)
