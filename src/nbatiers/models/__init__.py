"""Shared data models."""

from .player import PRIMARY_POSITIONS, PlayerRecord, Position

__all__ = ["PRIMARY_POSITIONS", "PlayerRecord", "Position"]
