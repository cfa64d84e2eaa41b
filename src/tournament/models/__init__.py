"""Stored document models for players, teams and matches."""

from .match import COMPLETED, SCHEDULED, Match, MatchStatus, Result
from .player import Player, Stats
from .team import Team

__all__ = [
    "COMPLETED",
    "SCHEDULED",
    "Match",
    "MatchStatus",
    "Player",
    "Result",
    "Stats",
    "Team",
]
