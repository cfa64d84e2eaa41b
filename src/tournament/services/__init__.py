"""Lifecycle services that keep player, team and match references consistent."""

from __future__ import annotations

from dataclasses import dataclass

from tournament.config import SquadRules
from tournament.persistence import TournamentStore

from .matches import MatchService
from .players import PlayerService
from .results import ResultResolver
from .roster import RosterManager
from .teams import TeamService


@dataclass
class Services:
    store: TournamentStore
    roster: RosterManager
    players: PlayerService
    teams: TeamService
    matches: MatchService


def build_services(store: TournamentStore, rules: SquadRules | None = None) -> Services:
    """Wire every service against one store."""

    roster = RosterManager(store, rules)
    return Services(
        store=store,
        roster=roster,
        players=PlayerService(store, roster),
        teams=TeamService(store, roster),
        matches=MatchService(store, ResultResolver(store)),
    )


__all__ = [
    "MatchService",
    "PlayerService",
    "ResultResolver",
    "RosterManager",
    "Services",
    "TeamService",
    "build_services",
]
