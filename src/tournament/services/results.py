"""Builds a match :class:`Result` from names, checked against the two teams playing."""

from __future__ import annotations

from typing import Any, Mapping

from tournament.exceptions import InvalidResultError
from tournament.models import Result, Team
from tournament.persistence import TournamentStore, normalize_name


class ResultResolver:
    def __init__(self, store: TournamentStore):
        self._store = store

    def resolve(self, result: Mapping[str, Any], first_team: Team, second_team: Team) -> Result:
        winner_name = (result.get("winner") or "").strip()
        winner = _pick_team(winner_name, first_team, second_team)
        if winner is None:
            raise InvalidResultError(
                "result.winner",
                f"Winner must be either '{first_team.team_name}' or '{second_team.team_name}'",
            )

        mom_name = (result.get("man_of_the_match_name") or "").strip()
        candidates = self._store.players.find_all_by_name(mom_name) if mom_name else []
        if not candidates:
            raise InvalidResultError(
                "result.manOfTheMatchName",
                f"Player not found with name: {mom_name}",
            )
        playing = {first_team.id, second_team.id}
        man_of_the_match = next((p for p in candidates if p.team_id in playing), None)
        if man_of_the_match is None:
            raise InvalidResultError(
                "result.manOfTheMatchName",
                f"Man of the match must be a player from '{first_team.team_name}' or '{second_team.team_name}'",
            )

        return Result(
            winner=winner.id,
            margin=result.get("margin"),
            man_of_the_match_id=man_of_the_match.id,
        )


def _pick_team(name: str, first_team: Team, second_team: Team) -> Team | None:
    wanted = normalize_name(name)
    for team in (first_team, second_team):
        if normalize_name(team.team_name) == wanted:
            return team
    return None
