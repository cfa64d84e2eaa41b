"""Load tournament fixtures from a JSON seed file."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from tournament.api.schemas import MatchCreateRequest, PlayerCreateRequest, TeamCreateRequest
from tournament.services import Services


@dataclass
class SeedFile:
    """Teams, players and matches in the same camelCase shape the API accepts.

    Teams are created first with empty rosters, then players join them by
    ``teamName``. Any ``captainName`` or ``playerNames`` on a team entry is
    applied once all players exist. Matches come last.
    """

    teams: List[Dict[str, Any]] = field(default_factory=list)
    players: List[Dict[str, Any]] = field(default_factory=list)
    matches: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def load(cls, path: Path) -> "SeedFile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            teams=data.get("teams", []),
            players=data.get("players", []),
            matches=data.get("matches", []),
        )

    def save(self, path: Path) -> None:
        payload = {
            "teams": self.teams,
            "players": self.players,
            "matches": self.matches,
        }
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def apply(self, services: Services) -> Dict[str, int]:
        team_requests = [TeamCreateRequest.model_validate(entry) for entry in self.teams]
        player_requests = [PlayerCreateRequest.model_validate(entry) for entry in self.players]
        match_requests = [MatchCreateRequest.model_validate(entry) for entry in self.matches]

        created_teams = []
        for request in team_requests:
            created_teams.append(
                services.teams.create(
                    team_name=request.team_name,
                    home_ground=request.home_ground,
                    coach=request.coach,
                )
            )

        for request in player_requests:
            services.players.create(
                name=request.name,
                team_name=request.team_name,
                role=request.role,
                batting_style=request.batting_style,
                bowling_style=request.bowling_style,
                stats=request.stats.model_dump() if request.stats else None,
            )

        for team, request in zip(created_teams, team_requests):
            changes: Dict[str, Any] = {}
            if request.player_names:
                changes["player_names"] = request.player_names
            if request.captain_name:
                changes["captain_name"] = request.captain_name
            if changes:
                services.teams.patch(team.id, changes)

        for request in match_requests:
            services.matches.create(
                venue=request.venue,
                date=request.date,
                first_team_name=request.first_team_name,
                second_team_name=request.second_team_name,
                status=request.status,
                result=request.result.model_dump() if request.result else None,
            )

        return {
            "teams": len(team_requests),
            "players": len(player_requests),
            "matches": len(match_requests),
        }
