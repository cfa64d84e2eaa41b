"""Turn stored documents, which hold ids, into name-bearing API responses.

Each converter batch-loads the documents it refers to so a list endpoint costs
one query per referenced collection rather than one per row.
"""

from __future__ import annotations

from typing import Iterable, List

from tournament.api.schemas import (
    MatchResponse,
    PlayerResponse,
    PlayerSummary,
    ResultResponse,
    StatsResponse,
    TeamDetailsResponse,
    TeamResponse,
)
from tournament.models import Match, Player, Team
from tournament.persistence import TournamentStore


def player_responses(store: TournamentStore, players: Iterable[Player]) -> List[PlayerResponse]:
    players = list(players)
    teams = {
        team.id: team
        for team in store.teams.get_all_by_ids(p.team_id for p in players if p.team_id is not None)
    }
    responses: List[PlayerResponse] = []
    for player in players:
        team = teams.get(player.team_id) if player.team_id is not None else None
        responses.append(
            PlayerResponse(
                id=player.id,
                name=player.name,
                team_name=team.team_name if team else None,
                role=player.role,
                batting_style=player.batting_style,
                bowling_style=player.bowling_style,
                stats=StatsResponse(**player.stats.model_dump()),
            )
        )
    return responses


def player_response(store: TournamentStore, player: Player) -> PlayerResponse:
    return player_responses(store, [player])[0]


def team_responses(store: TournamentStore, teams: Iterable[Team]) -> List[TeamResponse]:
    teams = list(teams)
    players = {
        player.id: player
        for player in store.players.get_all_by_ids(pid for team in teams for pid in team.player_ids)
    }
    responses: List[TeamResponse] = []
    for team in teams:
        captain = players.get(team.captain_id) if team.captain_id is not None else None
        responses.append(
            TeamResponse(
                id=team.id,
                team_name=team.team_name,
                home_ground=team.home_ground,
                coach=team.coach,
                captain_name=captain.name if captain else None,
                player_names=[players[pid].name for pid in team.player_ids if pid in players],
            )
        )
    return responses


def team_response(store: TournamentStore, team: Team) -> TeamResponse:
    return team_responses(store, [team])[0]


def team_details_response(team: Team, squad: Iterable[Player]) -> TeamDetailsResponse:
    return TeamDetailsResponse(
        id=team.id,
        team_name=team.team_name,
        home_ground=team.home_ground,
        coach=team.coach,
        captain_id=team.captain_id,
        squad=[PlayerSummary(id=p.id, name=p.name, role=p.role) for p in squad],
    )


def match_responses(store: TournamentStore, matches: Iterable[Match]) -> List[MatchResponse]:
    matches = list(matches)
    team_ids = {tid for match in matches for tid in (match.first_team, match.second_team)}
    teams = {team.id: team for team in store.teams.get_all_by_ids(team_ids)}
    mom_ids = {match.result.man_of_the_match_id for match in matches if match.result is not None}
    players = {player.id: player for player in store.players.get_all_by_ids(mom_ids)}

    def team_name(team_id: int | None) -> str | None:
        team = teams.get(team_id) if team_id is not None else None
        return team.team_name if team else None

    responses: List[MatchResponse] = []
    for match in matches:
        result = None
        if match.result is not None:
            mom = players.get(match.result.man_of_the_match_id)
            result = ResultResponse(
                winner=team_name(match.result.winner),
                margin=match.result.margin,
                man_of_the_match=mom.name if mom else None,
            )
        responses.append(
            MatchResponse(
                id=match.id,
                venue=match.venue,
                date=match.date,
                first_team_name=team_name(match.first_team),
                second_team_name=team_name(match.second_team),
                status=match.status,
                result=result,
            )
        )
    return responses


def match_response(store: TournamentStore, match: Match) -> MatchResponse:
    return match_responses(store, [match])[0]
