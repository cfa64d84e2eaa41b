"""REST API for the tournament data service."""

from __future__ import annotations

import logging
from typing import Any, List

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tournament.api import views
from tournament.api.schemas import (
    ApiResponse,
    MatchCreateRequest,
    MatchPatchRequest,
    MatchResponse,
    PlayerCreateRequest,
    PlayerPatchRequest,
    PlayerResponse,
    RoleCountResponse,
    TeamCreateRequest,
    TeamDetailsResponse,
    TeamPatchRequest,
    TeamResponse,
)
from tournament.config import Settings, load_settings
from tournament.exceptions import InvalidRequestError, NotFoundError
from tournament.persistence import TournamentStore
from tournament.services import build_services


logger = logging.getLogger("uvicorn.error")

API_PREFIX = "/api/v1"


def _error_response(status_code: int, message: str, data: Any = None) -> JSONResponse:
    payload = {"success": False, "message": message, "data": data}
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload))


def _field_name(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "request"


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        logger.warning("%s %s - %s", request.method, request.url.path, exc)
        return _error_response(status.HTTP_404_NOT_FOUND, str(exc))

    @app.exception_handler(InvalidRequestError)
    async def invalid_request(request: Request, exc: InvalidRequestError) -> JSONResponse:
        logger.warning("%s %s - %s", request.method, request.url.path, exc)
        return _error_response(status.HTTP_400_BAD_REQUEST, str(exc), {exc.field: exc.reason})

    @app.exception_handler(RequestValidationError)
    async def validation_failed(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors: dict[str, str] = {}
        for error in exc.errors():
            errors.setdefault(_field_name(tuple(error.get("loc", ()))), error.get("msg", "Invalid value"))
        logger.warning("%s %s - validation failed: %s", request.method, request.url.path, errors)
        return _error_response(status.HTTP_400_BAD_REQUEST, "Validation failed", errors)

    @app.exception_handler(Exception)
    async def unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("%s %s - unhandled error", request.method, request.url.path)
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "An unexpected error occurred")


def create_app(settings: Settings | None = None, *, store: TournamentStore | None = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="Tournament data API")
    store = store or TournamentStore(settings.db_path)
    services = build_services(store)
    app.state.store = store
    app.state.services = services
    logger.setLevel(settings.log_level)
    _register_error_handlers(app)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    # Players

    @app.get(f"{API_PREFIX}/players", response_model=ApiResponse[List[PlayerResponse]])
    async def list_players():
        logger.info("GET %s/players - Fetching all players", API_PREFIX)
        players = views.player_responses(store, services.players.list_all())
        return ApiResponse(success=True, message="Players retrieved successfully", data=players)

    @app.get(f"{API_PREFIX}/players/{{player_id}}", response_model=ApiResponse[PlayerResponse])
    async def get_player(player_id: int):
        player = services.players.get(player_id)
        return ApiResponse(
            success=True,
            message="Player retrieved successfully",
            data=views.player_response(store, player),
        )

    @app.post(
        f"{API_PREFIX}/players",
        response_model=ApiResponse[PlayerResponse],
        status_code=status.HTTP_201_CREATED,
    )
    async def create_player(request: PlayerCreateRequest):
        logger.info("POST %s/players - Creating player: %s", API_PREFIX, request.name)
        player = services.players.create(
            name=request.name,
            team_name=request.team_name,
            role=request.role,
            batting_style=request.batting_style,
            bowling_style=request.bowling_style,
            stats=request.stats.model_dump() if request.stats else None,
        )
        return ApiResponse(
            success=True,
            message="Player created successfully",
            data=views.player_response(store, player),
        )

    @app.put(f"{API_PREFIX}/players/update/{{player_id}}", response_model=ApiResponse[PlayerResponse])
    async def update_player(player_id: int, request: PlayerCreateRequest):
        logger.info("PUT %s/players/update/%s - Full update request", API_PREFIX, player_id)
        player = services.players.full_update(
            player_id,
            name=request.name,
            team_name=request.team_name,
            role=request.role,
            batting_style=request.batting_style,
            bowling_style=request.bowling_style,
            stats=request.stats.model_dump() if request.stats else None,
        )
        return ApiResponse(
            success=True,
            message="Player updated successfully",
            data=views.player_response(store, player),
        )

    @app.patch(f"{API_PREFIX}/players/update/{{player_id}}", response_model=ApiResponse[PlayerResponse])
    async def patch_player(player_id: int, request: PlayerPatchRequest):
        logger.info("PATCH %s/players/update/%s - Partial update request", API_PREFIX, player_id)
        player = services.players.partial_update(player_id, request.model_dump(exclude_unset=True))
        return ApiResponse(
            success=True,
            message="Player updated successfully",
            data=views.player_response(store, player),
        )

    @app.delete(f"{API_PREFIX}/players/{{player_id}}", response_model=ApiResponse[PlayerResponse])
    async def delete_player(player_id: int):
        logger.info("DELETE %s/players/%s", API_PREFIX, player_id)
        player = services.players.delete(player_id)
        return ApiResponse(
            success=True,
            message="Player deleted successfully",
            data=views.player_response(store, player),
        )

    # Teams

    @app.get(f"{API_PREFIX}/teams", response_model=ApiResponse[List[TeamResponse]])
    async def list_teams():
        logger.info("GET %s/teams - Fetching all teams", API_PREFIX)
        teams = views.team_responses(store, services.teams.list_all())
        return ApiResponse(success=True, message="Teams retrieved successfully", data=teams)

    @app.get(f"{API_PREFIX}/teams/{{team_id}}", response_model=ApiResponse[TeamResponse])
    async def get_team(team_id: int):
        team = services.teams.get(team_id)
        return ApiResponse(
            success=True,
            message="Team retrieved successfully",
            data=views.team_response(store, team),
        )

    @app.get(f"{API_PREFIX}/teams/{{team_id}}/details", response_model=ApiResponse[TeamDetailsResponse])
    async def get_team_details(team_id: int):
        team = services.teams.get(team_id)
        details = views.team_details_response(team, services.teams.squad(team_id))
        return ApiResponse(success=True, message="Team details retrieved successfully", data=details)

    @app.get(f"{API_PREFIX}/teams/{{team_id}}/role-count", response_model=ApiResponse[List[RoleCountResponse]])
    async def get_role_count(team_id: int):
        counts = [RoleCountResponse(**item) for item in services.teams.role_count(team_id)]
        return ApiResponse(success=True, message="Role count retrieved successfully", data=counts)

    @app.post(
        f"{API_PREFIX}/teams",
        response_model=ApiResponse[TeamResponse],
        status_code=status.HTTP_201_CREATED,
    )
    async def create_team(request: TeamCreateRequest):
        logger.info("POST %s/teams - Creating new team: %s", API_PREFIX, request.team_name)
        team = services.teams.create(
            team_name=request.team_name,
            home_ground=request.home_ground,
            coach=request.coach,
            captain_name=request.captain_name,
            player_names=request.player_names,
        )
        return ApiResponse(
            success=True,
            message="Team created successfully",
            data=views.team_response(store, team),
        )

    @app.put(f"{API_PREFIX}/teams/update/{{team_id}}", response_model=ApiResponse[TeamResponse])
    async def update_team(team_id: int, request: TeamCreateRequest):
        logger.info("PUT %s/teams/update/%s - Full update request", API_PREFIX, team_id)
        team = services.teams.full_update(
            team_id,
            team_name=request.team_name,
            home_ground=request.home_ground,
            coach=request.coach,
            captain_name=request.captain_name,
            player_names=request.player_names,
        )
        return ApiResponse(
            success=True,
            message="Team updated successfully",
            data=views.team_response(store, team),
        )

    @app.patch(f"{API_PREFIX}/teams/update/{{team_id}}", response_model=ApiResponse[TeamResponse])
    async def patch_team(team_id: int, request: TeamPatchRequest):
        logger.info("PATCH %s/teams/update/%s - Partial update request", API_PREFIX, team_id)
        team = services.teams.patch(team_id, request.model_dump(exclude_unset=True))
        return ApiResponse(
            success=True,
            message="Team updated successfully",
            data=views.team_response(store, team),
        )

    @app.delete(f"{API_PREFIX}/teams/{{team_id}}", response_model=ApiResponse[TeamResponse])
    async def delete_team(team_id: int):
        logger.info("DELETE %s/teams/%s", API_PREFIX, team_id)
        team = services.teams.delete(team_id)
        return ApiResponse(
            success=True,
            message="Team deleted successfully",
            data=views.team_response(store, team),
        )

    # Matches

    @app.get(f"{API_PREFIX}/matches", response_model=ApiResponse[List[MatchResponse]])
    async def list_matches():
        logger.info("GET %s/matches - Fetching all matches", API_PREFIX)
        matches = views.match_responses(store, services.matches.list_all())
        return ApiResponse(success=True, message="Matches retrieved successfully", data=matches)

    @app.get(f"{API_PREFIX}/matches/{{match_id}}", response_model=ApiResponse[MatchResponse])
    async def get_match(match_id: int):
        match = services.matches.get(match_id)
        return ApiResponse(
            success=True,
            message="Match retrieved successfully",
            data=views.match_response(store, match),
        )

    @app.post(
        f"{API_PREFIX}/matches",
        response_model=ApiResponse[MatchResponse],
        status_code=status.HTTP_201_CREATED,
    )
    async def create_match(request: MatchCreateRequest):
        logger.info(
            "POST %s/matches - Creating match: %s vs %s",
            API_PREFIX,
            request.first_team_name,
            request.second_team_name,
        )
        match = services.matches.create(
            venue=request.venue,
            date=request.date,
            first_team_name=request.first_team_name,
            second_team_name=request.second_team_name,
            status=request.status,
            result=request.result.model_dump() if request.result else None,
        )
        return ApiResponse(
            success=True,
            message="Match created successfully",
            data=views.match_response(store, match),
        )

    @app.put(f"{API_PREFIX}/matches/update/{{match_id}}", response_model=ApiResponse[MatchResponse])
    async def update_match(match_id: int, request: MatchCreateRequest):
        logger.info("PUT %s/matches/update/%s - Full update request", API_PREFIX, match_id)
        match = services.matches.full_update(
            match_id,
            venue=request.venue,
            date=request.date,
            first_team_name=request.first_team_name,
            second_team_name=request.second_team_name,
            status=request.status,
            result=request.result.model_dump() if request.result else None,
        )
        return ApiResponse(
            success=True,
            message="Match updated successfully",
            data=views.match_response(store, match),
        )

    @app.patch(f"{API_PREFIX}/matches/update/{{match_id}}", response_model=ApiResponse[MatchResponse])
    async def patch_match(match_id: int, request: MatchPatchRequest):
        logger.info("PATCH %s/matches/update/%s - Partial update request", API_PREFIX, match_id)
        match = services.matches.partial_update(match_id, request.model_dump(exclude_unset=True))
        return ApiResponse(
            success=True,
            message="Match updated successfully",
            data=views.match_response(store, match),
        )

    @app.delete(f"{API_PREFIX}/matches/{{match_id}}", response_model=ApiResponse[MatchResponse])
    async def delete_match(match_id: int):
        logger.info("DELETE %s/matches/%s", API_PREFIX, match_id)
        match = services.matches.delete(match_id)
        return ApiResponse(
            success=True,
            message="Match deleted successfully",
            data=views.match_response(store, match),
        )

    return app


__all__ = ["create_app"]
