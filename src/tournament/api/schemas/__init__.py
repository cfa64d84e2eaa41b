"""Pydantic models for API I/O."""

from .common import ApiResponse, CamelModel
from .match import MatchCreateRequest, MatchPatchRequest, MatchResponse, ResultRequest, ResultResponse
from .player import PlayerCreateRequest, PlayerPatchRequest, PlayerResponse, StatsPayload, StatsResponse
from .team import (
    PlayerSummary,
    RoleCountResponse,
    TeamCreateRequest,
    TeamDetailsResponse,
    TeamPatchRequest,
    TeamResponse,
)

__all__ = [
    "ApiResponse",
    "CamelModel",
    "MatchCreateRequest",
    "MatchPatchRequest",
    "MatchResponse",
    "PlayerCreateRequest",
    "PlayerPatchRequest",
    "PlayerResponse",
    "PlayerSummary",
    "ResultRequest",
    "ResultResponse",
    "RoleCountResponse",
    "StatsPayload",
    "StatsResponse",
    "TeamCreateRequest",
    "TeamDetailsResponse",
    "TeamPatchRequest",
    "TeamResponse",
]
