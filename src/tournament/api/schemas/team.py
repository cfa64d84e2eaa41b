from __future__ import annotations

from typing import List

from pydantic import Field

from .common import CamelModel


class TeamCreateRequest(CamelModel):
    team_name: str = Field(..., min_length=2, max_length=100)
    home_ground: str = Field(..., min_length=2, max_length=100)
    coach: str = Field(..., min_length=2, max_length=100)
    captain_name: str | None = None
    player_names: List[str] = Field(default_factory=list)


class TeamPatchRequest(CamelModel):
    team_name: str | None = Field(default=None, min_length=2, max_length=100)
    home_ground: str | None = Field(default=None, min_length=2, max_length=100)
    coach: str | None = Field(default=None, min_length=2, max_length=100)
    captain_name: str | None = None
    player_names: List[str] | None = None


class TeamResponse(CamelModel):
    id: int
    team_name: str
    home_ground: str | None = None
    coach: str | None = None
    captain_name: str | None = None
    player_names: List[str] = Field(default_factory=list)


class PlayerSummary(CamelModel):
    id: int
    name: str
    role: str


class TeamDetailsResponse(CamelModel):
    id: int
    team_name: str
    home_ground: str | None = None
    coach: str | None = None
    captain_id: int | None = None
    squad: List[PlayerSummary] = Field(default_factory=list)


class RoleCountResponse(CamelModel):
    role: str
    count: int
