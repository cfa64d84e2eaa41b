from __future__ import annotations

from pydantic import Field, field_validator

from tournament.config.roster import BATTING_STYLES, BOWLING_STYLES, ROLES

from .common import CamelModel, one_of


class StatsPayload(CamelModel):
    matches_played: int | None = Field(default=None, ge=0)
    runs_scored: int | None = Field(default=None, ge=0)
    wickets_taken: int | None = Field(default=None, ge=0)
    catches_taken: int | None = Field(default=None, ge=0)


class StatsResponse(CamelModel):
    matches_played: int
    runs_scored: int
    wickets_taken: int
    catches_taken: int


class _PlayerFields(CamelModel):
    @field_validator("role", check_fields=False)
    @classmethod
    def _check_role(cls, value: str | None) -> str | None:
        return one_of(value, ROLES, "Role must be: Batsman, Bowler, All-Rounder, or Wicket-Keeper")

    @field_validator("batting_style", check_fields=False)
    @classmethod
    def _check_batting_style(cls, value: str | None) -> str | None:
        return one_of(value, BATTING_STYLES, "Batting style must be: Right-Handed or Left-Handed")

    @field_validator("bowling_style", check_fields=False)
    @classmethod
    def _check_bowling_style(cls, value: str | None) -> str | None:
        return one_of(value, BOWLING_STYLES, "Invalid bowling style")


class PlayerCreateRequest(_PlayerFields):
    name: str = Field(..., min_length=2, max_length=100)
    team_name: str = Field(..., min_length=2, max_length=100)
    role: str
    batting_style: str
    bowling_style: str | None = None
    stats: StatsPayload | None = None


class PlayerPatchRequest(_PlayerFields):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    team_name: str | None = Field(default=None, min_length=2, max_length=100)
    role: str | None = None
    batting_style: str | None = None
    bowling_style: str | None = None
    stats: StatsPayload | None = None


class PlayerResponse(CamelModel):
    id: int
    name: str
    team_name: str | None = None
    role: str
    batting_style: str
    bowling_style: str | None = None
    stats: StatsResponse
