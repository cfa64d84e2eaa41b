from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from tournament.models import COMPLETED, SCHEDULED

from .common import CamelModel, one_of


_STATUS_MESSAGE = "Status must be: SCHEDULED or COMPLETED"


class ResultRequest(CamelModel):
    winner: str = Field(..., min_length=1)
    margin: str | None = None
    man_of_the_match_name: str = Field(..., min_length=1)


class ResultResponse(CamelModel):
    winner: str | None = None
    margin: str | None = None
    man_of_the_match: str | None = None


class MatchCreateRequest(CamelModel):
    venue: str = Field(..., min_length=2, max_length=150)
    date: datetime
    first_team_name: str = Field(..., min_length=2, max_length=100)
    second_team_name: str = Field(..., min_length=2, max_length=100)
    status: str
    result: ResultRequest | None = None

    @field_validator("status")
    @classmethod
    def _check_status(cls, value: str) -> str:
        return one_of(value, (SCHEDULED, COMPLETED), _STATUS_MESSAGE)


class MatchPatchRequest(CamelModel):
    venue: str | None = Field(default=None, min_length=2, max_length=150)
    date: datetime | None = None
    first_team_name: str | None = Field(default=None, min_length=2, max_length=100)
    second_team_name: str | None = Field(default=None, min_length=2, max_length=100)
    status: str | None = None
    result: ResultRequest | None = None

    @field_validator("status")
    @classmethod
    def _check_status(cls, value: str | None) -> str | None:
        return one_of(value, (SCHEDULED, COMPLETED), _STATUS_MESSAGE)


class MatchResponse(CamelModel):
    id: int
    venue: str
    date: datetime
    first_team_name: str | None = None
    second_team_name: str | None = None
    status: str
    result: ResultResponse | None = None
