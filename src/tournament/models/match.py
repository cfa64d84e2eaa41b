"""Match documents and their embedded result."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel
from pydantic.config import ConfigDict


SCHEDULED = "SCHEDULED"
COMPLETED = "COMPLETED"

MatchStatus = Literal["SCHEDULED", "COMPLETED"]


class Result(BaseModel):
    """Outcome of a completed match, referencing teams and players by id."""

    winner: int
    margin: str | None = None
    man_of_the_match_id: int

    model_config = ConfigDict(frozen=True)


class Match(BaseModel):
    """A match as stored in the ``matches`` collection.

    ``result`` is present exactly when ``status`` is ``COMPLETED``.
    """

    id: int
    venue: str
    date: datetime
    first_team: int
    second_team: int
    status: MatchStatus = SCHEDULED
    result: Result | None = None

    model_config = ConfigDict(frozen=True)
