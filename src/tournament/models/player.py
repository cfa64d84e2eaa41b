"""Player documents and their embedded career statistics."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Stats(BaseModel):
    """Career statistics embedded in a player document."""

    matches_played: int = Field(default=0, ge=0)
    runs_scored: int = Field(default=0, ge=0)
    wickets_taken: int = Field(default=0, ge=0)
    catches_taken: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)


class Player(BaseModel):
    """A player as stored in the ``players`` collection.

    ``team_id`` is a back-reference; the owning team's ``player_ids`` is the
    authoritative roster and the roster manager keeps both sides in step.
    """

    id: int
    name: str = Field(..., min_length=1)
    team_id: int | None = None
    role: str
    batting_style: str
    bowling_style: str | None = None
    stats: Stats = Field(default_factory=Stats)

    model_config = ConfigDict(frozen=True)
