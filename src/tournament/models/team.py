"""Team documents."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class Team(BaseModel):
    """A team as stored in the ``teams`` collection.

    ``captain_id``, when set, is always one of ``player_ids``.
    """

    id: int
    team_name: str = Field(..., min_length=1)
    home_ground: str | None = None
    coach: str | None = None
    captain_id: int | None = None
    player_ids: List[int] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def has_player(self, player_id: int) -> bool:
        return player_id in self.player_ids
