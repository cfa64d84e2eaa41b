"""Keeps a team's roster and its players' ``team_id`` back-references in step.

Every change to ``Team.player_ids``, ``Team.captain_id`` on roster removal, or
``Player.team_id`` goes through :class:`RosterManager`. Callers run these
methods inside ``TournamentStore.transaction()`` so both sides of the link are
written together.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from tournament.config import SquadRules, get_rules
from tournament.exceptions import RosterFullError
from tournament.models import Player, Team
from tournament.persistence import TournamentStore


logger = logging.getLogger(__name__)


class RosterManager:
    def __init__(self, store: TournamentStore, rules: SquadRules | None = None):
        self._store = store
        self.rules = rules or get_rules()

    @property
    def max_players(self) -> int:
        return self.rules.max_players

    def validate_capacity(self, team: Team) -> None:
        if len(team.player_ids) >= self.max_players:
            raise RosterFullError(
                "teamName",
                f"Team '{team.team_name}' already has the maximum of {self.max_players} players",
            )

    def transfer_player(self, player_id: int, from_team_id: int | None, to_team: Team) -> Team:
        """Move ``player_id`` onto ``to_team``'s roster, leaving ``from_team_id``.

        Capacity is checked before anything is written. Adding a player who is
        already on the roster is a no-op. The caller sets the player's
        ``team_id`` to ``to_team.id``.
        """

        if to_team.has_player(player_id):
            if from_team_id is not None and from_team_id != to_team.id:
                self.detach_player(player_id, from_team_id)
            return to_team

        self.validate_capacity(to_team)
        if from_team_id is not None and from_team_id != to_team.id:
            self.detach_player(player_id, from_team_id)

        updated = to_team.model_copy(update={"player_ids": [*to_team.player_ids, player_id]})
        self._store.teams.save(updated)
        logger.info("Player %s joined team %s (%s)", player_id, updated.id, updated.team_name)
        return updated

    def detach_player(self, player_id: int, team_id: int) -> Team | None:
        """Drop ``player_id`` from a roster, clearing the captaincy if they held it.

        A team that no longer exists is treated as already detached.
        """

        team = self._store.teams.get(team_id)
        if team is None:
            logger.warning("Team %s not found while detaching player %s; treating as detached", team_id, player_id)
            return None
        updated = _without_player(team, player_id)
        if updated is team:
            return team
        self._store.teams.save(updated)
        logger.info("Player %s left team %s (%s)", player_id, team.id, team.team_name)
        return updated

    def release_team(self, team: Team) -> List[Player]:
        """Clear ``team_id`` on every player pointing at ``team``."""

        released: List[Player] = []
        for player in self._store.players.find_by_team(team.id):
            released.append(self._store.players.save(player.model_copy(update={"team_id": None})))
        logger.info("Released %d players from team %s", len(released), team.id)
        return released

    def sync_roster(self, team: Team, player_ids: Sequence[int], captain_id: int | None) -> Team:
        """Replace ``team``'s roster and captain, updating every affected player.

        Players leaving the roster lose their ``team_id``. Players joining are
        removed from whichever team held them before. The captain must be one
        of ``player_ids``; callers validate that before calling.
        """

        new_ids = _unique(player_ids)
        if len(new_ids) > self.max_players:
            raise RosterFullError(
                "playerNames",
                f"Team cannot have more than {self.max_players} players",
            )
        if captain_id is not None and captain_id not in new_ids:
            captain_id = None

        keep = set(new_ids)
        for player in self._store.players.get_all_by_ids(pid for pid in team.player_ids if pid not in keep):
            if player.team_id == team.id:
                self._store.players.save(player.model_copy(update={"team_id": None}))

        for player in self._store.players.get_all_by_ids(new_ids):
            if player.team_id != team.id:
                if player.team_id is not None:
                    self.detach_player(player.id, player.team_id)
                self._store.players.save(player.model_copy(update={"team_id": team.id}))

        updated = team.model_copy(update={"player_ids": new_ids, "captain_id": captain_id})
        self._store.teams.save(updated)
        logger.info("Synced roster for team %s: %d players", updated.id, len(new_ids))
        return updated


def _without_player(team: Team, player_id: int) -> Team:
    if player_id not in team.player_ids and team.captain_id != player_id:
        return team
    captain_id = None if team.captain_id == player_id else team.captain_id
    return team.model_copy(
        update={
            "player_ids": [pid for pid in team.player_ids if pid != player_id],
            "captain_id": captain_id,
        }
    )


def _unique(ids: Iterable[int]) -> List[int]:
    seen: set[int] = set()
    ordered: List[int] = []
    for pid in ids:
        if pid not in seen:
            seen.add(pid)
            ordered.append(pid)
    return ordered
