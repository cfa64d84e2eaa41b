"""Team lifecycle: create, full update, patch and delete, plus read projections."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, List, Mapping, Sequence

from tournament.exceptions import DuplicateNameError, InvalidRequestError, NotFoundError, RosterFullError
from tournament.models import Player, Team
from tournament.persistence import TEAMS_SEQUENCE, TournamentStore, normalize_name
from tournament.services.roster import RosterManager


logger = logging.getLogger(__name__)

FIELD_PLAYER_NAMES = "playerNames"
FIELD_CAPTAIN_NAME = "captainName"


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


class TeamService:
    def __init__(self, store: TournamentStore, roster: RosterManager):
        self._store = store
        self._roster = roster

    def list_all(self) -> List[Team]:
        return self._store.teams.list_all()

    def get(self, team_id: int) -> Team:
        team = self._store.teams.get(team_id)
        if team is None:
            raise NotFoundError("Team", "id", team_id)
        return team

    def squad(self, team_id: int) -> List[Player]:
        """Current roster members in roster order."""

        team = self.get(team_id)
        by_id = {player.id: player for player in self._store.players.get_all_by_ids(team.player_ids)}
        return [by_id[pid] for pid in team.player_ids if pid in by_id]

    def role_count(self, team_id: int) -> List[dict[str, Any]]:
        counts = Counter(player.role for player in self.squad(team_id))
        return [{"role": role, "count": count} for role, count in sorted(counts.items())]

    def create(
        self,
        *,
        team_name: str,
        home_ground: str | None = None,
        coach: str | None = None,
        captain_name: str | None = None,
        player_names: Sequence[str] | None = None,
    ) -> Team:
        with self._store.transaction():
            self._ensure_unique_team_name(team_name)
            player_ids = self._resolve_player_ids(player_names or [])
            captain_id = self._resolve_captain(captain_name, player_ids)

            team = Team(
                id=self._store.sequences.next(TEAMS_SEQUENCE),
                team_name=team_name,
                home_ground=home_ground,
                coach=coach,
            )
            team = self._roster.sync_roster(team, player_ids, captain_id)
        logger.info("Created team %s (%s) with %d players", team.id, team.team_name, len(team.player_ids))
        return team

    def full_update(
        self,
        team_id: int,
        *,
        team_name: str,
        home_ground: str | None = None,
        coach: str | None = None,
        captain_name: str | None = None,
        player_names: Sequence[str] | None = None,
    ) -> Team:
        with self._store.transaction():
            existing = self.get(team_id)
            self._ensure_unique_team_name(team_name, exclude_id=existing.id)
            player_ids = self._resolve_player_ids(player_names or [], team_id=existing.id)
            captain_id = self._resolve_captain(captain_name, player_ids)

            renamed = existing.model_copy(
                update={"team_name": team_name, "home_ground": home_ground, "coach": coach}
            )
            updated = self._roster.sync_roster(renamed, player_ids, captain_id)
        logger.info("Replaced team %s", team_id)
        return updated

    def patch(self, team_id: int, changes: Mapping[str, Any]) -> Team:
        """Merge the provided fields; blank strings and nulls leave fields unchanged.

        A blank ``captain_name`` clears the captain.
        """

        with self._store.transaction():
            existing = self.get(team_id)
            updates: dict[str, Any] = {}

            if _has_text(changes.get("team_name")):
                self._ensure_unique_team_name(changes["team_name"], exclude_id=existing.id)
                updates["team_name"] = changes["team_name"]
            for field in ("home_ground", "coach"):
                if _has_text(changes.get(field)):
                    updates[field] = changes[field]

            team = existing.model_copy(update=updates) if updates else existing
            player_ids = list(team.player_ids)
            if changes.get("player_names") is not None:
                player_ids = self._resolve_player_ids(changes["player_names"], team_id=existing.id)

            captain_id = team.captain_id
            captain_name = changes.get("captain_name")
            if captain_name is not None:
                captain_id = self._resolve_captain(captain_name, player_ids)
            elif captain_id is not None and captain_id not in player_ids:
                captain_id = None

            if changes.get("player_names") is not None:
                team = self._roster.sync_roster(team, player_ids, captain_id)
            else:
                team = team.model_copy(update={"captain_id": captain_id})
                self._store.teams.save(team)
        logger.info("Patched team %s fields=%s", team_id, sorted(changes))
        return team

    def delete(self, team_id: int) -> Team:
        """Remove a team and clear ``team_id`` on all its players; returns the snapshot."""

        with self._store.transaction():
            existing = self.get(team_id)
            self._roster.release_team(existing)
            self._store.teams.delete(existing.id)
        logger.info("Deleted team %s (%s)", existing.id, existing.team_name)
        return existing

    def _ensure_unique_team_name(self, team_name: str, *, exclude_id: int | None = None) -> None:
        clash = self._store.teams.find_by_name(team_name)
        if clash is not None and clash.id != exclude_id:
            raise DuplicateNameError("teamName", f"Team with name '{team_name}' already exists")

    def _find_player(self, name: str, team_id: int | None) -> Player:
        """Resolve one roster name to a player.

        A player already on ``team_id`` wins, then an unattached player. A
        player on another team is only taken when the name is unique store-wide.
        """

        candidates = self._store.players.find_all_by_name(name)
        if not candidates:
            raise InvalidRequestError(FIELD_PLAYER_NAMES, f"Player not found with name: {name}")
        if team_id is not None:
            for player in candidates:
                if player.team_id == team_id:
                    return player
        unattached = [player for player in candidates if player.team_id is None]
        if len(unattached) == 1:
            return unattached[0]
        if not unattached and len(candidates) == 1:
            return candidates[0]
        raise InvalidRequestError(
            FIELD_PLAYER_NAMES,
            f"Player name '{name}' matches players on several teams",
        )

    def _resolve_player_ids(self, player_names: Sequence[str], *, team_id: int | None = None) -> List[int]:
        ids: List[int] = []
        for name in player_names:
            player = self._find_player(name, team_id)
            if player.id not in ids:
                ids.append(player.id)
        if len(ids) > self._roster.max_players:
            raise RosterFullError(
                FIELD_PLAYER_NAMES,
                f"Team cannot have more than {self._roster.max_players} players",
            )
        return ids

    def _resolve_captain(self, captain_name: str | None, player_ids: Sequence[int]) -> int | None:
        if not _has_text(captain_name):
            return None
        wanted = normalize_name(captain_name)
        for member in self._store.players.get_all_by_ids(player_ids):
            if normalize_name(member.name) == wanted:
                return member.id
        if not self._store.players.find_all_by_name(captain_name):
            raise InvalidRequestError(FIELD_CAPTAIN_NAME, f"Captain not found with name: {captain_name}")
        raise InvalidRequestError(FIELD_CAPTAIN_NAME, "Captain must be a player in the team")
