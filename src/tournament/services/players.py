"""Player lifecycle: create, full update, partial update and delete."""

from __future__ import annotations

import logging
from typing import Any, List, Mapping

from tournament.exceptions import DuplicateNameError, InvalidTeamError, NotFoundError
from tournament.models import Player, Stats, Team
from tournament.persistence import PLAYERS_SEQUENCE, TournamentStore, normalize_name
from tournament.services.roster import RosterManager


logger = logging.getLogger(__name__)

_STAT_FIELDS = ("matches_played", "runs_scored", "wickets_taken", "catches_taken")


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def build_stats(values: Mapping[str, Any] | None) -> Stats:
    """Stats for a new or fully replaced player; missing or null fields become zero."""

    if not values:
        return Stats()
    return Stats(**{field: values.get(field) or 0 for field in _STAT_FIELDS})


def merge_stats(current: Stats, values: Mapping[str, Any]) -> Stats:
    """Overlay the non-null fields of ``values`` onto ``current``."""

    changes = {field: values[field] for field in _STAT_FIELDS if values.get(field) is not None}
    if not changes:
        return current
    return Stats(**{**current.model_dump(), **changes})


class PlayerService:
    def __init__(self, store: TournamentStore, roster: RosterManager):
        self._store = store
        self._roster = roster

    def list_all(self) -> List[Player]:
        return self._store.players.list_all()

    def get(self, player_id: int) -> Player:
        player = self._store.players.get(player_id)
        if player is None:
            raise NotFoundError("Player", "id", player_id)
        return player

    def create(
        self,
        *,
        name: str,
        team_name: str,
        role: str,
        batting_style: str,
        bowling_style: str | None = None,
        stats: Mapping[str, Any] | None = None,
    ) -> Player:
        with self._store.transaction():
            team = self._resolve_team(team_name)
            self._ensure_unique_name(team, name)
            self._roster.validate_capacity(team)

            player = Player(
                id=self._store.sequences.next(PLAYERS_SEQUENCE),
                name=name,
                team_id=team.id,
                role=role,
                batting_style=batting_style,
                bowling_style=bowling_style,
                stats=build_stats(stats),
            )
            self._store.players.save(player)
            self._roster.transfer_player(player.id, None, team)
        logger.info("Created player %s (%s) in team %s", player.id, player.name, team.id)
        return player

    def full_update(
        self,
        player_id: int,
        *,
        name: str,
        team_name: str,
        role: str,
        batting_style: str,
        bowling_style: str | None = None,
        stats: Mapping[str, Any] | None = None,
    ) -> Player:
        with self._store.transaction():
            existing = self.get(player_id)
            team = self._resolve_team(team_name)
            self._ensure_unique_name(team, name, exclude_id=existing.id)
            if team.id != existing.team_id or not team.has_player(existing.id):
                self._roster.transfer_player(existing.id, existing.team_id, team)

            updated = Player(
                id=existing.id,
                name=name,
                team_id=team.id,
                role=role,
                batting_style=batting_style,
                bowling_style=bowling_style,
                stats=build_stats(stats),
            )
            self._store.players.save(updated)
        logger.info("Replaced player %s", player_id)
        return updated

    def partial_update(self, player_id: int, changes: Mapping[str, Any]) -> Player:
        """Apply only the fields present in ``changes``.

        Blank or null values mean "no change", except ``bowling_style`` where an
        explicit null clears the stored value.
        """

        with self._store.transaction():
            existing = self.get(player_id)
            updates: dict[str, Any] = {}

            for field in ("name", "role", "batting_style"):
                if _has_text(changes.get(field)):
                    updates[field] = changes[field]
            if "bowling_style" in changes:
                updates["bowling_style"] = changes["bowling_style"] if _has_text(changes["bowling_style"]) else None

            target_team: Team | None = None
            moving = False
            if _has_text(changes.get("team_name")):
                target_team = self._resolve_team(changes["team_name"])
                moving = target_team.id != existing.team_id
            elif existing.team_id is not None and "name" in updates:
                target_team = self._store.teams.get(existing.team_id)

            if target_team is not None and (moving or "name" in updates):
                self._ensure_unique_name(target_team, updates.get("name", existing.name), exclude_id=existing.id)

            if moving and target_team is not None:
                self._roster.transfer_player(existing.id, existing.team_id, target_team)
                updates["team_id"] = target_team.id

            stats_changes = changes.get("stats")
            if stats_changes is not None:
                updates["stats"] = merge_stats(existing.stats or Stats(), stats_changes)

            updated = existing.model_copy(update=updates) if updates else existing
            self._store.players.save(updated)
        logger.info("Patched player %s fields=%s", player_id, sorted(updates))
        return updated

    def delete(self, player_id: int) -> Player:
        """Remove a player, detaching them from their team first; returns the snapshot."""

        with self._store.transaction():
            existing = self.get(player_id)
            if existing.team_id is not None:
                self._roster.detach_player(existing.id, existing.team_id)
            self._store.players.delete(existing.id)
        logger.info("Deleted player %s", player_id)
        return existing

    def _resolve_team(self, team_name: str) -> Team:
        team = self._store.teams.find_by_name(team_name)
        if team is None:
            raise InvalidTeamError("teamName", f"Team not found with name: {team_name}")
        return team

    def _ensure_unique_name(self, team: Team, name: str, *, exclude_id: int | None = None) -> None:
        wanted = normalize_name(name)
        for member in self._store.players.get_all_by_ids(team.player_ids):
            if member.id != exclude_id and normalize_name(member.name) == wanted:
                raise DuplicateNameError(
                    "name",
                    f"Player with name '{name}' already exists in team '{team.team_name}'",
                )
