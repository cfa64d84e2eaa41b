"""Match lifecycle: create, full update, partial update and delete.

Status rules: a ``COMPLETED`` match always carries a resolved result and a
``SCHEDULED`` one never does. Moving back to ``SCHEDULED`` drops the result.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Mapping

from tournament.exceptions import InvalidMatchError, InvalidTeamError, NotFoundError
from tournament.models import COMPLETED, SCHEDULED, Match, Result, Team
from tournament.persistence import MATCHES_SEQUENCE, TournamentStore
from tournament.services.results import ResultResolver


logger = logging.getLogger(__name__)


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


class MatchService:
    def __init__(self, store: TournamentStore, resolver: ResultResolver):
        self._store = store
        self._resolver = resolver

    def list_all(self) -> List[Match]:
        return self._store.matches.list_all()

    def get(self, match_id: int) -> Match:
        match = self._store.matches.get(match_id)
        if match is None:
            raise NotFoundError("Match", "id", match_id)
        return match

    def create(
        self,
        *,
        venue: str,
        date: datetime,
        first_team_name: str,
        second_team_name: str,
        status: str,
        result: Mapping[str, Any] | None = None,
    ) -> Match:
        with self._store.transaction():
            first_team, second_team, resolved = self._validate(
                first_team_name, second_team_name, status, result
            )
            match = Match(
                id=self._store.sequences.next(MATCHES_SEQUENCE),
                venue=venue,
                date=date,
                first_team=first_team.id,
                second_team=second_team.id,
                status=status,
                result=resolved,
            )
            self._store.matches.save(match)
        logger.info("Created match %s: %s vs %s", match.id, first_team.team_name, second_team.team_name)
        return match

    def full_update(
        self,
        match_id: int,
        *,
        venue: str,
        date: datetime,
        first_team_name: str,
        second_team_name: str,
        status: str,
        result: Mapping[str, Any] | None = None,
    ) -> Match:
        with self._store.transaction():
            existing = self.get(match_id)
            first_team, second_team, resolved = self._validate(
                first_team_name, second_team_name, status, result
            )
            updated = Match(
                id=existing.id,
                venue=venue,
                date=date,
                first_team=first_team.id,
                second_team=second_team.id,
                status=status,
                result=resolved,
            )
            self._store.matches.save(updated)
        logger.info("Replaced match %s", match_id)
        return updated

    def partial_update(self, match_id: int, changes: Mapping[str, Any]) -> Match:
        with self._store.transaction():
            existing = self.get(match_id)
            updates: dict[str, Any] = {}

            if _has_text(changes.get("venue")):
                updates["venue"] = changes["venue"]
            if changes.get("date") is not None:
                updates["date"] = changes["date"]

            first_changed = _has_text(changes.get("first_team_name"))
            second_changed = _has_text(changes.get("second_team_name"))
            first_team: Team | None = None
            second_team: Team | None = None
            if first_changed:
                first_team = self._resolve_team(changes["first_team_name"], "firstTeamName")
                updates["first_team"] = first_team.id
            if second_changed:
                second_team = self._resolve_team(changes["second_team_name"], "secondTeamName")
                updates["second_team"] = second_team.id
            teams_changed = first_changed or second_changed
            if teams_changed:
                first_id = updates.get("first_team", existing.first_team)
                second_id = updates.get("second_team", existing.second_team)
                if first_id == second_id:
                    raise InvalidMatchError("teams", "First team and second team must be different")

            status = changes.get("status") or existing.status
            updates["status"] = status
            result_input = changes.get("result")

            if result_input is not None:
                if status != COMPLETED:
                    raise InvalidMatchError("result", "Result can only be set when match status is COMPLETED")
                first_team = first_team or self._load_team(existing.first_team, "firstTeamName")
                second_team = second_team or self._load_team(existing.second_team, "secondTeamName")
                updates["result"] = self._resolver.resolve(result_input, first_team, second_team)
            elif status == SCHEDULED:
                updates["result"] = None
            else:
                if existing.result is None:
                    raise InvalidMatchError("result", "Result is required when status is COMPLETED")
                if teams_changed:
                    self._check_existing_result(
                        existing.result,
                        updates.get("first_team", existing.first_team),
                        updates.get("second_team", existing.second_team),
                    )

            updated = existing.model_copy(update=updates)
            self._store.matches.save(updated)
        logger.info("Patched match %s fields=%s", match_id, sorted(k for k in changes))
        return updated

    def delete(self, match_id: int) -> Match:
        with self._store.transaction():
            existing = self.get(match_id)
            self._store.matches.delete(existing.id)
        logger.info("Deleted match %s", match_id)
        return existing

    def _validate(
        self,
        first_team_name: str,
        second_team_name: str,
        status: str,
        result: Mapping[str, Any] | None,
    ) -> tuple[Team, Team, Result | None]:
        first_team = self._resolve_team(first_team_name, "firstTeamName")
        second_team = self._resolve_team(second_team_name, "secondTeamName")
        if first_team.id == second_team.id:
            raise InvalidMatchError("teams", "First team and second team must be different")
        if status == COMPLETED and result is None:
            raise InvalidMatchError("result", "Result is required when status is COMPLETED")
        if status == SCHEDULED and result is not None:
            raise InvalidMatchError("result", "Result must not be provided when status is SCHEDULED")
        resolved = self._resolver.resolve(result, first_team, second_team) if result is not None else None
        return first_team, second_team, resolved

    def _check_existing_result(self, result: Result, first_id: int, second_id: int) -> None:
        if result.winner not in (first_id, second_id):
            raise InvalidMatchError(
                "result",
                "Existing result does not match the updated teams; provide a new result",
            )
        man_of_the_match = self._store.players.get(result.man_of_the_match_id)
        if man_of_the_match is None or man_of_the_match.team_id not in (first_id, second_id):
            raise InvalidMatchError(
                "result",
                "Existing man of the match does not play for either updated team; provide a new result",
            )

    def _resolve_team(self, team_name: str, field: str) -> Team:
        team = self._store.teams.find_by_name(team_name)
        if team is None:
            raise InvalidTeamError(field, f"Team not found with name: {team_name}")
        return team

    def _load_team(self, team_id: int, field: str) -> Team:
        team = self._store.teams.get(team_id)
        if team is None:
            raise InvalidTeamError(field, f"Team with id {team_id} no longer exists")
        return team
