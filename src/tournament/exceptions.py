"""Error taxonomy raised by the lifecycle services."""

from __future__ import annotations

from typing import Any


class TournamentError(Exception):
    """Base class for errors the HTTP layer maps onto status codes."""


class NotFoundError(TournamentError):
    def __init__(self, resource: str, field: str, value: Any):
        super().__init__(f"{resource} was not found with {field}: {value}")
        self.resource = resource
        self.field = field
        self.value = value


class InvalidRequestError(TournamentError):
    """Business-rule violation on otherwise well-formed input."""

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid {field}: {reason}")
        self.field = field
        self.reason = reason


class InvalidTeamError(InvalidRequestError):
    """A team name did not resolve to a stored team."""


class DuplicateNameError(InvalidRequestError):
    """A name collides, case-insensitively, with one already in use."""


class RosterFullError(InvalidRequestError):
    """The target team already holds the maximum number of players."""


class InvalidResultError(InvalidRequestError):
    """A match result does not fit the teams playing the match."""


class InvalidMatchError(InvalidRequestError):
    """Match status, result or team pairing is inconsistent."""
