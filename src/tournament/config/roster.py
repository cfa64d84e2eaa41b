"""Squad rules shared by the player, team and match services."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Tuple


logger = logging.getLogger(__name__)

_MAX_SQUAD_SIZE_ENV = "TOURNAMENT_MAX_SQUAD_SIZE"
_MAX_SQUAD_SIZE_DEFAULT = 25

ROLES: Tuple[str, ...] = ("Batsman", "Bowler", "All-Rounder", "Wicket-Keeper")
BATTING_STYLES: Tuple[str, ...] = ("Right-Handed", "Left-Handed")
BOWLING_STYLES: Tuple[str, ...] = (
    "Right-Arm Fast",
    "Left-Arm Fast",
    "Right-Arm Medium",
    "Left-Arm Medium",
    "Right-Arm Spin",
    "Left-Arm Spin",
    "None",
)


@dataclass(frozen=True)
class SquadRules:
    max_players: int
    roles: Tuple[str, ...] = ROLES
    batting_styles: Tuple[str, ...] = BATTING_STYLES
    bowling_styles: Tuple[str, ...] = BOWLING_STYLES


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def get_rules() -> SquadRules:
    """Return the active squad rules, honouring the size override in the environment."""

    return SquadRules(max_players=_env_int(_MAX_SQUAD_SIZE_ENV, _MAX_SQUAD_SIZE_DEFAULT, min_value=1))
