"""Configuration helpers for squad rules and runtime settings."""

from .roster import SquadRules, get_rules
from .settings import Settings, load_settings

__all__ = [
    "SquadRules",
    "Settings",
    "get_rules",
    "load_settings",
]
