from __future__ import annotations

from pathlib import Path

import pytest

from tournament.config import SquadRules
from tournament.persistence import TournamentStore
from tournament.services import Services, build_services


@pytest.fixture(scope="module")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def store(tmp_path: Path) -> TournamentStore:
    return TournamentStore(tmp_path / "tournament.sqlite")


@pytest.fixture
def services(store: TournamentStore) -> Services:
    return build_services(store, SquadRules(max_players=25))
