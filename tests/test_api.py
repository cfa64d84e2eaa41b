from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from tournament.api import create_app
from tournament.config import Settings
from tournament.persistence import TournamentStore


API = "/api/v1"


@pytest.fixture
async def client(tmp_path: Path):
    db_path = tmp_path / "api.sqlite"
    app = create_app(Settings(db_path=db_path), store=TournamentStore(db_path))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


async def _create_team(client: AsyncClient, name: str, **extra) -> dict:
    payload = {"teamName": name, "homeGround": f"{name} Ground", "coach": f"{name} Coach", **extra}
    response = await client.post(f"{API}/teams", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def _create_player(client: AsyncClient, name: str, team_name: str, **extra) -> dict:
    payload = {"name": name, "teamName": team_name, "role": "Batsman", "battingStyle": "Right-Handed", **extra}
    response = await client.post(f"{API}/players", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_player_lifecycle_envelope(client: AsyncClient):
    await _create_team(client, "Mumbai Indians")

    response = await client.post(
        f"{API}/players",
        json={
            "name": "Rohit Sharma",
            "teamName": "Mumbai Indians",
            "role": "Batsman",
            "battingStyle": "Right-Handed",
            "stats": {"runsScored": 6211},
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Player created successfully"
    player = body["data"]
    assert player["teamName"] == "Mumbai Indians"
    assert player["bowlingStyle"] is None
    assert player["stats"] == {"matchesPlayed": 0, "runsScored": 6211, "wicketsTaken": 0, "catchesTaken": 0}

    listing = (await client.get(f"{API}/players")).json()
    assert listing["message"] == "Players retrieved successfully"
    assert [p["name"] for p in listing["data"]] == ["Rohit Sharma"]

    patched = await client.patch(
        f"{API}/players/update/{player['id']}", json={"role": "All-Rounder", "stats": {"matchesPlayed": 250}}
    )
    assert patched.status_code == 200
    assert patched.json()["data"]["role"] == "All-Rounder"
    assert patched.json()["data"]["stats"]["runsScored"] == 6211

    deleted = await client.delete(f"{API}/players/{player['id']}")
    assert deleted.status_code == 200
    assert deleted.json()["message"] == "Player deleted successfully"
    assert deleted.json()["data"]["name"] == "Rohit Sharma"

    team = (await client.get(f"{API}/teams")).json()["data"][0]
    assert team["playerNames"] == []


@pytest.mark.anyio
async def test_missing_resources_return_404(client: AsyncClient):
    for path in ("players/99", "teams/99", "matches/99", "teams/99/details"):
        response = await client.get(f"{API}/{path}")
        assert response.status_code == 404
        assert response.json()["success"] is False
        assert response.json()["data"] is None

    response = await client.delete(f"{API}/players/99")
    assert response.json()["message"] == "Player was not found with id: 99"


@pytest.mark.anyio
async def test_validation_errors_map_to_fields(client: AsyncClient):
    response = await client.post(
        f"{API}/players",
        json={"name": "R", "teamName": "Mumbai Indians", "role": "Captain", "battingStyle": "Right-Handed"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["message"] == "Validation failed"
    assert set(body["data"]) >= {"name", "role"}
    assert "Batsman, Bowler" in body["data"]["role"]


@pytest.mark.anyio
async def test_business_rule_errors_return_400(client: AsyncClient):
    response = await client.post(
        f"{API}/players",
        json={"name": "Rohit Sharma", "teamName": "Nowhere XI", "role": "Batsman", "battingStyle": "Right-Handed"},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["data"] == {"teamName": "Team not found with name: Nowhere XI"}


@pytest.mark.anyio
async def test_team_roster_and_details(client: AsyncClient):
    await _create_team(client, "Pool")
    await _create_player(client, "Rohit Sharma", "Pool")
    await _create_player(client, "Jasprit Bumrah", "Pool", role="Bowler", bowlingStyle="Right-Arm Fast")

    team = await _create_team(
        client, "Mumbai Indians", playerNames=["Rohit Sharma", "Jasprit Bumrah"], captainName="Rohit Sharma"
    )
    assert team["captainName"] == "Rohit Sharma"
    assert team["playerNames"] == ["Rohit Sharma", "Jasprit Bumrah"]

    details = (await client.get(f"{API}/teams/{team['id']}/details")).json()
    assert details["message"] == "Team details retrieved successfully"
    assert [p["role"] for p in details["data"]["squad"]] == ["Batsman", "Bowler"]

    counts = (await client.get(f"{API}/teams/{team['id']}/role-count")).json()["data"]
    assert counts == [{"role": "Batsman", "count": 1}, {"role": "Bowler", "count": 1}]

    cleared = await client.patch(f"{API}/teams/update/{team['id']}", json={"captainName": ""})
    assert cleared.json()["data"]["captainName"] is None

    deleted = await client.delete(f"{API}/teams/{team['id']}")
    assert deleted.status_code == 200
    players = (await client.get(f"{API}/players")).json()["data"]
    assert {p["teamName"] for p in players} == {None}


@pytest.mark.anyio
async def test_match_status_rules(client: AsyncClient):
    await _create_team(client, "Mumbai Indians")
    await _create_team(client, "Chennai Super Kings")
    await _create_player(client, "Rohit Sharma", "Mumbai Indians")

    base = {
        "venue": "Wankhede Stadium",
        "date": "2024-04-12T19:30:00",
        "firstTeamName": "Mumbai Indians",
        "secondTeamName": "Chennai Super Kings",
    }
    result = {"winner": "Mumbai Indians", "margin": "20 runs", "manOfTheMatchName": "Rohit Sharma"}

    rejected = await client.post(f"{API}/matches", json={**base, "status": "SCHEDULED", "result": result})
    assert rejected.status_code == 400
    assert "result" in rejected.json()["data"]

    bad_status = await client.post(f"{API}/matches", json={**base, "status": "LIVE"})
    assert bad_status.status_code == 400
    assert bad_status.json()["data"]["status"].endswith("SCHEDULED or COMPLETED")

    created = await client.post(f"{API}/matches", json={**base, "status": "COMPLETED", "result": result})
    assert created.status_code == 201
    match = created.json()["data"]
    assert match["result"] == {"winner": "Mumbai Indians", "margin": "20 runs", "manOfTheMatch": "Rohit Sharma"}
    assert match["date"].startswith("2024-04-12T19:30")

    rescheduled = await client.patch(f"{API}/matches/update/{match['id']}", json={"status": "SCHEDULED"})
    assert rescheduled.status_code == 200
    assert rescheduled.json()["data"]["result"] is None


@pytest.mark.anyio
async def test_unexpected_errors_return_500(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    db_path = tmp_path / "broken.sqlite"
    app = create_app(Settings(db_path=db_path), store=TournamentStore(db_path))

    def boom():
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(app.state.services.players, "list_all", boom)
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        response = await client.get(f"{API}/players")

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "An unexpected error occurred", "data": None}
