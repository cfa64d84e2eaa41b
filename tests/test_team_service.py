import pytest

from tests.factories import add_player, add_team
from tournament.config import SquadRules
from tournament.exceptions import DuplicateNameError, InvalidRequestError, NotFoundError, RosterFullError
from tournament.services import Services


def _squad_names(services: Services, team_id: int):
    return [player.name for player in services.teams.squad(team_id)]


def test_create_with_roster_and_captain(services: Services):
    old = add_team(services, "Old Club")
    rohit = add_player(services, "Rohit Sharma", "Old Club")
    bumrah = add_player(services, "Jasprit Bumrah", "Old Club")

    team = add_team(
        services,
        "Mumbai Indians",
        player_names=["Rohit Sharma", "jasprit bumrah"],
        captain_name="Rohit Sharma",
    )

    assert team.player_ids == [rohit.id, bumrah.id]
    assert team.captain_id == rohit.id
    assert services.players.get(rohit.id).team_id == team.id
    assert services.teams.get(old.id).player_ids == []


def test_create_rejects_duplicate_name(services: Services):
    add_team(services, "Mumbai Indians")

    with pytest.raises(DuplicateNameError):
        add_team(services, "mumbai indians")


def test_captain_must_be_on_roster(services: Services):
    add_team(services, "Old Club")
    add_player(services, "Rohit Sharma", "Old Club")
    add_player(services, "Jasprit Bumrah", "Old Club")

    with pytest.raises(InvalidRequestError) as excinfo:
        add_team(services, "Mumbai Indians", player_names=["Rohit Sharma"], captain_name="Jasprit Bumrah")
    assert excinfo.value.field == "captainName"
    assert services.store.teams.find_by_name("Mumbai Indians") is None


def test_unknown_player_name_is_rejected(services: Services):
    with pytest.raises(InvalidRequestError) as excinfo:
        add_team(services, "Mumbai Indians", player_names=["Ghost"])
    assert excinfo.value.field == "playerNames"


def test_roster_over_capacity_is_rejected(services: Services):
    add_team(services, "Pool")
    names = [f"Player {idx}" for idx in range(25)]
    for name in names:
        add_player(services, name, "Pool")
    services.roster.rules = SquadRules(max_players=24)

    with pytest.raises(RosterFullError):
        add_team(services, "Too Many", player_names=names)


def test_full_update_resyncs_roster(services: Services):
    team = add_team(services, "Mumbai Indians")
    rohit = add_player(services, "Rohit Sharma", "Mumbai Indians")
    add_team(services, "Pool")
    ishan = add_player(services, "Ishan Kishan", "Pool")

    updated = services.teams.full_update(
        team.id,
        team_name="Mumbai Indians",
        home_ground="Wankhede Stadium",
        coach="Mark Boucher",
        player_names=["Ishan Kishan"],
        captain_name="Ishan Kishan",
    )

    assert updated.player_ids == [ishan.id]
    assert updated.captain_id == ishan.id
    assert updated.home_ground == "Wankhede Stadium"
    assert services.players.get(rohit.id).team_id is None
    assert services.players.get(ishan.id).team_id == team.id


def test_patch_merges_fields_and_captain(services: Services):
    team = add_team(services, "Mumbai Indians", coach="Mahela Jayawardene")
    rohit = add_player(services, "Rohit Sharma", "Mumbai Indians")

    patched = services.teams.patch(team.id, {"home_ground": "Wankhede Stadium", "coach": " ", "captain_name": "Rohit Sharma"})

    assert patched.home_ground == "Wankhede Stadium"
    assert patched.coach == "Mahela Jayawardene"
    assert patched.captain_id == rohit.id
    assert patched.player_ids == [rohit.id]

    cleared = services.teams.patch(team.id, {"captain_name": ""})
    assert cleared.captain_id is None


def test_patch_roster_drops_departing_captain(services: Services):
    team = add_team(services, "Mumbai Indians")
    rohit = add_player(services, "Rohit Sharma", "Mumbai Indians")
    bumrah = add_player(services, "Jasprit Bumrah", "Mumbai Indians")
    services.teams.patch(team.id, {"captain_name": "Rohit Sharma"})

    patched = services.teams.patch(team.id, {"player_names": ["Jasprit Bumrah"]})

    assert patched.player_ids == [bumrah.id]
    assert patched.captain_id is None
    assert services.players.get(rohit.id).team_id is None


def test_patch_rename_must_stay_unique(services: Services):
    team = add_team(services, "Mumbai Indians")
    add_team(services, "Chennai Super Kings")

    with pytest.raises(DuplicateNameError):
        services.teams.patch(team.id, {"team_name": "CHENNAI SUPER KINGS"})

    renamed = services.teams.patch(team.id, {"team_name": "MUMBAI INDIANS"})
    assert renamed.team_name == "MUMBAI INDIANS"


def test_delete_releases_players(services: Services):
    team = add_team(services, "Mumbai Indians")
    rohit = add_player(services, "Rohit Sharma", "Mumbai Indians")

    snapshot = services.teams.delete(team.id)

    assert snapshot.player_ids == [rohit.id]
    assert services.players.get(rohit.id).team_id is None
    with pytest.raises(NotFoundError):
        services.teams.get(team.id)


def test_squad_and_role_count(services: Services):
    team = add_team(services, "Mumbai Indians")
    add_player(services, "Rohit Sharma", "Mumbai Indians")
    add_player(services, "Jasprit Bumrah", "Mumbai Indians", role="Bowler")
    add_player(services, "Trent Boult", "Mumbai Indians", role="Bowler")

    assert _squad_names(services, team.id) == ["Rohit Sharma", "Jasprit Bumrah", "Trent Boult"]
    assert services.teams.role_count(team.id) == [
        {"role": "Batsman", "count": 1},
        {"role": "Bowler", "count": 2},
    ]


def test_team_names_fold_non_ascii_case(services: Services):
    add_team(services, "Équipe Bleue")

    with pytest.raises(DuplicateNameError):
        add_team(services, "équipe bleue")
    with pytest.raises(DuplicateNameError):
        add_team(services, "ÉQUIPE BLEUE")


@pytest.fixture
def namesakes(services: Services):
    """Two teams that each roster a player called Rohit Sharma."""

    first = add_team(services, "Mumbai Indians")
    first_rohit = add_player(services, "Rohit Sharma", "Mumbai Indians")
    second = add_team(services, "Kolkata Knight Riders")
    second_rohit = add_player(services, "Rohit Sharma", "Kolkata Knight Riders")
    return first, first_rohit, second, second_rohit


def test_full_update_keeps_own_namesake(services: Services, namesakes):
    first, first_rohit, second, second_rohit = namesakes

    updated = services.teams.full_update(
        second.id,
        team_name="Kolkata Knight Riders",
        home_ground="Eden Gardens",
        coach="Chandrakant Pandit",
        player_names=["rohit sharma"],
        captain_name="Rohit Sharma",
    )

    assert updated.player_ids == [second_rohit.id]
    assert updated.captain_id == second_rohit.id
    assert services.teams.get(first.id).player_ids == [first_rohit.id]
    assert services.players.get(first_rohit.id).team_id == first.id


def test_patch_captain_picks_rostered_namesake(services: Services, namesakes):
    first, first_rohit, second, second_rohit = namesakes

    patched = services.teams.patch(second.id, {"captain_name": "ROHIT SHARMA"})

    assert patched.captain_id == second_rohit.id
    assert services.teams.get(first.id).captain_id is None


def test_patch_roster_keeps_own_namesake(services: Services, namesakes):
    first, first_rohit, second, second_rohit = namesakes
    add_player(services, "Andre Russell", "Kolkata Knight Riders")

    patched = services.teams.patch(second.id, {"player_names": ["Rohit Sharma"]})

    assert patched.player_ids == [second_rohit.id]
    assert services.teams.get(first.id).player_ids == [first_rohit.id]


def test_ambiguous_roster_name_is_rejected(services: Services, namesakes):
    first, first_rohit, second, second_rohit = namesakes

    with pytest.raises(InvalidRequestError) as excinfo:
        add_team(services, "Delhi Capitals", player_names=["Rohit Sharma"])

    assert excinfo.value.field == "playerNames"
    assert services.store.teams.find_by_name("Delhi Capitals") is None
    assert services.teams.get(first.id).player_ids == [first_rohit.id]
    assert services.teams.get(second.id).player_ids == [second_rohit.id]


def test_unattached_namesake_is_preferred(services: Services, namesakes):
    first, first_rohit, second, second_rohit = namesakes
    pool = add_team(services, "Pool")
    free_rohit = add_player(services, "Rohit Sharma", "Pool")
    services.teams.delete(pool.id)

    team = add_team(services, "Delhi Capitals", player_names=["Rohit Sharma"], captain_name="Rohit Sharma")

    assert team.player_ids == [free_rohit.id]
    assert team.captain_id == free_rohit.id
    assert services.teams.get(first.id).player_ids == [first_rohit.id]
