"""Tests for secret squares."""

from fastapi.testclient import TestClient
from sqlmodel import Session

from bingo.db.repositories.games import GameRepository
from bingo.db.repositories.secrets import SecretSquareRepository
from bingo.db.seed import seed_all
from bingo.features.secrets.services import SecretSquareService

API = "/api/v1"


def _create_secret(client: TestClient, headers, game_id: int, player: str = "her", text: str = "Steal his hoodie"):
    return client.post(
        f"{API}/secrets",
        json={"player": player, "game_id": game_id, "text": text, "description": "Keep it all night"},
        headers=headers,
    )


def _share(client: TestClient, player: str, pin: str = "4321") -> None:
    token = client.post(f"{API}/auth/setup", json={"player": player, "pin": pin}).json()["player_token"]
    client.patch(f"{API}/auth/share/{player}", json={"shared": True}, headers={"X-Player-Token": token})


def test_create_and_list_own_secrets(client: TestClient, create_game, player_headers) -> None:
    game = create_game()
    response = _create_secret(client, player_headers("her"), game["id"])
    assert response.status_code == 201
    secret = response.json()
    assert secret["player"] == "her"
    assert secret["checked"] is False

    listed = client.get(f"{API}/secrets/her/{game['id']}", headers=player_headers("her")).json()
    assert [s["id"] for s in listed] == [secret["id"]]


def test_secrets_hidden_until_shared(client: TestClient, create_game, player_headers) -> None:
    game = create_game()
    _create_secret(client, player_headers("her"), game["id"])

    assert client.get(f"{API}/secrets/her/{game['id']}", headers=player_headers("him")).status_code == 403

    _share(client, "her")
    listed = client.get(f"{API}/secrets/her/{game['id']}", headers=player_headers("him"))
    assert listed.status_code == 200
    assert [s["text"] for s in listed.json()] == ["Steal his hoodie"]


def test_create_for_other_slot_forbidden(client: TestClient, create_game, player_headers) -> None:
    game = create_game()
    assert _create_secret(client, player_headers("him"), game["id"], player="her").status_code == 403
    assert _create_secret(client, {}, game["id"]).status_code == 401


def test_create_rejects_blank_text_and_unknown_game(client: TestClient, create_game, player_headers) -> None:
    game = create_game()
    assert _create_secret(client, player_headers("her"), game["id"], text="   ").status_code == 422
    assert _create_secret(client, player_headers("her"), 999).status_code == 404


def test_only_owner_slot_can_toggle(client: TestClient, create_game, player_headers) -> None:
    game = create_game()
    secret = _create_secret(client, player_headers("her"), game["id"]).json()

    denied = client.patch(f"{API}/secrets/{secret['id']}", json={"checked": True}, headers=player_headers("him"))
    assert denied.status_code == 403
    assert client.patch(f"{API}/secrets/{secret['id']}", json={"checked": True}).status_code == 401

    ok = client.patch(f"{API}/secrets/{secret['id']}", json={"checked": True}, headers=player_headers("her"))
    assert ok.status_code == 200
    assert ok.json()["checked"] is True


def test_toggle_unknown_secret(client: TestClient, player_headers) -> None:
    assert client.patch(f"{API}/secrets/12345", json={"checked": True}, headers=player_headers("her")).status_code == 404


def test_secrets_locked_after_completion(client: TestClient, create_game, player_headers) -> None:
    game = create_game()
    secret = _create_secret(client, player_headers("her"), game["id"]).json()
    client.patch(f"{API}/games/{game['id']}/winner", json={"winner": "her"})

    toggle = client.patch(f"{API}/secrets/{secret['id']}", json={"checked": True}, headers=player_headers("her"))
    assert toggle.status_code == 409
    assert _create_secret(client, player_headers("her"), game["id"], text="Too late").status_code == 409


def test_duplicating_template_copies_default_secrets(client: TestClient, app, auth_headers, player_headers) -> None:
    with Session(app.state.engine) as session:
        seed_all(session, app.state.settings.SEED_PATH)

    templates = client.get(f"{API}/games/templates").json()
    thursday = next(t for t in templates if t["title"] == "Thursday Night")

    copy = client.post(f"{API}/games/{thursday['id']}/duplicate", headers=auth_headers("alice")).json()
    secrets = client.get(f"{API}/secrets/her/{copy['id']}", headers=player_headers("her")).json()
    assert [s["text"] for s in secrets] == ["Steal his hoodie"]
    assert all(s["checked"] is False for s in secrets)


def test_list_by_player_across_games(session: Session) -> None:
    games = GameRepository(session)
    squares = [{"text": f"s{i}", "description": ""} for i in range(9)]
    first = games.create(title="One", grid_size=3, squares=squares, owner_id="alice")
    second = games.create(title="Two", grid_size=3, squares=squares, owner_id="alice")

    svc = SecretSquareService(game_repo=games, secret_repo=SecretSquareRepository(session))
    svc.create(player="him", game_id=first.id, text="Win her a prize")
    svc.create(player="him", game_id=second.id, text="  Tell her a secret  ")
    svc.create(player="her", game_id=second.id, text="Catch him staring")

    assert [s.text for s in svc.list_by_player("him")] == ["Win her a prize", "Tell her a secret"]
    assert [s.game_id for s in svc.list_by_player("her")] == [second.id]
