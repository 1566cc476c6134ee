"""Tests for game lifecycle, ownership and stats."""

from fastapi.testclient import TestClient
from sqlmodel import Session, select

from bingo.db.models.progress import ProgressEntry
from bingo.db.models.secrets import SecretSquare

from conftest import make_game_payload, make_squares

API = "/api/v1"


# -----------------------------
# Création / lecture
# -----------------------------
def test_create_game_defaults(client: TestClient, auth_headers) -> None:
    response = client.post(f"{API}/games", json=make_game_payload(), headers=auth_headers("alice"))
    assert response.status_code == 201
    game = response.json()
    assert game["status"] == "active"
    assert game["winner"] is None
    assert game["owner_id"] == "alice"
    assert game["partner_id"] is None
    assert game["is_template"] is False
    assert game["rating"] == "r"
    assert game["mood"] == "couples"
    assert game["player1_label"] == "Him"
    assert game["player2_label"] == "Her"
    assert len(game["squares"]) == 9


def test_create_game_requires_identity(client: TestClient) -> None:
    response = client.post(f"{API}/games", json=make_game_payload())
    assert response.status_code == 401


def test_create_game_rejects_invalid_token(client: TestClient) -> None:
    response = client.post(
        f"{API}/games",
        json=make_game_payload(),
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert response.status_code == 401


def test_player_token_is_not_an_identity(client: TestClient, player_headers) -> None:
    token = player_headers("him")["X-Player-Token"]
    response = client.post(
        f"{API}/games",
        json=make_game_payload(),
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 401


def test_create_game_wrong_square_count(client: TestClient, auth_headers) -> None:
    payload = make_game_payload(grid_size=4, squares=make_squares(3))
    response = client.post(f"{API}/games", json=payload, headers=auth_headers("alice"))
    assert response.status_code == 400


def test_create_game_blank_square(client: TestClient, auth_headers) -> None:
    squares = make_squares(3)
    squares[4]["text"] = "   "
    response = client.post(f"{API}/games", json=make_game_payload(squares=squares), headers=auth_headers("alice"))
    assert response.status_code == 422


def test_create_game_unsupported_grid_size(client: TestClient, auth_headers) -> None:
    payload = make_game_payload(grid_size=6, squares=make_squares(6))
    response = client.post(f"{API}/games", json=payload, headers=auth_headers("alice"))
    assert response.status_code == 422


def test_get_game_and_not_found(client: TestClient, create_game) -> None:
    game = create_game()
    assert client.get(f"{API}/games/{game['id']}").json()["title"] == "Friday Date Night"
    assert client.get(f"{API}/games/9999").status_code == 404


def test_list_mine_includes_partner_games(client: TestClient, create_game, auth_headers) -> None:
    own = create_game(owner="alice")
    joined = create_game(owner="bob", title="Bob's night")
    create_game(owner="carol", title="Not mine")
    client.post(f"{API}/games/{joined['id']}/join", headers=auth_headers("alice"))

    response = client.get(f"{API}/games/me", headers=auth_headers("alice"))
    assert response.status_code == 200
    ids = {g["id"] for g in response.json()}
    assert ids == {own["id"], joined["id"]}


def test_list_mine_status_filter(client: TestClient, create_game, auth_headers) -> None:
    active = create_game()
    done = create_game(title="Done")
    client.patch(f"{API}/games/{done['id']}/winner", json={"winner": "her"})

    active_ids = [g["id"] for g in client.get(f"{API}/games/me?status=active", headers=auth_headers("alice")).json()]
    completed_ids = [g["id"] for g in client.get(f"{API}/games/me?status=completed", headers=auth_headers("alice")).json()]
    assert active_ids == [active["id"]]
    assert completed_ids == [done["id"]]


# -----------------------------
# Partenaire
# -----------------------------
def test_join_as_partner(client: TestClient, create_game, auth_headers) -> None:
    game = create_game(owner="alice")
    response = client.post(f"{API}/games/{game['id']}/join", headers=auth_headers("bob"))
    assert response.status_code == 200
    assert response.json()["partner_id"] == "bob"

    # idempotent pour le même partenaire
    again = client.post(f"{API}/games/{game['id']}/join", headers=auth_headers("bob"))
    assert again.status_code == 200
    assert again.json()["partner_id"] == "bob"


def test_join_conflicts(client: TestClient, create_game, auth_headers) -> None:
    game = create_game(owner="alice")
    assert client.post(f"{API}/games/{game['id']}/join", headers=auth_headers("alice")).status_code == 409

    client.post(f"{API}/games/{game['id']}/join", headers=auth_headers("bob"))
    assert client.post(f"{API}/games/{game['id']}/join", headers=auth_headers("carol")).status_code == 409
    assert client.get(f"{API}/games/{game['id']}").json()["partner_id"] == "bob"


# -----------------------------
# Duplication
# -----------------------------
def test_duplicate_resets_lifecycle(client: TestClient, create_game, auth_headers) -> None:
    source = create_game(owner="alice", rating="pg13", mood="party", player1_label="Team A", player2_label="Team B")
    client.post(f"{API}/games/{source['id']}/join", headers=auth_headers("bob"))
    client.patch(f"{API}/games/{source['id']}/winner", json={"winner": "him"})

    response = client.post(f"{API}/games/{source['id']}/duplicate", headers=auth_headers("carol"))
    assert response.status_code == 201
    copy = response.json()
    assert copy["id"] != source["id"]
    assert copy["owner_id"] == "carol"
    assert copy["partner_id"] is None
    assert copy["status"] == "active"
    assert copy["winner"] is None
    assert copy["is_template"] is False
    for field in ("title", "theme", "grid_size", "squares", "bet_description", "rating", "mood", "player1_label", "player2_label"):
        assert copy[field] == source[field]


def test_duplicate_unknown_game(client: TestClient, auth_headers) -> None:
    assert client.post(f"{API}/games/404/duplicate", headers=auth_headers("alice")).status_code == 404


# -----------------------------
# Mise à jour
# -----------------------------
def test_update_by_partner(client: TestClient, create_game, auth_headers) -> None:
    game = create_game(owner="alice")
    client.post(f"{API}/games/{game['id']}/join", headers=auth_headers("bob"))

    response = client.patch(f"{API}/games/{game['id']}", json={"title": "Saturday"}, headers=auth_headers("bob"))
    assert response.status_code == 200
    assert response.json()["title"] == "Saturday"


def test_update_grid_size_needs_matching_squares(client: TestClient, create_game, auth_headers) -> None:
    game = create_game()
    response = client.patch(f"{API}/games/{game['id']}", json={"grid_size": 4}, headers=auth_headers("alice"))
    assert response.status_code == 400

    response = client.patch(
        f"{API}/games/{game['id']}",
        json={"grid_size": 4, "squares": make_squares(4)},
        headers=auth_headers("alice"),
    )
    assert response.status_code == 200
    assert len(response.json()["squares"]) == 16


def test_shrinking_grid_prunes_progress(client: TestClient, create_game, auth_headers, player_headers) -> None:
    game = create_game(grid_size=4)
    for index in (0, 5, 15):
        client.post(
            f"{API}/progress",
            json={"player": "him", "game_id": game["id"], "square_index": index, "checked": True},
            headers=player_headers("him"),
        )

    response = client.patch(
        f"{API}/games/{game['id']}",
        json={"grid_size": 3, "squares": make_squares(3)},
        headers=auth_headers("alice"),
    )
    assert response.status_code == 200

    rows = client.get(f"{API}/progress/him/{game['id']}", headers=player_headers("him")).json()
    assert sorted(r["square_index"] for r in rows) == [0, 5]


def test_update_completed_game_conflicts(client: TestClient, create_game, auth_headers) -> None:
    game = create_game()
    client.patch(f"{API}/games/{game['id']}/winner", json={"winner": "tie"})
    response = client.patch(f"{API}/games/{game['id']}", json={"title": "Too late"}, headers=auth_headers("alice"))
    assert response.status_code == 409


# -----------------------------
# Suppression
# -----------------------------
def test_delete_is_owner_only_and_cascades(app, client: TestClient, create_game, auth_headers, player_headers) -> None:
    game = create_game(owner="alice")
    client.post(f"{API}/games/{game['id']}/join", headers=auth_headers("bob"))
    client.post(
        f"{API}/progress",
        json={"player": "her", "game_id": game["id"], "square_index": 1},
        headers=player_headers("her"),
    )
    client.post(
        f"{API}/secrets",
        json={"player": "her", "game_id": game["id"], "text": "Steal his hoodie"},
        headers=player_headers("her"),
    )

    with Session(app.state.engine) as session:
        assert len(session.exec(select(ProgressEntry).where(ProgressEntry.game_id == game["id"])).all()) == 1
        assert len(session.exec(select(SecretSquare).where(SecretSquare.game_id == game["id"])).all()) == 1

    assert client.delete(f"{API}/games/{game['id']}", headers=auth_headers("bob")).status_code == 403
    assert client.delete(f"{API}/games/{game['id']}", headers=auth_headers("alice")).status_code == 204
    assert client.get(f"{API}/games/{game['id']}").status_code == 404
    assert client.get(f"{API}/progress/her/{game['id']}", headers=player_headers("her")).status_code == 404
    assert client.delete(f"{API}/games/{game['id']}", headers=auth_headers("alice")).status_code == 404

    with Session(app.state.engine) as session:
        assert session.exec(select(ProgressEntry).where(ProgressEntry.game_id == game["id"])).all() == []
        assert session.exec(select(SecretSquare).where(SecretSquare.game_id == game["id"])).all() == []


# -----------------------------
# Fin de partie
# -----------------------------
def test_declare_winner_once(client: TestClient, create_game) -> None:
    game = create_game()
    response = client.patch(f"{API}/games/{game['id']}/winner", json={"winner": "her"})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "completed"
    assert body["winner"] == "her"
    assert body["completed_at"] is not None

    second = client.patch(f"{API}/games/{game['id']}/winner", json={"winner": "him"})
    assert second.status_code == 409
    assert client.get(f"{API}/games/{game['id']}").json()["winner"] == "her"


def test_declare_winner_invalid_value(client: TestClient, create_game) -> None:
    game = create_game()
    assert client.patch(f"{API}/games/{game['id']}/winner", json={"winner": "nobody"}).status_code == 422


# -----------------------------
# Stats
# -----------------------------
def test_stats_for_owner_and_partner(client: TestClient, create_game, auth_headers) -> None:
    results = ["him", "him", "her", "tie"]
    for winner in results:
        game = create_game(owner="alice")
        client.post(f"{API}/games/{game['id']}/join", headers=auth_headers("bob"))
        client.patch(f"{API}/games/{game['id']}/winner", json={"winner": winner})
    create_game(owner="alice", title="Still playing")

    expected = {"him": 2, "her": 1, "tie": 1, "played": 4}
    assert client.get(f"{API}/games/stats", headers=auth_headers("alice")).json() == expected
    assert client.get(f"{API}/games/stats", headers=auth_headers("bob")).json() == expected
    assert client.get(f"{API}/games/stats", headers=auth_headers("carol")).json() == {"him": 0, "her": 0, "tie": 0, "played": 0}
