from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from chessmoves.protocol.http.app import create_app


def _client() -> TestClient:
    return TestClient(create_app(default_rules="standard"))


def test_create_game_and_get_state() -> None:
    client = _client()
    r = client.post("/api/games")
    assert r.status_code == 200
    body = r.json()
    game_id = body["game_id"]
    assert game_id
    assert body["side_to_move"] == "white"
    assert len(body["pieces"]) == 32
    assert body["last_turn"] is None
    assert body["winner"] is None
    assert "b1" in body["movable"] and "e2" in body["movable"]

    r2 = client.get(f"/api/games/{game_id}/state")
    assert r2.status_code == 200
    assert r2.json() == body


def test_get_state_unknown_id_404() -> None:
    r = _client().get("/api/games/does-not-exist/state")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "not_found"


def test_moves_for_square() -> None:
    client = _client()
    game_id = client.post("/api/games").json()["game_id"]
    r = client.get(f"/api/games/{game_id}/moves/b1")
    assert r.status_code == 200
    body = r.json()
    assert body["piece_type"] == "knight"
    assert sorted(body["destinations"]) == ["a3", "c3"]

    r_rook = client.get(f"/api/games/{game_id}/moves/a1")
    assert r_rook.json()["destinations"] == []


@pytest.mark.parametrize("square", ["z9", "e4"])
def test_moves_for_bad_square(square: str) -> None:
    client = _client()
    game_id = client.post("/api/games").json()["game_id"]
    r = client.get(f"/api/games/{game_id}/moves/{square}")
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "bad_request"


def test_move_flow_and_history() -> None:
    client = _client()
    game_id = client.post("/api/games").json()["game_id"]
    r = client.post(f"/api/games/{game_id}/move", json={"move": "e2e4"})
    assert r.status_code == 200
    state = r.json()
    assert state["side_to_move"] == "black"
    assert state["last_turn"] == "wp 1:4 -> 3:4"
    assert state["history"] == ["wp 1:4 -> 3:4"]

    r_bad = client.post(f"/api/games/{game_id}/move", json={"move": "e4e5"})
    assert r_bad.status_code == 400
    assert "turn" in r_bad.json()["error"]["message"]

    r_garbage = client.post(f"/api/games/{game_id}/move", json={"move": "xx"})
    assert r_garbage.status_code == 400


def test_see_through_rules_per_game() -> None:
    client = _client()
    game_id = client.post("/api/games", json={"rules": "see_through"}).json()["game_id"]
    r = client.get(f"/api/games/{game_id}/moves/a1")
    # The rook looks through its own pawn up to the enemy back rank
    assert r.json()["destinations"] == ["a3", "a4", "a5", "a6", "a7", "a8"]


@pytest.mark.parametrize("kwargs", [{}, {"json": {}}, {"json": {"rules": None}}])
def test_server_default_rules_apply_without_explicit_choice(kwargs) -> None:
    client = TestClient(create_app(default_rules="see_through"))
    game_id = client.post("/api/games", **kwargs).json()["game_id"]
    r = client.get(f"/api/games/{game_id}/moves/a1")
    assert r.json()["destinations"] == ["a3", "a4", "a5", "a6", "a7", "a8"]


def test_explicit_rules_override_server_default() -> None:
    client = TestClient(create_app(default_rules="see_through"))
    game_id = client.post("/api/games", json={"rules": "standard"}).json()["game_id"]
    assert client.get(f"/api/games/{game_id}/moves/a1").json()["destinations"] == []


def test_perft_uses_server_default_rules() -> None:
    client = TestClient(create_app(default_rules="see_through"))
    # Rooks and bishops look through their own pawns, so white has more than 20 moves
    assert client.post("/api/perft", json={"depth": 1}).json()["nodes"] > 20
    assert client.post("/api/perft", json={"depth": 1, "rules": "standard"}).json()["nodes"] == 20


def test_unknown_rules_rejected() -> None:
    r = _client().post("/api/games", json={"rules": "chaos"})
    assert r.status_code == 422


def test_delete_game() -> None:
    client = _client()
    game_id = client.post("/api/games").json()["game_id"]
    assert client.delete(f"/api/games/{game_id}").status_code == 200
    assert client.delete(f"/api/games/{game_id}").status_code == 404
    assert client.get(f"/api/games/{game_id}/state").status_code == 404


def test_perft_endpoint() -> None:
    client = _client()
    r = client.post("/api/perft", json={"depth": 2})
    assert r.status_code == 200
    assert r.json() == {"depth": 2, "nodes": 400}

    assert client.post("/api/perft", json={"depth": -1}).status_code == 422
