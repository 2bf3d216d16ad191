"""API route tests."""

import random

import pytest
from fastapi.testclient import TestClient

from api.game_store import MemoryGameStore
from api.main import app, get_session
from api.session import GameSession
from imposter.errors import PersistenceError
from imposter.words import WordSource

NAMES = ["Alice", "Bob", "Carol", "Dave"]

client = TestClient(app)


class FlakyStore(MemoryGameStore):
    def __init__(self) -> None:
        super().__init__()
        self.fail = False
        self.fail_load = False

    def load(self):
        if self.fail_load:
            raise PersistenceError("Could not read game.json")
        return super().load()

    def store(self, record) -> None:
        if self.fail:
            raise PersistenceError("quota exceeded")
        super().store(record)


@pytest.fixture(autouse=True)
def session():
    s = GameSession(FlakyStore(), WordSource({"niets": ["FIETS"]}), random.Random(17))
    app.dependency_overrides[get_session] = lambda: s
    yield s
    app.dependency_overrides.clear()


def _dealt_game(player_count: int = 4, imposter_count: int = 1) -> dict:
    r = client.post("/game", json={"player_count": player_count, "imposter_count": imposter_count})
    assert r.status_code == 200
    r = client.put("/game/players", json={"names": NAMES[:player_count]})
    assert r.status_code == 200
    r = client.post("/game/roles")
    assert r.status_code == 200
    return r.json()


def _roles() -> dict[str, str]:
    state = client.get("/game").json()
    roles = {}
    for i in range(len(state["players"])):
        reveal = client.get(f"/game/roles/{i}").json()
        roles[reveal["player_name"]] = reveal["role"]
    return roles


def test_health():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_get_game_404():
    r = client.get("/game")
    assert r.status_code == 404


def test_create_game():
    r = client.post("/game", json={"player_count": 5, "imposter_count": 2, "knowledge_level": "some"})
    assert r.status_code == 200
    state = r.json()
    assert state["player_count"] == 5
    assert state["imposter_count"] == 2
    assert state["knowledge_level"] == "some"
    assert state["players"] == []
    assert state["roles_assigned"] is False
    assert state["round"] == 1
    assert state["secret_word"] is None
    assert state["saved"] is True


def test_create_game_validation():
    r = client.post("/game", json={"player_count": 2})
    assert r.status_code == 422  # too few players
    r = client.post("/game", json={"player_count": 21})
    assert r.status_code == 422
    r = client.post("/game", json={"player_count": 5, "imposter_count": 3})
    assert r.status_code == 422  # more than half
    r = client.post("/game", json={"player_count": 5, "knowledge_level": "everything"})
    assert r.status_code == 422


def test_set_players_wrong_count():
    client.post("/game", json={"player_count": 4, "imposter_count": 1})
    r = client.put("/game/players", json={"names": ["A", "B", "C"]})
    assert r.status_code == 400
    r = client.put("/game/players", json={"names": ["A", "B", " ", "D"]})
    assert r.status_code == 400


def test_assign_roles_before_names():
    client.post("/game", json={"player_count": 4, "imposter_count": 1})
    r = client.post("/game/roles")
    assert r.status_code == 409


def test_roles_hidden_until_game_over():
    state = _dealt_game()
    assert state["roles_assigned"] is True
    assert state["current_player"] == "Alice"
    assert [p["name"] for p in state["roster"]] == NAMES
    assert all(p["role"] is None and p["active"] for p in state["roster"])
    assert state["remaining_imposter_count"] == 1
    assert state["remaining_crewmate_count"] == 3


def test_reveal_role_word_only_for_crewmates():
    _dealt_game()
    roles = _roles()
    assert sorted(roles.values()) == ["crewmate", "crewmate", "crewmate", "impostor"]
    for i in range(4):
        reveal = client.get(f"/game/roles/{i}").json()
        if reveal["role"] == "crewmate":
            assert reveal["word"] == "FIETS"
        else:
            assert reveal["word"] is None
    r = client.get("/game/roles/4")
    assert r.status_code == 409


def test_turns_wrap_into_next_round():
    _dealt_game()
    for _ in range(3):
        state = client.post("/game/turn").json()
    assert state["turn_index"] == 3
    assert state["current_player"] == "Dave"
    state = client.post("/game/turn").json()
    assert state["round"] == 2
    assert state["turn_index"] == 0


def test_vote_crewmates_until_impostors_win():
    _dealt_game()
    roles = _roles()
    crew = [name for name, role in roles.items() if role == "crewmate"]
    r = client.post("/game/vote", json={"player_name": crew[0]})
    assert r.status_code == 200
    state = r.json()
    assert state["ended"] is False
    assert state["last_vote_result"] == {"voted_player_name": crew[0], "was_impostor": False}
    eliminated = [p for p in state["roster"] if not p["active"]]
    assert eliminated == [{"name": crew[0], "active": False, "role": "crewmate"}]

    r = client.post("/game/results")
    assert r.status_code == 405
    r = client.get("/game/results")
    assert r.status_code == 409

    state = client.post("/game/next-round").json()
    assert state["round"] == 2
    state = client.post("/game/vote", json={"player_name": crew[1]}).json()
    assert state["ended"] is True
    assert state["winner"] == "impostors"
    assert state["secret_word"] == "FIETS"
    assert all(p["role"] is not None for p in state["roster"])

    r = client.post("/game/vote", json={"player_name": crew[2]})
    assert r.status_code == 409
    r = client.post("/game/turn")
    assert r.status_code == 409

    results = client.get("/game/results").json()
    assert [r["player_name"] for r in results] == NAMES
    assert sorted(r["player_name"] for r in results if r["eliminated"]) == sorted(crew[:2])


def test_vote_impostor_crewmates_win():
    _dealt_game(player_count=4)
    roles = _roles()
    impostor = next(name for name, role in roles.items() if role == "impostor")
    state = client.post("/game/vote", json={"player_name": impostor}).json()
    assert state["ended"] is True
    assert state["winner"] == "crewmates"
    assert state["remaining_imposter_count"] == 0


def test_vote_unknown_player():
    _dealt_game()
    r = client.post("/game/vote", json={"player_name": "Zed"})
    assert r.status_code == 409


def test_replay_same_players_restores_roster():
    _dealt_game()
    roles = _roles()
    impostor = next(name for name, role in roles.items() if role == "impostor")
    crew = next(name for name, role in roles.items() if role == "crewmate")
    client.post("/game/vote", json={"player_name": crew})
    client.post("/game/next-round")
    client.post("/game/vote", json={"player_name": impostor})
    r = client.post("/game/replay", json={"same_players": True})
    assert r.status_code == 200
    state = r.json()
    assert state["players"] == NAMES
    assert state["ended"] is False
    assert state["winner"] is None
    assert state["round"] == 1
    assert state["last_vote_result"] is None


def test_replay_new_discards_game():
    _dealt_game()
    r = client.post("/game/replay", json={"same_players": False})
    assert r.status_code == 200
    assert r.json() is None
    assert client.get("/game").status_code == 404


def test_reset():
    _dealt_game()
    r = client.delete("/game")
    assert r.status_code == 200
    assert client.get("/game").status_code == 404


def test_store_failure_reports_unsaved(session):
    _dealt_game()
    session.store.fail = True
    r = client.post("/game/turn")
    assert r.status_code == 503
    state = client.get("/game").json()
    assert state["turn_index"] == 1  # kept in memory
    assert state["saved"] is False
    assert session.store.load().turn_index == 0

    session.store.fail = False
    state = client.post("/game/save").json()
    assert state["saved"] is True
    assert session.store.load().turn_index == 1


def test_vote_name_with_padding():
    client.post("/game", json={"player_count": 3, "imposter_count": 1})
    client.put("/game/players", json={"names": ["Ann ", "Ben", "Cas"]})
    client.post("/game/roles")
    r = client.post("/game/vote", json={"player_name": "Ann "})
    assert r.status_code == 200
    assert r.json()["last_vote_result"]["voted_player_name"] == "Ann"


def test_load_failure_reports_storage_error(session):
    session.store.fail_load = True
    r = client.get("/game")
    assert r.status_code == 503
    detail = r.json()["detail"]
    assert detail.startswith("Game storage error")
    assert "saved" not in detail


def test_cors_allows_local_origin_without_credentials():
    r = client.get("/health", headers={"Origin": "http://localhost"})
    assert r.headers["access-control-allow-origin"] == "http://localhost"
    assert "access-control-allow-credentials" not in r.headers
    r = client.get("/health", headers={"Origin": "http://evil.example"})
    assert "access-control-allow-origin" not in r.headers
