"""Test KEEP SIEGE API endpoints."""

import pytest
from fastapi.testclient import TestClient

from siege.simulation import EntitySnapshot, Vector3
from siege_server.config import Settings
from siege_server.main import create_app
from siege_server.routers.battle import cap_per_archetype


@pytest.fixture
def app(tmp_path):
    """App with its own leaderboard directory."""
    return create_app(Settings(
        battle_seed="api-seed",
        leaderboard_dir=tmp_path / "leaderboard",
        post_id="post-1",
        player_name="tester",
    ))


@pytest.fixture
def client(app):
    """Create test client."""
    return TestClient(app)


def _finish(app, client):
    """Start the battle and force a quick defeat."""
    client.post("/api/battle/start")
    engine = app.state.engine
    engine._keep.hp = 0.5
    for defender in engine._defenders.values():
        defender.dps = 0.0
    while engine.step():
        pass
    return engine


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["tick"] == 0
        assert data["running"] is False


class TestBattleControl:
    def test_state_before_start(self, client):
        data = client.get("/api/battle/state").json()
        assert data["seed"] == "api-seed"
        assert data["tick"] == 0
        assert data["running"] is False
        assert data["keep_hp"] is None
        assert data["submitted"] is False

    def test_start_and_advance(self, client):
        assert client.post("/api/battle/start").json()["status"] == "running"
        response = client.post("/api/battle/advance", json={"seconds": 0.5})
        assert response.status_code == 200
        data = response.json()
        assert data["steps"] == 5
        assert data["tick"] == 5
        state = client.get("/api/battle/state").json()
        assert state["waves"]["wave_number"] == 1
        assert state["keep_hp"] == 100.0

    def test_advance_rejects_negative(self, client):
        client.post("/api/battle/start")
        response = client.post("/api/battle/advance", json={"seconds": -1})
        assert response.status_code == 422

    def test_advance_while_stopped_is_noop(self, client):
        data = client.post("/api/battle/advance", json={"seconds": 1.0}).json()
        assert data["steps"] == 0
        assert data["tick"] == 0

    def test_stop(self, client):
        client.post("/api/battle/start")
        assert client.post("/api/battle/stop").json()["status"] == "stopped"
        assert client.get("/api/battle/state").json()["running"] is False

    def test_new_battle(self, client):
        client.post("/api/battle/start")
        client.post("/api/battle/advance", json={"seconds": 0.3})
        data = client.post("/api/battle/new", json={"seed": "fresh"}).json()
        assert data["seed"] == "fresh"
        state = client.get("/api/battle/state").json()
        assert state["seed"] == "fresh"
        assert state["tick"] == 0

    def test_replay(self, app, client):
        client.post("/api/battle/start")
        client.post("/api/battle/advance", json={"seconds": 1.0})
        old = app.state.engine
        data = client.post("/api/battle/replay").json()
        assert data["seed"] == "api-seed"
        assert data["tick"] == 0
        assert app.state.engine is not old
        assert app.state.engine.is_running


class TestBattleReads:
    def test_entities(self, client):
        client.post("/api/battle/start")
        client.post("/api/battle/advance", json={"seconds": 0.1})
        entities = client.get("/api/battle/entities").json()
        kinds = [e["kind"] for e in entities]
        assert kinds[0] == "keep"
        assert kinds.count("defender") == 3
        assert kinds.count("hostile") >= 5

    def test_hostiles(self, client):
        client.post("/api/battle/start")
        client.post("/api/battle/advance", json={"seconds": 0.1})
        hostiles = client.get("/api/battle/hostiles").json()
        assert len(hostiles) >= 5
        assert all(h["alive"] for h in hostiles)
        assert {"archetype", "position", "hp", "max_hp"} <= set(hostiles[0])

    def test_projectiles_and_damage_events(self, client):
        client.post("/api/battle/start")
        client.post("/api/battle/advance", json={"seconds": 2.0})
        assert isinstance(client.get("/api/battle/projectiles").json(), list)
        assert isinstance(client.get("/api/battle/damage-events").json(), list)

    def test_log(self, client):
        client.post("/api/battle/start")
        client.post("/api/battle/advance", json={"seconds": 0.1})
        lines = client.get("/api/battle/log").json()["lines"]
        assert lines[0].startswith("[t=0000] Battle started")
        assert len(client.get("/api/battle/log", params={"limit": 1}).json()["lines"]) == 1

    def test_summary_404_until_finished(self, client):
        assert client.get("/api/battle/summary").status_code == 404

    def test_summary_after_finish(self, app, client):
        _finish(app, client)
        data = client.get("/api/battle/summary").json()
        assert data["outcome"] == "defeat"
        assert data["seed"] == "api-seed"

    def test_units(self, client):
        data = client.get("/api/battle/units").json()
        assert data["budget"] == 120
        assert {u["type_id"] for u in data["hostiles"]} == {"runner", "tank", "spitter", "pack"}


class TestDisplayCap:
    def _hostiles(self, archetype, n):
        return tuple(
            EntitySnapshot(id=f"{archetype}-{i}", kind="hostile", archetype=archetype,
                           position=Vector3(), hp=1.0, max_hp=1.0, alive=True, created_tick=0)
            for i in range(n)
        )

    def test_truncates_per_archetype(self):
        hostiles = self._hostiles("runner", 300) + self._hostiles("tank", 10)
        kept = cap_per_archetype(hostiles, 256)
        assert len(kept) == 266
        assert sum(1 for h in kept if h.archetype == "runner") == 256
        assert kept[0].id == "runner-0"

    def test_under_cap_untouched(self):
        hostiles = self._hostiles("pack", 4)
        assert cap_per_archetype(hostiles, 256) == list(hostiles)

    def test_endpoint_uses_configured_cap(self, app, client):
        app.state.display_cap = 1
        client.post("/api/battle/start")
        client.post("/api/battle/advance", json={"seconds": 0.1})
        hostiles = client.get("/api/battle/hostiles").json()
        archetypes = [h["archetype"] for h in hostiles]
        assert len(archetypes) == len(set(archetypes))
        assert len(hostiles) < len(app.state.engine.hostiles())


class TestSubmit:
    def test_submit_before_finish(self, client):
        assert client.post("/api/battle/submit", json={}).status_code == 404

    def test_submit_once(self, app, client):
        _finish(app, client)
        response = client.post("/api/battle/submit", json={"player_name": "alice"})
        assert response.status_code == 200
        record = response.json()["record"]
        assert record["leaderboard"][0]["player"] == "alice"
        assert record["leaderboard"][0]["damage_dealt"] == 100.0
        assert record["fastest_collapse"] is not None

        again = client.post("/api/battle/submit", json={"player_name": "alice"})
        assert again.status_code == 409
        board = client.get("/api/leaderboard/post-1").json()
        assert len(board["leaderboard"]) == 1
        assert client.get("/api/battle/state").json()["submitted"] is True

    def test_submit_defaults_from_settings(self, app, client):
        _finish(app, client)
        data = client.post("/api/battle/submit", json={}).json()
        assert data["post_id"] == "post-1"
        assert data["record"]["leaderboard"][0]["player"] == "tester"

    def test_submit_validates_plan(self, app, client):
        _finish(app, client)
        response = client.post("/api/battle/submit", json={"plan": ["tank"] * 4})
        assert response.status_code == 400
        ok = client.post("/api/battle/submit", json={"plan": ["tank", "runner"]})
        assert ok.status_code == 200

    def test_new_battle_resets_submitted_flag(self, app, client):
        _finish(app, client)
        client.post("/api/battle/submit", json={})
        client.post("/api/battle/new", json={})
        assert client.get("/api/battle/state").json()["submitted"] is False


class TestLeaderboard:
    def test_empty_board(self, client):
        data = client.get("/api/leaderboard/nobody").json()
        assert data == {"brain_value": 0.0, "fastest_collapse": None, "leaderboard": []}

    def test_invalid_post_id(self, client):
        assert client.get("/api/leaderboard/bad id!").status_code == 400

    def test_clear(self, app, client):
        _finish(app, client)
        client.post("/api/battle/submit", json={})
        assert client.delete("/api/leaderboard/post-1").json()["cleared"] is True
        assert client.get("/api/leaderboard/post-1").json()["leaderboard"] == []
