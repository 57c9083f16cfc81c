"""Tests for the Flask JSON API."""

from unittest.mock import patch

import pytest

from tierclick.data.balance import BALANCE
from tierclick.data.upgrades import ALL_UPGRADES
from tierclick.engine.save import PersistenceHandle
from tierclick.engine.session import GameSession
from tierclick.web.__main__ import main
from tierclick.web.server import create_app, run_server


class FakeClock:
    def __init__(self, t: float = 0.0) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t


@pytest.fixture
def session(tmp_path):
    return GameSession(
        PersistenceHandle(tmp_path),
        clock=FakeClock(),
        wall_clock=FakeClock(100.0),
        load=False,
    )


@pytest.fixture
def client(session):
    app = create_app(session)
    app.config["TESTING"] = True
    return app.test_client()


# ── Read model ───────────────────────────────────────────────────


def test_state(client):
    resp = client.get("/api/state")
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["clicks"] == "0"
    assert data["cps"] == "0/s"
    assert len(data["upgrades"]) == len(ALL_UPGRADES)
    assert set(data["trees"]) == {"prestige", "ascension", "transcendence", "eternity"}
    assert data["event"]["id"] == "golden_hour"
    assert data["event"]["time_left"] == BALANCE.events.window_s - 100
    assert data["gain_preview"]["prestige"] == 0
    assert "event_start:golden_hour" in data["notifications"]
    assert "changed" not in data


def test_notifications_are_drained(client):
    client.get("/api/state")
    assert client.get("/api/state").get_json()["notifications"] == []


# ── Actions ──────────────────────────────────────────────────────


def test_click(client):
    data = client.post("/api/action/click").get_json()
    assert data["changed"] is True
    # Golden hour doubles click power
    assert data["clicks_raw"] == 2


def test_buy_rejected_without_funds(client):
    data = client.post("/api/action/buy/energy", json={"amount": 1}).get_json()
    assert data["changed"] is False


def test_buy_max(client, session):
    session.state.clicks = 190
    data = client.post("/api/action/buy/energy", json={"amount": "MAX"}).get_json()
    assert data["changed"] is True
    energy = next(u for u in data["upgrades"] if u["id"] == "energy")
    assert energy["owned"] == 3


def test_buy_with_bad_amount(client):
    assert client.post("/api/action/buy/energy", json={"amount": "lots"}).status_code == 400
    assert client.post("/api/action/buy/energy", json={"amount": 1.5}).status_code == 400


def test_tree_purchase(client):
    client.post("/api/action/cheat", json={"code": "givemeprestige"})
    data = client.post("/api/action/tree/prestige/a").get_json()
    assert data["changed"] is True
    node = next(n for n in data["trees"]["prestige"] if n["id"] == "a")
    assert node["owned"]
    assert client.post("/api/action/tree/bogus/a").status_code == 400


def test_reset_without_gain(client):
    for path in ("prestige", "ascend", "transcend", "eternity"):
        data = client.post(f"/api/action/{path}").get_json()
        assert data["changed"] is False


def test_claims(client):
    data = client.post("/api/action/claim/quest/beginner_journey").get_json()
    assert data["changed"] is False
    assert client.post("/api/action/claim/trophy/x").status_code == 400


def test_leaderboard(client):
    data = client.post("/api/action/leaderboard", json={"name": "ann", "type": "lifetime"}).get_json()
    assert data["changed"] is True
    assert data["leaderboard"]["lifetime"][0]["name"] == "ann"
    assert client.post("/api/action/leaderboard", json={"name": 5}).status_code == 400


def test_cheat(client):
    data = client.post("/api/action/cheat", json={"code": "giveme1000clicks"}).get_json()
    assert data["clicks_raw"] == 1000
    assert client.post("/api/action/cheat", json={}).status_code == 400
    assert client.post("/api/action/cheat", json={"code": "nope"}).get_json()["changed"] is False


def test_save_load_reset(client, tmp_path):
    client.post("/api/action/click")
    client.post("/api/action/save")
    assert PersistenceHandle(tmp_path).save_file.exists()

    client.post("/api/action/click")
    assert client.post("/api/action/load").get_json()["clicks_raw"] == 2

    client.post("/api/action/reset")
    assert not PersistenceHandle(tmp_path).save_file.exists()
    assert client.get("/api/state").get_json()["clicks_raw"] == 0


def test_audio(client):
    assert client.get("/api/audio").get_json()["volume"] == 0.5
    data = client.post("/api/audio", json={"volume": 0.2, "sfx_enabled": False}).get_json()
    assert data == {"volume": 0.2, "sfx_enabled": False, "music_enabled": True}
    assert client.post("/api/audio", json={"volume": "loud"}).status_code == 400


# ── Entry points ─────────────────────────────────────────────────


def test_run_server_saves_on_shutdown(tmp_path):
    with patch("flask.Flask.run") as run:
        run_server(port=5055, save_dir=str(tmp_path))
    run.assert_called_once_with(host="127.0.0.1", port=5055, debug=False, use_reloader=False)
    assert PersistenceHandle(tmp_path).save_file.exists()


def test_cli_arguments(tmp_path):
    argv = ["tierclick.web", "--port", "8080", "--save-dir", str(tmp_path), "--log-level", "debug"]
    with patch("tierclick.web.__main__.run_server") as run, patch("sys.argv", argv):
        main()
    run.assert_called_once_with(host="127.0.0.1", port=8080, debug=False, save_dir=str(tmp_path))
