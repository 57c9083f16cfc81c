"""Tests for save/load, migration and offline earnings."""

import json

from tierclick.data.balance import BALANCE
from tierclick.data.upgrades import ALL_UPGRADES
from tierclick.engine.economy import compute_derived
from tierclick.engine.events import sync_event
from tierclick.engine.game_state import ScoreType, new_game_state
from tierclick.engine.progress import add_leaderboard_score
from tierclick.engine.save import (
    AudioSettings,
    PersistenceHandle,
    compute_offline_earnings,
    dict_to_state,
    state_to_dict,
)

WINDOW = BALANCE.events.window_s


def _played_state():
    state = new_game_state(now=500.0)
    state.clicks = 1_234.5
    state.lifetime_clicks = 99_999
    state.prestige_points = 3
    state.total_prestiges = 2
    state.upgrades["energy"] = 4
    state.upgrades["sean"] = 2
    state.skill_tree["a"] = True
    state.achievements["first_click"] = True
    state.quest_state.quests["beginner_journey"].steps["step1"] = 100
    state = add_leaderboard_score(state, "ann", ScoreType.LIFETIME, 600.0)
    return compute_derived(state)


# ── Round trip ───────────────────────────────────────────────────


def test_save_and_load(tmp_path):
    handle = PersistenceHandle(tmp_path)
    state = _played_state()
    stamped = handle.save(state, now=1_000.0)
    assert stamped.stats.last_online_time == 1_000.0
    assert state.stats.last_online_time == 500.0

    loaded = handle.load()
    assert loaded.clicks == 1_234.5
    assert loaded.lifetime_clicks == 99_999
    assert loaded.prestige_points == 3
    assert loaded.total_prestiges == 2
    assert loaded.upgrades == state.upgrades
    assert loaded.skill_tree == state.skill_tree
    assert loaded.achievements["first_click"]
    assert loaded.quest_state.quests["beginner_journey"].steps["step1"] == 100
    assert [e.name for e in loaded.quest_state.leaderboard] == ["ann"]
    assert loaded.quest_state.leaderboard[0].score_type == ScoreType.LIFETIME
    assert loaded.click_power == state.click_power
    assert loaded.cps == state.cps
    assert loaded.stats.last_online_time == 1_000.0
    assert loaded == stamped


def test_snapshot_is_versioned():
    assert state_to_dict(new_game_state(now=0.0))["version"] == 1


def test_missing_save_gives_fresh_state(tmp_path):
    loaded = PersistenceHandle(tmp_path).load()
    assert loaded.clicks == 0
    assert set(loaded.upgrades) == set(ALL_UPGRADES)


def test_corrupt_save_gives_fresh_state(tmp_path):
    handle = PersistenceHandle(tmp_path)
    handle.save_file.write_text("{not json")
    assert handle.load().clicks == 0

    handle.save_file.write_text(json.dumps([1, 2, 3]))
    assert handle.load().clicks == 0


def test_unwritable_directory_does_not_raise(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("")
    handle = PersistenceHandle(blocker)
    stamped = handle.save(new_game_state(now=0.0), now=5.0)
    assert stamped.stats.last_online_time == 5.0


def test_delete(tmp_path):
    handle = PersistenceHandle(tmp_path)
    handle.save(new_game_state(now=0.0))
    assert handle.save_file.exists()
    handle.delete()
    assert not handle.save_file.exists()
    handle.delete()


# ── Migration ────────────────────────────────────────────────────


def test_merge_adds_new_and_drops_removed_content():
    state = dict_to_state({
        "clicks": 5,
        "upgrades": {"energy": 3, "retired_upgrade": 9},
        "skill_tree": {"a": True, "zz": True},
        "achievements": {"first_click": True, "retired": True},
    })
    assert set(state.upgrades) == set(ALL_UPGRADES)
    assert state.upgrades["energy"] == 3
    assert state.upgrades["sean"] == 0
    assert "zz" not in state.skill_tree
    assert "retired" not in state.achievements
    assert state.clicks == 5
    # Derived stats are recomputed, not trusted
    assert state.click_power == (1 + 6) * 2


def test_merge_rejects_bad_values():
    state = dict_to_state({
        "clicks": "lots",
        "total_prestiges": -4,
        "lifetime_clicks": True,
        "upgrades": {"energy": "x", "sean": -3},
        "quest_state": {"leaderboard": [{"name": 1}], "event": {"id": "retired_event"}},
        "stats": {"cps_history": [{"time": 1, "value": "x"}, {"time": 2, "value": 3}]},
    })
    assert state.clicks == 0
    assert state.total_prestiges == 0
    assert state.lifetime_clicks == 0
    assert state.upgrades["energy"] == 0
    assert state.upgrades["sean"] == 0
    assert state.quest_state.leaderboard == []
    assert state.quest_state.event is None
    assert [(p.time, p.value) for p in state.stats.cps_history] == [(2.0, 3.0)]


def test_merge_caps_history():
    limit = BALANCE.stats.history_limit
    points = [{"time": i, "value": i} for i in range(limit + 20)]
    state = dict_to_state({"stats": {"clicks_history": points}})
    assert len(state.stats.clicks_history) == limit
    assert state.stats.clicks_history[-1].value == limit + 19


def test_merge_uses_given_clock_for_missing_fields():
    state = dict_to_state({"clicks": 5}, now=42.0)
    assert state.stats.start_time == 42.0
    assert state.stats.last_online_time == 42.0
    assert state.quest_state.last_daily_reset == 42.0


# ── Offline earnings ─────────────────────────────────────────────


def test_offline_earnings():
    state = new_game_state(now=1_000.0)
    state.upgrades["sean"] = 10
    state = compute_derived(state)
    assert compute_offline_earnings(state, 1_100.0) == (100.0, 1_000.0)


def test_offline_earnings_are_capped():
    state = new_game_state(now=0.0)
    state.upgrades["sean"] = 1
    state = compute_derived(state)
    seconds, amount = compute_offline_earnings(state, 30 * 24 * 3600)
    assert seconds == BALANCE.persistence.max_offline_s
    assert amount == BALANCE.persistence.max_offline_s


def test_clock_going_backwards_earns_nothing():
    state = compute_derived(new_game_state(now=1_000.0))
    assert compute_offline_earnings(state, 10.0) == (0.0, 0.0)


def test_offline_earnings_use_event_running_on_return():
    saved_at = WINDOW * 2 + 10
    state = new_game_state(now=saved_at)
    state.upgrades["sean"] = 1
    sync_event(state, saved_at, [])
    state = compute_derived(state)
    assert state.quest_state.event.id == "speed_rush"
    assert state.cps == 3

    # Back during golden hour, which leaves cps alone
    seconds, amount = compute_offline_earnings(state, WINDOW * 5 + 10)
    assert seconds == BALANCE.persistence.max_offline_s
    assert amount == seconds
    assert state.quest_state.event.id == "speed_rush"
    assert compute_offline_earnings(state, saved_at + 100) == (100.0, 300.0)


# ── Audio ────────────────────────────────────────────────────────


def test_audio_round_trip(tmp_path):
    handle = PersistenceHandle(tmp_path)
    assert handle.load_audio() == AudioSettings()
    handle.save_audio(AudioSettings(volume=0.2, sfx_enabled=False))
    loaded = handle.load_audio()
    assert loaded.volume == 0.2
    assert not loaded.sfx_enabled
    assert loaded.music_enabled


def test_audio_volume_is_clamped(tmp_path):
    assert AudioSettings(volume=3).volume == 1.0
    assert AudioSettings(volume=-1).volume == 0.0
    handle = PersistenceHandle(tmp_path)
    handle.audio_file.write_text(json.dumps({"volume": 9, "music_enabled": "no"}))
    loaded = handle.load_audio()
    assert loaded.volume == 1.0
    assert loaded.music_enabled
