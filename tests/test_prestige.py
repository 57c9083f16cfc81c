"""Tests for the reset tiers and their trees."""

from dataclasses import replace

from tierclick.data.balance import BALANCE
from tierclick.data.trees import Tier
from tierclick.engine import prestige
from tierclick.engine.economy import compute_derived
from tierclick.engine.game_state import new_game_state
from tierclick.engine.prestige import (
    ascension_gain,
    buy_tree_node,
    eternity_gain,
    gain_previews,
    perform_ascension,
    perform_eternity,
    perform_prestige,
    perform_transcendence,
    prestige_gain,
    transcendence_gain,
)


def _state(**fields):
    state = new_game_state(now=0.0)
    for name, value in fields.items():
        setattr(state, name, value)
    return compute_derived(state)


# ── Prestige ─────────────────────────────────────────────────────


def test_prestige_gain_floors():
    assert prestige_gain(_state(lifetime_clicks=25_000_000)) == 2
    assert prestige_gain(_state(lifetime_clicks=9_999_999)) == 0


def test_cannot_prestige_below_threshold():
    state = _state(clicks=5_000_000, lifetime_clicks=5_000_000)
    assert perform_prestige(state) is state


def test_prestige_resets_run_and_keeps_tree():
    state = _state(clicks=1_000_000, lifetime_clicks=25_000_000, prestige_points=1)
    state.upgrades["energy"] = 10
    state.skill_tree["a"] = True
    state.achievements["first_click"] = True
    state.stats.total_clicks = 42
    after = perform_prestige(state)

    assert after.prestige_points == 3
    assert after.total_prestige_points == 2
    assert after.total_prestiges == 1
    assert after.clicks == 0
    assert after.lifetime_clicks == 0
    assert all(owned == 0 for owned in after.upgrades.values())
    assert after.skill_tree["a"]
    assert after.achievements["first_click"]
    assert after.stats.total_clicks == 42
    # Derived stats follow the wiped upgrades
    assert after.click_power == 2


def test_prestige_starting_clicks():
    state = _state(lifetime_clicks=25_000_000)
    state.skill_tree["e"] = True
    after = perform_prestige(state)
    assert after.clicks == 10_000
    assert after.lifetime_clicks == 10_000


def test_prestige_multiplier_node():
    state = _state(lifetime_clicks=25_000_000)
    state.ascension_tree["asc1"] = True
    assert prestige_gain(state) == 4


def test_gain_guards_bad_divisor(monkeypatch):
    broken = replace(BALANCE, prestige=replace(BALANCE.prestige, prestige_divisor=0))
    monkeypatch.setattr(prestige, "BALANCE", broken)
    assert prestige_gain(_state(lifetime_clicks=25_000_000)) == 0


# ── Ascension ────────────────────────────────────────────────────


def test_ascension_gain_is_sqrt_of_total_prestige():
    assert ascension_gain(_state(total_prestige_points=2_000)) == 2
    assert ascension_gain(_state(total_prestige_points=499)) == 0


def test_ascension_wipes_prestige_layer():
    state = _state(clicks=50, prestige_points=7, total_prestige_points=2_000)
    state.skill_tree["a"] = True
    state.skill_tree["e"] = True
    state.upgrades["sean"] = 3
    after = perform_ascension(state)

    assert after.ascension_points == 2
    assert after.total_ascension_points == 2
    assert after.total_ascensions == 1
    assert after.prestige_points == 0
    assert after.total_prestige_points == 2_000
    assert not any(after.skill_tree.values())
    assert after.upgrades["sean"] == 0
    # The head-start node was wiped along with the tree
    assert after.clicks == 0


def test_ascension_keeps_own_tree_start_bonus():
    state = _state(total_prestige_points=2_000)
    state.ascension_tree["asc5"] = True
    after = perform_ascension(state)
    assert after.ascension_tree["asc5"]
    assert after.clicks == 1_000_000


# ── Transcendence / Eternity ─────────────────────────────────────


def test_transcendence_wipes_ascension_layer():
    state = _state(ascension_points=3, total_ascension_points=1_000, prestige_points=4)
    state.ascension_tree["asc5"] = True
    state.transcendence_tree["tr4"] = True
    assert transcendence_gain(state) == 2
    after = perform_transcendence(state)

    assert after.transcendence_points == 2
    assert after.total_transcendences == 1
    assert after.ascension_points == 0
    assert after.prestige_points == 0
    assert not any(after.ascension_tree.values())
    assert after.transcendence_tree["tr4"]
    assert after.clicks == 100_000_000


def test_eternity_wipes_transcendence_layer():
    state = _state(transcendence_points=1, total_transcendence_points=400)
    state.transcendence_tree["tr1"] = True
    state.eternity_tree["et1"] = True
    assert eternity_gain(state) == 2
    after = perform_eternity(state)

    assert after.eternity_points == 2
    assert after.total_eternities == 1
    assert after.transcendence_points == 0
    assert not any(after.transcendence_tree.values())
    assert after.eternity_tree["et1"]
    assert after.click_power == 100


def test_resets_without_gain_are_noops():
    state = _state()
    assert perform_ascension(state) is state
    assert perform_transcendence(state) is state
    assert perform_eternity(state) is state


def test_gain_previews():
    previews = gain_previews(_state(lifetime_clicks=25_000_000, total_prestige_points=2_000))
    assert previews == {"prestige": 2, "ascension": 2, "transcendence": 0, "eternity": 0}


# ── Tree purchases ───────────────────────────────────────────────


def test_buy_tree_node():
    state = _state(prestige_points=1)
    after = buy_tree_node(state, Tier.PRESTIGE, "a")
    assert after.skill_tree["a"]
    assert after.prestige_points == 0
    assert after.click_power == 2
    assert not state.skill_tree["a"]


def test_tree_node_is_bought_once():
    state = _state(prestige_points=10)
    once = buy_tree_node(state, Tier.PRESTIGE, "a")
    assert buy_tree_node(once, Tier.PRESTIGE, "a") is once


def test_tree_node_rejections():
    state = _state(ascension_points=1)
    assert buy_tree_node(state, Tier.ASCENSION, "asc7") is state
    assert buy_tree_node(state, Tier.ASCENSION, "nope") is state
    assert buy_tree_node(state, Tier.ETERNITY, "et1") is state
