"""Tests for the economy engine."""

import math
from dataclasses import replace

from tierclick.data.balance import BALANCE
from tierclick.engine import economy
from tierclick.engine.economy import (
    MAX,
    apply_click,
    buy_upgrade,
    buy_upgrade_bulk,
    compute_bulk_cost,
    compute_click_power,
    compute_derived,
    compute_max_affordable,
    compute_upgrade_cost,
    format_number,
    tick_passive,
)
from tierclick.engine.game_state import EventProgress, new_game_state


def _state(clicks: float = 0.0, **upgrades: int):
    state = new_game_state(now=0.0)
    state.clicks = clicks
    state.upgrades.update(upgrades)
    return compute_derived(state)


# ── Formatting ───────────────────────────────────────────────────


def test_format_number_small():
    assert format_number(0) == "0"
    assert format_number(999) == "999"
    assert format_number(99.9) == "99"


def test_format_number_suffixes():
    assert format_number(1_500) == "1.5K"
    assert format_number(1_500_000) == "1.5M"
    assert format_number(150_000) == "150K"
    assert format_number(2_000_000_000) == "2.0B"


def test_format_number_beyond_suffixes():
    assert "e" in format_number(1e40)


def test_format_number_negative():
    assert format_number(-1_500) == "-1.5K"


# ── Derived stats ────────────────────────────────────────────────


def test_base_click_power():
    state = _state()
    assert state.click_power == BALANCE.economy.base_click_power
    assert state.cps == 0


def test_additive_upgrades_before_tree_multipliers():
    state = new_game_state(now=0.0)
    state.upgrades["energy"] = 1
    state.skill_tree["a"] = True
    state = compute_derived(state)
    # (1 + 2) * 2, not 1 * 2 + 2
    assert state.click_power == 6


def test_auto_clickers_scale_with_click_power():
    state = _state(sean=2, energy=1)
    assert state.cps == 2 * 3


def test_compute_derived_is_idempotent():
    state = new_game_state(now=0.0)
    state.upgrades["energy"] = 4
    state.achievements["click_10k"] = True
    once = compute_derived(state)
    twice = compute_derived(once)
    assert once.click_power == twice.click_power
    assert once.click_power == (1 + 8) * 1.01


def test_event_click_multiplier():
    state = new_game_state(now=0.0)
    state.quest_state.event = EventProgress(id="golden_hour")
    assert compute_click_power(state) == 2


# ── Transitions ──────────────────────────────────────────────────


def test_click_earns_click_power():
    state = _state(energy=1)
    after = apply_click(state)
    assert after.clicks == 3
    assert after.lifetime_clicks == 3
    assert after.stats.total_clicks == 1
    assert state.clicks == 0


def test_tick_passive_income():
    state = _state(sean=1)
    after = tick_passive(state, 10.0)
    assert after.clicks == 10
    assert after.lifetime_clicks == 10
    assert after.stats.total_playtime == 10
    assert after.stats.best_cps == 1


def test_tick_passive_ignores_non_positive_dt():
    state = _state(sean=1)
    assert tick_passive(state, 0) is state
    assert tick_passive(state, -5) is state


def test_buy_energy_scenario():
    state = _state(clicks=50)
    after = buy_upgrade(state, "energy")
    assert after.upgrades["energy"] == 1
    assert after.clicks == 0
    assert after.click_power == 3
    assert compute_upgrade_cost(after, "energy") == 62
    # Input untouched
    assert state.clicks == 50
    assert state.upgrades["energy"] == 0


def test_buy_upgrade_insufficient_funds_is_idempotent():
    state = _state(clicks=10)
    once = buy_upgrade(state, "energy")
    twice = buy_upgrade(once, "energy")
    assert once is state
    assert twice is state
    assert state.clicks == 10


def test_unknown_upgrade():
    state = _state(clicks=1e9)
    assert compute_upgrade_cost(state, "nope") == math.inf
    assert buy_upgrade(state, "nope") is state
    assert buy_upgrade_bulk(state, "nope", 3) is state


def test_upgrade_cost_strictly_increases():
    state = _state()
    for uid in ("energy", "sean", "quantum"):
        costs = []
        for owned in range(30):
            state.upgrades[uid] = owned
            costs.append(compute_upgrade_cost(state, uid))
        assert all(a < b for a, b in zip(costs, costs[1:]))


def test_cost_reduction_floors():
    state = new_game_state(now=0.0)
    state.skill_tree["d"] = True
    assert compute_upgrade_cost(state, "energy") == math.floor(50 * 0.85)


# ── Bulk purchases ───────────────────────────────────────────────


def test_bulk_cost_sums_sequential_prices():
    state = _state()
    assert compute_bulk_cost(state, "energy", 3) == 50 + 62 + 78


def test_bulk_matches_repeated_singles():
    state = _state(clicks=10_000)
    bulk = buy_upgrade_bulk(state, "energy", 5)
    single = state
    for _ in range(5):
        single = buy_upgrade(single, "energy")
    assert bulk.upgrades == single.upgrades
    assert bulk.clicks == single.clicks
    assert bulk.click_power == single.click_power


def test_max_affordable():
    assert compute_max_affordable(_state(clicks=190), "energy") == 3
    assert compute_max_affordable(_state(clicks=189), "energy") == 2
    assert compute_max_affordable(_state(clicks=49), "energy") == 0


def test_buy_max():
    state = _state(clicks=190)
    after = buy_upgrade_bulk(state, "energy", MAX)
    assert after.upgrades["energy"] == 3
    assert after.clicks == 0
    assert compute_bulk_cost(state, "energy", MAX) == 190


def test_bulk_clamps_to_affordable():
    state = _state(clicks=120)
    after = buy_upgrade_bulk(state, "energy", 10)
    assert after.upgrades["energy"] == 2
    assert after.clicks == 120 - 50 - 62


def test_bulk_rejects_bad_amounts():
    state = _state(clicks=1_000)
    assert buy_upgrade_bulk(state, "energy", 0) is state
    assert buy_upgrade_bulk(state, "energy", -2) is state
    assert buy_upgrade_bulk(state, "energy", True) is state


def test_bulk_with_nothing_affordable_is_noop():
    state = _state(clicks=0)
    assert buy_upgrade_bulk(state, "energy", MAX) is state


def test_max_search_is_capped(monkeypatch):
    capped = replace(BALANCE, economy=replace(BALANCE.economy, max_bulk_iterations=3))
    monkeypatch.setattr(economy, "BALANCE", capped)
    assert compute_max_affordable(_state(clicks=1e12), "energy") == 3


def test_max_search_survives_huge_balances():
    assert compute_max_affordable(_state(clicks=1e300), "energy") > 0
