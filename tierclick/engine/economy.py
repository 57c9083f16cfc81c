"""Economy engine — derived stats, clicking, buying, and number formatting.

Every function here is a pure transition: it returns a new ``GameState``
(or the very same object when the request is invalid) and never edits the
state it was handed.
"""

from __future__ import annotations

import logging
import math
from typing import Iterator, Literal, Union

from tierclick.data.achievements import ALL_ACHIEVEMENTS
from tierclick.data.balance import BALANCE
from tierclick.data.quests import EVENTS_BY_ID, EventMultipliers
from tierclick.data.trees import (
    TIER_TREES,
    AscensionKind,
    EternityKind,
    NodeKind,
    SkillKind,
    Tier,
    TranscendenceKind,
    TreeNodeDef,
)
from tierclick.data.upgrades import ALL_UPGRADES, UpgradeDef, UpgradeKind
from tierclick.engine.game_state import GameState

log = logging.getLogger(__name__)

MAX = "MAX"
BulkAmount = Union[int, Literal["MAX"]]

_NO_EVENT = EventMultipliers()


def owned_nodes(state: GameState, tier: Tier, kind: NodeKind) -> Iterator[TreeNodeDef]:
    """Owned nodes of ``kind`` in ``tier``'s tree, in table order."""
    owned = state.tree(tier)
    for nid, ndef in TIER_TREES[tier].items():
        if ndef.kind == kind and owned.get(nid, False):
            yield ndef


def active_event_multipliers(state: GameState) -> EventMultipliers:
    """Multipliers of the event the tracker last installed, if any."""
    event = state.quest_state.event
    if event is None:
        return _NO_EVENT
    edef = EVENTS_BY_ID.get(event.id)
    return edef.multipliers if edef else _NO_EVENT


def _achievement_boosts(state: GameState) -> tuple[float, float]:
    click_boost = 0.0
    cps_boost = 0.0
    for aid, unlocked in state.achievements.items():
        adef = ALL_ACHIEVEMENTS.get(aid)
        if unlocked and adef:
            click_boost += adef.click_boost
            cps_boost += adef.cps_boost
    return 1.0 + click_boost, 1.0 + cps_boost


# ── Derived stats ────────────────────────────────────────────────


def base_click_power(state: GameState) -> float:
    """Click power from upgrades and tree multipliers only.

    Additive upgrade contributions first, then tree multipliers in tier order.
    """
    power = BALANCE.economy.base_click_power
    for uid, owned in state.upgrades.items():
        udef = ALL_UPGRADES.get(uid)
        if udef and udef.kind == UpgradeKind.CLICK_POWER:
            power += udef.effect * owned

    for node in owned_nodes(state, Tier.PRESTIGE, SkillKind.CLICK_MULTI):
        power *= node.effect
    for node in owned_nodes(state, Tier.ASCENSION, AscensionKind.ALL_MULTI):
        power *= node.effect
    for node in owned_nodes(state, Tier.TRANSCENDENCE, TranscendenceKind.GLOBAL_MULTI):
        power *= node.effect
    for node in owned_nodes(state, Tier.ETERNITY, EternityKind.ETERNAL_MULTI):
        power *= node.effect

    return max(0.0, power)


def compute_click_power(state: GameState) -> float:
    """Currency earned per manual click."""
    click_boost, _ = _achievement_boosts(state)
    power = base_click_power(state) * click_boost
    power *= active_event_multipliers(state).clicks
    return max(0.0, power)


def compute_passive_rate(state: GameState) -> float:
    """Passive income per second.

    Auto-clickers scale with base click power, so achievement and event
    click bonuses are not applied twice.
    """
    power = base_click_power(state)
    cps = 0.0
    for uid, owned in state.upgrades.items():
        udef = ALL_UPGRADES.get(uid)
        if udef and udef.kind == UpgradeKind.AUTO_CLICKER:
            cps += udef.effect * owned * power

    for node in owned_nodes(state, Tier.PRESTIGE, SkillKind.CPS_BOOST):
        cps *= node.effect
    for node in owned_nodes(state, Tier.PRESTIGE, SkillKind.CPS_MULTI):
        cps *= node.effect
    for node in owned_nodes(state, Tier.ASCENSION, AscensionKind.ULTIMATE_CPS):
        cps *= node.effect
    for node in owned_nodes(state, Tier.TRANSCENDENCE, TranscendenceKind.INFINITE_CPS):
        cps *= node.effect
    for node in owned_nodes(state, Tier.ETERNITY, EternityKind.ETERNAL_CPS):
        cps *= node.effect

    _, cps_boost = _achievement_boosts(state)
    cps *= cps_boost
    cps *= active_event_multipliers(state).cps
    return max(0.0, cps)


def compute_derived(state: GameState) -> GameState:
    """Return a copy with click power and passive rate recomputed.

    Always starts from the raw collections, so calling it again with no
    new unlocks yields identical values.
    """
    new = state.clone()
    new.click_power = compute_click_power(new)
    new.cps = compute_passive_rate(new)
    return new


# ── Costs ────────────────────────────────────────────────────────


def _cost_at(state: GameState, udef: UpgradeDef, owned: int) -> float:
    try:
        cost = math.floor(udef.base_cost * (udef.cost_multiplier ** owned))
    except OverflowError:
        return math.inf
    for node in owned_nodes(state, Tier.PRESTIGE, SkillKind.COST_REDUCTION):
        cost = math.floor(cost * node.effect)
    for node in owned_nodes(state, Tier.ASCENSION, AscensionKind.SUPER_COST):
        cost = math.floor(cost * node.effect)
    for node in owned_nodes(state, Tier.ETERNITY, EternityKind.ETERNAL_COST):
        cost = math.floor(cost * node.effect)
    return max(0, cost)


def compute_upgrade_cost(state: GameState, upgrade_id: str) -> float:
    """Cost of the next unit. ``math.inf`` for an unknown id."""
    udef = ALL_UPGRADES.get(upgrade_id)
    if udef is None:
        return math.inf
    return _cost_at(state, udef, state.upgrades.get(upgrade_id, 0))


def _simulate_bulk(state: GameState, upgrade_id: str, count: int | None) -> tuple[int, float]:
    """Price units one by one. ``count=None`` buys greedily with current clicks.

    Returns (units, total cost).
    """
    udef = ALL_UPGRADES.get(upgrade_id)
    if udef is None:
        return 0, 0
    owned = state.upgrades.get(upgrade_id, 0)
    limit = BALANCE.economy.max_bulk_iterations
    if count is not None:
        limit = min(limit, count)

    units = 0
    total = 0
    while units < limit:
        cost = _cost_at(state, udef, owned + units)
        if count is None and total + cost > state.clicks:
            break
        total += cost
        units += 1
    return units, total


def compute_bulk_cost(state: GameState, upgrade_id: str, amount: BulkAmount) -> float:
    """Total price of ``amount`` sequential units, or of the affordable run for MAX."""
    if amount == MAX:
        _, total = _simulate_bulk(state, upgrade_id, None)
        return total
    if upgrade_id not in ALL_UPGRADES:
        return math.inf
    _, total = _simulate_bulk(state, upgrade_id, max(0, int(amount)))
    return total


def compute_max_affordable(state: GameState, upgrade_id: str) -> int:
    """How many units current clicks can pay for, bought one after another."""
    units, _ = _simulate_bulk(state, upgrade_id, None)
    return units


# ── Transitions ──────────────────────────────────────────────────


def apply_click(state: GameState) -> GameState:
    """Handle a single manual click."""
    new = state.clone()
    new.clicks += new.click_power
    new.lifetime_clicks += new.click_power
    new.stats.total_clicks += 1
    return new


def tick_passive(state: GameState, dt: float) -> GameState:
    """Apply passive income for ``dt`` elapsed seconds."""
    if dt <= 0:
        return state
    new = state.clone()
    earned = new.cps * dt
    new.clicks += earned
    new.lifetime_clicks += earned
    new.stats.total_playtime += dt
    if new.cps > new.stats.best_cps:
        new.stats.best_cps = new.cps
    return new


def buy_upgrade(state: GameState, upgrade_id: str) -> GameState:
    """Buy one unit. Unknown ids and unaffordable prices leave state untouched."""
    if upgrade_id not in ALL_UPGRADES:
        return state
    cost = compute_upgrade_cost(state, upgrade_id)
    if state.clicks < cost:
        return state

    new = state.clone()
    new.clicks -= cost
    new.upgrades[upgrade_id] = new.upgrades.get(upgrade_id, 0) + 1
    log.debug("bought %s for %s", upgrade_id, cost)
    return compute_derived(new)


def buy_upgrade_bulk(state: GameState, upgrade_id: str, amount: BulkAmount) -> GameState:
    """Buy up to ``amount`` units (or as many as affordable for MAX) in one step."""
    if upgrade_id not in ALL_UPGRADES:
        return state
    affordable = compute_max_affordable(state, upgrade_id)
    if amount == MAX:
        count = affordable
    elif isinstance(amount, int) and not isinstance(amount, bool) and amount > 0:
        count = min(amount, affordable)
    else:
        return state
    if count == 0:
        return state

    new = state.clone()
    udef = ALL_UPGRADES[upgrade_id]
    owned = new.upgrades.get(upgrade_id, 0)
    for _ in range(count):
        new.clicks -= _cost_at(new, udef, owned)
        owned += 1
        new.upgrades[upgrade_id] = owned
    log.debug("bought %d x %s", count, upgrade_id)
    return compute_derived(new)


# ── Formatting ───────────────────────────────────────────────────


def format_number(n: float) -> str:
    """Format a number with suffixes for readability."""
    if n < 0:
        return f"-{format_number(-n)}"
    if n < 1000:
        return str(math.floor(n))

    suffixes = BALANCE.economy.suffixes
    tier = 0
    scaled = n
    while scaled >= 1000 and tier <= len(suffixes):
        scaled /= 1000
        tier += 1
    if tier > len(suffixes):
        return f"{n:.2e}"

    suffix = suffixes[tier - 1]
    if scaled >= 100:
        return f"{math.floor(scaled)}{suffix}"
    return f"{scaled:.1f}{suffix}"
