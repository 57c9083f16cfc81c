"""Reset tiers — Prestige, Ascension, Transcendence and Eternity.

Each tier converts a cumulative total from the tier below into its own
points, then wipes a growing slice of progress. Gains double as the UI's
"gain preview"; every reset is a no-op while its gain is zero.
"""

from __future__ import annotations

import logging
import math

from tierclick.data.balance import BALANCE
from tierclick.data.trees import (
    STARTING_KINDS,
    TIER_TREES,
    AscensionKind,
    EternityKind,
    Tier,
    TranscendenceKind,
)
from tierclick.engine.economy import active_event_multipliers, compute_derived, owned_nodes
from tierclick.engine.game_state import POINT_FIELDS, GameState

log = logging.getLogger(__name__)


def _ratio(total: float, divisor: float) -> float:
    if divisor <= 0 or total <= 0:
        return 0.0
    return total / divisor


# ── Gain formulas ────────────────────────────────────────────────


def prestige_gain(state: GameState) -> int:
    """Prestige points a reset would award now."""
    gain = math.floor(_ratio(state.lifetime_clicks, BALANCE.prestige.prestige_divisor))
    for node in owned_nodes(state, Tier.ASCENSION, AscensionKind.PRESTIGE_MULTI):
        gain = math.floor(gain * node.effect)
    gain = math.floor(gain * active_event_multipliers(state).prestige_gain)
    return max(0, gain)


def ascension_gain(state: GameState) -> int:
    gain = math.floor(math.sqrt(_ratio(state.total_prestige_points, BALANCE.prestige.ascension_divisor)))
    for node in owned_nodes(state, Tier.TRANSCENDENCE, TranscendenceKind.ASCENSION_MULTI):
        gain = math.floor(gain * node.effect)
    return max(0, gain)


def transcendence_gain(state: GameState) -> int:
    gain = math.floor(
        math.sqrt(_ratio(state.total_ascension_points, BALANCE.prestige.transcendence_divisor))
    )
    for node in owned_nodes(state, Tier.ETERNITY, EternityKind.TRANSCENDENCE_MULTI):
        gain = math.floor(gain * node.effect)
    return max(0, gain)


def eternity_gain(state: GameState) -> int:
    gain = math.floor(
        math.sqrt(_ratio(state.total_transcendence_points, BALANCE.prestige.eternity_divisor))
    )
    return max(0, gain)


def gain_previews(state: GameState) -> dict[str, int]:
    """Every tier's gain at once, keyed by tier name."""
    return {
        Tier.PRESTIGE.value: prestige_gain(state),
        Tier.ASCENSION.value: ascension_gain(state),
        Tier.TRANSCENDENCE.value: transcendence_gain(state),
        Tier.ETERNITY.value: eternity_gain(state),
    }


# ── Tree purchases ───────────────────────────────────────────────


def buy_tree_node(state: GameState, tier: Tier, node_id: str) -> GameState:
    """Buy a one-time node with ``tier``'s points."""
    ndef = TIER_TREES[tier].get(node_id)
    if ndef is None:
        return state
    if state.tree(tier).get(node_id, False):
        return state
    if state.points(tier) < ndef.cost:
        return state

    new = state.clone()
    setattr(new, POINT_FIELDS[tier], new.points(tier) - ndef.cost)
    new.tree(tier)[node_id] = True
    log.debug("bought %s node %s", tier.value, node_id)
    return compute_derived(new)


# ── Reset scopes ─────────────────────────────────────────────────


def _starting_clicks(state: GameState) -> float:
    """Highest starting-clicks bonus among nodes still owned."""
    best = 0.0
    for tier, table in TIER_TREES.items():
        owned = state.tree(tier)
        for nid, ndef in table.items():
            if ndef.kind in STARTING_KINDS and owned.get(nid, False):
                best = max(best, ndef.effect)
    return best


def _clear_tree(state: GameState, tier: Tier) -> None:
    tree = state.tree(tier)
    for nid in tree:
        tree[nid] = False


def _reset_run(state: GameState) -> None:
    """Prestige scope: currency and upgrades. Caller recomputes derived stats."""
    state.upgrades = {uid: 0 for uid in state.upgrades}
    start = _starting_clicks(state)
    state.clicks = start
    state.lifetime_clicks = start


def perform_prestige(state: GameState) -> GameState:
    """Trade lifetime clicks for prestige points. Skill tree is kept."""
    gain = prestige_gain(state)
    if gain <= 0:
        return state

    new = state.clone()
    _reset_run(new)
    new.prestige_points += gain
    new.total_prestige_points += gain
    new.total_prestiges += 1
    log.info("prestige #%d: +%d points", new.total_prestiges, gain)
    return compute_derived(new)


def perform_ascension(state: GameState) -> GameState:
    """Prestige scope plus prestige points and the skill tree."""
    gain = ascension_gain(state)
    if gain <= 0:
        return state

    new = state.clone()
    new.prestige_points = 0
    _clear_tree(new, Tier.PRESTIGE)
    _reset_run(new)
    new.ascension_points += gain
    new.total_ascension_points += gain
    new.total_ascensions += 1
    log.info("ascension #%d: +%d points", new.total_ascensions, gain)
    return compute_derived(new)


def perform_transcendence(state: GameState) -> GameState:
    """Ascension scope plus ascension points and the ascension tree."""
    gain = transcendence_gain(state)
    if gain <= 0:
        return state

    new = state.clone()
    new.prestige_points = 0
    new.ascension_points = 0
    _clear_tree(new, Tier.PRESTIGE)
    _clear_tree(new, Tier.ASCENSION)
    _reset_run(new)
    new.transcendence_points += gain
    new.total_transcendence_points += gain
    new.total_transcendences += 1
    log.info("transcendence #%d: +%d points", new.total_transcendences, gain)
    return compute_derived(new)


def perform_eternity(state: GameState) -> GameState:
    """Transcendence scope plus transcendence points and the transcendence tree."""
    gain = eternity_gain(state)
    if gain <= 0:
        return state

    new = state.clone()
    new.prestige_points = 0
    new.ascension_points = 0
    new.transcendence_points = 0
    _clear_tree(new, Tier.PRESTIGE)
    _clear_tree(new, Tier.ASCENSION)
    _clear_tree(new, Tier.TRANSCENDENCE)
    _reset_run(new)
    new.eternity_points += gain
    new.total_eternity_points += gain
    new.total_eternities += 1
    log.info("eternity #%d: +%d points", new.total_eternities, gain)
    return compute_derived(new)


RESETS = {
    Tier.PRESTIGE: perform_prestige,
    Tier.ASCENSION: perform_ascension,
    Tier.TRANSCENDENCE: perform_transcendence,
    Tier.ETERNITY: perform_eternity,
}
