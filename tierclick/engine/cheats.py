"""Developer cheat codes. Unknown codes are logged and ignored."""

from __future__ import annotations

import logging
from typing import Callable

from tierclick.engine.economy import compute_derived
from tierclick.engine.game_state import GameState

log = logging.getLogger(__name__)


def _give_clicks(s: GameState) -> None:
    s.clicks += 1000
    s.lifetime_clicks += 1000


def _unlock_upgrades(s: GameState) -> None:
    s.upgrades = {uid: 999 for uid in s.upgrades}


def _unlock_achievements(s: GameState) -> None:
    s.achievements = {aid: True for aid in s.achievements}


def _give_prestige(s: GameState) -> None:
    s.prestige_points += 100
    s.total_prestige_points += 100


def _give_ascension(s: GameState) -> None:
    s.ascension_points += 50
    s.total_ascension_points += 50


def _give_transcendence(s: GameState) -> None:
    s.transcendence_points += 10
    s.total_transcendence_points += 10


CHEATS: dict[str, Callable[[GameState], None]] = {
    "giveme1000clicks": _give_clicks,
    "unlockallupgrades": _unlock_upgrades,
    "unlockallachievements": _unlock_achievements,
    "givemeprestige": _give_prestige,
    "giveascension": _give_ascension,
    "givetranscendence": _give_transcendence,
}


def apply_cheat(state: GameState, code: str) -> GameState:
    """Apply a cheat code (case-insensitive)."""
    cheat = CHEATS.get(code.strip().lower()) if isinstance(code, str) else None
    if cheat is None:
        log.warning("unknown cheat code: %r", code)
        return state
    new = state.clone()
    cheat(new)
    log.debug("cheat applied: %s", code)
    return compute_derived(new)
