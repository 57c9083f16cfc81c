"""Game session — the single owner of the live ``GameState``.

The session wires the pure engine functions together: it measures elapsed
time on a monotonic clock, applies passive income, runs the progress
tracker, samples history, autosaves, and fans notification strings out to
subscribers. Every operation installs a complete new state; nothing is
edited in place.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from typing import Callable

from tierclick.data.balance import BALANCE
from tierclick.data.trees import Tier
from tierclick.engine.cheats import apply_cheat
from tierclick.engine.economy import (
    MAX,
    BulkAmount,
    apply_click,
    buy_upgrade,
    buy_upgrade_bulk,
    tick_passive,
)
from tierclick.engine.events import claim_event_reward
from tierclick.engine.game_state import GameState, HistoryPoint, ScoreType, new_game_state
from tierclick.engine.prestige import (
    RESETS,
    ascension_gain,
    buy_tree_node,
    eternity_gain,
    prestige_gain,
    transcendence_gain,
)
from tierclick.engine.progress import (
    add_leaderboard_score,
    claim_challenge,
    claim_quest,
    update_progress,
)
from tierclick.engine.save import AudioSettings, PersistenceHandle, compute_offline_earnings

log = logging.getLogger(__name__)

Listener = Callable[[str], None]

_RESET_NAMES = {
    Tier.PRESTIGE: "prestige",
    Tier.ASCENSION: "ascend",
    Tier.TRANSCENDENCE: "transcend",
    Tier.ETERNITY: "eternity",
}

_GAINS = {
    Tier.PRESTIGE: prestige_gain,
    Tier.ASCENSION: ascension_gain,
    Tier.TRANSCENDENCE: transcendence_gain,
    Tier.ETERNITY: eternity_gain,
}


def record_history(state: GameState, now: float) -> GameState:
    """Append one cps/clicks sample, keeping the newest ``history_limit``."""
    limit = BALANCE.stats.history_limit
    new = state.clone()
    new.stats.cps_history.append(HistoryPoint(time=now, value=new.cps))
    new.stats.clicks_history.append(HistoryPoint(time=now, value=new.lifetime_clicks))
    new.stats.cps_history = new.stats.cps_history[-limit:]
    new.stats.clicks_history = new.stats.clicks_history[-limit:]
    return new


def credit_offline(state: GameState, amount: float) -> GameState:
    if amount <= 0:
        return state
    new = state.clone()
    new.clicks += amount
    new.lifetime_clicks += amount
    return new


class GameSession:
    """Drives one player's game. All public operations are no-ops on bad input."""

    def __init__(
        self,
        persistence: PersistenceHandle,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
        load: bool = True,
    ) -> None:
        self._persistence = persistence
        self._clock = clock
        self._wall_clock = wall_clock
        self._listeners: list[Listener] = []
        self._pending: deque[str] = deque(maxlen=BALANCE.progress.notification_limit)
        self._closed = False
        self._last_tick = clock()
        self._since_sample = 0.0
        self._since_autosave = 0.0

        self.state: GameState = new_game_state(wall_clock())
        self.audio: AudioSettings = persistence.load_audio()
        # (seconds away, clicks credited) from the last load
        self.last_offline_earnings: tuple[float, float] = (0.0, 0.0)
        if load:
            self.load()
        else:
            self._track()

    # ── Notifications ────────────────────────────────────

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def drain_notifications(self) -> list[str]:
        notes = list(self._pending)
        self._pending.clear()
        return notes

    def _notify(self, note: str) -> None:
        self._pending.append(note)
        for listener in list(self._listeners):
            listener(note)

    # ── Internals ────────────────────────────────────────

    def _track(self) -> None:
        self.state, notes = update_progress(self.state, self._wall_clock())
        for note in notes:
            self._notify(note)

    def _install(self, new: GameState, note: str) -> bool:
        if self._closed or new is self.state:
            return False
        self.state = new
        self._notify(note)
        self._track()
        return True

    # ── Clock ────────────────────────────────────────────

    def now(self) -> float:
        """Wall-clock time as this session sees it."""
        return self._wall_clock()

    def tick(self) -> GameState:
        """Catch up on elapsed time since the previous tick."""
        if self._closed:
            return self.state
        now = self._clock()
        dt = now - self._last_tick
        self._last_tick = now
        if dt <= 0:
            return self.state

        self.state = tick_passive(self.state, dt)
        self._track()

        self._since_sample += dt
        if self._since_sample >= BALANCE.stats.sample_interval_s:
            self._since_sample %= BALANCE.stats.sample_interval_s
            self.state = record_history(self.state, self._wall_clock())

        self._since_autosave += dt
        if self._since_autosave >= BALANCE.persistence.autosave_interval_s:
            self.save()
        return self.state

    # ── Player intents ───────────────────────────────────

    def click(self) -> bool:
        if self._closed:
            return False
        return self._install(apply_click(self.state), "click")

    def buy_upgrade(self, upgrade_id: str, amount: BulkAmount = 1) -> bool:
        before = self.state.upgrades.get(upgrade_id, 0)
        if amount == 1:
            new = buy_upgrade(self.state, upgrade_id)
        else:
            new = buy_upgrade_bulk(self.state, upgrade_id, amount)
        bought = new.upgrades.get(upgrade_id, 0) - before
        return self._install(new, f"purchase:{upgrade_id}:{bought}")

    def buy_upgrade_bulk(self, upgrade_id: str, amount: BulkAmount) -> bool:
        return self.buy_upgrade(upgrade_id, amount)

    def buy_max(self, upgrade_id: str) -> bool:
        return self.buy_upgrade(upgrade_id, MAX)

    def buy_tree_node(self, tier: Tier | str, node_id: str) -> bool:
        try:
            tier = Tier(tier)
        except ValueError:
            return False
        return self._install(buy_tree_node(self.state, tier, node_id), f"tree:{tier.value}:{node_id}")

    def reset_tier(self, tier: Tier) -> bool:
        gain = _GAINS[tier](self.state)
        return self._install(RESETS[tier](self.state), f"{_RESET_NAMES[tier]}:{gain}")

    def prestige(self) -> bool:
        return self.reset_tier(Tier.PRESTIGE)

    def ascend(self) -> bool:
        return self.reset_tier(Tier.ASCENSION)

    def transcend(self) -> bool:
        return self.reset_tier(Tier.TRANSCENDENCE)

    def eternity_reset(self) -> bool:
        return self.reset_tier(Tier.ETERNITY)

    def claim_quest(self, quest_id: str) -> bool:
        return self._install(claim_quest(self.state, quest_id), f"quest_claimed:{quest_id}")

    def claim_challenge(self, challenge_id: str) -> bool:
        new = claim_challenge(self.state, challenge_id, self._wall_clock())
        return self._install(new, f"challenge_claimed:{challenge_id}")

    def claim_event_reward(self, event_id: str) -> bool:
        new = claim_event_reward(self.state, event_id, self._wall_clock())
        return self._install(new, f"event_claimed:{event_id}")

    def add_leaderboard_score(self, name: str, score_type: ScoreType | str) -> bool:
        new = add_leaderboard_score(self.state, name, score_type, self._wall_clock())
        label = score_type.value if isinstance(score_type, ScoreType) else score_type
        return self._install(new, f"leaderboard:{label}")

    def apply_cheat(self, code: str) -> bool:
        return self._install(apply_cheat(self.state, code), f"cheat:{code}")

    # ── Persistence ──────────────────────────────────────

    def save(self) -> None:
        if self._closed:
            return
        self.state = self._persistence.save(self.state, self._wall_clock())
        self._since_autosave = 0.0

    def load(self) -> None:
        """Replace the live state with the saved one and credit offline income."""
        if self._closed:
            return
        now = self._wall_clock()
        state = self._persistence.load(now)
        seconds, amount = compute_offline_earnings(state, now)
        self.state = credit_offline(state, amount)
        self.last_offline_earnings = (seconds, amount)
        self._last_tick = self._clock()
        if amount > 0:
            log.info("credited %.0f offline clicks for %.0fs away", amount, seconds)
            self._notify(f"offline:{seconds:.0f}:{amount:.0f}")
        self._track()

    def reset_all(self) -> None:
        if self._closed:
            return
        self._persistence.delete()
        self.state = new_game_state(self._wall_clock())
        self._since_sample = 0.0
        self._since_autosave = 0.0
        self._notify("reset")
        self._track()

    def set_audio(
        self,
        volume: float | None = None,
        sfx_enabled: bool | None = None,
        music_enabled: bool | None = None,
    ) -> AudioSettings:
        current = self.audio
        self.audio = AudioSettings(
            volume=current.volume if volume is None else volume,
            sfx_enabled=current.sfx_enabled if sfx_enabled is None else sfx_enabled,
            music_enabled=current.music_enabled if music_enabled is None else music_enabled,
        )
        self._persistence.save_audio(self.audio)
        return self.audio

    def close(self) -> None:
        """Save once and stop reacting to any further calls."""
        if self._closed:
            return
        self.save()
        self._closed = True
        self._listeners.clear()

    @property
    def closed(self) -> bool:
        return self._closed
