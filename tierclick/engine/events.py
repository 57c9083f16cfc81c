"""Special events — a fixed rotation of time-windowed bonus bundles.

Exactly one event is scheduled at any wall-clock moment:
``EVENT_ROTATION[floor(now / window) % len(EVENT_ROTATION)]``, running from
``floor(now / window) * window`` for one window. No randomness, so every
session agrees on the current event.
"""

from __future__ import annotations

import logging
import math
import time

from tierclick.data.balance import BALANCE
from tierclick.data.quests import EVENT_ROTATION, EVENTS_BY_ID, EventDef
from tierclick.engine.economy import compute_derived
from tierclick.engine.game_state import EventProgress, GameState
from tierclick.engine.progress import grant_reward, read_stat

log = logging.getLogger(__name__)


def scheduled_event(now: float) -> tuple[EventDef, float, float]:
    """(event, starts_at, ends_at) for the window containing ``now``."""
    window = BALANCE.events.window_s
    slot = math.floor(now / window)
    edef = EVENT_ROTATION[slot % len(EVENT_ROTATION)]
    starts_at = slot * window
    return edef, starts_at, starts_at + window


def sync_event(state: GameState, now: float, notes: list[str]) -> None:
    """Install the scheduled event and advance its challenges.

    Mutates ``state`` in place; callers hand in a working copy.
    """
    edef, starts_at, ends_at = scheduled_event(now)
    qs = state.quest_state
    if qs.event is None or qs.event.id != edef.id or qs.event.starts_at != starts_at:
        qs.event = EventProgress(
            id=edef.id,
            starts_at=starts_at,
            ends_at=ends_at,
            challenges={c.id: 0.0 for c in edef.challenges},
        )
        notes.append(f"event_start:{edef.id}")
        log.info("event started: %s", edef.id)

    event = qs.event
    if event.completed:
        return
    for challenge in edef.challenges:
        event.challenges[challenge.id] = read_stat(state, challenge.stat)
    if all(event.challenges[c.id] >= c.target for c in edef.challenges):
        event.completed = True
        notes.append(f"event_complete:{edef.id}")


def event_time_left(state: GameState, now: float | None = None) -> float:
    """Seconds until the installed event ends (0 when none is running)."""
    if now is None:
        now = time.time()
    event = state.quest_state.event
    if event is None or not event.is_active(now):
        return 0.0
    return event.ends_at - now


def claim_event_reward(state: GameState, event_id: str, now: float | None = None) -> GameState:
    """Grant the running event's bundle once, after all its challenges are met."""
    if now is None:
        now = time.time()
    event = state.quest_state.event
    edef = EVENTS_BY_ID.get(event_id)
    if edef is None or event is None or event.id != event_id:
        return state
    if not event.completed or event.claimed or not event.is_active(now):
        return state

    new = state.clone()
    new.quest_state.event.claimed = True
    grant_reward(new, edef.reward)
    log.info("event reward claimed: %s", event_id)
    return compute_derived(new)
