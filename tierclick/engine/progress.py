"""Progress tracker — achievements, quests, challenges and the leaderboard.

``update_progress`` is the per-tick entry point: it re-evaluates every
tracker against the current state and returns the next state together with
a list of notification strings for the presentation layer.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from tierclick.data.achievements import ALL_ACHIEVEMENTS
from tierclick.data.balance import BALANCE
from tierclick.data.quests import ALL_CHALLENGES, ALL_QUESTS, ChallengePeriod, ProgressStat, Reward
from tierclick.engine.economy import compute_click_power, compute_passive_rate
from tierclick.engine.game_state import (
    GameState,
    LeaderboardEntry,
    QuestProgress,
    ScoreType,
    new_challenge,
)

log = logging.getLogger(__name__)

_STAT_READERS: dict[ProgressStat, Callable[[GameState], float]] = {
    ProgressStat.CLICKS: lambda s: s.clicks,
    ProgressStat.LIFETIME_CLICKS: lambda s: s.lifetime_clicks,
    ProgressStat.CLICK_POWER: lambda s: s.click_power,
    ProgressStat.CPS: lambda s: s.cps,
    ProgressStat.UPGRADES: lambda s: s.total_upgrades_owned,
    ProgressStat.PRESTIGES: lambda s: s.total_prestiges,
    ProgressStat.ASCENSIONS: lambda s: s.total_ascensions,
    ProgressStat.TRANSCENDENCES: lambda s: s.total_transcendences,
    ProgressStat.ETERNITIES: lambda s: s.total_eternities,
    ProgressStat.TOTAL_CLICKS: lambda s: s.stats.total_clicks,
}


def read_stat(state: GameState, stat: ProgressStat) -> float:
    """Current value of the state field a progress counter follows."""
    reader = _STAT_READERS.get(stat)
    if reader is None:
        log.warning("unknown progress stat %r", stat)
        return 0.0
    return reader(state)


def grant_reward(state: GameState, reward: Reward) -> None:
    """Pay out a reward into ``state`` in place."""
    state.clicks += reward.clicks
    state.lifetime_clicks += reward.clicks
    state.prestige_points += reward.prestige_points
    state.total_prestige_points += reward.prestige_points
    state.ascension_points += reward.ascension_points
    state.total_ascension_points += reward.ascension_points


# ── Per-tick trackers (operate in place on a working copy) ───────


def _update_achievements(state: GameState, notes: list[str]) -> None:
    newly = [
        aid
        for aid, adef in ALL_ACHIEVEMENTS.items()
        if not state.achievements.get(aid, False) and adef.predicate(state)
    ]
    for aid in newly:
        state.achievements[aid] = True
        notes.append(f"achievement:{aid}")
        log.info("achievement unlocked: %s", aid)


def _update_quests(state: GameState, notes: list[str]) -> None:
    quests = state.quest_state.quests
    for qid, qdef in ALL_QUESTS.items():
        progress = quests.setdefault(qid, QuestProgress(id=qid))
        if progress.completed:
            continue
        for step in qdef.steps:
            progress.steps[step.id] = read_stat(state, step.stat)
        if all(progress.steps[s.id] >= s.target for s in qdef.steps):
            progress.completed = True
            notes.append(f"quest_complete:{qid}")


def _update_challenges(state: GameState, now: float, notes: list[str]) -> None:
    qs = state.quest_state
    for cid, cdef in ALL_CHALLENGES.items():
        progress = qs.challenges.get(cid)
        if progress is None or now >= progress.expires_at:
            # Expired: unclaimed rewards are forfeited
            qs.challenges[cid] = new_challenge(cdef, now)
            if cdef.period == ChallengePeriod.DAILY:
                qs.last_daily_reset = now
            else:
                qs.last_weekly_reset = now
            if progress is not None:
                notes.append(f"challenge_reset:{cid}")
            continue
        if progress.completed:
            continue
        progress.current = read_stat(state, cdef.stat)
        if progress.current >= cdef.target:
            progress.completed = True
            notes.append(f"challenge_complete:{cid}")


def _refresh_derived(state: GameState) -> None:
    state.click_power = compute_click_power(state)
    state.cps = compute_passive_rate(state)


def update_progress(state: GameState, now: float | None = None) -> tuple[GameState, list[str]]:
    """Run every tracker once. Returns (next state, notifications)."""
    from tierclick.engine.events import sync_event

    if now is None:
        now = time.time()
    notes: list[str] = []
    new = state.clone()

    # Event first so its multipliers are in place before anything reads cps
    sync_event(new, now, notes)
    _refresh_derived(new)

    _update_achievements(new, notes)
    _update_quests(new, notes)
    _update_challenges(new, now, notes)

    # Achievement boosts re-derived from scratch: no compounding
    _refresh_derived(new)
    return new, notes


# ── Claims ───────────────────────────────────────────────────────


def claim_quest(state: GameState, quest_id: str) -> GameState:
    """Grant a completed quest's reward once."""
    qdef = ALL_QUESTS.get(quest_id)
    progress = state.quest_state.quests.get(quest_id)
    if qdef is None or progress is None:
        return state
    if not progress.completed or progress.claimed:
        return state

    new = state.clone()
    new.quest_state.quests[quest_id].claimed = True
    grant_reward(new, qdef.reward)
    _refresh_derived(new)
    return new


def claim_challenge(state: GameState, challenge_id: str, now: float | None = None) -> GameState:
    """Grant a completed, unexpired challenge's reward once."""
    if now is None:
        now = time.time()
    cdef = ALL_CHALLENGES.get(challenge_id)
    progress = state.quest_state.challenges.get(challenge_id)
    if cdef is None or progress is None:
        return state
    if not progress.completed or progress.claimed or now >= progress.expires_at:
        return state

    new = state.clone()
    new.quest_state.challenges[challenge_id].claimed = True
    grant_reward(new, cdef.reward)
    _refresh_derived(new)
    return new


# ── Leaderboard ──────────────────────────────────────────────────

_SCORE_READERS: dict[ScoreType, Callable[[GameState], float]] = {
    ScoreType.LIFETIME: lambda s: s.lifetime_clicks,
    ScoreType.CPS: lambda s: s.cps,
    ScoreType.PRESTIGES: lambda s: s.total_prestiges,
}


def add_leaderboard_score(
    state: GameState,
    name: str,
    score_type: ScoreType | str,
    now: float | None = None,
) -> GameState:
    """Record the current score of ``score_type`` under ``name``."""
    if not isinstance(name, str) or not name.strip():
        return state
    try:
        score_type = ScoreType(score_type)
    except ValueError:
        return state
    if now is None:
        now = time.time()

    new = state.clone()
    entry = LeaderboardEntry(
        id=uuid.uuid4().hex,
        name=name.strip(),
        score=_SCORE_READERS[score_type](state),
        date=now,
        score_type=score_type,
    )
    board = new.quest_state.leaderboard
    board.append(entry)
    same = sorted((e for e in board if e.score_type == score_type), key=lambda e: e.score, reverse=True)
    dropped = {e.id for e in same[BALANCE.progress.leaderboard_limit:]}
    new.quest_state.leaderboard = [e for e in board if e.id not in dropped]
    return new


def top_scores(
    state: GameState,
    score_type: ScoreType,
    limit: int = BALANCE.progress.leaderboard_display,
) -> list[LeaderboardEntry]:
    entries = [e for e in state.quest_state.leaderboard if e.score_type == score_type]
    entries.sort(key=lambda e: e.score, reverse=True)
    return entries[:limit]
