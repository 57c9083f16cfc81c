"""Game state — single source of truth for a player's progress."""

from __future__ import annotations

import copy
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

from tierclick.data.achievements import ALL_ACHIEVEMENTS
from tierclick.data.balance import BALANCE
from tierclick.data.quests import ALL_CHALLENGES, ALL_QUESTS, ChallengeDef, ChallengePeriod
from tierclick.data.trees import TIER_TREES, Tier
from tierclick.data.upgrades import ALL_UPGRADES


class ScoreType(Enum):
    """What a leaderboard entry ranks."""

    LIFETIME = "lifetime"
    CPS = "cps"
    PRESTIGES = "prestiges"


@dataclass
class HistoryPoint:
    time: float
    value: float


@dataclass
class GameStats:
    """Session-spanning statistics (survive every reset)."""

    start_time: float = field(default_factory=time.time)
    total_playtime: float = 0.0
    best_cps: float = 0.0
    total_clicks: int = 0          # manual clicks performed
    cps_history: list[HistoryPoint] = field(default_factory=list)
    clicks_history: list[HistoryPoint] = field(default_factory=list)
    last_online_time: float = field(default_factory=time.time)


@dataclass
class QuestProgress:
    id: str
    steps: dict[str, float] = field(default_factory=dict)
    completed: bool = False
    claimed: bool = False


@dataclass
class ChallengeProgress:
    id: str
    current: float = 0.0
    completed: bool = False
    claimed: bool = False
    expires_at: float = 0.0


@dataclass
class EventProgress:
    id: str
    starts_at: float = 0.0
    ends_at: float = 0.0
    challenges: dict[str, float] = field(default_factory=dict)
    completed: bool = False
    claimed: bool = False

    def is_active(self, now: float) -> bool:
        return self.starts_at <= now < self.ends_at


@dataclass
class LeaderboardEntry:
    id: str
    name: str
    score: float
    date: float
    score_type: ScoreType


@dataclass
class QuestState:
    quests: dict[str, QuestProgress] = field(default_factory=dict)
    challenges: dict[str, ChallengeProgress] = field(default_factory=dict)
    leaderboard: list[LeaderboardEntry] = field(default_factory=list)
    event: EventProgress | None = None
    last_daily_reset: float = field(default_factory=time.time)
    last_weekly_reset: float = field(default_factory=time.time)


@dataclass
class GameState:
    """Complete state for one player. Engine operations return new instances."""

    # ── Currency ─────────────────────────────────────────
    clicks: float = 0.0
    lifetime_clicks: float = 0.0

    # ── Derived (recomputed after every change) ──────────
    click_power: float = BALANCE.economy.base_click_power
    cps: float = 0.0

    # ── Tier currencies ──────────────────────────────────
    prestige_points: int = 0
    total_prestige_points: int = 0
    ascension_points: int = 0
    total_ascension_points: int = 0
    transcendence_points: int = 0
    total_transcendence_points: int = 0
    eternity_points: int = 0
    total_eternity_points: int = 0

    # ── Reset counters ───────────────────────────────────
    total_prestiges: int = 0
    total_ascensions: int = 0
    total_transcendences: int = 0
    total_eternities: int = 0

    # ── Collections: id → owned count / owned flag ───────
    upgrades: dict[str, int] = field(default_factory=dict)
    skill_tree: dict[str, bool] = field(default_factory=dict)
    ascension_tree: dict[str, bool] = field(default_factory=dict)
    transcendence_tree: dict[str, bool] = field(default_factory=dict)
    eternity_tree: dict[str, bool] = field(default_factory=dict)
    achievements: dict[str, bool] = field(default_factory=dict)

    stats: GameStats = field(default_factory=GameStats)
    quest_state: QuestState = field(default_factory=QuestState)

    def clone(self) -> GameState:
        """Deep copy, so a transition never touches the state it was given."""
        return copy.deepcopy(self)

    def tree(self, tier: Tier) -> dict[str, bool]:
        """Owned flags for the tree bought with ``tier``'s points."""
        return getattr(self, TREE_FIELDS[tier])

    def points(self, tier: Tier) -> int:
        return getattr(self, POINT_FIELDS[tier])

    @property
    def total_upgrades_owned(self) -> int:
        return sum(self.upgrades.values())


TREE_FIELDS: dict[Tier, str] = {
    Tier.PRESTIGE: "skill_tree",
    Tier.ASCENSION: "ascension_tree",
    Tier.TRANSCENDENCE: "transcendence_tree",
    Tier.ETERNITY: "eternity_tree",
}

POINT_FIELDS: dict[Tier, str] = {
    Tier.PRESTIGE: "prestige_points",
    Tier.ASCENSION: "ascension_points",
    Tier.TRANSCENDENCE: "transcendence_points",
    Tier.ETERNITY: "eternity_points",
}


def next_period_end(period: ChallengePeriod, now: float) -> float:
    """Next local midnight (daily) or next Monday midnight (weekly) after ``now``."""
    today = datetime.fromtimestamp(now).replace(hour=0, minute=0, second=0, microsecond=0)
    if period == ChallengePeriod.DAILY:
        days = 1
    else:
        # Monday is weekday 0; a Monday rolls over to the following Monday
        days = 7 - today.weekday()
    return (today + timedelta(days=days)).timestamp()


def new_challenge(cdef: ChallengeDef, now: float) -> ChallengeProgress:
    return ChallengeProgress(id=cdef.id, expires_at=next_period_end(cdef.period, now))


def new_game_state(now: float | None = None) -> GameState:
    """Fresh state covering every id in the current content tables."""
    if now is None:
        now = time.time()
    quest_state = QuestState(
        quests={
            qid: QuestProgress(id=qid, steps={s.id: 0.0 for s in qdef.steps})
            for qid, qdef in ALL_QUESTS.items()
        },
        challenges={cid: new_challenge(cdef, now) for cid, cdef in ALL_CHALLENGES.items()},
        last_daily_reset=now,
        last_weekly_reset=now,
    )
    state = GameState(
        upgrades={uid: 0 for uid in ALL_UPGRADES},
        achievements={aid: False for aid in ALL_ACHIEVEMENTS},
        stats=GameStats(start_time=now, last_online_time=now),
        quest_state=quest_state,
    )
    for tier, table in TIER_TREES.items():
        setattr(state, TREE_FIELDS[tier], {nid: False for nid in table})
    return state
