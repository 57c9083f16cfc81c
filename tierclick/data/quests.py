"""Quest, challenge and special-event definitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ProgressStat(Enum):
    """State field a progress counter reads from."""

    CLICKS = "clicks"
    LIFETIME_CLICKS = "lifetimeClicks"
    CLICK_POWER = "clickPower"
    CPS = "cps"
    UPGRADES = "upgrades"            # total upgrade units owned
    PRESTIGES = "prestiges"
    ASCENSIONS = "ascensions"
    TRANSCENDENCES = "transcendences"
    ETERNITIES = "eternities"
    TOTAL_CLICKS = "totalClicks"     # manual click count


class ChallengePeriod(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"


@dataclass(frozen=True)
class Reward:
    """One-time grant paid out on claim."""

    clicks: float = 0
    prestige_points: int = 0
    ascension_points: int = 0


@dataclass(frozen=True)
class QuestStepDef:
    id: str
    description: str
    target: float
    stat: ProgressStat


@dataclass(frozen=True)
class QuestDef:
    id: str
    name: str
    description: str
    icon: str
    steps: tuple[QuestStepDef, ...]
    reward: Reward


@dataclass(frozen=True)
class ChallengeDef:
    id: str
    name: str
    description: str
    icon: str
    period: ChallengePeriod
    target: float
    stat: ProgressStat
    reward: Reward


@dataclass(frozen=True)
class EventChallengeDef:
    id: str
    description: str
    target: float
    stat: ProgressStat


@dataclass(frozen=True)
class EventMultipliers:
    clicks: float = 1.0
    cps: float = 1.0
    prestige_gain: float = 1.0


@dataclass(frozen=True)
class EventDef:
    id: str
    name: str
    description: str
    icon: str
    theme: str   # "gold" | "cosmic" | "speed" | "power" | "lucky"
    multipliers: EventMultipliers
    challenges: tuple[EventChallengeDef, ...]
    reward: Reward = field(default_factory=Reward)


def _steps(stat: ProgressStat, label: str, *targets: float) -> tuple[QuestStepDef, ...]:
    return tuple(
        QuestStepDef(f"step{i}", label.format(f"{t:,.0f}"), t, stat)
        for i, t in enumerate(targets, start=1)
    )


# ── Quests ───────────────────────────────────────────────────────

ALL_QUESTS: dict[str, QuestDef] = {
    q.id: q
    for q in [
        QuestDef(
            "beginner_journey", "Beginner Journey", "Complete your first steps as a clicker!", "🚀",
            (
                QuestStepDef("step1", "Reach 100 clicks", 100, ProgressStat.CLICKS),
                QuestStepDef("step2", "Reach 50 click power", 50, ProgressStat.CLICK_POWER),
                QuestStepDef("step3", "Buy 5 upgrades total", 5, ProgressStat.UPGRADES),
            ),
            Reward(clicks=5_000),
        ),
        QuestDef(
            "automation_master", "Automation Master", "Master the art of auto-clicking!", "⚡",
            _steps(ProgressStat.CPS, "Reach {} CPS", 10, 100, 500, 1_000),
            Reward(clicks=50_000, prestige_points=2),
        ),
        QuestDef(
            "click_champion", "Click Champion", "Prove your clicking dedication!", "🏆",
            _steps(ProgressStat.LIFETIME_CLICKS, "Reach {} lifetime clicks", 10_000, 100_000, 1_000_000),
            Reward(prestige_points=5),
        ),
        QuestDef(
            "prestige_path", "Prestige Path", "Walk the path of prestige!", "✨",
            _steps(ProgressStat.PRESTIGES, "Prestige {} times", 1, 3, 5, 10),
            Reward(ascension_points=1),
        ),
        QuestDef(
            "power_surge", "Power Surge", "Maximize your clicking power!", "🔥",
            _steps(ProgressStat.CLICK_POWER, "Reach {} click power", 100, 500, 1_000),
            Reward(clicks=100_000, prestige_points=3),
        ),
        QuestDef(
            "upgrade_collector", "Upgrade Collector", "Collect all the upgrades!", "🎁",
            _steps(ProgressStat.UPGRADES, "Buy {} upgrades", 10, 25, 50, 100),
            Reward(prestige_points=4, ascension_points=1),
        ),
    ]
}

# ── Daily / weekly challenges ────────────────────────────────────

ALL_CHALLENGES: dict[str, ChallengeDef] = {
    c.id: c
    for c in [
        ChallengeDef("daily_clicks", "Daily Clicks", "Earn 50,000 clicks today", "👆",
                     ChallengePeriod.DAILY, 50_000, ProgressStat.CLICKS,
                     Reward(clicks=10_000)),
        ChallengeDef("daily_cps", "Speed Demon", "Reach 200 CPS today", "🚀",
                     ChallengePeriod.DAILY, 200, ProgressStat.CPS,
                     Reward(clicks=25_000)),
        ChallengeDef("weekly_lifetime", "Weekly Grind", "Earn 500,000 lifetime clicks this week", "💪",
                     ChallengePeriod.WEEKLY, 500_000, ProgressStat.LIFETIME_CLICKS,
                     Reward(clicks=100_000, prestige_points=2)),
        ChallengeDef("weekly_upgrades", "Shopping Spree", "Buy 30 upgrades this week", "🎁",
                     ChallengePeriod.WEEKLY, 30, ProgressStat.UPGRADES,
                     Reward(prestige_points=3)),
    ]
}

# ── Special event rotation (order matters: index = window % len) ─

EVENT_ROTATION: tuple[EventDef, ...] = (
    EventDef(
        "golden_hour", "Golden Hour", "Every click glitters. Double click power!", "🌟", "gold",
        EventMultipliers(clicks=2.0),
        (
            EventChallengeDef("gold_clicks", "Click 500 times", 500, ProgressStat.TOTAL_CLICKS),
            EventChallengeDef("gold_lifetime", "Reach 1M lifetime clicks", 1_000_000, ProgressStat.LIFETIME_CLICKS),
        ),
        Reward(clicks=250_000, prestige_points=1),
    ),
    EventDef(
        "cosmic_alignment", "Cosmic Alignment", "The stars favour resets. +50% prestige gain!", "🌌", "cosmic",
        EventMultipliers(prestige_gain=1.5),
        (
            EventChallengeDef("cosmic_prestige", "Prestige 2 times", 2, ProgressStat.PRESTIGES),
        ),
        Reward(prestige_points=3, ascension_points=1),
    ),
    EventDef(
        "speed_rush", "Speed Rush", "Auto-clickers overclocked. Triple CPS!", "⚡", "speed",
        EventMultipliers(cps=3.0),
        (
            EventChallengeDef("speed_cps", "Reach 1,000 CPS", 1_000, ProgressStat.CPS),
            EventChallengeDef("speed_upgrades", "Own 40 upgrades", 40, ProgressStat.UPGRADES),
        ),
        Reward(clicks=500_000),
    ),
    EventDef(
        "power_week", "Power Week", "Everything hits harder. 1.5x clicks and CPS!", "💪", "power",
        EventMultipliers(clicks=1.5, cps=1.5),
        (
            EventChallengeDef("power_click", "Reach 1,000 click power", 1_000, ProgressStat.CLICK_POWER),
        ),
        Reward(clicks=100_000, prestige_points=2),
    ),
    EventDef(
        "lucky_streak", "Lucky Streak", "Fortune smiles on you. 1.25x everything!", "🍀", "lucky",
        EventMultipliers(clicks=1.25, cps=1.25, prestige_gain=1.25),
        (
            EventChallengeDef("lucky_clicks", "Click 1,000 times", 1_000, ProgressStat.TOTAL_CLICKS),
            EventChallengeDef("lucky_cps", "Reach 500 CPS", 500, ProgressStat.CPS),
        ),
        Reward(clicks=300_000, prestige_points=1),
    ),
)

EVENTS_BY_ID: dict[str, EventDef] = {e.id: e for e in EVENT_ROTATION}
