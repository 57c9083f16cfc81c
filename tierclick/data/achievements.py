"""Achievement definitions — unlock predicates and their passive boosts.

Predicates are code and live only here; a save stores nothing but the
unlocked flag per id.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from tierclick.engine.game_state import GameState


@dataclass(frozen=True)
class AchievementDef:
    """Definition of a single achievement."""

    id: str
    name: str
    description: str
    icon: str
    predicate: Callable[["GameState"], bool]
    # Permanent fractional boosts once unlocked (0.05 = +5%)
    click_boost: float = 0.0
    cps_boost: float = 0.0


ALL_ACHIEVEMENTS: dict[str, AchievementDef] = {
    a.id: a
    for a in [
        AchievementDef("first_click", "First Click", "Click for the first time", "👆",
                       lambda s: s.lifetime_clicks >= 1),
        AchievementDef("click_100", "Getting Started", "Reach 100 lifetime clicks", "✋",
                       lambda s: s.lifetime_clicks >= 100),
        AchievementDef("click_1k", "Thousand Club", "Reach 1,000 lifetime clicks", "🏆",
                       lambda s: s.lifetime_clicks >= 1_000),
        AchievementDef("click_10k", "Click Enthusiast", "Reach 10,000 lifetime clicks", "⭐",
                       lambda s: s.lifetime_clicks >= 10_000, click_boost=0.01),
        AchievementDef("click_100k", "Click Master", "Reach 100,000 lifetime clicks", "💎",
                       lambda s: s.lifetime_clicks >= 100_000, click_boost=0.02),
        AchievementDef("click_1m", "Millionaire", "Reach 1,000,000 lifetime clicks", "🌟",
                       lambda s: s.lifetime_clicks >= 1_000_000, click_boost=0.05),
        AchievementDef("first_upgrade", "First Purchase", "Buy your first upgrade", "🛒",
                       lambda s: any(owned >= 1 for owned in s.upgrades.values())),
        AchievementDef("upgrade_10", "Upgrade Collector", "Own 10 total upgrades", "📦",
                       lambda s: s.total_upgrades_owned >= 10),
        AchievementDef("first_prestige", "First Prestige", "Prestige for the first time", "🔄",
                       lambda s: s.total_prestiges >= 1),
        AchievementDef("prestige_5", "Prestige Pro", "Prestige 5 times", "🏅",
                       lambda s: s.total_prestiges >= 5, cps_boost=0.05),
        AchievementDef("cps_100", "Auto Clicker", "Reach 100 CPS", "⚡",
                       lambda s: s.cps >= 100),
        AchievementDef("cps_1000", "Speed Demon", "Reach 1,000 CPS", "🚀",
                       lambda s: s.cps >= 1_000, cps_boost=0.02),
        AchievementDef("first_ascension", "Ascended", "Ascend for the first time", "🌌",
                       lambda s: s.total_ascension_points >= 1),
        AchievementDef("skill_complete", "Skill Master", "Unlock all prestige skills", "🎓",
                       lambda s: bool(s.skill_tree) and all(s.skill_tree.values())),
        AchievementDef("first_transcendence", "Transcendent", "Transcend for the first time", "🪐",
                       lambda s: s.total_transcendences >= 1, click_boost=0.10),
        AchievementDef("first_eternity", "Eternal", "Reach Eternity for the first time", "♾️",
                       lambda s: s.total_eternities >= 1, click_boost=0.25, cps_boost=0.25),
    ]
}
