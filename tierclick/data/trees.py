"""Skill trees — one-time node purchases for each reset tier.

Each tier pays for its nodes with its own point currency:
prestige points buy Skill nodes, ascension points buy Ascension nodes, and
so on. A node's ``kind`` selects which derived stat it modifies.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Union


class Tier(Enum):
    """The four nested reset layers, lowest first."""

    PRESTIGE = "prestige"
    ASCENSION = "ascension"
    TRANSCENDENCE = "transcendence"
    ETERNITY = "eternity"


class SkillKind(Enum):
    CLICK_MULTI = auto()       # click power × effect
    CPS_BOOST = auto()         # passive rate × effect
    CPS_MULTI = auto()         # passive rate × effect (applied after CPS_BOOST)
    COST_REDUCTION = auto()    # upgrade cost × effect (< 1)
    STARTING_CLICKS = auto()   # clicks after a reset


class AscensionKind(Enum):
    PRESTIGE_MULTI = auto()    # prestige gain × effect
    ALL_MULTI = auto()         # click power × effect (and so passive rate)
    ULTIMATE_CPS = auto()      # passive rate × effect
    SUPER_COST = auto()        # upgrade cost × effect (< 1)
    MEGA_START = auto()        # clicks after a reset


class TranscendenceKind(Enum):
    GLOBAL_MULTI = auto()      # click power × effect
    INFINITE_CPS = auto()      # passive rate × effect
    ASCENSION_MULTI = auto()   # ascension gain × effect
    COSMIC_START = auto()      # clicks after a reset


class EternityKind(Enum):
    ETERNAL_MULTI = auto()        # click power × effect
    ETERNAL_CPS = auto()          # passive rate × effect
    TRANSCENDENCE_MULTI = auto()  # transcendence gain × effect
    ETERNAL_COST = auto()         # upgrade cost × effect (< 1)
    TIMELESS_START = auto()       # clicks after a reset


NodeKind = Union[SkillKind, AscensionKind, TranscendenceKind, EternityKind]

# Node kinds that set the post-reset clicks floor
STARTING_KINDS: frozenset[NodeKind] = frozenset({
    SkillKind.STARTING_CLICKS,
    AscensionKind.MEGA_START,
    TranscendenceKind.COSMIC_START,
    EternityKind.TIMELESS_START,
})


@dataclass(frozen=True)
class TreeNodeDef:
    """Definition of a single tree node."""

    id: str
    name: str
    description: str
    kind: NodeKind
    effect: float
    cost: int


def _table(*nodes: TreeNodeDef) -> dict[str, TreeNodeDef]:
    return {n.id: n for n in nodes}


SKILL_TREE = _table(
    TreeNodeDef("a", "Click Fury", "Doubles all click power.",
                SkillKind.CLICK_MULTI, 2, 1),
    TreeNodeDef("b", "Auto Boost", "Multiplies auto-clicker speed by 1.5x.",
                SkillKind.CPS_BOOST, 1.5, 2),
    TreeNodeDef("c", "CPS Multi", "Triples your clicks per second.",
                SkillKind.CPS_MULTI, 3, 3),
    TreeNodeDef("d", "Bargain Hunter", "Reduces all upgrade costs by 15%.",
                SkillKind.COST_REDUCTION, 0.85, 2),
    TreeNodeDef("e", "Head Start", "Start each prestige with 10,000 clicks.",
                SkillKind.STARTING_CLICKS, 10_000, 3),
    TreeNodeDef("f", "Click Mastery", "Additional 3x click power multiplier.",
                SkillKind.CLICK_MULTI, 3, 5),
    TreeNodeDef("g", "Hyper CPS", "Additional 2x CPS multiplier.",
                SkillKind.CPS_BOOST, 2, 5),
)

ASCENSION_TREE = _table(
    TreeNodeDef("asc1", "Prestige Master", "Double prestige point gains.",
                AscensionKind.PRESTIGE_MULTI, 2, 1),
    TreeNodeDef("asc2", "Universal Power", "Triple ALL production.",
                AscensionKind.ALL_MULTI, 3, 2),
    TreeNodeDef("asc3", "Ultimate Clicker", "3.5x auto-clicker multiplier.",
                AscensionKind.ULTIMATE_CPS, 3.5, 3),
    TreeNodeDef("asc4", "Super Savings", "Reduce all costs by 25%.",
                AscensionKind.SUPER_COST, 0.75, 2),
    TreeNodeDef("asc5", "Mega Start", "Start with 1M clicks after a reset.",
                AscensionKind.MEGA_START, 1_000_000, 4),
    TreeNodeDef("asc6", "Prestige Surge", "Additional 3x prestige gain.",
                AscensionKind.PRESTIGE_MULTI, 3, 5),
    TreeNodeDef("asc7", "Cosmic Power", "5x ALL production.",
                AscensionKind.ALL_MULTI, 5, 8),
)

TRANSCENDENCE_TREE = _table(
    TreeNodeDef("tr1", "Global Surge", "10x click power across every run.",
                TranscendenceKind.GLOBAL_MULTI, 10, 1),
    TreeNodeDef("tr2", "Infinite Engines", "5x auto-clicker output.",
                TranscendenceKind.INFINITE_CPS, 5, 2),
    TreeNodeDef("tr3", "Ascendant Echo", "Double ascension point gains.",
                TranscendenceKind.ASCENSION_MULTI, 2, 3),
    TreeNodeDef("tr4", "Cosmic Start", "Start with 100M clicks after a reset.",
                TranscendenceKind.COSMIC_START, 100_000_000, 4),
)

ETERNITY_TREE = _table(
    TreeNodeDef("et1", "Eternal Flame", "100x click power, forever.",
                EternityKind.ETERNAL_MULTI, 100, 1),
    TreeNodeDef("et2", "Timeless Gears", "25x auto-clicker output.",
                EternityKind.ETERNAL_CPS, 25, 2),
    TreeNodeDef("et3", "Beyond the Veil", "Triple transcendence point gains.",
                EternityKind.TRANSCENDENCE_MULTI, 3, 3),
    TreeNodeDef("et4", "Entropy Discount", "Halve all upgrade costs.",
                EternityKind.ETERNAL_COST, 0.5, 2),
    TreeNodeDef("et5", "Timeless Start", "Start with 10B clicks after a reset.",
                EternityKind.TIMELESS_START, 10_000_000_000, 5),
)

TIER_TREES: dict[Tier, dict[str, TreeNodeDef]] = {
    Tier.PRESTIGE: SKILL_TREE,
    Tier.ASCENSION: ASCENSION_TREE,
    Tier.TRANSCENDENCE: TRANSCENDENCE_TREE,
    Tier.ETERNITY: ETERNITY_TREE,
}
