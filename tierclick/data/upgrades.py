"""Upgrade definitions — all purchasable upgrades and their effects."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class UpgradeKind(Enum):
    """What an upgrade modifies."""

    CLICK_POWER = "clickPower"     # + effect click power per owned unit
    AUTO_CLICKER = "autoClicker"   # + effect × click power passive rate per owned unit


@dataclass(frozen=True)
class UpgradeDef:
    """Definition of a single repeatable upgrade."""

    id: str
    name: str
    description: str
    kind: UpgradeKind
    effect: float
    base_cost: float
    # Growth per owned unit, must be > 1 so costs strictly increase
    cost_multiplier: float


ENERGY = UpgradeDef(
    id="energy",
    name="Energy Drink",
    description="+2 click power",
    kind=UpgradeKind.CLICK_POWER,
    effect=2,
    base_cost=50,
    cost_multiplier=1.25,
)

SEAN = UpgradeDef(
    id="sean",
    name="Sean's Love",
    description="+1 auto-clicker",
    kind=UpgradeKind.AUTO_CLICKER,
    effect=1,
    base_cost=1_000,
    cost_multiplier=1.15,
)

QUARTER_ZIP = UpgradeDef(
    id="superClick",
    name="Quarter Zip",
    description="+5 click power",
    kind=UpgradeKind.CLICK_POWER,
    effect=5,
    base_cost=5_000,
    cost_multiplier=1.2,
)

BENICIO = UpgradeDef(
    id="megaAuto",
    name="Benicio's Love",
    description="+5 auto-clickers",
    kind=UpgradeKind.AUTO_CLICKER,
    effect=5,
    base_cost=10_000,
    cost_multiplier=1.2,
)

HOT_SAUCE = UpgradeDef(
    id="hot sauce",
    name="Hot Sauce",
    description="+20 click power",
    kind=UpgradeKind.CLICK_POWER,
    effect=20,
    base_cost=20_000,
    cost_multiplier=1.2,
)

EVIL_BEN = UpgradeDef(
    id="Evil Ben G",
    name="Evil Ben G",
    description="+10 auto-clickers",
    kind=UpgradeKind.AUTO_CLICKER,
    effect=10,
    base_cost=100_000,
    cost_multiplier=1.2,
)

DISCORD_MOD = UpgradeDef(
    id="discord mod",
    name="Discord Mod",
    description="+100 click power",
    kind=UpgradeKind.CLICK_POWER,
    effect=100,
    base_cost=150_000,
    cost_multiplier=1.2,
)

MATCHA = UpgradeDef(
    id="macha",
    name="Matcha",
    description="+500 click power",
    kind=UpgradeKind.CLICK_POWER,
    effect=500,
    base_cost=1_000_000,
    cost_multiplier=1.2,
)

ROBOT = UpgradeDef(
    id="robot",
    name="Robot Helper",
    description="+50 auto-clickers",
    kind=UpgradeKind.AUTO_CLICKER,
    effect=50,
    base_cost=2_000_000,
    cost_multiplier=1.25,
)

QUANTUM = UpgradeDef(
    id="quantum",
    name="Quantum Click",
    description="+2000 click power",
    kind=UpgradeKind.CLICK_POWER,
    effect=2_000,
    base_cost=10_000_000,
    cost_multiplier=1.3,
)

# ── All upgrades registry (display order) ────────────────────────

ALL_UPGRADES: dict[str, UpgradeDef] = {
    u.id: u
    for u in [
        ENERGY,
        SEAN,
        QUARTER_ZIP,
        BENICIO,
        HOT_SAUCE,
        EVIL_BEN,
        DISCORD_MOD,
        MATCHA,
        ROBOT,
        QUANTUM,
    ]
}
