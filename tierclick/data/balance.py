"""Balance constants — all tuning knobs in one place.

Tweak these to adjust pacing and reset thresholds.
All upgrade costs follow: base_cost * (cost_multiplier ^ owned)
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class EconomyBalance:
    """Tuning for clicks, passive income and spending."""

    # Click power before any upgrade
    base_click_power: float = 1.0

    # Safety valve for "MAX" bulk purchases (simulated units per call)
    max_bulk_iterations: int = 10_000

    # Large number formatting: one suffix per power of 1000
    suffixes: tuple[str, ...] = (
        "K",
        "M",
        "B",
        "T",
        "Qa",
        "Qi",
        "Sx",
        "Sp",
        "Oc",
    )


@dataclass(frozen=True)
class PrestigeBalance:
    """Tuning for the four reset tiers.

    Prestige gain     = floor(lifetime_clicks / prestige_divisor)
    Ascension gain    = floor(sqrt(total_prestige_points / ascension_divisor))
    Transcendence gain = floor(sqrt(total_ascension_points / transcendence_divisor))
    Eternity gain     = floor(sqrt(total_transcendence_points / eternity_divisor))
    """

    prestige_divisor: float = 10_000_000
    ascension_divisor: float = 500
    transcendence_divisor: float = 250
    eternity_divisor: float = 100


@dataclass(frozen=True)
class ProgressBalance:
    """Tuning for quests, challenges and the leaderboard."""

    # Best entries kept per leaderboard score type
    leaderboard_limit: int = 50
    # Entries shown by default
    leaderboard_display: int = 10
    # Undrained notifications kept by a session (oldest dropped first)
    notification_limit: int = 200


@dataclass(frozen=True)
class EventBalance:
    """Tuning for the rotating special events."""

    # Length of one rotation window in seconds
    window_s: float = 3 * 24 * 3600.0


@dataclass(frozen=True)
class StatsBalance:
    """Tuning for the historical charts."""

    # Seconds of play between two history samples
    sample_interval_s: float = 10.0
    # Points kept per series (one hour at the default interval)
    history_limit: int = 360


@dataclass(frozen=True)
class PersistenceBalance:
    """Tuning for saving and offline earnings."""

    autosave_interval_s: float = 30.0
    # Offline earnings stop accruing after this long away
    max_offline_s: float = 7 * 24 * 3600.0
    save_file: str = "save.json"
    audio_file: str = "audio.json"


@dataclass(frozen=True)
class GameBalance:
    """Top-level container for all balance constants."""

    economy: EconomyBalance = field(default_factory=EconomyBalance)
    prestige: PrestigeBalance = field(default_factory=PrestigeBalance)
    progress: ProgressBalance = field(default_factory=ProgressBalance)
    events: EventBalance = field(default_factory=EventBalance)
    stats: StatsBalance = field(default_factory=StatsBalance)
    persistence: PersistenceBalance = field(default_factory=PersistenceBalance)


# Singleton — import this everywhere
BALANCE = GameBalance()
