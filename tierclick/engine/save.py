"""Save/load — persists progress to disk between sessions.

Loading never trusts the file: a fresh state covering the current content
tables is the base, every saved scalar is type-checked before it overlays
the base, and id-keyed collections are merged by id. New content therefore
shows up in old saves, and content that was removed is dropped.
"""

from __future__ import annotations

import json
import logging
import math
import time
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

from tierclick.data.balance import BALANCE
from tierclick.data.quests import ALL_QUESTS, EVENTS_BY_ID
from tierclick.engine.economy import compute_derived, compute_passive_rate
from tierclick.engine.events import sync_event
from tierclick.engine.game_state import (
    TREE_FIELDS,
    EventProgress,
    GameState,
    GameStats,
    HistoryPoint,
    LeaderboardEntry,
    QuestState,
    ScoreType,
    new_game_state,
)

log = logging.getLogger(__name__)

SAVE_DIR = Path.home() / ".tierclick"
SCHEMA_VERSION = 1


# ── Coercion helpers ─────────────────────────────────────────────


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _coerce(value: Any, default: Any) -> Any:
    """Return ``value`` converted to the type of ``default``, or ``default``."""
    if isinstance(default, bool):
        return value if isinstance(value, bool) else default
    if isinstance(default, int):
        return int(value) if _is_number(value) else default
    if isinstance(default, float):
        return float(value) if _is_number(value) else default
    if isinstance(default, str):
        return value if isinstance(value, str) else default
    return default


def _count(value: Any, default: int) -> int:
    return max(0, _coerce(value, default))


def _overlay_scalars(target: Any, data: dict) -> None:
    """Copy every number/bool/str field present in ``data`` onto ``target``.

    Ids are never overlaid; they come from the content table.
    """
    for f in fields(target):
        if f.name == "id":
            continue
        default = getattr(target, f.name)
        if isinstance(default, (bool, int, float, str)) and f.name in data:
            setattr(target, f.name, _coerce(data[f.name], default))


def _as_dict(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


# ── Serialisation ────────────────────────────────────────────────


def state_to_dict(state: GameState) -> dict:
    s = state
    qs = s.quest_state
    data = {
        "version": SCHEMA_VERSION,
        "clicks": s.clicks,
        "lifetime_clicks": s.lifetime_clicks,
        "click_power": s.click_power,
        "cps": s.cps,
        "prestige_points": s.prestige_points,
        "total_prestige_points": s.total_prestige_points,
        "ascension_points": s.ascension_points,
        "total_ascension_points": s.total_ascension_points,
        "transcendence_points": s.transcendence_points,
        "total_transcendence_points": s.total_transcendence_points,
        "eternity_points": s.eternity_points,
        "total_eternity_points": s.total_eternity_points,
        "total_prestiges": s.total_prestiges,
        "total_ascensions": s.total_ascensions,
        "total_transcendences": s.total_transcendences,
        "total_eternities": s.total_eternities,
        "upgrades": dict(s.upgrades),
        "achievements": dict(s.achievements),
        "stats": asdict(s.stats),
        "quest_state": {
            "quests": {qid: asdict(q) for qid, q in qs.quests.items()},
            "challenges": {cid: asdict(c) for cid, c in qs.challenges.items()},
            "leaderboard": [
                {
                    "id": e.id,
                    "name": e.name,
                    "score": e.score,
                    "date": e.date,
                    "score_type": e.score_type.value,
                }
                for e in qs.leaderboard
            ],
            "event": asdict(qs.event) if qs.event is not None else None,
            "last_daily_reset": qs.last_daily_reset,
            "last_weekly_reset": qs.last_weekly_reset,
        },
    }
    for name in TREE_FIELDS.values():
        data[name] = dict(getattr(s, name))
    return data


def _merge_stats(base: GameStats, data: dict) -> None:
    _overlay_scalars(base, data)
    for name in ("cps_history", "clicks_history"):
        points = []
        for raw in _as_list(data.get(name)):
            raw = _as_dict(raw)
            if _is_number(raw.get("time")) and _is_number(raw.get("value")):
                points.append(HistoryPoint(time=float(raw["time"]), value=float(raw["value"])))
        setattr(base, name, points[-BALANCE.stats.history_limit:])


def _merge_leaderboard(data: list) -> list[LeaderboardEntry]:
    entries = []
    for raw in data:
        raw = _as_dict(raw)
        try:
            score_type = ScoreType(raw.get("score_type"))
        except ValueError:
            continue
        if not (isinstance(raw.get("id"), str) and isinstance(raw.get("name"), str)):
            continue
        if not (_is_number(raw.get("score")) and _is_number(raw.get("date"))):
            continue
        entries.append(
            LeaderboardEntry(
                id=raw["id"],
                name=raw["name"],
                score=raw["score"],
                date=float(raw["date"]),
                score_type=score_type,
            )
        )
    return entries


def _merge_event(data: Any) -> EventProgress | None:
    data = _as_dict(data)
    edef = EVENTS_BY_ID.get(data.get("id"))
    if edef is None:
        return None
    event = EventProgress(id=edef.id, challenges={c.id: 0.0 for c in edef.challenges})
    _overlay_scalars(event, data)
    saved = _as_dict(data.get("challenges"))
    for cid in event.challenges:
        event.challenges[cid] = _coerce(saved.get(cid), 0.0)
    return event


def _merge_quest_state(base: QuestState, data: dict) -> None:
    _overlay_scalars(base, data)

    saved_quests = _as_dict(data.get("quests"))
    for qid, progress in base.quests.items():
        saved = _as_dict(saved_quests.get(qid))
        _overlay_scalars(progress, saved)
        saved_steps = _as_dict(saved.get("steps"))
        for step in ALL_QUESTS[qid].steps:
            progress.steps[step.id] = _coerce(saved_steps.get(step.id), progress.steps[step.id])

    saved_challenges = _as_dict(data.get("challenges"))
    for cid, progress in base.challenges.items():
        _overlay_scalars(progress, _as_dict(saved_challenges.get(cid)))

    base.leaderboard = _merge_leaderboard(_as_list(data.get("leaderboard")))
    base.event = _merge_event(data.get("event"))


def dict_to_state(data: dict, now: float | None = None) -> GameState:
    """Merge a raw snapshot onto a fresh state built from current content."""
    state = new_game_state(now)
    _overlay_scalars(state, data)
    # Currencies and counters are never negative
    for f in fields(state):
        value = getattr(state, f.name)
        if _is_number(value) and value < 0:
            setattr(state, f.name, type(value)(0))

    saved_upgrades = _as_dict(data.get("upgrades"))
    for uid in state.upgrades:
        state.upgrades[uid] = _count(saved_upgrades.get(uid), 0)

    for name in [*TREE_FIELDS.values(), "achievements"]:
        collection = getattr(state, name)
        saved = _as_dict(data.get(name))
        for key in collection:
            collection[key] = _coerce(saved.get(key), False)

    _merge_stats(state.stats, _as_dict(data.get("stats")))
    _merge_quest_state(state.quest_state, _as_dict(data.get("quest_state")))
    return compute_derived(state)


# ── Offline earnings ─────────────────────────────────────────────


def compute_offline_earnings(state: GameState, now: float | None = None) -> tuple[float, float]:
    """(seconds away, currency earned meanwhile) since the last save.

    Priced with the event scheduled at ``now``, not the one in the snapshot.
    """
    if now is None:
        now = time.time()
    elapsed = max(0.0, now - state.stats.last_online_time)
    elapsed = min(elapsed, BALANCE.persistence.max_offline_s)
    current = state.clone()
    sync_event(current, now, [])
    return elapsed, elapsed * compute_passive_rate(current)


# ── Audio settings ───────────────────────────────────────────────


@dataclass
class AudioSettings:
    volume: float = 0.5
    sfx_enabled: bool = True
    music_enabled: bool = True

    def __post_init__(self) -> None:
        self.volume = min(1.0, max(0.0, float(self.volume)))


# ── Public API ───────────────────────────────────────────────────


class PersistenceHandle:
    """Owns the on-disk snapshot (last write wins) and the audio settings."""

    def __init__(self, directory: Path | str = SAVE_DIR) -> None:
        self.directory = Path(directory)
        self.save_file = self.directory / BALANCE.persistence.save_file
        self.audio_file = self.directory / BALANCE.persistence.audio_file

    def save(self, state: GameState, now: float | None = None) -> GameState:
        """Persist ``state`` stamped with ``now``. Returns the stamped state."""
        if now is None:
            now = time.time()
        stamped = state.clone()
        stamped.stats.last_online_time = now
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self.save_file.write_text(json.dumps(state_to_dict(stamped), indent=2))
        except OSError as exc:
            log.warning("could not save to %s: %s", self.save_file, exc)
        return stamped

    def load(self, now: float | None = None) -> GameState:
        """Load the snapshot, or a fresh state if it is missing or corrupt."""
        if not self.save_file.exists():
            return new_game_state(now)
        try:
            data = json.loads(self.save_file.read_text())
        except (OSError, ValueError) as exc:
            log.warning("corrupt save %s, starting fresh: %s", self.save_file, exc)
            return new_game_state(now)
        if not isinstance(data, dict):
            log.warning("save %s is not an object, starting fresh", self.save_file)
            return new_game_state(now)
        return dict_to_state(data, now)

    def delete(self) -> None:
        try:
            self.save_file.unlink(missing_ok=True)
        except OSError as exc:
            log.warning("could not delete %s: %s", self.save_file, exc)

    def save_audio(self, settings: AudioSettings) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self.audio_file.write_text(json.dumps(asdict(settings), indent=2))
        except OSError as exc:
            log.warning("could not save audio settings: %s", exc)

    def load_audio(self) -> AudioSettings:
        if not self.audio_file.exists():
            return AudioSettings()
        try:
            data = json.loads(self.audio_file.read_text())
        except (OSError, ValueError) as exc:
            log.warning("corrupt audio settings, using defaults: %s", exc)
            return AudioSettings()
        data = _as_dict(data)
        settings = AudioSettings()
        _overlay_scalars(settings, data)
        return AudioSettings(settings.volume, settings.sfx_enabled, settings.music_enabled)
