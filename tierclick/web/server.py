"""Tierclick Web — Flask JSON API that wraps the game engine.

Exposes the engine's operations and its derived read model to an external
front end. The game loop is driven lazily: each request catches up on
elapsed time before acting and returns the resulting state.
"""

from __future__ import annotations

import threading

from flask import Flask, jsonify, request

from tierclick.data.achievements import ALL_ACHIEVEMENTS
from tierclick.data.quests import ALL_CHALLENGES, ALL_QUESTS, EVENTS_BY_ID
from tierclick.data.trees import TIER_TREES, Tier
from tierclick.data.upgrades import ALL_UPGRADES
from tierclick.engine.economy import (
    MAX,
    compute_max_affordable,
    compute_upgrade_cost,
    format_number,
)
from tierclick.engine.events import event_time_left
from tierclick.engine.game_state import GameState, ScoreType
from tierclick.engine.prestige import gain_previews
from tierclick.engine.progress import top_scores
from tierclick.engine.save import PersistenceHandle
from tierclick.engine.session import GameSession


# ---------------------------------------------------------------------------
# Read model
# ---------------------------------------------------------------------------


def state_json(session: GameSession) -> dict:
    """Build the JSON blob sent to the front end."""
    s = session.state
    now = session.now()

    upgrades = []
    for uid, udef in ALL_UPGRADES.items():
        cost = compute_upgrade_cost(s, uid)
        upgrades.append({
            "id": uid,
            "name": udef.name,
            "description": udef.description,
            "kind": udef.kind.value,
            "owned": s.upgrades.get(uid, 0),
            "cost": format_number(cost),
            "cost_raw": cost,
            "can_afford": s.clicks >= cost,
            "max_affordable": compute_max_affordable(s, uid),
        })

    trees = {}
    for tier, table in TIER_TREES.items():
        owned = s.tree(tier)
        points = s.points(tier)
        trees[tier.value] = [
            {
                "id": nid,
                "name": ndef.name,
                "description": ndef.description,
                "cost": ndef.cost,
                "owned": owned.get(nid, False),
                "can_afford": not owned.get(nid, False) and points >= ndef.cost,
            }
            for nid, ndef in table.items()
        ]

    achievements = [
        {
            "id": aid,
            "name": adef.name,
            "description": adef.description,
            "icon": adef.icon,
            "unlocked": s.achievements.get(aid, False),
        }
        for aid, adef in ALL_ACHIEVEMENTS.items()
    ]

    return {
        "clicks": format_number(s.clicks),
        "clicks_raw": s.clicks,
        "lifetime_clicks": format_number(s.lifetime_clicks),
        "lifetime_clicks_raw": s.lifetime_clicks,
        "click_power": format_number(s.click_power),
        "click_power_raw": s.click_power,
        "cps": f"{format_number(s.cps)}/s",
        "cps_raw": s.cps,
        "points": {tier.value: s.points(tier) for tier in Tier},
        "totals": {
            "prestige_points": s.total_prestige_points,
            "ascension_points": s.total_ascension_points,
            "transcendence_points": s.total_transcendence_points,
            "eternity_points": s.total_eternity_points,
            "prestiges": s.total_prestiges,
            "ascensions": s.total_ascensions,
            "transcendences": s.total_transcendences,
            "eternities": s.total_eternities,
        },
        "gain_preview": gain_previews(s),
        "upgrades": upgrades,
        "trees": trees,
        "achievements": achievements,
        "quests": _quests_json(s),
        "challenges": _challenges_json(s),
        "event": _event_json(s, now),
        "leaderboard": {
            t.value: [
                {"name": e.name, "score": e.score, "date": e.date}
                for e in top_scores(s, t)
            ]
            for t in ScoreType
        },
        "stats": {
            "total_playtime": s.stats.total_playtime,
            "best_cps": s.stats.best_cps,
            "total_clicks": s.stats.total_clicks,
            "cps_history": [[p.time, p.value] for p in s.stats.cps_history],
            "clicks_history": [[p.time, p.value] for p in s.stats.clicks_history],
        },
        "offline": {
            "seconds": session.last_offline_earnings[0],
            "earned": session.last_offline_earnings[1],
        },
        "notifications": session.drain_notifications(),
        "server_time": now,
    }


def _quests_json(s: GameState) -> list[dict]:
    out = []
    for qid, qdef in ALL_QUESTS.items():
        progress = s.quest_state.quests[qid]
        out.append({
            "id": qid,
            "name": qdef.name,
            "description": qdef.description,
            "icon": qdef.icon,
            "steps": [
                {
                    "id": step.id,
                    "description": step.description,
                    "target": step.target,
                    "current": progress.steps.get(step.id, 0.0),
                }
                for step in qdef.steps
            ],
            "completed": progress.completed,
            "claimed": progress.claimed,
        })
    return out


def _challenges_json(s: GameState) -> list[dict]:
    out = []
    for cid, cdef in ALL_CHALLENGES.items():
        progress = s.quest_state.challenges.get(cid)
        if progress is None:
            continue
        out.append({
            "id": cid,
            "name": cdef.name,
            "description": cdef.description,
            "period": cdef.period.value,
            "target": cdef.target,
            "current": progress.current,
            "completed": progress.completed,
            "claimed": progress.claimed,
            "expires_at": progress.expires_at,
        })
    return out


def _event_json(s: GameState, now: float) -> dict | None:
    event = s.quest_state.event
    if event is None:
        return None
    edef = EVENTS_BY_ID[event.id]
    return {
        "id": event.id,
        "name": edef.name,
        "description": edef.description,
        "theme": edef.theme,
        "starts_at": event.starts_at,
        "ends_at": event.ends_at,
        "time_left": event_time_left(s, now),
        "multipliers": {
            "clicks": edef.multipliers.clicks,
            "cps": edef.multipliers.cps,
            "prestige_gain": edef.multipliers.prestige_gain,
        },
        "challenges": [
            {
                "id": c.id,
                "description": c.description,
                "target": c.target,
                "current": event.challenges.get(c.id, 0.0),
            }
            for c in edef.challenges
        ],
        "completed": event.completed,
        "claimed": event.claimed,
    }


# ---------------------------------------------------------------------------
# Flask app
# ---------------------------------------------------------------------------


def create_app(session: GameSession) -> Flask:
    """Build a Flask app serving one single-player session."""
    app = Flask(__name__)
    app.config["GAME_SESSION"] = session
    lock = threading.Lock()

    def respond(changed: bool | None = None, status: int = 200):
        data = state_json(session)
        if changed is not None:
            data["changed"] = changed
        return jsonify(data), status

    def error(message: str):
        return jsonify({"error": message}), 400

    @app.route("/api/state")
    def api_state():
        with lock:
            session.tick()
            return respond()

    @app.route("/api/action/click", methods=["POST"])
    def action_click():
        with lock:
            session.tick()
            return respond(session.click())

    @app.route("/api/action/buy/<upgrade_id>", methods=["POST"])
    def action_buy(upgrade_id: str):
        body = request.get_json(silent=True) or {}
        amount = body.get("amount", 1)
        if amount != MAX and (isinstance(amount, bool) or not isinstance(amount, int)):
            return error("amount must be a positive integer or \"MAX\"")
        with lock:
            session.tick()
            return respond(session.buy_upgrade(upgrade_id, amount))

    @app.route("/api/action/tree/<tier>/<node_id>", methods=["POST"])
    def action_tree(tier: str, node_id: str):
        try:
            tier_enum = Tier(tier)
        except ValueError:
            return error(f"unknown tier {tier!r}")
        with lock:
            session.tick()
            return respond(session.buy_tree_node(tier_enum, node_id))

    def reset_route(tier: Tier):
        def action():
            with lock:
                session.tick()
                return respond(session.reset_tier(tier))
        return action

    for path, tier in (
        ("prestige", Tier.PRESTIGE),
        ("ascend", Tier.ASCENSION),
        ("transcend", Tier.TRANSCENDENCE),
        ("eternity", Tier.ETERNITY),
    ):
        app.add_url_rule(
            f"/api/action/{path}",
            endpoint=f"action_{path}",
            view_func=reset_route(tier),
            methods=["POST"],
        )

    @app.route("/api/action/claim/<kind>/<item_id>", methods=["POST"])
    def action_claim(kind: str, item_id: str):
        claims = {
            "quest": session.claim_quest,
            "challenge": session.claim_challenge,
            "event": session.claim_event_reward,
        }
        claim = claims.get(kind)
        if claim is None:
            return error(f"unknown claim kind {kind!r}")
        with lock:
            session.tick()
            return respond(claim(item_id))

    @app.route("/api/action/leaderboard", methods=["POST"])
    def action_leaderboard():
        body = request.get_json(silent=True) or {}
        name = body.get("name", "")
        score_type = body.get("type", ScoreType.LIFETIME.value)
        if not isinstance(name, str) or not isinstance(score_type, str):
            return error("name and type must be strings")
        with lock:
            session.tick()
            return respond(session.add_leaderboard_score(name, score_type))

    @app.route("/api/action/cheat", methods=["POST"])
    def action_cheat():
        body = request.get_json(silent=True) or {}
        code = body.get("code")
        if not isinstance(code, str):
            return error("code must be a string")
        with lock:
            session.tick()
            return respond(session.apply_cheat(code))

    @app.route("/api/action/save", methods=["POST"])
    def action_save():
        with lock:
            session.tick()
            session.save()
            return respond(True)

    @app.route("/api/action/load", methods=["POST"])
    def action_load():
        with lock:
            session.load()
            return respond(True)

    @app.route("/api/action/reset", methods=["POST"])
    def action_reset():
        with lock:
            session.reset_all()
            return respond(True)

    @app.route("/api/audio", methods=["GET", "POST"])
    def api_audio():
        with lock:
            if request.method == "POST":
                body = request.get_json(silent=True) or {}
                volume = body.get("volume")
                if volume is not None and (isinstance(volume, bool) or not isinstance(volume, (int, float))):
                    return error("volume must be a number")
                session.set_audio(
                    volume=volume,
                    sfx_enabled=body.get("sfx_enabled") if isinstance(body.get("sfx_enabled"), bool) else None,
                    music_enabled=body.get("music_enabled") if isinstance(body.get("music_enabled"), bool) else None,
                )
            audio = session.audio
            return jsonify({
                "volume": audio.volume,
                "sfx_enabled": audio.sfx_enabled,
                "music_enabled": audio.music_enabled,
            })

    return app


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def run_server(
    host: str = "127.0.0.1",
    port: int = 5000,
    debug: bool = False,
    save_dir: str | None = None,
) -> None:
    """Start the Flask development server; saves once on shutdown."""
    persistence = PersistenceHandle(save_dir) if save_dir else PersistenceHandle()
    session = GameSession(persistence)
    app = create_app(session)
    try:
        app.run(host=host, port=port, debug=debug, use_reloader=False)
    finally:
        session.close()
