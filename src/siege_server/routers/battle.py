"""Battle API — drive the siege and read its state."""

from __future__ import annotations

from collections import Counter

from fastapi import APIRouter, HTTPException, Request
from loguru import logger
from pydantic import BaseModel, Field

from siege.leaderboard import submission_from_summary
from siege.simulation import EntitySnapshot, SimulationEngine
from siege.units import SIEGE_BUDGET, hostile_types, validate_plan

router = APIRouter(prefix="/api/battle", tags=["battle"])

DEFAULT_DISPLAY_CAP = 256


class AdvanceRequest(BaseModel):
    seconds: float = Field(default=0.1, ge=0.0, le=60.0)


class NewBattleRequest(BaseModel):
    seed: str | None = None


class SubmitRequest(BaseModel):
    player_name: str | None = None
    post_id: str | None = None
    plan: list[str] | None = None  # hostile archetypes the attacker composed


def _get_engine(request: Request) -> SimulationEngine:
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(503, "Battle engine not available")
    return engine


def _set_engine(request: Request, engine: SimulationEngine) -> None:
    request.app.state.engine = engine
    request.app.state.submitted = False


def cap_per_archetype(hostiles: tuple[EntitySnapshot, ...], cap: int) -> list[EntitySnapshot]:
    """Keep at most *cap* hostiles of each archetype, in collection order."""
    seen: Counter[str] = Counter()
    kept: list[EntitySnapshot] = []
    for hostile in hostiles:
        seen[hostile.archetype] += 1
        if seen[hostile.archetype] <= cap:
            kept.append(hostile)
    over = {name: n - cap for name, n in seen.items() if n > cap}
    if over:
        logger.warning(f"Hostile display cap {cap} exceeded, dropped: {over}")
    return kept


@router.get("/state")
async def get_battle_state(request: Request):
    """Tick, running flag, wave progress, keep hp, time scale, outcome."""
    engine = _get_engine(request)
    state = engine.get_battle_state()
    state["submitted"] = getattr(request.app.state, "submitted", False)
    return state


@router.get("/entities")
async def get_entities(request: Request):
    engine = _get_engine(request)
    return [e.to_dict() for e in engine.entities()]


@router.get("/hostiles")
async def get_hostiles(request: Request):
    """Live hostiles, truncated per archetype to what a renderer can draw."""
    engine = _get_engine(request)
    cap = getattr(request.app.state, "display_cap", DEFAULT_DISPLAY_CAP)
    return [h.to_dict() for h in cap_per_archetype(engine.hostiles(), cap)]


@router.get("/projectiles")
async def get_projectiles(request: Request):
    engine = _get_engine(request)
    return [p.to_dict() for p in engine.projectiles()]


@router.get("/damage-events")
async def get_damage_events(request: Request):
    engine = _get_engine(request)
    return [e.to_dict() for e in engine.damage_events()]


@router.get("/log")
async def get_log(request: Request, limit: int | None = None):
    engine = _get_engine(request)
    return {"lines": engine.log(limit)}


@router.get("/summary")
async def get_summary(request: Request):
    engine = _get_engine(request)
    summary = engine.replay_summary()
    if summary is None:
        raise HTTPException(404, "Battle has not finished")
    return summary.to_dict()


@router.get("/units")
async def get_unit_types():
    """Hostile archetypes an attacker can spend the siege budget on."""
    return {
        "budget": SIEGE_BUDGET,
        "hostiles": [
            {
                "type_id": t.type_id,
                "display_name": t.display_name,
                "cost": t.spawn_cost,
                "max_hp": t.combat.max_hp,
                "speed": t.speed,
                "attack_range": t.combat.attack_range,
                "dps": t.combat.dps,
            }
            for t in hostile_types()
        ],
    }


@router.post("/start")
async def start_battle(request: Request):
    engine = _get_engine(request)
    engine.start()
    return {"status": "running" if engine.is_running else "stopped", "tick": engine.tick}


@router.post("/stop")
async def stop_battle(request: Request):
    engine = _get_engine(request)
    engine.stop()
    return {"status": "stopped", "tick": engine.tick}


@router.post("/advance")
async def advance_battle(body: AdvanceRequest, request: Request):
    """Move the battle's wall clock forward by ``seconds``."""
    engine = _get_engine(request)
    steps = engine.advance_by(body.seconds)
    return {"steps": steps, "tick": engine.tick, "running": engine.is_running}


@router.post("/replay")
async def replay_battle(request: Request):
    """Restart the current seed from scratch."""
    engine = _get_engine(request).replay()
    _set_engine(request, engine)
    logger.info(f"Replaying battle {engine.seed!r}")
    return {"status": "running", "seed": engine.seed, "tick": engine.tick}


@router.post("/new")
async def new_battle(body: NewBattleRequest, request: Request):
    """Replace the battle with a fresh one (stopped until /start)."""
    old = _get_engine(request)
    old.stop()
    seed = body.seed if body.seed is not None else old.seed
    engine = SimulationEngine(
        seed,
        event_bus=getattr(request.app.state, "event_bus", None),
        log_capacity=getattr(request.app.state, "log_capacity", 100),
    )
    _set_engine(request, engine)
    logger.info(f"New battle {engine.seed!r}")
    return {"status": "stopped", "seed": engine.seed}


@router.post("/submit")
async def submit_battle(body: SubmitRequest, request: Request):
    """Send the finished battle to the leaderboard, once per battle."""
    engine = _get_engine(request)
    summary = engine.replay_summary()
    if summary is None:
        raise HTTPException(404, "Battle has not finished")
    if getattr(request.app.state, "submitted", False):
        raise HTTPException(409, "Battle already submitted")

    wave_config = ""
    if body.plan is not None:
        try:
            validate_plan(body.plan)
        except ValueError as e:
            raise HTTPException(400, str(e))
        wave_config = ",".join(body.plan)

    store = request.app.state.leaderboard
    post_id = body.post_id or request.app.state.post_id
    player = body.player_name or request.app.state.player_name
    try:
        record = store.submit_attack(
            post_id, submission_from_summary(summary, player, wave_config),
        )
    except ValueError as e:
        raise HTTPException(400, str(e))
    if record is None:
        raise HTTPException(503, "Leaderboard unavailable")

    request.app.state.submitted = True
    return {"status": "submitted", "post_id": post_id, "record": record.to_json_dict()}
