"""Simulation subsystem — tick engine, waves, combat, replay."""
from .battle_log import BattleLog
from .combat import CombatSystem, DamageEvent, Projectile, acquire_target
from .engine import FIXED_DT, TICK_RATE, SimulationEngine
from .entity import SimulationEntity, make_defender, make_hostile, make_keep, make_pack_minion
from .replay import BattleRun, ReplayCheck, run_battle, verify_replay
from .rng import RandomStream, composite_seed
from .snapshot import BattleSnapshot, DamageEventSnapshot, EntitySnapshot, ProjectileSnapshot, ReplaySummary
from .vector import ORIGIN, Vector3
from .waves import WaveDirector, WaveRecord, WaveState, wave_size

__all__ = [
    "BattleLog",
    "BattleRun",
    "BattleSnapshot",
    "CombatSystem",
    "DamageEvent",
    "DamageEventSnapshot",
    "EntitySnapshot",
    "FIXED_DT",
    "ORIGIN",
    "Projectile",
    "ProjectileSnapshot",
    "RandomStream",
    "ReplayCheck",
    "ReplaySummary",
    "SimulationEngine",
    "SimulationEntity",
    "TICK_RATE",
    "Vector3",
    "WaveDirector",
    "WaveRecord",
    "WaveState",
    "acquire_target",
    "composite_seed",
    "make_defender",
    "make_hostile",
    "make_keep",
    "make_pack_minion",
    "run_battle",
    "verify_replay",
    "wave_size",
]
