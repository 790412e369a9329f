"""Read-only snapshot records handed to presentation and persistence code.

Every record here is frozen and built by copying out of the live
simulation, so a consumer holding one can never reach back into engine
state.  Positions are frozen Vector3 values and are shared safely.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .vector import Vector3

if TYPE_CHECKING:
    from .combat import DamageEvent, Projectile
    from .entity import SimulationEntity


@dataclass(frozen=True)
class EntitySnapshot:
    id: str
    kind: str
    archetype: str
    position: Vector3
    hp: float
    max_hp: float
    alive: bool
    created_tick: int
    is_pack_minion: bool = False
    target_id: str | None = None
    level: int = 1

    @classmethod
    def of(cls, entity: SimulationEntity) -> EntitySnapshot:
        return cls(
            id=entity.entity_id,
            kind=entity.kind.value,
            archetype=entity.archetype,
            position=entity.position,
            hp=entity.hp,
            max_hp=entity.max_hp,
            alive=entity.alive,
            created_tick=entity.created_tick,
            is_pack_minion=entity.is_pack_minion,
            target_id=entity.target_id,
            level=entity.level,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind,
            "archetype": self.archetype,
            "position": self.position.to_dict(),
            "hp": self.hp,
            "max_hp": self.max_hp,
            "alive": self.alive,
            "created_tick": self.created_tick,
            "is_pack_minion": self.is_pack_minion,
            "target_id": self.target_id,
            "level": self.level,
        }


@dataclass(frozen=True)
class ProjectileSnapshot:
    id: str
    source_id: str
    target_id: str
    origin: Vector3
    target: Vector3
    progress: float
    damage: float

    @classmethod
    def of(cls, proj: Projectile) -> ProjectileSnapshot:
        return cls(
            id=proj.id,
            source_id=proj.source_id,
            target_id=proj.target_id,
            origin=proj.origin,
            target=proj.target,
            progress=proj.progress,
            damage=proj.damage,
        )

    @property
    def position(self) -> Vector3:
        return self.origin.lerp(self.target, self.progress)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "source_id": self.source_id,
            "target_id": self.target_id,
            "origin": self.origin.to_dict(),
            "target": self.target.to_dict(),
            "progress": self.progress,
            "damage": self.damage,
        }


@dataclass(frozen=True)
class DamageEventSnapshot:
    id: str
    target_id: str
    position: Vector3
    amount: float
    time: float
    duration: float
    tick: int

    @classmethod
    def of(cls, event: DamageEvent) -> DamageEventSnapshot:
        return cls(
            id=event.id,
            target_id=event.target_id,
            position=event.position,
            amount=event.amount,
            time=event.time,
            duration=event.duration,
            tick=event.tick,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "target_id": self.target_id,
            "position": self.position.to_dict(),
            "amount": self.amount,
            "time": self.time,
            "duration": self.duration,
            "tick": self.tick,
        }


@dataclass(frozen=True)
class BattleSnapshot:
    """Tick-level view of the battle.

    Wall-clock data (damage event timestamps) is left out so snapshots from
    two runs of the same seed compare equal tick for tick.
    """

    tick: int
    running: bool
    entities: tuple[EntitySnapshot, ...]
    projectiles: tuple[ProjectileSnapshot, ...]
    wave_number: int
    random_draws: int

    @property
    def keep(self) -> EntitySnapshot | None:
        for entity in self.entities:
            if entity.kind == "keep":
                return entity
        return None

    @property
    def hostiles(self) -> tuple[EntitySnapshot, ...]:
        return tuple(e for e in self.entities if e.kind == "hostile")

    def to_dict(self) -> dict:
        return {
            "tick": self.tick,
            "running": self.running,
            "wave_number": self.wave_number,
            "random_draws": self.random_draws,
            "entities": [e.to_dict() for e in self.entities],
            "projectiles": [p.to_dict() for p in self.projectiles],
        }


@dataclass(frozen=True)
class ReplaySummary:
    """Produced once, when the battle reaches a terminal state."""

    seed: str
    duration_ticks: int
    duration_seconds: float
    final_keep_hp: float
    keep_max_hp: float
    outcome: str  # "victory" (keep held) or "defeat" (keep fell)

    @property
    def keep_damage(self) -> float:
        return self.keep_max_hp - self.final_keep_hp

    def to_dict(self) -> dict:
        return {
            "seed": self.seed,
            "duration_ticks": self.duration_ticks,
            "duration_seconds": self.duration_seconds,
            "final_keep_hp": self.final_keep_hp,
            "keep_max_hp": self.keep_max_hp,
            "outcome": self.outcome,
        }
