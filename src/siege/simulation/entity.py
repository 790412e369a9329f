"""SimulationEntity — one participant in the siege.

Architecture
------------
SimulationEntity is a *flat dataclass*.  The keep, every hostile and every
defender share the same record; ``kind`` tags the variant and
``archetype`` names the unit type whose stats filled it in.  Variant
behaviour (hostiles move and strike the keep, defenders pick targets) is
dispatched on ``kind`` by the engine and CombatSystem rather than by
subclass overrides.

Stat profiles come from the unit type registry (``siege.units``), so the
factory functions below are the only place a record is built from a type.

Hit points only ever go down.  ``alive`` flips to False exactly when hp
reaches zero and never flips back.
"""

from __future__ import annotations

from dataclasses import dataclass

from siege.units import Keep, Runner, UnitKind, UnitType, get_type

from .vector import Vector3, distance


@dataclass
class SimulationEntity:
    """A single keep, hostile, or defender."""

    entity_id: str
    kind: UnitKind
    archetype: str  # unit type_id: "keep", "archer", "runner", "tank", ...
    position: Vector3
    max_hp: float
    hp: float
    created_tick: int = 0
    alive: bool = True

    # Movement / combat (zero for stationary or unarmed units)
    speed: float = 0.0          # units per tick
    attack_range: float = 0.0   # defender range, or hostile reach to the keep
    dps: float = 0.0            # damage per second

    # Hostile-only
    spawn_cost: int = 0
    is_pack_minion: bool = False

    # Keep-only
    level: int = 1

    # Defender-only — nearest hostile chosen this tick
    target_id: str | None = None

    def apply_damage(self, amount: float) -> bool:
        """Apply *amount* damage.  Returns True if this hit eliminated the entity."""
        if not self.alive or amount <= 0:
            return False
        self.hp = max(0.0, self.hp - amount)
        if self.hp <= 0:
            self.alive = False
            return True
        return False

    def distance_to(self, point: Vector3) -> float:
        return distance(self.position, point)

    def in_reach_of(self, point: Vector3) -> bool:
        return distance(self.position, point) <= self.attack_range

    def move_toward(self, goal: Vector3, jitter: float) -> None:
        """Step straight toward *goal* on the ground plane.

        *jitter* scales the step (1.0 = nominal speed).  The step never
        carries the entity past *goal*.
        """
        dx = goal.x - self.position.x
        dz = goal.z - self.position.z
        dist = (dx * dx + dz * dz) ** 0.5
        if dist <= 0 or self.speed <= 0:
            return
        step = min(self.speed * jitter, dist)
        self.position = Vector3(
            self.position.x + dx / dist * step,
            self.position.y,
            self.position.z + dz / dist * step,
        )

    @property
    def hp_fraction(self) -> float:
        if self.max_hp <= 0:
            return 0.0
        return self.hp / self.max_hp

    def to_dict(self) -> dict:
        """Serialize for API consumption."""
        data = {
            "id": self.entity_id,
            "kind": self.kind.value,
            "archetype": self.archetype,
            "position": self.position.to_dict(),
            "hp": round(self.hp, 3),
            "max_hp": self.max_hp,
            "alive": self.alive,
            "created_tick": self.created_tick,
        }
        if self.kind is UnitKind.HOSTILE:
            data["is_pack_minion"] = self.is_pack_minion
            data["spawn_cost"] = self.spawn_cost
        elif self.kind is UnitKind.DEFENDER:
            data["target_id"] = self.target_id
        elif self.kind is UnitKind.KEEP:
            data["level"] = self.level
        return data


def _from_type(
    unit_type: type[UnitType],
    entity_id: str,
    position: Vector3,
    created_tick: int,
) -> SimulationEntity:
    stats = unit_type.combat
    return SimulationEntity(
        entity_id=entity_id,
        kind=unit_type.kind,
        archetype=unit_type.type_id,
        position=position,
        max_hp=stats.max_hp,
        hp=stats.max_hp,
        created_tick=created_tick,
        speed=unit_type.speed,
        attack_range=stats.attack_range,
        dps=stats.dps,
        spawn_cost=unit_type.spawn_cost,
    )


def make_keep(entity_id: str, position: Vector3, created_tick: int = 0) -> SimulationEntity:
    return _from_type(Keep, entity_id, position, created_tick)


def make_defender(
    entity_id: str,
    position: Vector3,
    created_tick: int = 0,
    archetype: str = "archer",
) -> SimulationEntity:
    unit_type = get_type(archetype)
    if unit_type is None or unit_type.kind is not UnitKind.DEFENDER:
        raise ValueError(f"Unknown defender archetype: {archetype}")
    return _from_type(unit_type, entity_id, position, created_tick)


def make_hostile(
    entity_id: str,
    archetype: str,
    position: Vector3,
    created_tick: int = 0,
) -> SimulationEntity:
    unit_type = get_type(archetype)
    if unit_type is None or not unit_type.is_hostile():
        raise ValueError(f"Unknown hostile archetype: {archetype}")
    return _from_type(unit_type, entity_id, position, created_tick)


def make_pack_minion(entity_id: str, position: Vector3, created_tick: int = 0) -> SimulationEntity:
    """A runner at half hit points and half damage that costs nothing."""
    stats = Runner.combat.halved()
    return SimulationEntity(
        entity_id=entity_id,
        kind=UnitKind.HOSTILE,
        archetype=Runner.type_id,
        position=position,
        max_hp=stats.max_hp,
        hp=stats.max_hp,
        created_tick=created_tick,
        speed=Runner.speed,
        attack_range=stats.attack_range,
        dps=stats.dps,
        spawn_cost=0,
        is_pack_minion=True,
    )
