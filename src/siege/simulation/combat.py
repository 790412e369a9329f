"""CombatSystem — targeting, arrow flight, and damage resolution.

Architecture
------------
CombatSystem runs three phases of the fixed step, always in this order:

  1. ``defenders_fire()`` — each defender picks the nearest living hostile
     within range (first one seen wins a tie) and looses one arrow at it.
     Targets are re-picked every tick; nothing is remembered between ticks.
     The arrow's endpoints are captured at fire time and never re-aimed.
     Its damage is fixed at fire time to ``dps * dt``.

  2. ``tick_projectiles()`` — every arrow advances by
     ``speed * dt / distance(origin, target)``.  Arrows are walked newest
     first.  An arrow that reaches ``progress >= 1`` resolves: if the hostile
     it was aimed at is still alive, the arrow's damage is applied and a
     DamageEvent is recorded.  The arrow is removed either way.  There is
     no miss roll and no re-targeting.

  3. ``hostiles_attack()`` — every living hostile within reach of the keep
     deals ``dps * dt`` to it, in hostile-collection order.

None of these phases draws from the random stream, so their effects are
fully determined by tick order and the entity collections.

DamageEvents are presentation feedback.  They carry the wall-clock time of
the frame that produced them and are pruned once ``duration`` seconds of
wall-clock time have passed.

Events are published on the EventBus (when one is attached):
  - ``projectile_fired``: new arrow in the air
  - ``projectile_hit``: arrow damage applied
  - ``hostile_eliminated``: hostile hp reached zero
  - ``keep_damaged``: keep took damage this tick
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

from .vector import Vector3, distance

if TYPE_CHECKING:
    from siege.comms.event_bus import EventBus
    from .battle_log import BattleLog
    from .entity import SimulationEntity

# Arrow flight speed, units per second
PROJECTILE_SPEED = 40.0

# How long a damage number stays on screen, wall-clock seconds
DAMAGE_EVENT_DURATION = 0.8


@dataclass
class Projectile:
    """A single arrow in flight."""

    id: str
    source_id: str
    target_id: str
    origin: Vector3
    target: Vector3
    damage: float
    speed: float = PROJECTILE_SPEED
    progress: float = 0.0
    fired_tick: int = 0

    @property
    def flight_distance(self) -> float:
        return distance(self.origin, self.target)

    @property
    def position(self) -> Vector3:
        return self.origin.lerp(self.target, self.progress)

    def advance(self, dt: float) -> bool:
        """Move along the flight path.  Returns True once the arrow has landed."""
        dist = self.flight_distance
        if dist <= 0:
            self.progress = 1.0
        else:
            self.progress = min(1.0, self.progress + self.speed * dt / dist)
        return self.progress >= 1.0

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


@dataclass
class DamageEvent:
    """Floating damage feedback for presentation."""

    id: str
    target_id: str
    position: Vector3
    amount: float
    time: float  # wall-clock seconds at creation
    tick: int = 0
    duration: float = DAMAGE_EVENT_DURATION

    def expired(self, now: float) -> bool:
        return now - self.time >= self.duration

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "target_id": self.target_id,
            "position": self.position.to_dict(),
            "amount": self.amount,
            "time": self.time,
            "tick": self.tick,
            "duration": self.duration,
        }


def acquire_target(
    defender: SimulationEntity,
    hostiles: Iterable[SimulationEntity],
) -> SimulationEntity | None:
    """Nearest living hostile within the defender's range.

    Ties go to the hostile seen first.
    """
    nearest: SimulationEntity | None = None
    nearest_dist = float("inf")
    for hostile in hostiles:
        if not hostile.alive:
            continue
        dist = defender.distance_to(hostile.position)
        if dist <= defender.attack_range and dist < nearest_dist:
            nearest = hostile
            nearest_dist = dist
    return nearest


class CombatSystem:
    """Owns arrows and damage events; resolves all damage in a step."""

    def __init__(
        self,
        event_bus: EventBus | None = None,
        battle_log: BattleLog | None = None,
    ) -> None:
        self._projectiles: list[Projectile] = []
        self._damage_events: list[DamageEvent] = []
        self._event_bus = event_bus
        self._log = battle_log
        self._projectile_seq = 0
        self._damage_seq = 0
        self.eliminations = 0
        self.keep_damage_taken = 0.0

    @property
    def projectile_count(self) -> int:
        return len(self._projectiles)

    @property
    def projectiles(self) -> list[Projectile]:
        return list(self._projectiles)

    @property
    def damage_events(self) -> list[DamageEvent]:
        return list(self._damage_events)

    # -- Phase 1: defenders ------------------------------------------------

    def fire(
        self,
        source: SimulationEntity,
        target: SimulationEntity,
        tick: int,
        dt: float,
    ) -> Projectile:
        """Loose one arrow from *source* at *target*'s current position."""
        self._projectile_seq += 1
        proj = Projectile(
            id=f"arrow-{self._projectile_seq}",
            source_id=source.entity_id,
            target_id=target.entity_id,
            origin=source.position,
            target=target.position,
            damage=source.dps * dt,
            fired_tick=tick,
        )
        self._projectiles.append(proj)
        self._publish("projectile_fired", {
            "id": proj.id,
            "source_id": proj.source_id,
            "target_id": proj.target_id,
            "origin": proj.origin.to_dict(),
            "target": proj.target.to_dict(),
            "damage": proj.damage,
            "tick": tick,
        })
        return proj

    def defenders_fire(
        self,
        defenders: Iterable[SimulationEntity],
        hostiles: list[SimulationEntity],
        tick: int,
        dt: float,
    ) -> int:
        """Every living defender re-acquires a target and fires once.  Returns shots."""
        shots = 0
        for defender in defenders:
            if not defender.alive:
                continue
            target = acquire_target(defender, hostiles)
            defender.target_id = target.entity_id if target is not None else None
            if target is None:
                continue
            self.fire(defender, target, tick, dt)
            shots += 1
        return shots

    # -- Phase 2: arrows ---------------------------------------------------

    def tick_projectiles(
        self,
        hostiles: dict[str, SimulationEntity],
        tick: int,
        dt: float,
        now: float,
    ) -> None:
        """Advance all arrows newest-first and resolve the ones that land."""
        landed: list[int] = []
        for index in range(len(self._projectiles) - 1, -1, -1):
            proj = self._projectiles[index]
            if not proj.advance(dt):
                continue
            landed.append(index)
            target = hostiles.get(proj.target_id)
            if target is None or not target.alive:
                continue
            eliminated = target.apply_damage(proj.damage)
            self._record_damage(target, proj.damage, tick, now)
            self._note(tick, f"{proj.source_id} hit {target.entity_id} "
                             f"for {proj.damage:.2f} (hp {target.hp:.2f})")
            self._publish("projectile_hit", {
                "projectile_id": proj.id,
                "source_id": proj.source_id,
                "target_id": target.entity_id,
                "damage": proj.damage,
                "remaining_hp": target.hp,
                "position": target.position.to_dict(),
                "tick": tick,
            })
            if eliminated:
                self.eliminations += 1
                self._note(tick, f"{target.entity_id} ({target.archetype}) "
                                 f"eliminated by {proj.source_id}")
                self._publish("hostile_eliminated", {
                    "target_id": target.entity_id,
                    "archetype": target.archetype,
                    "interceptor_id": proj.source_id,
                    "position": target.position.to_dict(),
                    "tick": tick,
                })

        # ``landed`` holds descending indices, so deleting in order is safe
        for index in landed:
            del self._projectiles[index]

    # -- Phase 3: hostiles -------------------------------------------------

    def hostiles_attack(
        self,
        keep: SimulationEntity,
        hostiles: Iterable[SimulationEntity],
        tick: int,
        dt: float,
        now: float,
    ) -> float:
        """Hostiles within reach strike the keep.  Returns damage applied."""
        total = 0.0
        attackers = 0
        for hostile in hostiles:
            if not keep.alive:
                break
            if not hostile.alive or not hostile.in_reach_of(keep.position):
                continue
            amount = hostile.dps * dt
            keep.apply_damage(amount)
            self._record_damage(keep, amount, tick, now)
            total += amount
            attackers += 1

        if attackers:
            self.keep_damage_taken += total
            self._note(tick, f"Keep took {total:.2f} from {attackers} "
                             f"hostile(s) (hp {keep.hp:.2f})")
            self._publish("keep_damaged", {
                "keep_id": keep.entity_id,
                "damage": total,
                "attackers": attackers,
                "remaining_hp": keep.hp,
                "tick": tick,
            })
        return total

    # -- Damage events -----------------------------------------------------

    def prune_damage_events(self, now: float) -> int:
        """Drop damage events whose wall-clock duration has elapsed."""
        before = len(self._damage_events)
        self._damage_events = [e for e in self._damage_events if not e.expired(now)]
        return before - len(self._damage_events)

    def clear(self) -> None:
        """Remove all arrows and damage events."""
        self._projectiles.clear()
        self._damage_events.clear()

    # -- Internals ---------------------------------------------------------

    def _record_damage(self, target: SimulationEntity, amount: float,
                       tick: int, now: float) -> None:
        self._damage_seq += 1
        self._damage_events.append(DamageEvent(
            id=f"dmg-{self._damage_seq}",
            target_id=target.entity_id,
            position=target.position,
            amount=amount,
            time=now,
            tick=tick,
        ))

    def _note(self, tick: int, message: str) -> None:
        if self._log is not None:
            self._log.append(tick, message)

    def _publish(self, event_type: str, data: dict) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event_type, data)
