"""WaveDirector — fixed-cadence hostile wave spawning.

Waves fire on every tick divisible by WAVE_CADENCE until MAX_WAVES have
spawned.  Wave *k* (0-indexed) places ``5 + 3k`` hostiles evenly around a
ring centred on the keep.  For each slot, in order, the director draws:

  1. the ring radius: ``30 + rng() * 5``
  2. the archetype:   ``ARCHETYPE_TABLE[floor(rng() * 5)]``
  3. for a pack, one radius draw per minion: ``2 + rng() * 1``

Minions are placed evenly by angle around their pack and appended to the
spawn list directly after it.  Replays depend on this exact draw order.

After each wave ``next_spawn_at`` moves to ``tick + VICTORY_WINDOW``.  The
engine only declares victory once the tick passes the final wave's window.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from siege.units import Pack

from .entity import SimulationEntity, make_hostile, make_pack_minion
from .vector import Vector3, ring_point

if TYPE_CHECKING:
    from siege.comms.event_bus import EventBus
    from .battle_log import BattleLog
    from .rng import RandomStream

WAVE_CADENCE = 30
MAX_WAVES = 5
BASE_WAVE_SIZE = 5
WAVE_GROWTH = 3
VICTORY_WINDOW = 200

SPAWN_RADIUS = 30.0
SPAWN_RADIUS_JITTER = 5.0
MINION_RADIUS = 2.0
MINION_RADIUS_JITTER = 1.0

# Weighted pick list: runners are twice as likely as anything else
ARCHETYPE_TABLE: tuple[str, ...] = ("runner", "runner", "tank", "spitter", "pack")


@dataclass
class WaveState:
    """Progress of the wave schedule."""

    wave_number: int = 0      # waves spawned so far
    next_spawn_at: int = 0    # tick boundary after the latest wave
    total_spawned: int = 0    # hostiles spawned, minions included

    def to_dict(self) -> dict:
        return {
            "wave_number": self.wave_number,
            "next_spawn_at": self.next_spawn_at,
            "total_spawned": self.total_spawned,
            "max_waves": MAX_WAVES,
        }


@dataclass(frozen=True)
class WaveRecord:
    """What a single wave put on the field."""

    wave_index: int
    tick: int
    archetypes: tuple[str, ...]
    minions: int

    @property
    def count(self) -> int:
        """Hostiles placed on the ring (before pack expansion)."""
        return len(self.archetypes)

    @property
    def total(self) -> int:
        return len(self.archetypes) + self.minions


def wave_size(wave_index: int) -> int:
    return BASE_WAVE_SIZE + wave_index * WAVE_GROWTH


class WaveDirector:
    """Schedules and spawns hostile waves from the shared random stream."""

    def __init__(
        self,
        rng: RandomStream,
        event_bus: EventBus | None = None,
        battle_log: BattleLog | None = None,
    ) -> None:
        self._rng = rng
        self._event_bus = event_bus
        self._log = battle_log
        self.state = WaveState()
        self.history: list[WaveRecord] = []

    @property
    def finished(self) -> bool:
        return self.state.wave_number >= MAX_WAVES

    def should_spawn(self, tick: int) -> bool:
        return tick % WAVE_CADENCE == 0 and self.state.wave_number < MAX_WAVES

    def tick(self, tick: int, center: Vector3) -> list[SimulationEntity]:
        """Spawn the next wave if *tick* is a wave boundary.  Returns new hostiles."""
        if not self.should_spawn(tick):
            return []

        wave_index = self.state.wave_number
        count = wave_size(wave_index)
        spawned: list[SimulationEntity] = []
        archetypes: list[str] = []
        minions = 0

        for i in range(count):
            angle = i / count * 2.0 * math.pi
            radius = SPAWN_RADIUS + self._rng.next() * SPAWN_RADIUS_JITTER
            archetype = ARCHETYPE_TABLE[math.floor(self._rng.next() * len(ARCHETYPE_TABLE))]
            position = ring_point(center, angle, radius)

            hostile = make_hostile(self._next_id(), archetype, position, tick)
            spawned.append(hostile)
            archetypes.append(archetype)

            if archetype == Pack.type_id:
                for j in range(Pack.minions):
                    minion_angle = j / Pack.minions * 2.0 * math.pi
                    minion_radius = MINION_RADIUS + self._rng.next() * MINION_RADIUS_JITTER
                    minion_pos = ring_point(position, minion_angle, minion_radius)
                    spawned.append(make_pack_minion(self._next_id(), minion_pos, tick))
                    minions += 1

        self.state.wave_number += 1
        self.state.next_spawn_at = tick + VICTORY_WINDOW

        record = WaveRecord(
            wave_index=wave_index,
            tick=tick,
            archetypes=tuple(archetypes),
            minions=minions,
        )
        self.history.append(record)

        if self._log is not None:
            self._log.append(tick, f"Wave {wave_index + 1}/{MAX_WAVES} spawned: "
                                   f"{count} hostiles + {minions} minions")
        if self._event_bus is not None:
            self._event_bus.publish("wave_spawned", {
                "wave": wave_index + 1,
                "tick": tick,
                "count": count,
                "minions": minions,
                "archetypes": list(archetypes),
            })
        return spawned

    def _next_id(self) -> str:
        self.state.total_spawned += 1
        return f"hostile-{self.state.total_spawned}"
