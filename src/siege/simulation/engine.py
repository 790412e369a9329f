"""SimulationEngine — fixed-step tick scheduler for one siege.

Architecture
------------
The engine is the authoritative owner of every battle participant: the
keep, the defender roster, the live hostile collection, and (through
CombatSystem) arrows and damage events.  Consumers only ever get frozen
snapshot records back.

There is no thread.  An external caller drives the engine by calling
``advance(now)`` once per frame with its wall clock.  The frame delta is
scaled by the time scale, added to an accumulator, and the accumulator is
drained in whole fixed steps of ``FIXED_DT`` (0.1s, 10 Hz).  The wall
clock decides *how many* steps run, never what a step does: a step's
effects depend only on the tick counter and the random stream.

Per-step order (``_fixed_update``):
  1. WaveDirector spawns a wave on cadence ticks.
  2. Every living hostile draws one jitter value, then walks toward the
     keep unless it is already within reach.
  3. Defenders re-acquire the nearest hostile in range and fire.
  4. Arrows advance newest-first; landed arrows resolve.
  5. Hostiles within reach strike the keep.
  6. Dead hostiles are pruned.
  7. Terminal check: keep fallen -> defeat (slow motion, stop).  All
     hostiles gone after at least one wave and past the final wave's
     window -> victory (stop).

Lifecycle:
  stopped --start()--> running --stop()/terminal--> stopped
  A battle that reached a terminal state never resumes; ``replay()``
  rebuilds it from the seed instead.
"""

from __future__ import annotations

import time
from dataclasses import replace
from typing import TYPE_CHECKING, Callable

from siege.units import Archer

from .battle_log import DEFAULT_CAPACITY, BattleLog
from .combat import CombatSystem
from .entity import SimulationEntity, make_defender, make_keep
from .rng import RandomStream
from .snapshot import (
    BattleSnapshot,
    DamageEventSnapshot,
    EntitySnapshot,
    ProjectileSnapshot,
    ReplaySummary,
)
from .vector import ORIGIN, Vector3
from .waves import WaveDirector, WaveRecord, WaveState

if TYPE_CHECKING:
    from siege.comms.event_bus import EventBus

TICK_RATE = 10
FIXED_DT = 1.0 / TICK_RATE

# Accumulator slack so float drift in frame deltas never swallows a step
_STEP_EPSILON = 1e-9

# Movement jitter: each step is scaled by 1 +/- 5%
JITTER_SPREAD = 0.1

SLOW_MOTION_SCALE = 0.3
TIME_SCALE_RECOVERY = 2.0  # time scale regained per real second

KEEP_ID = "keep-0"
KEEP_POSITION = ORIGIN

# Archers stand on the keep's walls
DEFENDER_OFFSETS: tuple[Vector3, ...] = (
    Vector3(-2.0, 4.0, 2.0),
    Vector3(2.0, 4.0, 2.0),
    Vector3(0.0, 4.0, -2.0),
)


def recover_time_scale(scale: float, delta: float) -> float:
    """Ease *scale* back toward 1.0 after *delta* real seconds, clamped to [0, 1]."""
    return min(1.0, max(0.0, scale + TIME_SCALE_RECOVERY * delta))


class SimulationEngine:
    """Drives one deterministic siege at 10 Hz."""

    def __init__(
        self,
        seed: str | int | float,
        event_bus: EventBus | None = None,
        log_capacity: int = DEFAULT_CAPACITY,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._seed = str(seed)
        self._event_bus = event_bus
        self._log_capacity = log_capacity
        self._clock = clock
        self._reset()

    def _reset(self) -> None:
        self._rng = RandomStream(self._seed)
        self._log = BattleLog(self._log_capacity)
        self.combat = CombatSystem(self._event_bus, self._log)
        self.waves = WaveDirector(self._rng, self._event_bus, self._log)
        self._keep: SimulationEntity | None = None
        self._defenders: dict[str, SimulationEntity] = {}
        self._hostiles: dict[str, SimulationEntity] = {}
        self._running = False
        self._tick = 0
        self._accumulator = 0.0
        self._last_time = 0.0
        self._time_scale = 1.0
        self._outcome: str | None = None
        self._summary: ReplaySummary | None = None

    # -- Lifecycle ----------------------------------------------------------

    def start(self, now: float | None = None) -> None:
        """Begin (or resume) the battle and reset the wall-clock reference.

        The keep and the defender roster are created on the first start.
        A battle that already ended stays stopped.
        """
        if self._running or self._outcome is not None:
            return
        self._last_time = self._clock() if now is None else now
        self._running = True
        if self._keep is None:
            self._keep = make_keep(KEEP_ID, KEEP_POSITION, self._tick)
            for index, offset in enumerate(DEFENDER_OFFSETS, start=1):
                defender = make_defender(
                    f"{Archer.type_id}-{index}",
                    KEEP_POSITION.offset(offset.x, offset.y, offset.z),
                    self._tick,
                )
                self._defenders[defender.entity_id] = defender
            self._log.append(self._tick, f"Battle started (seed {self._seed!r}): "
                                         f"keep hp {self._keep.hp:.0f}, "
                                         f"{len(self._defenders)} defenders")
            self._publish("battle_started", {
                "seed": self._seed,
                "keep_id": self._keep.entity_id,
                "defenders": list(self._defenders),
            })

    def stop(self) -> None:
        """Stop stepping and flush the battle log to the log sink."""
        if not self._running:
            return
        self._running = False
        self._log.flush()

    def replay(self, now: float | None = None) -> SimulationEngine:
        """Rebuild the battle from scratch with the same seed and start it.

        Returns a new engine; this one is stopped and left as it was.
        """
        self.stop()
        engine = SimulationEngine(
            self._seed,
            event_bus=self._event_bus,
            log_capacity=self._log_capacity,
            clock=self._clock,
        )
        engine.start(now)
        return engine

    # -- Time ---------------------------------------------------------------

    def advance(self, now: float | None = None) -> int:
        """Feed one frame of wall-clock time.  Returns the number of steps run.

        No-op while stopped.
        """
        if not self._running:
            return 0
        if now is None:
            now = self._clock()
        delta = max(0.0, now - self._last_time)
        self._last_time = now

        self._accumulator += delta * self._time_scale
        self._time_scale = recover_time_scale(self._time_scale, delta)

        steps = 0
        while self._running and self._accumulator >= FIXED_DT - _STEP_EPSILON:
            self._fixed_update()
            self._tick += 1
            self._accumulator -= FIXED_DT
            steps += 1

        self.combat.prune_damage_events(now)
        return steps

    def advance_by(self, seconds: float) -> int:
        """Advance the wall-clock reference by *seconds* and feed that frame."""
        return self.advance(self._last_time + seconds)

    def step(self) -> bool:
        """Run exactly one fixed step, bypassing the accumulator.

        Returns False (and does nothing) while stopped.
        """
        if not self._running:
            return False
        self._fixed_update()
        self._tick += 1
        return True

    # -- Fixed step ---------------------------------------------------------

    def _fixed_update(self) -> None:
        keep = self._keep
        if keep is None:
            raise RuntimeError("Battle has no keep; start() must run before stepping")
        tick = self._tick
        now = self._last_time

        # 1. Waves
        for hostile in self.waves.tick(tick, keep.position):
            self._hostiles[hostile.entity_id] = hostile

        # 2. Movement — one draw per living hostile, in collection order
        for hostile in self._hostiles.values():
            if not hostile.alive:
                continue
            jitter = 1.0 + (self._rng.next() - 0.5) * JITTER_SPREAD
            if not hostile.in_reach_of(keep.position):
                hostile.move_toward(keep.position, jitter)

        # 3. Defenders fire
        living = [h for h in self._hostiles.values() if h.alive]
        self.combat.defenders_fire(self._defenders.values(), living, tick, FIXED_DT)

        # 4. Arrows
        self.combat.tick_projectiles(self._hostiles, tick, FIXED_DT, now)

        # 5. Hostiles strike the keep
        self.combat.hostiles_attack(keep, self._hostiles.values(), tick, FIXED_DT, now)

        # 6. Prune
        dead = [hid for hid, h in self._hostiles.items() if not h.alive]
        for hid in dead:
            del self._hostiles[hid]

        # 7. Terminal check
        if not keep.alive:
            self._finish("defeat", tick)
        elif (
            not self._hostiles
            and self.waves.state.wave_number > 0
            and tick > self.waves.state.next_spawn_at
        ):
            self._finish("victory", tick)

    def _finish(self, outcome: str, tick: int) -> None:
        keep = self._keep
        self._outcome = outcome
        self._summary = ReplaySummary(
            seed=self._seed,
            duration_ticks=tick + 1,
            duration_seconds=round((tick + 1) * FIXED_DT, 6),
            final_keep_hp=keep.hp,
            keep_max_hp=keep.max_hp,
            outcome=outcome,
        )
        if outcome == "defeat":
            self._log.append(tick, f"DEFEAT: the keep has fallen after {tick + 1} ticks")
            self._time_scale = SLOW_MOTION_SCALE
        else:
            self._log.append(tick, f"VICTORY: all {self.waves.state.total_spawned} hostiles "
                                   f"cleared, keep hp {keep.hp:.2f}")
        self._publish("battle_over", self._summary.to_dict())
        self.stop()

    # -- Read accessors -----------------------------------------------------

    @property
    def seed(self) -> str:
        return self._seed

    @property
    def tick(self) -> int:
        return self._tick

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def time_scale(self) -> float:
        return self._time_scale

    @property
    def outcome(self) -> str | None:
        return self._outcome

    @property
    def random_draws(self) -> int:
        return self._rng.draws

    @property
    def wave_state(self) -> WaveState:
        return replace(self.waves.state)

    @property
    def wave_history(self) -> tuple[WaveRecord, ...]:
        return tuple(self.waves.history)

    @property
    def keep(self) -> EntitySnapshot | None:
        return EntitySnapshot.of(self._keep) if self._keep is not None else None

    def entities(self) -> tuple[EntitySnapshot, ...]:
        """Keep, then live hostiles, then defenders."""
        out: list[EntitySnapshot] = []
        if self._keep is not None:
            out.append(EntitySnapshot.of(self._keep))
        out.extend(EntitySnapshot.of(h) for h in self._hostiles.values())
        out.extend(EntitySnapshot.of(d) for d in self._defenders.values())
        return tuple(out)

    def hostiles(self) -> tuple[EntitySnapshot, ...]:
        return tuple(EntitySnapshot.of(h) for h in self._hostiles.values())

    def defenders(self) -> tuple[EntitySnapshot, ...]:
        return tuple(EntitySnapshot.of(d) for d in self._defenders.values())

    def projectiles(self) -> tuple[ProjectileSnapshot, ...]:
        return tuple(ProjectileSnapshot.of(p) for p in self.combat.projectiles)

    def damage_events(self) -> tuple[DamageEventSnapshot, ...]:
        return tuple(DamageEventSnapshot.of(e) for e in self.combat.damage_events)

    def log(self, limit: int | None = None) -> list[str]:
        return self._log.recent(limit)

    def replay_summary(self) -> ReplaySummary | None:
        return self._summary

    def snapshot(self) -> BattleSnapshot:
        return BattleSnapshot(
            tick=self._tick,
            running=self._running,
            entities=self.entities(),
            projectiles=self.projectiles(),
            wave_number=self.waves.state.wave_number,
            random_draws=self._rng.draws,
        )

    def get_battle_state(self) -> dict:
        """Summary dict for status panels and the HTTP surface."""
        keep = self._keep
        return {
            "seed": self._seed,
            "tick": self._tick,
            "running": self._running,
            "outcome": self._outcome,
            "time_scale": self._time_scale,
            "keep_hp": keep.hp if keep is not None else None,
            "keep_max_hp": keep.max_hp if keep is not None else None,
            "hostiles": len(self._hostiles),
            "defenders": len(self._defenders),
            "projectiles": self.combat.projectile_count,
            "eliminations": self.combat.eliminations,
            "waves": self.waves.state.to_dict(),
        }

    # -- Internals ----------------------------------------------------------

    def _publish(self, event_type: str, data: dict) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event_type, data)


__all__ = [
    "DEFENDER_OFFSETS",
    "FIXED_DT",
    "KEEP_ID",
    "KEEP_POSITION",
    "SLOW_MOTION_SCALE",
    "SimulationEngine",
    "TICK_RATE",
    "recover_time_scale",
]
