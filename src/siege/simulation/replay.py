"""Headless battle runs and replay verification.

``run_battle`` drives a fresh engine with a fixed frame delta, the way a
render loop would, and records a snapshot after every frame that ran at
least one step.  ``verify_replay`` runs the same seed twice in
independent engines and compares the two recordings frame by frame.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger

from .engine import FIXED_DT, SimulationEngine
from .snapshot import BattleSnapshot, ReplaySummary

if TYPE_CHECKING:
    from siege.comms.event_bus import EventBus

# 10 minutes of battle at 10 Hz; every seed finishes well inside this
DEFAULT_MAX_FRAMES = 6000


@dataclass
class BattleRun:
    """Result of one headless battle."""

    seed: str
    frames: int
    summary: ReplaySummary | None
    snapshots: list[BattleSnapshot] = field(default_factory=list)
    log: list[str] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.summary is not None

    @property
    def ticks(self) -> int:
        return self.snapshots[-1].tick if self.snapshots else 0


@dataclass
class ReplayCheck:
    """Outcome of running one seed twice."""

    seed: str
    first: BattleRun
    second: BattleRun
    mismatch_frame: int | None = None

    @property
    def matches(self) -> bool:
        return self.mismatch_frame is None and self.first.summary == self.second.summary


def run_battle(
    seed: str | int | float,
    frame_delta: float = FIXED_DT,
    max_frames: int = DEFAULT_MAX_FRAMES,
    event_bus: EventBus | None = None,
    log_capacity: int = 100,
) -> BattleRun:
    """Run a battle to completion (or *max_frames*) with a constant frame delta."""
    if frame_delta <= 0:
        raise ValueError(f"frame_delta must be positive, got {frame_delta}")

    engine = SimulationEngine(seed, event_bus=event_bus, log_capacity=log_capacity)
    engine.start(now=0.0)

    snapshots: list[BattleSnapshot] = []
    frames = 0
    while engine.is_running and frames < max_frames:
        frames += 1
        # Absolute frame times keep both runs of a seed on identical deltas
        if engine.advance(frames * frame_delta):
            snapshots.append(engine.snapshot())

    if engine.is_running:
        logger.warning(f"Battle {engine.seed!r} still running after {max_frames} frames")
        engine.stop()

    return BattleRun(
        seed=engine.seed,
        frames=frames,
        summary=engine.replay_summary(),
        snapshots=snapshots,
        log=engine.log(),
    )


def verify_replay(
    seed: str | int | float,
    frame_delta: float = FIXED_DT,
    max_frames: int = DEFAULT_MAX_FRAMES,
) -> ReplayCheck:
    """Run *seed* twice from scratch and compare the recordings."""
    first = run_battle(seed, frame_delta, max_frames)
    second = run_battle(seed, frame_delta, max_frames)

    mismatch: int | None = None
    for index, (a, b) in enumerate(zip(first.snapshots, second.snapshots)):
        if a != b:
            mismatch = index
            break
    if mismatch is None and len(first.snapshots) != len(second.snapshots):
        mismatch = min(len(first.snapshots), len(second.snapshots))

    check = ReplayCheck(seed=str(seed), first=first, second=second, mismatch_frame=mismatch)
    if check.matches:
        logger.info(f"Replay verified for seed {check.seed!r}: "
                    f"{len(first.snapshots)} frames, outcome "
                    f"{first.summary.outcome if first.summary else 'unfinished'}")
    else:
        logger.warning(f"Replay diverged for seed {check.seed!r} at frame {mismatch}")
    return check
