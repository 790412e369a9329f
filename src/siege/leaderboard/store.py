"""LeaderboardStore — per-keep attack records kept as JSON documents.

One document per keep (battle post), ``keep-<post_id>-state.json`` under
``root_dir``.  The store sits outside the simulation: it only ever sees
finished ReplaySummary values, converted by ``submission_from_summary``.

Read and write failures are recovered here.  A missing or unreadable
document reads as the default empty record, and a failed submit is logged
and dropped.
"""

from __future__ import annotations

import json
import math
import re
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field

from siege.simulation.snapshot import ReplaySummary

LEADERBOARD_SIZE = 50

# A submission that dealt this much damage brought the keep down
FULL_COLLAPSE_DAMAGE = 100.0

_POST_ID_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class LeaderboardEntry(BaseModel):
    player: str
    time_survived: float
    damage_dealt: float


class KeepRecord(BaseModel):
    """Aggregate state for one keep."""

    brain_value: float = 0.0
    fastest_collapse: float = math.inf
    leaderboard: list[LeaderboardEntry] = Field(default_factory=list)

    def to_json_dict(self) -> dict:
        """JSON-safe form: an unset ``fastest_collapse`` is written as null."""
        data = self.model_dump()
        if math.isinf(self.fastest_collapse):
            data["fastest_collapse"] = None
        return data

    @classmethod
    def from_json_dict(cls, data: dict) -> KeepRecord:
        data = dict(data)
        if data.get("fastest_collapse") is None:
            data["fastest_collapse"] = math.inf
        return cls(**data)


class AttackSubmission(BaseModel):
    player_name: str
    wave_config: str = ""
    time_survived: float
    damage_dealt: float
    replay_seed: str


def submission_from_summary(
    summary: ReplaySummary,
    player_name: str,
    wave_config: str = "",
) -> AttackSubmission:
    """Turn a finished battle into the attacker's leaderboard submission."""
    return AttackSubmission(
        player_name=player_name,
        wave_config=wave_config,
        time_survived=summary.duration_seconds,
        damage_dealt=round(summary.keep_damage, 6),
        replay_seed=summary.seed,
    )


class LeaderboardStore:
    """Key-value store of KeepRecords, keyed by post id."""

    def __init__(self, root_dir: str | Path) -> None:
        self._dir = Path(root_dir)

    @property
    def root_dir(self) -> Path:
        return self._dir

    def path_for(self, post_id: str) -> Path:
        if not _POST_ID_RE.match(post_id):
            raise ValueError(f"Invalid post id: {post_id!r}")
        return self._dir / f"keep-{post_id}-state.json"

    def get_state(self, post_id: str) -> KeepRecord:
        """Current record for *post_id*, or the empty record if none is readable."""
        path = self.path_for(post_id)
        if not path.exists():
            return KeepRecord()
        try:
            with open(path) as f:
                data = json.load(f)
            return KeepRecord.from_json_dict(data)
        except Exception as e:
            logger.warning(f"Failed to read leaderboard for {post_id}: {e}")
            return KeepRecord()

    def submit_attack(self, post_id: str, attack: AttackSubmission) -> KeepRecord | None:
        """Record one attack.  Returns the updated record, or None if it was not saved."""
        path = self.path_for(post_id)
        try:
            record = self.get_state(post_id)
            record.leaderboard.append(LeaderboardEntry(
                player=attack.player_name,
                time_survived=attack.time_survived,
                damage_dealt=attack.damage_dealt,
            ))
            # sorted() is stable: equal damage keeps submission order
            record.leaderboard = sorted(
                record.leaderboard, key=lambda e: e.damage_dealt, reverse=True,
            )[:LEADERBOARD_SIZE]
            if attack.damage_dealt == FULL_COLLAPSE_DAMAGE:
                record.fastest_collapse = min(record.fastest_collapse, attack.time_survived)
            record.brain_value += attack.damage_dealt

            self._dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w") as f:
                json.dump(record.to_json_dict(), f, indent=2)
        except Exception as e:
            logger.error(f"Failed to submit attack for {post_id}: {e}")
            return None

        logger.info(f"Attack recorded for {post_id}: {attack.player_name} dealt "
                    f"{attack.damage_dealt:.1f} in {attack.time_survived:.1f}s")
        return record

    def clear(self, post_id: str) -> bool:
        """Delete the record for *post_id*.  Returns True if one existed."""
        path = self.path_for(post_id)
        try:
            if not path.exists():
                return False
            path.unlink()
        except OSError as e:
            logger.error(f"Failed to clear leaderboard for {post_id}: {e}")
            return False
        logger.info(f"Cleared leaderboard for {post_id}")
        return True
