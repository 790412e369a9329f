"""RandomStream — the single source of randomness for a battle.

Every stochastic decision in a battle (movement jitter, wave composition,
spawn radii) draws from one RandomStream in a fixed order determined by
tick and entity iteration order.  Nothing in the simulation may touch the
global ``random`` module, the wall clock, or any other entropy source.

The stream is the standard library Mersenne Twister seeded with the
stringified seed.  String seeding hashes the seed with SHA-512, so the
sequence for a given seed is identical across processes, platforms and
Python releases.
"""

from __future__ import annotations

import random


class RandomStream:
    """Deterministic float stream in [0, 1) built from a seed."""

    def __init__(self, seed: str | int | float) -> None:
        self._seed = str(seed)
        self._random = random.Random(self._seed)
        self._draws = 0

    @property
    def seed(self) -> str:
        return self._seed

    @property
    def draws(self) -> int:
        """Number of values drawn so far."""
        return self._draws

    def next(self) -> float:
        self._draws += 1
        return self._random.random()

    def __call__(self) -> float:
        return self.next()

    def __repr__(self) -> str:
        return f"<RandomStream seed={self._seed!r} draws={self._draws}>"


def composite_seed(keep_id: str, attacker_id: str) -> str:
    """Seed for one attacker's siege against one keep (``"keep:attacker"``)."""
    return f"{keep_id}:{attacker_id}"
