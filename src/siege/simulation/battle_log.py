"""BattleLog — rolling, human-readable record of notable battle events.

The engine owns one BattleLog.  Lines are kept in memory in a bounded
ring buffer (oldest dropped first) and exposed through the engine's log
accessor.  Nothing is written to an output sink until ``flush()``, which
the engine calls when the battle stops.
"""

from __future__ import annotations

from collections import deque

from loguru import logger

DEFAULT_CAPACITY = 100


class BattleLog:
    """Bounded ring buffer of ``[t=0042] message`` lines."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("BattleLog capacity must be positive")
        self._entries: deque[tuple[int, str]] = deque(maxlen=capacity)
        self._seq = 0
        self._flushed_seq = 0

    @property
    def capacity(self) -> int:
        return self._entries.maxlen or 0

    @property
    def total(self) -> int:
        """Lines appended over the log's lifetime, including dropped ones."""
        return self._seq

    def append(self, tick: int, message: str) -> str:
        self._seq += 1
        line = f"[t={tick:04d}] {message}"
        self._entries.append((self._seq, line))
        return line

    def recent(self, limit: int | None = None) -> list[str]:
        """Most recent lines, oldest first."""
        lines = [line for _, line in self._entries]
        if limit is not None:
            if limit <= 0:
                return []
            lines = lines[-limit:]
        return lines

    def flush(self) -> list[str]:
        """Emit lines not yet flushed to the loguru sink and return them."""
        pending = [line for seq, line in self._entries if seq > self._flushed_seq]
        for line in pending:
            logger.info(f"battle: {line}")
        self._flushed_seq = self._seq
        return pending

    def clear(self) -> None:
        self._entries.clear()
        self._flushed_seq = self._seq

    def __len__(self) -> int:
        return len(self._entries)
