"""Unit tests for BattleLog, the engine's rolling text log."""

from __future__ import annotations

import pytest
from loguru import logger

from siege.simulation.battle_log import BattleLog

pytestmark = pytest.mark.unit


@pytest.fixture
def captured():
    lines: list[str] = []
    handler_id = logger.add(lambda m: lines.append(m.record["message"]), level="INFO")
    yield lines
    logger.remove(handler_id)


class TestBattleLog:
    def test_line_format(self):
        log = BattleLog()
        assert log.append(42, "Wave 1/5 spawned") == "[t=0042] Wave 1/5 spawned"
        assert log.recent() == ["[t=0042] Wave 1/5 spawned"]

    def test_ring_buffer_drops_oldest(self):
        log = BattleLog(capacity=3)
        for i in range(5):
            log.append(i, f"line {i}")
        assert len(log) == 3
        assert log.total == 5
        assert log.recent() == ["[t=0002] line 2", "[t=0003] line 3", "[t=0004] line 4"]

    def test_recent_limit(self):
        log = BattleLog()
        for i in range(10):
            log.append(i, "x")
        assert len(log.recent(4)) == 4
        assert log.recent(4)[-1] == "[t=0009] x"
        assert log.recent(0) == []

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            BattleLog(capacity=0)

    def test_flush_emits_only_new_lines(self, captured):
        log = BattleLog()
        log.append(1, "first")
        assert log.flush() == ["[t=0001] first"]
        log.append(2, "second")
        assert log.flush() == ["[t=0002] second"]
        assert log.flush() == []
        assert captured == ["battle: [t=0001] first", "battle: [t=0002] second"]

    def test_clear(self):
        log = BattleLog()
        log.append(0, "gone")
        log.clear()
        assert len(log) == 0
        assert log.flush() == []
