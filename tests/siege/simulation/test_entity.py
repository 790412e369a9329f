"""Unit tests for SimulationEntity and its factories."""

from __future__ import annotations

import pytest

from siege.simulation.entity import (
    make_defender,
    make_hostile,
    make_keep,
    make_pack_minion,
)
from siege.simulation.vector import ORIGIN, Vector3, distance
from siege.units import UnitKind

pytestmark = pytest.mark.unit


class TestFactories:
    def test_keep(self):
        keep = make_keep("keep-0", ORIGIN)
        assert keep.kind is UnitKind.KEEP
        assert keep.hp == keep.max_hp == 100.0
        assert keep.level == 1
        assert keep.alive

    def test_defender(self):
        archer = make_defender("archer-1", Vector3(-2, 4, 2), created_tick=3)
        assert archer.kind is UnitKind.DEFENDER
        assert archer.archetype == "archer"
        assert archer.attack_range == 20.0
        assert archer.dps == 8.0
        assert archer.created_tick == 3

    def test_defender_rejects_hostile_archetype(self):
        with pytest.raises(ValueError):
            make_defender("x", ORIGIN, archetype="runner")

    def test_hostile(self):
        tank = make_hostile("hostile-1", "tank", Vector3(30, 0, 0))
        assert tank.kind is UnitKind.HOSTILE
        assert tank.max_hp == 60.0
        assert tank.speed == 0.3
        assert tank.spawn_cost == 40
        assert not tank.is_pack_minion

    def test_hostile_rejects_unknown(self):
        with pytest.raises(ValueError):
            make_hostile("x", "dragon", ORIGIN)

    def test_pack_minion(self):
        minion = make_pack_minion("hostile-2", Vector3(1, 0, 1))
        assert minion.archetype == "runner"
        assert minion.is_pack_minion
        assert minion.max_hp == 7.5
        assert minion.dps == 0.75
        assert minion.speed == 1.2
        assert minion.spawn_cost == 0


class TestDamage:
    def test_apply_damage_reduces_hp(self):
        h = make_hostile("h", "runner", ORIGIN)
        assert h.apply_damage(5.0) is False
        assert h.hp == 10.0
        assert h.alive

    def test_eliminating_hit_returns_true_once(self):
        h = make_hostile("h", "runner", ORIGIN)
        assert h.apply_damage(20.0) is True
        assert h.hp == 0.0
        assert not h.alive
        assert h.apply_damage(5.0) is False
        assert h.hp == 0.0

    def test_non_positive_damage_ignored(self):
        h = make_hostile("h", "runner", ORIGIN)
        assert h.apply_damage(0.0) is False
        assert h.apply_damage(-3.0) is False
        assert h.hp == 15.0

    def test_hp_never_negative(self):
        keep = make_keep("keep-0", ORIGIN)
        keep.apply_damage(1000.0)
        assert keep.hp == 0.0
        assert keep.hp_fraction == 0.0


class TestMovement:
    def test_moves_speed_times_jitter(self):
        h = make_hostile("h", "runner", Vector3(30.0, 0.0, 0.0))
        h.move_toward(ORIGIN, jitter=1.0)
        assert h.position.x == pytest.approx(28.8)
        h.move_toward(ORIGIN, jitter=1.05)
        assert h.position.x == pytest.approx(28.8 - 1.26)

    def test_never_overshoots_goal(self):
        h = make_hostile("h", "runner", Vector3(0.5, 0.0, 0.0))
        h.move_toward(ORIGIN, jitter=1.05)
        assert h.position == Vector3(0.0, 0.0, 0.0)

    def test_moves_on_ground_plane(self):
        h = make_hostile("h", "tank", Vector3(10.0, 0.0, 10.0))
        h.move_toward(Vector3(0.0, 5.0, 0.0), jitter=1.0)
        assert h.position.y == 0.0
        assert distance(h.position, Vector3(10.0, 0.0, 10.0)) == pytest.approx(0.3)

    def test_stationary_does_not_move(self):
        archer = make_defender("a", Vector3(2, 4, 2))
        archer.move_toward(ORIGIN, jitter=1.0)
        assert archer.position == Vector3(2, 4, 2)

    def test_in_reach(self):
        spitter = make_hostile("s", "spitter", Vector3(6.0, 0.0, 0.0))
        assert spitter.in_reach_of(ORIGIN)
        runner = make_hostile("r", "runner", Vector3(1.6, 0.0, 0.0))
        assert not runner.in_reach_of(ORIGIN)


class TestSerialization:
    def test_hostile_dict(self):
        d = make_pack_minion("hostile-9", ORIGIN).to_dict()
        assert d["id"] == "hostile-9"
        assert d["kind"] == "hostile"
        assert d["is_pack_minion"] is True

    def test_keep_dict(self):
        d = make_keep("keep-0", ORIGIN).to_dict()
        assert d["level"] == 1
        assert d["position"] == {"x": 0.0, "y": 0.0, "z": 0.0}
