"""Unit type registry.

Importing this package imports every concrete unit module, then indexes
all ``UnitType`` subclasses by ``type_id``.  The siege budget helpers
live here too because plan cost is a pure function of the hostile types.
"""

from __future__ import annotations

from siege.units.base import CombatStats, MovementCategory, UnitKind, UnitType
from siege.units.defenders.archer import Archer
from siege.units.hostiles.pack import Pack
from siege.units.hostiles.runner import Runner
from siege.units.hostiles.spitter import Spitter
from siege.units.hostiles.tank import Tank
from siege.units.keep import Keep

# Total spawn cost an attacker may spend composing one wave.
SIEGE_BUDGET = 120


def _collect(cls: type[UnitType]) -> list[type[UnitType]]:
    found: list[type[UnitType]] = []
    for sub in cls.__subclasses__():
        if "type_id" in sub.__dict__:
            found.append(sub)
        found.extend(_collect(sub))
    return found


_REGISTRY: dict[str, type[UnitType]] = {t.type_id: t for t in _collect(UnitType)}


def get_type(type_id: str) -> type[UnitType] | None:
    return _REGISTRY.get(type_id)


def all_types() -> list[type[UnitType]]:
    return list(_REGISTRY.values())


def hostile_types() -> list[type[UnitType]]:
    return [t for t in _REGISTRY.values() if t.is_hostile()]


def plan_cost(archetypes: list[str]) -> int:
    """Sum of spawn costs for a proposed hostile wave.

    Raises ValueError for anything that is not a hostile archetype.
    """
    total = 0
    for type_id in archetypes:
        unit_type = _REGISTRY.get(type_id)
        if unit_type is None or not unit_type.is_hostile():
            raise ValueError(f"Unknown hostile archetype: {type_id}")
        total += unit_type.spawn_cost
    return total


def validate_plan(archetypes: list[str], budget: int = SIEGE_BUDGET) -> int:
    """Return the plan cost, or raise ValueError if it is empty or over budget."""
    if not archetypes:
        raise ValueError("A siege plan needs at least one hostile")
    cost = plan_cost(archetypes)
    if cost > budget:
        raise ValueError(f"Siege plan costs {cost}, budget is {budget}")
    return cost


__all__ = [
    "Archer",
    "CombatStats",
    "Keep",
    "MovementCategory",
    "Pack",
    "Runner",
    "SIEGE_BUDGET",
    "Spitter",
    "Tank",
    "UnitKind",
    "UnitType",
    "all_types",
    "get_type",
    "hostile_types",
    "plan_cost",
    "validate_plan",
]
