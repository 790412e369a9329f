"""Base classes for the unit type system.

MovementCategory -- enum for movement capabilities
CombatStats      -- frozen dataclass for hit points and weapon stats
UnitType         -- abstract base every concrete type subclasses
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class MovementCategory(Enum):
    """How a unit moves through the battlefield."""
    STATIONARY = "stationary"
    FOOT = "foot"


class UnitKind(str, Enum):
    """Which side of the siege a unit type belongs to."""
    KEEP = "keep"
    HOSTILE = "hostile"
    DEFENDER = "defender"


@dataclass(frozen=True)
class CombatStats:
    """Immutable combat profile for a unit type.

    ``dps`` is damage per second; the engine scales it by the fixed step.
    ``attack_range`` is the weapon reach (defender range, hostile reach
    to the keep).
    """
    max_hp: float
    attack_range: float
    dps: float

    def halved(self) -> CombatStats:
        """Half hit points and half damage, same reach."""
        return CombatStats(
            max_hp=self.max_hp / 2.0,
            attack_range=self.attack_range,
            dps=self.dps / 2.0,
        )


class UnitType:
    """Abstract base for every unit type definition.

    Subclasses MUST set all ClassVar fields.  The registry discovers
    concrete subclasses automatically at import time.
    """

    # -- identity --
    type_id: ClassVar[str]
    display_name: ClassVar[str]
    kind: ClassVar[UnitKind]

    # -- movement --
    category: ClassVar[MovementCategory]
    speed: ClassVar[float]  # units per tick

    # -- combat --
    combat: ClassVar[CombatStats]

    # -- siege budget --
    spawn_cost: ClassVar[int] = 0
    minions: ClassVar[int] = 0  # sub-units spawned alongside this unit

    # -- helpers --

    @classmethod
    def is_mobile(cls) -> bool:
        return cls.category is not MovementCategory.STATIONARY

    @classmethod
    def is_hostile(cls) -> bool:
        return cls.kind is UnitKind.HOSTILE

    @classmethod
    def spawns_minions(cls) -> bool:
        return cls.minions > 0

    def __repr__(self) -> str:
        return f"<UnitType {self.type_id}>"
