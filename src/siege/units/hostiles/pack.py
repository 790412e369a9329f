from siege.units.base import CombatStats, MovementCategory, UnitKind, UnitType


class Pack(UnitType):
    """Horde leader.  Spawns six half-strength runner minions around itself.

    The leader and its minions are independent combatants; there is no
    shared health pool.
    """
    type_id = "pack"
    display_name = "Horde Pack"
    kind = UnitKind.HOSTILE
    category = MovementCategory.FOOT
    speed = 0.5
    spawn_cost = 30
    minions = 6
    combat = CombatStats(max_hp=30.0, attack_range=1.5, dps=2.0)
