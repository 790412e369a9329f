from siege.units.base import CombatStats, MovementCategory, UnitKind, UnitType


class Runner(UnitType):
    """Fast, fragile melee hostile.  Also the template for pack minions."""
    type_id = "runner"
    display_name = "Runner"
    kind = UnitKind.HOSTILE
    category = MovementCategory.FOOT
    speed = 1.2
    spawn_cost = 15
    combat = CombatStats(max_hp=15.0, attack_range=1.5, dps=1.5)
