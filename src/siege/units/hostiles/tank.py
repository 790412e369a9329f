from siege.units.base import CombatStats, MovementCategory, UnitKind, UnitType


class Tank(UnitType):
    type_id = "tank"
    display_name = "Tank"
    kind = UnitKind.HOSTILE
    category = MovementCategory.FOOT
    speed = 0.3
    spawn_cost = 40
    combat = CombatStats(max_hp=60.0, attack_range=1.5, dps=3.0)
