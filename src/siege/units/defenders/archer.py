from siege.units.base import CombatStats, MovementCategory, UnitKind, UnitType


class Archer(UnitType):
    type_id = "archer"
    display_name = "Archer"
    kind = UnitKind.DEFENDER
    category = MovementCategory.STATIONARY
    speed = 0.0
    combat = CombatStats(max_hp=50.0, attack_range=20.0, dps=8.0)
