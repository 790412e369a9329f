from siege.units.base import CombatStats, MovementCategory, UnitKind, UnitType


class Keep(UnitType):
    """The defended structure.  No weapon of its own."""
    type_id = "keep"
    display_name = "Keep"
    kind = UnitKind.KEEP
    category = MovementCategory.STATIONARY
    speed = 0.0
    combat = CombatStats(max_hp=100.0, attack_range=0.0, dps=0.0)
