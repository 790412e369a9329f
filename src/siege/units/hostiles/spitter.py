from siege.units.base import CombatStats, MovementCategory, UnitKind, UnitType


class Spitter(UnitType):
    """Hostile that attacks the keep from a short standoff distance."""
    type_id = "spitter"
    display_name = "Spitter"
    kind = UnitKind.HOSTILE
    category = MovementCategory.FOOT
    speed = 0.5
    spawn_cost = 25
    combat = CombatStats(max_hp=30.0, attack_range=6.0, dps=2.0)
