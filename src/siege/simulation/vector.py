"""Vector3 — the 3D point type shared by every battle participant.

Positions are value objects.  A Vector3 is frozen, so assigning one to an
entity or a projectile endpoint can never alias another participant's
position; movement replaces the whole value.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector3:
    """A point (or offset) in battle space.  y is height; ground is y=0."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def distance_to(self, other: Vector3) -> float:
        return distance(self, other)

    def offset(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> Vector3:
        return Vector3(self.x + dx, self.y + dy, self.z + dz)

    def lerp(self, other: Vector3, t: float) -> Vector3:
        """Point at fraction *t* of the way from self to *other*."""
        return Vector3(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
            self.z + (other.z - self.z) * t,
        )

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, data: dict) -> Vector3:
        return cls(float(data.get("x", 0.0)), float(data.get("y", 0.0)), float(data.get("z", 0.0)))


ORIGIN = Vector3(0.0, 0.0, 0.0)


def distance(a: Vector3, b: Vector3) -> float:
    """Euclidean distance between two points."""
    dx = a.x - b.x
    dy = a.y - b.y
    dz = a.z - b.z
    return math.sqrt(dx * dx + dy * dy + dz * dz)


def ring_point(center: Vector3, angle: float, radius: float) -> Vector3:
    """Point on a horizontal circle of *radius* around *center* (x/z plane)."""
    return Vector3(
        center.x + math.cos(angle) * radius,
        center.y,
        center.z + math.sin(angle) * radius,
    )
