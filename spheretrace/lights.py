"""
Light source for the renderer.

Only a single point light is supported. It produces hard shadows and has
no distance falloff: every unoccluded, front-facing point receives the full
intensity scaled by the Lambertian cosine term.
"""

from __future__ import annotations
import math

from .vec3 import Vec3, Point3
from .errors import InvalidGeometryError


class PointLight:
    """A point light source.

    Point lights emit light equally in all directions from a single point.
    """

    __slots__ = ('position', 'intensity')

    def __init__(self, position: Point3, intensity: float = 1.0):
        """Create a point light.

        Args:
            position: Position of the light
            intensity: Brightness multiplier (>= 0)
        """
        if not position.is_finite():
            raise InvalidGeometryError(f"Light position must be finite, got {position}")
        if not math.isfinite(intensity) or intensity < 0:
            raise InvalidGeometryError(f"Light intensity must be finite and >= 0, got {intensity}")
        self.position = position
        self.intensity = float(intensity)

    def direction_from(self, point: Point3) -> Vec3:
        """Unit vector from the light toward the given surface point."""
        return (point - self.position).normalize()

    def __repr__(self) -> str:
        return f"PointLight(position={self.position}, intensity={self.intensity})"
