"""
Geometric shapes for the ray tracer.

Spheres are the only primitive. Intersection uses the geometric
(projection) form rather than the quadratic formula, and assumes the ray
direction has unit length.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional
import math

from .vec3 import Vec3, Point3
from .ray import Ray
from .materials import Material
from .errors import InvalidGeometryError


@dataclass(frozen=True)
class Intersection:
    """Stores information about a ray-sphere intersection.

    Attributes:
        distance: The ray parameter at the intersection
        index: Position of the hit sphere in the scene's sphere tuple
    """
    distance: float
    index: int


class Sphere:
    """A sphere defined by center and radius."""

    __slots__ = ('center', 'radius', 'material')

    def __init__(self, center: Point3, radius: float, material: Material):
        """Create a sphere.

        Args:
            center: Center point of the sphere
            radius: Radius of the sphere (must be positive)
            material: Material for shading

        Raises:
            InvalidGeometryError: On non-finite center or non-positive radius
        """
        if not center.is_finite():
            raise InvalidGeometryError(f"Sphere center must be finite, got {center}")
        if not math.isfinite(radius) or radius <= 0:
            raise InvalidGeometryError(f"Sphere radius must be positive and finite, got {radius}")
        object.__setattr__(self, 'center', center)
        object.__setattr__(self, 'radius', float(radius))
        object.__setattr__(self, 'material', material)

    def __setattr__(self, name, value):
        raise AttributeError("Sphere is immutable once created")

    def intersect(self, ray: Ray) -> Optional[float]:
        """Return the nearest non-negative hit distance along the ray.

        l is the vector from the ray origin to the center, adj its projection
        on the ray, and d2 the squared distance between the center and the
        ray line. The ray misses when d2 exceeds r², or when both roots lie
        behind the origin. From inside the sphere the far root is returned.
        """
        l = self.center - ray.origin
        adj = l.dot(ray.direction)
        d2 = l.dot(l) - adj * adj
        radius2 = self.radius * self.radius

        if d2 > radius2:
            return None

        thc = math.sqrt(radius2 - d2)
        t0 = adj - thc
        t1 = adj + thc

        if t0 < 0 and t1 < 0:
            return None

        if t0 < 0:
            return t1
        return min(t0, t1)

    def normal_at(self, point: Point3) -> Vec3:
        """Outward unit normal at a point on the surface."""
        return (point - self.center).normalize()

    def __repr__(self) -> str:
        return f"Sphere(center={self.center}, radius={self.radius})"
