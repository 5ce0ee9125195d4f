"""
Camera module for generating primary rays.

The orthographic camera maps pixel coordinates 1:1 onto world X/Y and
looks down +Z: every primary ray is parallel, only its origin moves.
"""

from __future__ import annotations
import math
from .vec3 import Vec3, Point3
from .ray import Ray

VIEW_DIRECTION = Vec3(0.0, 0.0, 1.0)


class OrthoCamera:
    """A parallel-projection camera sitting on the plane z = camera.z."""

    def __init__(self, z: float = 0.0):
        """Create a camera.

        Args:
            z: Depth of the image plane the rays start from
        """
        if not math.isfinite(z):
            raise ValueError(f"Camera z must be finite, got {z}")
        self.z = float(z)

    @property
    def position(self) -> Point3:
        return Point3(0.0, 0.0, self.z)

    def get_ray(self, x: float, y: float) -> Ray:
        """Generate the primary ray for pixel (x, y).

        Args:
            x: Pixel column, used directly as world X
            y: Pixel row, used directly as world Y

        Returns:
            A unit-direction ray along +Z
        """
        return Ray(Point3(x, y, self.z), VIEW_DIRECTION)

    def __repr__(self) -> str:
        return f"OrthoCamera(z={self.z})"
