"""
Materials for the sphere renderer.

A material pairs a surface color with an albedo and a surface kind.
Surface kinds form a small tagged variant:
- Diffuse: Lambertian only
- Reflective: Lambertian blended with a mirror bounce
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Union
import math

from .vec3 import Color
from .errors import InvalidGeometryError


@dataclass(frozen=True)
class Diffuse:
    """Ideal matte surface."""
    pass


@dataclass(frozen=True)
class Reflective:
    """Surface that mirrors part of the incoming light.

    Attributes:
        reflectivity: Fraction of the final color taken from the
            reflected ray, in [0, 1]
    """
    reflectivity: float = 1.0

    def __post_init__(self):
        if not 0.0 <= self.reflectivity <= 1.0:
            raise InvalidGeometryError(
                f"Reflectivity must be within [0, 1], got {self.reflectivity}"
            )


SurfaceKind = Union[Diffuse, Reflective]


@dataclass(frozen=True)
class Material:
    """Surface description attached to a sphere.

    Attributes:
        color: Base color; channels are non-negative and not clamped
        albedo: Reflectance coefficient, only applied when the renderer
            is configured to weight by it
        surface: Diffuse() or Reflective(reflectivity)
    """
    color: Color
    albedo: float = 1.0
    surface: SurfaceKind = field(default_factory=Diffuse)

    def __post_init__(self):
        if not self.color.is_finite() or min(self.color) < 0:
            raise InvalidGeometryError(f"Material color must be finite and non-negative, got {self.color}")
        if not math.isfinite(self.albedo) or self.albedo < 0:
            raise InvalidGeometryError(f"Albedo must be finite and non-negative, got {self.albedo}")
        if not isinstance(self.surface, (Diffuse, Reflective)):
            raise InvalidGeometryError(f"Unknown surface kind: {self.surface!r}")

    @property
    def is_reflective(self) -> bool:
        return isinstance(self.surface, Reflective)

    @property
    def reflectivity(self) -> float:
        """Reflectivity of the surface, 0 for diffuse materials."""
        if isinstance(self.surface, Reflective):
            return self.surface.reflectivity
        return 0.0


def diffuse(color: Color, albedo: float = 1.0) -> Material:
    """Shorthand for a matte material."""
    return Material(color, albedo, Diffuse())


def reflective(color: Color, reflectivity: float, albedo: float = 1.0) -> Material:
    """Shorthand for a mirror-blended material."""
    return Material(color, albedo, Reflective(reflectivity))
