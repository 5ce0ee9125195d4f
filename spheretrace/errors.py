"""Exception types shared across the renderer."""

from .vec3 import DegenerateVectorError


class InvalidGeometryError(ValueError):
    """Scene input that would poison the intersection math.

    Raised at construction time for non-positive or non-finite radii,
    non-finite coordinates, negative colors and out-of-range material or
    light parameters.
    """
    pass


__all__ = ['DegenerateVectorError', 'InvalidGeometryError']
