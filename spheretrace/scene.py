"""
Scene container: an ordered, frozen collection of spheres lit by one light.
"""

from __future__ import annotations
from typing import Iterable, Optional

from .ray import Ray
from .shapes import Sphere, Intersection
from .lights import PointLight


class Scene:
    """Spheres plus the single point light that illuminates them.

    The sphere sequence is stored as a tuple so a scene cannot change once
    rendering starts. Intersections refer to spheres by their index here.
    """

    __slots__ = ('_spheres', '_light')

    def __init__(self, spheres: Iterable[Sphere], light: PointLight):
        """Create a scene.

        Args:
            spheres: Spheres in insertion order (only affects tie-breaks)
            light: The point light
        """
        spheres = tuple(spheres)
        for sphere in spheres:
            if not isinstance(sphere, Sphere):
                raise TypeError(f"Scene objects must be Sphere instances, got {type(sphere).__name__}")
        self._spheres = spheres
        self._light = light

    @property
    def spheres(self) -> tuple[Sphere, ...]:
        return self._spheres

    @property
    def light(self) -> PointLight:
        return self._light

    def nearest_hit(self, ray: Ray) -> Optional[Intersection]:
        """Find the closest intersection among all spheres.

        Ties keep the first sphere found. Returns None if the scene is empty
        or the ray misses everything.
        """
        closest: Optional[Intersection] = None

        for index, sphere in enumerate(self._spheres):
            distance = sphere.intersect(ray)
            if distance is None:
                continue
            if closest is None or distance < closest.distance:
                closest = Intersection(distance, index)

        return closest

    def with_spheres(self, spheres: Iterable[Sphere]) -> Scene:
        """Return a new scene with extra spheres appended."""
        return Scene(self._spheres + tuple(spheres), self._light)

    def __getitem__(self, index: int) -> Sphere:
        return self._spheres[index]

    def __len__(self) -> int:
        return len(self._spheres)

    def __iter__(self):
        return iter(self._spheres)

    def __repr__(self) -> str:
        return f"Scene(spheres={len(self._spheres)}, light={self._light})"
