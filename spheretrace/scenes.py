"""
Built-in scenes and seeded random scene generation.

Random placement takes an explicit numpy Generator so the same seed always
produces the same scene; the scene is frozen before any pixel is shaded.
"""

from __future__ import annotations
from typing import Optional
import numpy as np

from .vec3 import Point3, Color
from .shapes import Sphere
from .lights import PointLight
from .materials import Material, Diffuse, Reflective
from .scene import Scene

DEFAULT_LIGHT_POSITION = Point3(125.0, -100.0, 100.0)
DEFAULT_LIGHT_INTENSITY = 20.0
SPHERE_PLANE_Z = 100.0
MIN_RADIUS = 1.0
WHITE = Color(100.0, 100.0, 100.0)


def generate_random_spheres(
    rng: np.random.Generator,
    count: int,
    extent: float = 250.0,
    max_radius: float = 40.0,
    max_channel: float = 100.0,
    z: float = SPHERE_PLANE_Z,
    albedo: float = 2.0,
    reflectivity: Optional[float] = None
) -> list[Sphere]:
    """Scatter spheres with random position, size and color on a z plane.

    Args:
        rng: Generator owned by the caller
        count: Number of spheres
        extent: Centers are drawn from [0, extent) on X and Y
        max_radius: Radii are drawn from [MIN_RADIUS, max_radius)
        max_channel: Color channels are drawn from [0, max_channel)
        z: Depth shared by every center
        albedo: Albedo given to every material
        reflectivity: Reflective surfaces with this reflectivity, or diffuse
            surfaces when None

    Returns:
        The generated spheres
    """
    if count < 0:
        raise ValueError(f"Sphere count must be >= 0, got {count}")
    if max_radius <= MIN_RADIUS:
        raise ValueError(f"max_radius must exceed {MIN_RADIUS}, got {max_radius}")

    surface = Diffuse() if reflectivity is None else Reflective(reflectivity)
    spheres = []

    for _ in range(count):
        x, y = rng.uniform(0.0, extent, size=2)
        radius = rng.uniform(MIN_RADIUS, max_radius)
        red, green, blue = rng.uniform(0.0, max_channel, size=3)
        material = Material(Color(red, green, blue), albedo, surface)
        spheres.append(Sphere(Point3(x, y, z), radius, material))

    return spheres


def random_scene(
    seed: Optional[int] = None,
    count: int = 15,
    reflectivity: Optional[float] = 0.25,
    light: Optional[PointLight] = None
) -> Scene:
    """Create the demo scene: randomly placed spheres under one light."""
    rng = np.random.default_rng(seed)
    if light is None:
        light = PointLight(DEFAULT_LIGHT_POSITION, DEFAULT_LIGHT_INTENSITY)
    return Scene(generate_random_spheres(rng, count, reflectivity=reflectivity), light)


def single_sphere_scene() -> Scene:
    """One white sphere lit from above (negative Y)."""
    sphere = Sphere(Point3(125.0, 75.0, SPHERE_PLANE_Z), 20.0, Material(WHITE))
    return Scene([sphere], PointLight(DEFAULT_LIGHT_POSITION, DEFAULT_LIGHT_INTENSITY))


def occluded_sphere_scene() -> Scene:
    """The single-sphere scene with a larger sphere between it and the light."""
    occluder = Sphere(Point3(125.0, 20.0, SPHERE_PLANE_Z), 30.0, Material(WHITE))
    return single_sphere_scene().with_spheres([occluder])
