"""
Shading pipeline: direct Lambertian lighting with hard shadows.

For a primary hit the shader:
- builds the surface normal and the light direction
- casts a shadow ray toward the light from a point nudged off the surface
- applies the clamped cosine term scaled by 2/pi
- blends in a mirror bounce for reflective materials, down to a fixed depth
"""

from __future__ import annotations
import math

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .scene import Scene
from .shapes import Intersection
from .materials import Material, Reflective

DIFFUSE_FACTOR = 2.0 / math.pi
DEFAULT_SHADOW_BIAS = 1e-3
DEFAULT_MAX_DEPTH = 5


class Shader:
    """Computes the outgoing color for ray hits within a frozen scene."""

    def __init__(
        self,
        scene: Scene,
        shadow_bias: float = DEFAULT_SHADOW_BIAS,
        background_color: Color = None,
        apply_albedo: bool = False
    ):
        """Create a shader.

        Args:
            scene: Scene queried for shadow and reflection rays
            shadow_bias: Offset along the normal for secondary ray origins
            background_color: Color returned by reflected rays that miss
            apply_albedo: Multiply the diffuse term by the material albedo
        """
        self.scene = scene
        self.shadow_bias = shadow_bias
        self.background_color = background_color if background_color is not None else Color(0, 0, 0)
        self.apply_albedo = apply_albedo

    def shade(self, ray: Ray, intersection: Intersection, depth: int = 0) -> Color:
        """Color of the surface point hit by the given ray.

        Args:
            ray: The ray that produced the intersection
            intersection: Nearest hit returned by Scene.nearest_hit
            depth: Remaining reflection bounces (0 disables reflection)

        Returns:
            Unclamped color
        """
        sphere = self.scene[intersection.index]
        hit_point = ray.at(intersection.distance)
        normal = sphere.normal_at(hit_point)

        color = self.diffuse(hit_point, normal, sphere.material)

        surface = sphere.material.surface
        if isinstance(surface, Reflective) and depth > 0:
            reflected = self._reflect(ray, hit_point, normal, depth)
            color = color * (1.0 - surface.reflectivity) + reflected * surface.reflectivity

        return color

    def trace(self, ray: Ray, depth: int) -> Color:
        """Shade whatever the ray hits first, or return the background."""
        intersection = self.scene.nearest_hit(ray)
        if intersection is None:
            return self.background_color
        return self.shade(ray, intersection, depth)

    def diffuse(self, hit_point: Point3, normal: Vec3, material: Material) -> Color:
        """Lambertian contribution of the light, zero when occluded."""
        light = self.scene.light
        light_dir = light.direction_from(hit_point)

        light_intensity = light.intensity if self.in_light(hit_point, normal, light_dir) else 0.0
        light_power = max(0.0, normal.dot(-light_dir)) * light_intensity

        factor = light_power * DIFFUSE_FACTOR
        if self.apply_albedo:
            factor *= material.albedo
        return material.color * factor

    def in_light(self, hit_point: Point3, normal: Vec3, light_dir: Vec3) -> bool:
        """Check whether nothing blocks the path from the surface to the light.

        Occluders beyond the light still cast shadows: the shadow ray is not
        clipped at the light's distance.
        """
        shadow_ray = Ray(hit_point + normal * self.shadow_bias, -light_dir)
        return self.scene.nearest_hit(shadow_ray) is None

    def _reflect(self, ray: Ray, hit_point: Point3, normal: Vec3, depth: int) -> Color:
        direction = ray.direction.reflect(normal)
        reflected_ray = Ray(hit_point + normal * self.shadow_bias, direction)
        return self.trace(reflected_ray, depth - 1)
