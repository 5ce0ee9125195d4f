"""
SphereTrace - A Python Ray Casting Renderer

A small offline renderer for scenes of spheres:
- Orthographic primary rays, one per pixel
- Lambertian direct lighting from a single point light
- Hard shadows via shadow rays
- Bounded mirror reflection for reflective materials
- Multi-threaded row tiles
- 8-bit framebuffer output through Pillow
"""

__version__ = "0.1.0"
__author__ = "SphereTrace Team"

from .vec3 import Vec3, Point3, Color, DegenerateVectorError
from .errors import InvalidGeometryError
from .ray import Ray
from .materials import Material, Diffuse, Reflective, SurfaceKind, diffuse, reflective
from .lights import PointLight
from .shapes import Sphere, Intersection
from .scene import Scene
from .shading import Shader, DIFFUSE_FACTOR, DEFAULT_SHADOW_BIAS, DEFAULT_MAX_DEPTH
from .camera import OrthoCamera
from .framebuffer import Framebuffer, to_pixel
from .renderer import Renderer, RenderSettings
from .scenes import (
    generate_random_spheres, random_scene, single_sphere_scene, occluded_sphere_scene
)
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene
