"""
Scene description language parser.

Supports a YAML-based scene description format with:
- Render settings
- Camera depth
- Materials library
- Spheres (explicit or randomly generated)
- The point light

Example scene file:
```yaml
render:
  width: 256
  height: 256
  background: [20, 20, 20]
  shadow_bias: 0.001
  max_depth: 5

camera:
  z: 0

materials:
  white:
    color: [100, 100, 100]
  mirror:
    type: reflective
    color: [80, 60, 40]
    reflectivity: 0.5

spheres:
  - center: [125, 75, 100]
    radius: 20
    material: white

random:
  count: 10
  seed: 42

light:
  position: [125, -100, 100]
  intensity: 20
```
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Tuple
import numpy as np
import yaml

from .vec3 import Vec3, Color
from .camera import OrthoCamera
from .shapes import Sphere
from .lights import PointLight
from .materials import Material, Diffuse, Reflective
from .scene import Scene
from .scenes import generate_random_spheres, WHITE
from .renderer import RenderSettings

logger = logging.getLogger(__name__)


class SceneParseError(Exception):
    """Error during scene parsing."""
    pass


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.spheres: List[Sphere] = []
        self.light: Optional[PointLight] = None
        self.camera: Optional[OrthoCamera] = None
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: str) -> Tuple[Scene, OrthoCamera, RenderSettings]:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (YAML or JSON)

        Returns:
            Tuple of (scene, camera, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        try:
            content = path.read_text()
        except OSError as e:
            raise SceneParseError(f"Cannot open scene file {filepath}: {e}") from e

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON, so anything else goes through it
                data = yaml.safe_load(content)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise SceneParseError(f"Cannot read scene file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file {filepath} must contain a mapping")

        logger.info("Loading scene from %s", path)
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> Tuple[Scene, OrthoCamera, RenderSettings]:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, camera, settings)
        """
        try:
            # Parse materials first (spheres reference them)
            if 'materials' in data:
                self._parse_materials(data['materials'])

            if 'spheres' in data:
                self._parse_spheres(data['spheres'])

            if 'random' in data:
                self._parse_random(data['random'])

            if 'light' not in data:
                raise SceneParseError("Scene needs a 'light' section")
            self._parse_light(data['light'])

            self._parse_camera(data.get('camera', {}))
            self._parse_settings(data.get('render', {}))
        except (ValueError, TypeError, AttributeError) as e:
            raise SceneParseError(str(e)) from e

        scene = Scene(self.spheres, self.light)
        logger.debug("Parsed %d spheres", len(scene))
        return scene, self.camera, self.settings

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from various formats."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(float(data[0]), float(data[1]), float(data[2]))
        elif isinstance(data, dict):
            return Vec3(
                float(data.get('x', 0)),
                float(data.get('y', 0)),
                float(data.get('z', 0))
            )
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from various formats."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return Color(float(data[0]), float(data[1]), float(data[2]))
        elif isinstance(data, dict):
            return Color(
                float(data.get('r', 0)),
                float(data.get('g', 0)),
                float(data.get('b', 0))
            )
        elif isinstance(data, str):
            # Hex colors map onto the 0-255 pixel range
            if data.startswith('#') and len(data) == 7:
                return Color(int(data[1:3], 16), int(data[3:5], 16), int(data[5:7], 16))
            raise SceneParseError(f"Cannot parse color from string: {data}")
        else:
            raise SceneParseError(f"Cannot parse Color from: {data}")

    def _parse_material(self, mat_data: Dict[str, Any]) -> Material:
        mat_type = str(mat_data.get('type', 'diffuse')).lower()
        color = self._parse_color(mat_data['color']) if 'color' in mat_data else WHITE
        albedo = float(mat_data.get('albedo', 1.0))

        if mat_type == 'diffuse':
            surface = Diffuse()
        elif mat_type == 'reflective':
            surface = Reflective(float(mat_data.get('reflectivity', 1.0)))
        else:
            raise SceneParseError(f"Unknown material type: {mat_type}")

        return Material(color, albedo, surface)

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse materials section."""
        for name, mat_data in materials_data.items():
            self.materials[name] = self._parse_material(mat_data)

    def _get_material(self, mat_ref: Any) -> Material:
        """Get a material by name or inline definition."""
        if mat_ref is None:
            return Material(WHITE)
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._parse_material(mat_ref)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_spheres(self, spheres_data: list) -> None:
        """Parse spheres section."""
        for sphere_data in spheres_data:
            center = self._parse_vec3(sphere_data.get('center', [0, 0, 0]))
            radius = float(sphere_data.get('radius', 1.0))
            material = self._get_material(sphere_data.get('material'))
            self.spheres.append(Sphere(center, radius, material))

    def _parse_random(self, random_data: Dict[str, Any]) -> None:
        """Append randomly generated spheres."""
        rng = np.random.default_rng(random_data.get('seed'))
        reflectivity = random_data.get('reflectivity')
        spheres = generate_random_spheres(
            rng,
            int(random_data.get('count', 15)),
            extent=float(random_data.get('extent', 250.0)),
            max_radius=float(random_data.get('max_radius', 40.0)),
            max_channel=float(random_data.get('max_channel', 100.0)),
            z=float(random_data.get('z', 100.0)),
            reflectivity=None if reflectivity is None else float(reflectivity)
        )
        self.spheres.extend(spheres)

    def _parse_light(self, light_data: Dict[str, Any]) -> None:
        """Parse the light section."""
        position = self._parse_vec3(light_data.get('position', [0, 0, 0]))
        intensity = float(light_data.get('intensity', 1.0))
        self.light = PointLight(position, intensity)

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section."""
        self.camera = OrthoCamera(float(camera_data.get('z', 0.0)))

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        background = settings_data.get('background')
        self.settings = RenderSettings(
            width=int(settings_data.get('width', 256)),
            height=int(settings_data.get('height', 256)),
            background_color=self._parse_color(background) if background is not None else None,
            shadow_bias=float(settings_data.get('shadow_bias', 1e-3)),
            max_recursion_depth=int(settings_data.get('max_depth', 5)),
            apply_albedo=bool(settings_data.get('apply_albedo', False)),
            tile_size=int(settings_data.get('tile_size', 16)),
            num_threads=int(settings_data.get('threads', 1))
        )


def load_scene(filepath: str) -> Tuple[Scene, OrthoCamera, RenderSettings]:
    """Convenience function to load a scene file.

    Args:
        filepath: Path to the scene file

    Returns:
        Tuple of (scene, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> Tuple[Scene, OrthoCamera, RenderSettings]:
    """Convenience function to parse a scene from a dictionary.

    Args:
        data: Scene description dictionary

    Returns:
        Tuple of (scene, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_dict(data)
