"""
Renderer module - the render driver.

Implements:
- One orthographic primary ray per pixel
- Direct shading of the nearest hit, background color on misses
- Multi-threaded rendering over independent row tiles
- Raw float (HDR) output alongside the 8-bit framebuffer
"""

from __future__ import annotations
import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional, Callable, List, Tuple
import numpy as np

from .vec3 import Color
from .camera import OrthoCamera
from .scene import Scene
from .shading import Shader, DEFAULT_SHADOW_BIAS, DEFAULT_MAX_DEPTH
from .framebuffer import Framebuffer, to_pixel

logger = logging.getLogger(__name__)

# (x, y, color) for every pixel whose primary ray hit something
PixelHits = List[Tuple[int, int, Color]]


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 256
    height: int = 256
    background_color: Color = None
    shadow_bias: float = DEFAULT_SHADOW_BIAS
    max_recursion_depth: int = DEFAULT_MAX_DEPTH
    apply_albedo: bool = False
    tile_size: int = 16  # rows per tile
    num_threads: int = 1  # 0 = auto-detect

    def __post_init__(self):
        if self.background_color is None:
            self.background_color = Color(20, 20, 20)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.shadow_bias < 0:
            raise ValueError(f"Shadow bias must be >= 0, got {self.shadow_bias}")
        if self.max_recursion_depth < 0:
            raise ValueError(f"Recursion depth must be >= 0, got {self.max_recursion_depth}")
        if self.tile_size <= 0:
            raise ValueError(f"Tile size must be positive, got {self.tile_size}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 4


class Renderer:
    """Orthographic ray-casting renderer with multi-threading support."""

    def __init__(self, settings: RenderSettings = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
        """
        self.settings = settings if settings else RenderSettings()
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def render(
        self,
        scene: Scene,
        camera: Optional[OrthoCamera] = None,
        framebuffer: Optional[Framebuffer] = None
    ) -> Framebuffer:
        """Render the scene into an 8-bit framebuffer.

        Args:
            scene: The frozen scene to render
            camera: Camera to cast from (defaults to z = 0)
            framebuffer: Sink to write into (allocated if None); must match
                the configured resolution

        Returns:
            The filled framebuffer
        """
        width = self.settings.width
        height = self.settings.height

        if framebuffer is None:
            framebuffer = Framebuffer(width, height)
        elif (framebuffer.width, framebuffer.height) != (width, height):
            raise ValueError(
                f"Framebuffer is {framebuffer.width}x{framebuffer.height}, "
                f"settings ask for {width}x{height}"
            )

        framebuffer.fill(*to_pixel(self.settings.background_color))
        for x, y, color in self._trace_all(scene, camera):
            framebuffer.set_pixel(x, y, *to_pixel(color))

        return framebuffer

    def render_hdr(self, scene: Scene, camera: Optional[OrthoCamera] = None) -> np.ndarray:
        """Render the scene without clamping.

        Returns:
            Image as numpy array of shape (height, width, 3), background
            color where primary rays miss
        """
        image = np.empty((self.settings.height, self.settings.width, 3), dtype=np.float64)
        image[:, :] = self.settings.background_color.to_array()

        for x, y, color in self._trace_all(scene, camera):
            image[y, x] = color.to_array()

        return image

    def _trace_all(self, scene: Scene, camera: Optional[OrthoCamera]) -> PixelHits:
        """Trace every pixel, tile by tile, and collect the hits."""
        camera = camera if camera is not None else OrthoCamera()
        shader = Shader(
            scene,
            shadow_bias=self.settings.shadow_bias,
            background_color=self.settings.background_color,
            apply_albedo=self.settings.apply_albedo
        )

        tiles = self._generate_tiles(self.settings.height)
        total_tiles = len(tiles)
        completed_tiles = [0]  # Use list for mutable in closure
        progress_lock = threading.Lock()

        logger.info(
            "Rendering %dx%d, %d spheres, %d thread(s)",
            self.settings.width, self.settings.height, len(scene), self.settings.num_threads
        )
        start_time = time.time()

        def render_tile(tile: Tuple[int, int]) -> PixelHits:
            y0, y1 = tile
            hits = self._render_rows(shader, camera, y0, y1)

            # One callback at a time, progress strictly increasing
            with progress_lock:
                completed_tiles[0] += 1
                if self._progress_callback:
                    self._progress_callback(completed_tiles[0] / total_tiles)

            return hits

        if self.settings.num_threads > 1:
            with ThreadPoolExecutor(max_workers=self.settings.num_threads) as executor:
                results = list(executor.map(render_tile, tiles))
        else:
            results = [render_tile(tile) for tile in tiles]

        hits = [hit for tile_hits in results for hit in tile_hits]
        logger.info(
            "Rendered %d hit pixels in %.2f seconds", len(hits), time.time() - start_time
        )
        return hits

    def _render_rows(self, shader: Shader, camera: OrthoCamera, y0: int, y1: int) -> PixelHits:
        """Shade rows [y0, y1); pixels with no hit are left out."""
        scene = shader.scene
        depth = self.settings.max_recursion_depth
        hits: PixelHits = []

        for y in range(y0, y1):
            for x in range(self.settings.width):
                ray = camera.get_ray(x, y)
                intersection = scene.nearest_hit(ray)
                if intersection is None:
                    continue
                hits.append((x, y, shader.shade(ray, intersection, depth)))

        return hits

    def _generate_tiles(self, height: int) -> list[Tuple[int, int]]:
        """Split the image into bands of rows as (y0, y1) tuples."""
        tile_size = self.settings.tile_size
        return [(y, min(y + tile_size, height)) for y in range(0, height, tile_size)]
