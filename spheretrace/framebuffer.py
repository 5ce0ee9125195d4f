"""
Framebuffer: the 8-bit RGB pixel sink the renderer writes into.

Pixels are stored row-major, three bytes per pixel, so the flat buffer
index of (x, y) is (y * width + x) * 3.
"""

from __future__ import annotations
from pathlib import Path
from typing import Tuple
import numpy as np

from .vec3 import Color


def to_pixel(color: Color) -> Tuple[int, int, int]:
    """Clamp a raw color to [0, 255] and truncate each channel to an integer."""
    clamped = np.clip(color.to_array(), 0.0, 255.0)
    r, g, b = clamped.astype(np.uint8)
    return int(r), int(g), int(b)


def _check_channels(r, g, b) -> Tuple[int, int, int]:
    """Validate byte channels; fractional values are truncated."""
    for channel in (r, g, b):
        if not 0 <= channel <= 255:
            raise ValueError(f"Color channels must be within [0, 255], got ({r}, {g}, {b})")
    return int(r), int(g), int(b)


class Framebuffer:
    """A width x height grid of RGB bytes."""

    def __init__(self, width: int, height: int):
        if width <= 0 or height <= 0:
            raise ValueError(f"Framebuffer size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self._pixels = np.zeros((height, width, 3), dtype=np.uint8)

    def set_pixel(self, x: int, y: int, r: int, g: int, b: int) -> None:
        """Write one pixel.

        Raises:
            IndexError: If (x, y) is outside the image
            ValueError: If a channel is outside [0, 255]
        """
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} framebuffer")
        self._pixels[y, x] = _check_channels(r, g, b)

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} framebuffer")
        r, g, b = self._pixels[y, x]
        return int(r), int(g), int(b)

    def fill(self, r: int, g: int, b: int) -> None:
        """Set every pixel to the same color."""
        self._pixels[:, :] = _check_channels(r, g, b)

    def to_array(self) -> np.ndarray:
        """Return a (height, width, 3) uint8 copy of the pixels."""
        return self._pixels.copy()

    def to_bytes(self) -> bytes:
        """Return the flat row-major RGB buffer."""
        return self._pixels.tobytes()

    def save(self, filename: str) -> None:
        """Save the image; the extension picks the format (bmp, png, ...)."""
        from PIL import Image as PILImage

        path = Path(filename)
        path.parent.mkdir(parents=True, exist_ok=True)
        PILImage.fromarray(self._pixels, 'RGB').save(path)

    def __repr__(self) -> str:
        return f"Framebuffer({self.width}x{self.height})"
