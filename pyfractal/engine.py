"""Render engine: view state + fractal variant -> packed RGB pixel buffer."""

import math
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image

from . import kernels
from .fractals import BurningShip, FractalSpec, Mandelbrot
from .view import ViewState

# Debug crosshair written over the center pixel after every render
MARKER_COLOR = 0xFF0000


class PixelBuffer:
    """Flat, row-major buffer of packed ``0xRRGGBB`` values.

    Pixel ``(x, y)`` lives at index ``x + y * width``.
    """

    def __init__(self, width: int, height: int):
        self.width = 0
        self.height = 0
        self.pixels = np.zeros(0, dtype=np.uint32)
        self.resize(width, height)

    def __len__(self):
        return self.pixels.shape[0]

    @property
    def dimensions(self) -> tuple:
        return self.width, self.height

    @property
    def center_index(self) -> int:
        return (self.width // 2) + (self.height // 2) * self.width

    def resize(self, width: int, height: int):
        """Reallocate for a new size. Previous contents are discarded."""
        if width <= 0 or height <= 0:
            raise ValueError(f"dimensions must be positive, got {width}x{height}")
        if (width, height) == (self.width, self.height):
            return
        self.width, self.height = width, height
        self.pixels = np.zeros(width * height, dtype=np.uint32)

    def to_rgb(self) -> np.ndarray:
        """Return a ``(height, width, 3)`` uint8 array."""
        packed = self.pixels.reshape(self.height, self.width)
        rgb = np.empty((self.height, self.width, 3), dtype=np.uint8)
        rgb[..., 0] = (packed >> 16) & 0xFF
        rgb[..., 1] = (packed >> 8) & 0xFF
        rgb[..., 2] = packed & 0xFF
        return rgb

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.to_rgb())

    def save(self, path) -> Path:
        """Write the buffer to ``path``; the format follows the file extension."""
        path = Path(path).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        self.to_image().save(str(path))
        return path


def render(spec: FractalSpec, view: ViewState, buffer: Optional[PixelBuffer] = None) -> PixelBuffer:
    """Render ``spec`` as seen through ``view``.

    ``buffer`` is overwritten in place when its size matches the view and
    reallocated otherwise; a new buffer is created when none is given.
    The view is only read. Clearing ``view.dirty`` is up to the caller.
    """
    if not (math.isfinite(view.scale) and view.scale > 0):
        raise ValueError(f"scale must be positive and finite, got {view.scale}")

    if isinstance(spec, Mandelbrot):
        kernel = kernels.render_mandelbrot
    elif isinstance(spec, BurningShip):
        kernel = kernels.render_burning_ship
    else:
        raise TypeError(f"Unknown fractal: {spec!r}")

    width, height = view.dimensions
    if buffer is None:
        buffer = PixelBuffer(width, height)
    else:
        buffer.resize(width, height)

    kernel(
        buffer.pixels,
        width,
        height,
        float(view.pan_x),
        float(view.pan_y),
        float(view.scale),
        spec.max_iterations,
    )
    buffer.pixels[buffer.center_index] = MARKER_COLOR
    return buffer


def render_image(spec: FractalSpec, view: ViewState) -> Image.Image:
    """Render a single frame straight to a Pillow image."""
    return render(spec, view).to_image()
