"""Escape-time fractal rendering with live pan/zoom."""

from .engine import MARKER_COLOR, PixelBuffer, render, render_image
from .fractals import (
    BurningShip,
    ConfigurationError,
    FractalSpec,
    Mandelbrot,
    fractal_from_name,
    parse_iterations,
)
from .view import ViewState

__all__ = [
    "BurningShip",
    "ConfigurationError",
    "FractalSpec",
    "MARKER_COLOR",
    "Mandelbrot",
    "PixelBuffer",
    "ViewState",
    "fractal_from_name",
    "parse_iterations",
    "render",
    "render_image",
]
