"""Fractal variants and startup configuration parsing."""

from dataclasses import dataclass
from typing import Optional, Union

MANDELBROT = "mandelbrot"
BURNING_SHIP = "burning-ship"

FRACTAL_NAMES = (MANDELBROT, BURNING_SHIP)

DEFAULT_ITERATIONS = 30


class ConfigurationError(ValueError):
    """Raised when the startup configuration cannot produce a fractal."""


def _check_iterations(max_iterations):
    # bool is an int subclass; True would silently mean one iteration
    if isinstance(max_iterations, bool) or not isinstance(max_iterations, int):
        raise ConfigurationError(
            f"max_iterations must be an integer, got {max_iterations!r}"
        )
    if max_iterations < 1:
        raise ConfigurationError(
            f"max_iterations must be at least 1, got {max_iterations}"
        )


@dataclass(frozen=True)
class Mandelbrot:
    """z -> z^2 + c, starting from z = 0."""

    max_iterations: int = DEFAULT_ITERATIONS
    name = MANDELBROT

    def __post_init__(self):
        _check_iterations(self.max_iterations)


@dataclass(frozen=True)
class BurningShip:
    """z -> (|Re z| + i|Im z|)^2 + c, starting from z = 0."""

    max_iterations: int = DEFAULT_ITERATIONS
    name = BURNING_SHIP

    def __post_init__(self):
        _check_iterations(self.max_iterations)


FractalSpec = Union[Mandelbrot, BurningShip]


def parse_iterations(text: str) -> int:
    """Parse an iteration count given on the command line."""
    try:
        value = int(text)
    except (TypeError, ValueError):
        raise ConfigurationError(f"invalid iteration count: {text!r}") from None
    if value < 1:
        raise ConfigurationError(f"iteration count must be positive, got {value}")
    return value


def fractal_from_name(kind: str, iterations: Optional[int] = None) -> FractalSpec:
    """Build the fractal variant named ``kind``.

    Args:
        kind: One of ``FRACTAL_NAMES``.
        iterations: Iteration bound; ``DEFAULT_ITERATIONS`` when omitted.

    Raises:
        ConfigurationError: for an unknown kind or a bound below one.
    """
    if iterations is None:
        iterations = DEFAULT_ITERATIONS

    if kind == MANDELBROT:
        return Mandelbrot(iterations)
    elif kind == BURNING_SHIP:
        return BurningShip(iterations)
    raise ConfigurationError(
        f"Unknown fractal: {kind!r} (available: {', '.join(FRACTAL_NAMES)})"
    )
