"""Parallel escape-time kernels.

Each kernel fills a flat ``uint32`` pixel array in place. ``prange`` splits
the pixel index range into disjoint chunks, one per worker thread; every
index is computed and written by exactly one worker, so the only
synchronization is the join at the end of the parallel loop.

The loops always run ``max_iter`` steps and count every step in which
``|z|^2 > 4``. They do not stop at the first escape.
"""

import math

from numba import njit, prange

ESCAPE_RADIUS_SQ = 4.0
GRAY = 0x010101


@njit
def intensity(escaped, max_iter):
    """Packed grayscale value for ``escaped`` out of ``max_iter`` steps."""
    level = int(math.sqrt(escaped / max_iter) * 255.0)
    return level * GRAY


@njit
def mandelbrot_escapes(c_re, c_im, max_iter):
    z_re = 0.0
    z_im = 0.0
    escaped = 0
    for _ in range(max_iter):
        # (a + bi)^2 in component form, so inf/nan behave like complex multiply
        new_re = z_re * z_re - z_im * z_im + c_re
        new_im = z_re * z_im + z_im * z_re + c_im
        z_re = new_re
        z_im = new_im
        if z_re * z_re + z_im * z_im > ESCAPE_RADIUS_SQ:
            escaped += 1
    return escaped


@njit
def burning_ship_escapes(c_re, c_im, max_iter):
    z_re = 0.0
    z_im = 0.0
    escaped = 0
    for _ in range(max_iter):
        a = abs(z_re)
        b = abs(z_im)
        new_re = a * a - b * b + c_re
        new_im = a * b + b * a + c_im
        z_re = new_re
        z_im = new_im
        if z_re * z_re + z_im * z_im > ESCAPE_RADIUS_SQ:
            escaped += 1
    return escaped


@njit(parallel=True)
def render_mandelbrot(pixels, width, height, pan_x, pan_y, scale, max_iter):
    half_w = width / 2.0
    half_h = height / 2.0
    for i in prange(pixels.shape[0]):
        x = (i % width) - half_w
        y = (i // width) - half_h
        escaped = mandelbrot_escapes(x / scale + pan_x, y / scale + pan_y, max_iter)
        pixels[i] = intensity(escaped, max_iter)


@njit(parallel=True)
def render_burning_ship(pixels, width, height, pan_x, pan_y, scale, max_iter):
    half_w = width / 2.0
    half_h = height / 2.0
    for i in prange(pixels.shape[0]):
        x = (i % width) - half_w
        y = (i // width) - half_h
        escaped = burning_ship_escapes(x / scale + pan_x, y / scale + pan_y, max_iter)
        pixels[i] = intensity(escaped, max_iter)
