import math

import numpy as np
import pytest

from pyfractal import kernels
from pyfractal.engine import MARKER_COLOR, PixelBuffer, render, render_image
from pyfractal.fractals import BurningShip, Mandelbrot
from pyfractal.view import ViewState


def reference_render(burning, width, height, pan_x, pan_y, scale, max_iter):
    """Straightforward per-pixel loop to check the parallel kernels against."""
    out = []
    for i in range(width * height):
        c_re = (i % width - width / 2) / scale + pan_x
        c_im = (i // width - height / 2) / scale + pan_y
        a = b = 0.0
        escaped = 0
        for _ in range(max_iter):
            if burning:
                a, b = abs(a), abs(b)
            a, b = a * a - b * b + c_re, a * b + b * a + c_im
            if a * a + b * b > 4:
                escaped += 1
        out.append(int(math.sqrt(escaped / max_iter) * 255) * 0x010101)
    out[(width // 2) + (height // 2) * width] = 0xFF0000
    return out


@pytest.fixture
def small_view():
    return ViewState(width=16, height=12, pan_x=-0.5, pan_y=0.0, scale=4.0)


@pytest.mark.parametrize("spec", [Mandelbrot(20), BurningShip(20)])
def test_matches_reference(spec, small_view):
    buffer = render(spec, small_view)
    expected = reference_render(
        isinstance(spec, BurningShip), 16, 12, -0.5, 0.0, 4.0, 20
    )
    assert buffer.pixels.tolist() == expected


def test_inside_point_is_black():
    view = ViewState(width=640, height=360, scale=100.0)
    buffer = render(Mandelbrot(30), view)

    assert len(buffer) == 640 * 360
    # maps to c = -0.01 - 0.01i, inside the set
    assert buffer.pixels[319 + 179 * 640] == 0


@pytest.mark.parametrize("spec", [Mandelbrot(30), BurningShip(30)])
def test_center_marker(spec):
    for width, height in [(640, 360), (7, 5), (1, 1), (2, 3)]:
        buffer = render(spec, ViewState(width=width, height=height))
        assert buffer.pixels[(width // 2) + (height // 2) * width] == MARKER_COLOR


@pytest.mark.parametrize("spec", [Mandelbrot(1), Mandelbrot(30), BurningShip(7)])
def test_pixels_are_gray_and_in_range(spec):
    view = ViewState(width=80, height=45, pan_x=-0.5, scale=25.0)
    buffer = render(spec, view)

    pixels = np.delete(buffer.pixels, buffer.center_index)
    red = (pixels >> 16) & 0xFF
    green = (pixels >> 8) & 0xFF
    blue = pixels & 0xFF
    assert np.all(red == green)
    assert np.all(green == blue)
    assert np.all(pixels <= 0xFFFFFF)
    # the view covers both points inside the set and points far outside
    assert blue.min() == 0
    assert blue.max() > 0


def test_deterministic():
    view = ViewState(width=120, height=90, pan_x=-0.75, pan_y=0.1, scale=60.0)
    first = render(BurningShip(40), view).pixels.copy()
    second = render(BurningShip(40), view).pixels
    assert np.array_equal(first, second)


def test_burning_ship_differs_from_mandelbrot():
    view = ViewState(width=64, height=36, pan_x=-0.5, pan_y=-0.5, scale=20.0)
    mandelbrot = render(Mandelbrot(30), view).pixels
    burning_ship = render(BurningShip(30), view).pixels
    assert not np.array_equal(mandelbrot, burning_ship)


def test_render_does_not_touch_view():
    view = ViewState(width=32, height=18)
    before = view.copy()
    render(Mandelbrot(10), view)
    assert view == before
    assert view.dirty


def test_buffer_reused_in_place():
    view = ViewState(width=32, height=18)
    buffer = render(Mandelbrot(10), view)
    pixels = buffer.pixels

    view.zoom_in()
    again = render(Mandelbrot(10), view, buffer)
    assert again is buffer
    assert again.pixels is pixels


def test_buffer_reallocated_on_resize():
    view = ViewState(width=32, height=18)
    buffer = render(Mandelbrot(10), view)

    view.resize(20, 10)
    buffer = render(Mandelbrot(10), view, buffer)
    assert len(buffer) == 200
    assert buffer.dimensions == (20, 10)
    assert buffer.pixels[10 + 5 * 20] == MARKER_COLOR


def test_pixel_buffer_resize_discards_contents():
    buffer = PixelBuffer(4, 4)
    buffer.pixels[:] = 0xABCDEF
    buffer.resize(3, 2)
    assert len(buffer) == 6
    assert not buffer.pixels.any()

    with pytest.raises(ValueError):
        buffer.resize(0, 2)


def test_rejects_non_positive_scale():
    view = ViewState()
    view.scale = 0.0
    with pytest.raises(ValueError):
        render(Mandelbrot(10), view)


@pytest.mark.parametrize("scale", [float("nan"), float("inf"), -1.0])
def test_rejects_non_finite_scale(scale):
    view = ViewState(width=8, height=8)
    view.scale = scale
    with pytest.raises(ValueError):
        render(Mandelbrot(10), view)


def test_rejects_unknown_spec():
    with pytest.raises(TypeError):
        render("mandelbrot", ViewState(width=4, height=4))


def test_to_rgb_layout():
    buffer = PixelBuffer(3, 2)
    buffer.pixels[1 + 1 * 3] = 0x123456
    rgb = buffer.to_rgb()
    assert rgb.shape == (2, 3, 3)
    assert rgb.dtype == np.uint8
    assert tuple(rgb[1, 1]) == (0x12, 0x34, 0x56)
    assert tuple(rgb[0, 0]) == (0, 0, 0)


def test_render_image_and_save(tmp_path):
    view = ViewState(width=40, height=30)
    image = render_image(Mandelbrot(10), view)
    assert image.size == (40, 30)
    assert image.getpixel((20, 15)) == (255, 0, 0)

    path = render(BurningShip(10), view).save(tmp_path / "nested" / "ship.png")
    assert path.exists()


class TestKernels:
    def test_inside_point_never_escapes(self):
        assert kernels.mandelbrot_escapes(-0.01, -0.01, 30) == 0
        assert kernels.burning_ship_escapes(0.0, 0.0, 30) == 0

    def test_escape_count_stops_once_orbit_is_nan(self):
        # 3, 12, 147, ... overflows to inf on step 11; step 12 turns it into nan
        assert kernels.mandelbrot_escapes(3.0, 0.0, 30) == 11

    def test_every_step_past_escape_counts(self):
        # c = 2.5: |z| > 2 from the first step and stays finite for 5 steps
        assert kernels.mandelbrot_escapes(2.5, 0.0, 5) == 5

    def test_intensity(self):
        assert kernels.intensity(0, 30) == 0
        assert kernels.intensity(30, 30) == 0xFFFFFF
        assert kernels.intensity(1, 4) == 127 * 0x010101
