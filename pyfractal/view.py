"""Pan/zoom view state shared by the viewer and the render engine."""

from dataclasses import dataclass

DEFAULT_WIDTH = 640
DEFAULT_HEIGHT = 360
DEFAULT_SCALE = 100.0

ZOOM_FACTOR = 1.1

# Zoom clamps; scale must stay finite and strictly positive
MIN_SCALE = 1e-300
MAX_SCALE = 1e300


@dataclass
class ViewState:
    """Viewport size, complex-plane pan offset and zoom scale.

    ``scale`` is in pixels per complex-plane unit. Every mutation that
    changes the view sets ``dirty``; the caller clears it with ``mark_rendered`` once a render
    of the current state has been presented.

    Zooming saturates at ``MIN_SCALE`` and ``MAX_SCALE``: once a bound is
    reached, further zooms in that direction leave the view unchanged.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    pan_x: float = 0.0
    pan_y: float = 0.0
    scale: float = DEFAULT_SCALE
    dirty: bool = True

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"dimensions must be positive, got {self.width}x{self.height}")
        if not MIN_SCALE <= self.scale <= MAX_SCALE:
            raise ValueError(f"scale must be in [{MIN_SCALE}, {MAX_SCALE}], got {self.scale}")

    @property
    def dimensions(self) -> tuple:
        return self.width, self.height

    @property
    def pan(self) -> tuple:
        return self.pan_x, self.pan_y

    def copy(self) -> "ViewState":
        return ViewState(self.width, self.height, self.pan_x, self.pan_y, self.scale, self.dirty)

    def resize(self, width: int, height: int):
        """Set the viewport size. Only an actual change marks the view dirty."""
        if width <= 0 or height <= 0:
            raise ValueError(f"dimensions must be positive, got {width}x{height}")
        if (width, height) != (self.width, self.height):
            self.width, self.height = width, height
            self.dirty = True

    def zoom_in(self):
        self._set_scale(min(self.scale * ZOOM_FACTOR, MAX_SCALE))

    def zoom_out(self):
        self._set_scale(max(self.scale / ZOOM_FACTOR, MIN_SCALE))

    def _set_scale(self, scale: float):
        # At a clamp bound the scale stops moving and the view stays clean
        if scale != self.scale:
            self.scale = scale
            self.dirty = True

    # Pan steps are one screen pixel at the current zoom. Screen y grows
    # downward, so "up" decreases pan_y.

    def pan_up(self):
        self.pan_y -= 1.0 / self.scale
        self.dirty = True

    def pan_down(self):
        self.pan_y += 1.0 / self.scale
        self.dirty = True

    def pan_left(self):
        self.pan_x -= 1.0 / self.scale
        self.dirty = True

    def pan_right(self):
        self.pan_x += 1.0 / self.scale
        self.dirty = True

    def reset(self, other: "ViewState"):
        """Restore pan and scale from ``other``, keeping the current size."""
        self.pan_x, self.pan_y = other.pan_x, other.pan_y
        self.scale = other.scale
        self.dirty = True

    def mark_rendered(self):
        self.dirty = False
