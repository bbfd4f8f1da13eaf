"""Interactive fractal viewer - pygame frontend for the escape-time engine.

Controls:
    I / O          Zoom in / out (hold)
    Arrow keys     Pan (hold)
    S              Save a PNG snapshot
    0              Reset view
    ESC            Quit
"""

from pathlib import Path
from typing import Optional
import time

import pygame

from .engine import PixelBuffer, render
from .fractals import FractalSpec
from .log import error, log
from .view import ViewState


# =============================================================================
# Constants
# =============================================================================

WINDOW_TITLE = "Fractal Viewer"
FPS = 60

# Held keys, applied in this order once per frame
HELD_KEY_ACTIONS = (
    (pygame.K_i, ViewState.zoom_in),
    (pygame.K_o, ViewState.zoom_out),
    (pygame.K_UP, ViewState.pan_up),
    (pygame.K_DOWN, ViewState.pan_down),
    (pygame.K_LEFT, ViewState.pan_left),
    (pygame.K_RIGHT, ViewState.pan_right),
)


def apply_held_keys(view: ViewState, keys) -> bool:
    """Apply every held navigation key to ``view``.

    ``keys`` is anything indexable by pygame key constants, such as the
    result of ``pygame.key.get_pressed()``. Returns True if a key acted.
    """
    acted = False
    for key, action in HELD_KEY_ACTIONS:
        if keys[key]:
            action(view)
            acted = True
    return acted


# =============================================================================
# Main Viewer Class
# =============================================================================

class FractalViewer:
    """Pan/zoom viewer that re-renders only when the view is dirty."""

    def __init__(self, spec: FractalSpec, view: Optional[ViewState] = None,
                 snapshot_dir: str = "."):
        self.spec = spec
        self.view = view if view is not None else ViewState()
        self.home_view = self.view.copy()
        self.snapshot_dir = Path(snapshot_dir)
        self.buffer: Optional[PixelBuffer] = None
        self.running = True

        # Timing
        self.frame_times = []
        self.snapshot_count = 0

        # Pygame objects (initialized in open())
        self.screen = None
        self.clock = None

    def run(self):
        """Main entry point - open the window and run the event loop.

        Raises ``pygame.error`` if no display is available or presenting a
        frame fails.
        """
        try:
            self.open()
            while self.running:
                self.step()
                self.clock.tick(FPS)
        finally:
            self._print_stats()
            pygame.quit()

    def open(self):
        pygame.init()
        self.screen = pygame.display.set_mode(self.view.dimensions, pygame.RESIZABLE)
        pygame.display.set_caption(WINDOW_TITLE)
        self.clock = pygame.time.Clock()
        log(f"Display driver: {pygame.display.get_driver()}")

    def step(self):
        """Process one frame: events, window size, held keys, render."""
        self._handle_events()
        if not self.running:
            return
        self._sync_window_size()
        apply_held_keys(self.view, pygame.key.get_pressed())
        self._render_if_needed()

    def _print_stats(self):
        """Print rendering statistics on exit."""
        if self.frame_times:
            avg_ms = sum(self.frame_times) / len(self.frame_times)
            print(f"\nRendered {len(self.frame_times)} frames")
            print(f"Average render time: {avg_ms:.1f}ms")

    # =========================================================================
    # Event Handling
    # =========================================================================

    def _handle_events(self):
        """Process all pygame events."""
        for event in pygame.event.get():
            handler = self._event_handlers.get(event.type)
            if handler:
                handler(self, event)

    @property
    def _event_handlers(self) -> dict:
        """Map event types to handler methods."""
        return {
            pygame.QUIT: lambda self, e: setattr(self, 'running', False),
            pygame.KEYDOWN: FractalViewer._on_keydown,
        }

    def _on_keydown(self, event):
        handler = self._key_handlers.get(event.key)
        if handler:
            handler(self, event)

    @property
    def _key_handlers(self) -> dict:
        """Map one-shot keys to handler methods."""
        return {
            pygame.K_ESCAPE: lambda s, e: setattr(s, 'running', False),
            pygame.K_s: lambda s, e: s.save_snapshot(),
            pygame.K_0: FractalViewer._reset_view,
        }

    def _reset_view(self, event):
        self.view.reset(self.home_view)

    def _sync_window_size(self):
        self.screen = pygame.display.get_surface()
        width, height = self.screen.get_size()
        if width <= 0 or height <= 0:
            # Minimized; keep the last size
            return
        if (width, height) != self.view.dimensions:
            log(f"Resize: {self.view.width}x{self.view.height} -> {width}x{height}")
            self.view.resize(width, height)

    def save_snapshot(self) -> Optional[Path]:
        """Save the last presented frame as a PNG; returns its path."""
        if self.buffer is None:
            return None
        name = f"{self.spec.name}_{self.snapshot_count:03d}.png"
        try:
            path = self.buffer.save(self.snapshot_dir / name)
        except OSError as e:
            error(f"could not save snapshot {name}: {e}")
            return None
        self.snapshot_count += 1
        print(f"Saved: {path}")
        return path

    # =========================================================================
    # Rendering
    # =========================================================================

    def _render_if_needed(self):
        """Render and present a frame if the view has changed."""
        if not self.view.dirty:
            # Re-present the last frame without re-rendering
            pygame.display.update()
            return

        t0 = time.perf_counter()
        self.buffer = render(self.spec, self.view, self.buffer)
        render_ms = (time.perf_counter() - t0) * 1000

        surface = pygame.surfarray.make_surface(self.buffer.to_rgb().swapaxes(0, 1))
        self.screen.blit(surface, (0, 0))
        pygame.display.flip()

        self.view.mark_rendered()
        self.frame_times.append(render_ms)
        log(f"Frame {len(self.frame_times)}: {render_ms:.1f}ms "
            f"scale={self.view.scale:.4g} pan=({self.view.pan_x:.6g}, {self.view.pan_y:.6g})")
