"""
Main application module for the living Mandelbrot animation.

Contains the LivingMandelbrotApp class which handles:
- Window setup and the per-frame main loop
- User input (click zoom, keyboard, control bar, window resize)
- Rendering each frame and presenting it
"""

import pygame

from .controls import ControlBar, COMMAND_RESET, COMMAND_FLOW, COMMAND_RAYS
from .logging_setup import get_logger
from .renderer import FrameRenderer, AnimationClock
from .view import ViewController, RasterDimensions, EffectToggles


logger = get_logger()


def raster_for_window(window_width, window_height, render_scale):
    """Raster dimensions used for a window of the given size."""
    return RasterDimensions(
        max(1, int(window_width * render_scale)),
        max(1, int(window_height * render_scale))
    )


def window_to_raster(pos, window_size, raster):
    """Convert a window pixel position to raster coordinates."""
    wx, wy = pos
    window_width, window_height = window_size
    return (wx * raster.width / window_width,
            wy * raster.height / window_height)


class LivingMandelbrotApp:
    """
    Main application class for the living Mandelbrot animation.

    Handles the pygame window and event loop, and drives the renderer
    once per display refresh with the current controller state.
    """

    STATS_INTERVAL_MS = 1000  # How often the caption/statistics refresh
    CAPTION = "Living Mandelbrot"

    def __init__(self, settings):
        """
        Initialize the application.

        Args:
            settings: Validated settings dict (see settings.load_settings)
        """
        self.width = settings["width"]
        self.height = settings["height"]
        self.fps = settings["fps"]
        self.render_scale = settings["render_scale"]
        self.use_gpu = settings["use_gpu"]

        self.controller = ViewController(
            raster_for_window(self.width, self.height, self.render_scale),
            toggles=EffectToggles(settings["flow_enabled"], settings["rays_enabled"])
        )

        # Pygame state (initialized in run())
        self.screen = None
        self.clock = None

        # Components
        self.renderer = None
        self.controls = None
        self.animation_clock = AnimationClock()

        # Statistics
        self.last_stats_time = 0
        self.frames_since_stats = 0

        self.running = False

    def run(self):
        """Run the application main loop."""
        self._init_pygame()
        self._init_components()
        self._warmup()

        self.running = True
        while self.running:
            current_time = pygame.time.get_ticks()

            self._handle_events()
            if not self.running:
                break

            elapsed = self.animation_clock.tick(current_time)
            buffer = self.renderer.render_frame(
                self.controller.view, self.controller.raster,
                self.controller.toggles, elapsed
            )
            self._present(buffer)
            self._update_stats(current_time)

            self.clock.tick(self.fps)

        pygame.quit()

    def _init_pygame(self):
        """Initialize pygame and create window."""
        pygame.init()
        self.screen = pygame.display.set_mode(
            (self.width, self.height),
            pygame.RESIZABLE
        )
        pygame.display.set_caption(self.CAPTION)
        self.clock = pygame.time.Clock()

    def _init_components(self):
        """Initialize renderer and control bar."""
        self.renderer = FrameRenderer(use_gpu=self.use_gpu)
        self.controls = ControlBar(10, 10)
        self.controls.sync(self.controller.toggles)
        logger.info("Window %dx%d, raster %dx%d, backend %s",
                    self.width, self.height,
                    self.controller.raster.width, self.controller.raster.height,
                    self.renderer.backend_name)

    def _warmup(self):
        """Warm up JIT compilation before the first frame."""
        pygame.display.set_caption("Compiling (first run only)...")
        pygame.display.flip()
        self.renderer.warmup()
        pygame.display.set_caption(self.CAPTION)

    def _handle_events(self):
        """Process all pending pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                continue

            # Control bar gets first crack at events
            handled, command = self.controls.handle_event(event)
            if command is not None:
                self._apply_command(command)
            if handled:
                continue

            if event.type == pygame.MOUSEBUTTONDOWN:
                self._handle_mouse_down(event)
            elif event.type == pygame.VIDEORESIZE:
                self._handle_resize(event.w, event.h)
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)

    def _apply_command(self, command):
        """Run a command from the control bar or keyboard."""
        if command == COMMAND_RESET:
            self.controller.reset()
        elif command == COMMAND_FLOW:
            self.controller.toggle_flow()
        elif command == COMMAND_RAYS:
            self.controller.toggle_rays()
        self.controls.sync(self.controller.toggles)

    def _handle_mouse_down(self, event):
        """Left click zooms in at the cursor, right click zooms out."""
        # Clicks anywhere on the bar, gaps included, never zoom
        if self.controls.point_in_bar(event.pos):
            return
        if event.button == 1:
            px, py = window_to_raster(event.pos, (self.width, self.height),
                                      self.controller.raster)
            self.controller.zoom_in(px, py)
        elif event.button == 3:
            self.controller.zoom_out()

    def _handle_resize(self, width, height):
        """Adopt the new window size; the pixel buffer follows on the next frame."""
        self.width = max(1, width)
        self.height = max(1, height)
        self.screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
        self.controller.resize(raster_for_window(self.width, self.height, self.render_scale))

    def _handle_key(self, event):
        """Handle keyboard input."""
        if event.key == pygame.K_r:
            self._apply_command(COMMAND_RESET)
        elif event.key == pygame.K_f:
            self._apply_command(COMMAND_FLOW)
        elif event.key == pygame.K_g:
            self._apply_command(COMMAND_RAYS)
        elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
            raster = self.controller.raster
            self.controller.zoom_in(raster.width / 2, raster.height / 2)
        elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
            self.controller.zoom_out()
        elif event.key == pygame.K_ESCAPE:
            self.running = False

    def _present(self, buffer):
        """Blit the rendered buffer to the window and draw the overlay."""
        surface = pygame.surfarray.make_surface(buffer.rgb().swapaxes(0, 1))
        if surface.get_size() != (self.width, self.height):
            surface = pygame.transform.smoothscale(surface, (self.width, self.height))
        self.screen.blit(surface, (0, 0))
        self.controls.draw(self.screen)
        pygame.display.flip()

    def _update_stats(self, current_time):
        """Refresh the caption with FPS and zoom roughly once per second."""
        self.frames_since_stats += 1
        interval = current_time - self.last_stats_time
        if interval < self.STATS_INTERVAL_MS:
            return

        fps = self.frames_since_stats * 1000.0 / interval
        toggles = self.controller.toggles
        pygame.display.set_caption(
            f"{self.CAPTION} - {fps:.1f} fps - zoom {self.controller.zoom_depth:.3g}x"
            f" - flow {'on' if toggles.flow_enabled else 'off'}"
            f", rays {'on' if toggles.rays_enabled else 'off'}"
        )
        logger.debug("Frame %d: %.1f fps, last frame %.1f ms, %r",
                     self.animation_clock.frames, fps,
                     self.renderer.last_frame_ms, self.controller.view)

        self.last_stats_time = current_time
        self.frames_since_stats = 0


def run(settings):
    """
    Run the living Mandelbrot animation.

    Args:
        settings: Validated settings dict
    """
    app = LivingMandelbrotApp(settings)
    try:
        app.run()
    except KeyboardInterrupt:
        pygame.quit()
