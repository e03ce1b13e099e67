"""
View state and interaction controller.

Holds everything the renderer reads each frame: the complex-plane window
(center and scale), the raster dimensions and the effect toggles. All
mutation goes through ViewController so the render loop only ever sees a
consistent state between frames.
"""

from .compute import map_to_complex as _map_kernel
from .logging_setup import get_logger


logger = get_logger()


DEFAULT_CENTER = (-0.5, 0.0)
DEFAULT_SCALE = 3.5
ZOOM_FACTOR = 2.5

# Below MIN_SCALE neighbouring pixels collapse onto the same double;
# above MAX_SCALE the whole set is smaller than a pixel.
MIN_SCALE = 1e-13
MAX_SCALE = 1e6


class ViewState:
    """Center of the complex-plane window and its width (scale > 0)."""

    def __init__(self, center_real=DEFAULT_CENTER[0], center_imag=DEFAULT_CENTER[1],
                 scale=DEFAULT_SCALE):
        if not scale > 0:
            raise ValueError(f"scale must be positive, got {scale!r}")
        self.center_real = float(center_real)
        self.center_imag = float(center_imag)
        self.scale = float(scale)

    def as_tuple(self):
        return (self.center_real, self.center_imag, self.scale)

    def __repr__(self):
        return (f"ViewState(center_real={self.center_real!r}, "
                f"center_imag={self.center_imag!r}, scale={self.scale!r})")


class RasterDimensions:
    """Size of the pixel raster the fractal is rendered into."""

    def __init__(self, width, height):
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise ValueError(f"raster dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height

    def __eq__(self, other):
        if not isinstance(other, RasterDimensions):
            return NotImplemented
        return self.width == other.width and self.height == other.height

    def __hash__(self):
        return hash((self.width, self.height))

    def __repr__(self):
        return f"RasterDimensions({self.width}, {self.height})"


class EffectToggles:
    """Independent on/off switches for the flow and ray effects."""

    def __init__(self, flow_enabled=True, rays_enabled=True):
        self.flow_enabled = bool(flow_enabled)
        self.rays_enabled = bool(rays_enabled)

    def __repr__(self):
        return (f"EffectToggles(flow_enabled={self.flow_enabled}, "
                f"rays_enabled={self.rays_enabled})")


def map_to_complex(px, py, view, raster):
    """
    Map raster coordinate (px, py) to the complex plane.

    Args:
        px, py: Raster coordinate
        view: ViewState
        raster: RasterDimensions

    Returns:
        (real, imag) tuple of floats
    """
    real, imag = _map_kernel(
        float(px), float(py),
        view.center_real, view.center_imag, view.scale,
        raster.width, raster.height
    )
    return float(real), float(imag)


class ViewController:
    """
    Mutable view/interaction state.

    Operations are total: every call leaves the state valid. Changes take
    effect on the next rendered frame.

    Usage:
        controller = ViewController(RasterDimensions(800, 600))
        controller.zoom_in(120, 340)
        controller.toggle_rays()
    """

    def __init__(self, raster, view=None, toggles=None):
        """
        Args:
            raster: Initial RasterDimensions
            view: Initial ViewState (default: full set visible)
            toggles: Initial EffectToggles (default: both effects on)
        """
        self.raster = raster
        self.view = view if view is not None else ViewState()
        self.toggles = toggles if toggles is not None else EffectToggles()

    def map_to_complex(self, px, py):
        """Map a raster coordinate using the current view and raster."""
        return map_to_complex(px, py, self.view, self.raster)

    def zoom_in(self, px, py):
        """Center the view on raster point (px, py) and zoom in (down to MIN_SCALE)."""
        real, imag = self.map_to_complex(px, py)
        self.view.center_real = real
        self.view.center_imag = imag
        self.view.scale = max(MIN_SCALE, self.view.scale / ZOOM_FACTOR)
        logger.debug("Zoom in at (%s, %s) -> %r", px, py, self.view)

    def zoom_out(self):
        """Zoom out around the current center (up to MAX_SCALE)."""
        self.view.scale = min(MAX_SCALE, self.view.scale * ZOOM_FACTOR)
        logger.debug("Zoom out -> %r", self.view)

    def reset(self):
        """Restore the initial framing where the whole set is visible."""
        self.view.center_real, self.view.center_imag = DEFAULT_CENTER
        self.view.scale = DEFAULT_SCALE
        logger.debug("View reset -> %r", self.view)

    def resize(self, raster):
        """Adopt new raster dimensions; center and scale are unchanged."""
        if raster != self.raster:
            logger.info("Raster resized %dx%d -> %dx%d",
                        self.raster.width, self.raster.height,
                        raster.width, raster.height)
        self.raster = raster

    def toggle_flow(self):
        self.toggles.flow_enabled = not self.toggles.flow_enabled
        logger.info("Flow effect %s", "on" if self.toggles.flow_enabled else "off")
        return self.toggles.flow_enabled

    def toggle_rays(self):
        self.toggles.rays_enabled = not self.toggles.rays_enabled
        logger.info("Ray effect %s", "on" if self.toggles.rays_enabled else "off")
        return self.toggles.rays_enabled

    @property
    def zoom_depth(self):
        """Magnification relative to the default framing."""
        return DEFAULT_SCALE / self.view.scale
