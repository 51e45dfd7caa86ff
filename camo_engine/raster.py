"""
Mutable pixel buffer used by every stage of the generation engine.

A :class:`Raster` owns one Pillow ``RGB`` image.  Drawing stages fill
polygons and rectangles through ``ImageDraw``; pixel-level stages read the
buffer as a NumPy array, transform it and write it back.  Off-raster
coordinates are clipped by Pillow, so shape replication may freely draw
outside ``[0, W) x [0, H)``.

Dependencies:
    Pillow -- image storage and polygon filling
    NumPy  -- array access to the pixel buffer
"""

import logging
import numbers

log = logging.getLogger(__name__)

try:
    from PIL import Image, ImageColor, ImageDraw
except ImportError:
    raise ImportError(
        "Pillow is required for raster handling.  Install with: pip install Pillow"
    )

try:
    import numpy as np
except ImportError:
    raise ImportError(
        "NumPy is required for raster handling.  Install with: pip install numpy"
    )

from .config import RASTER_MODE


class RasterAccessError(RuntimeError):
    """The pixel buffer behind a Raster cannot be read or written."""


# ---------------------------------------------------------------------------
# Colour helpers
# ---------------------------------------------------------------------------

def parse_color(value):
    """
    Convert a colour value to an ``(r, g, b)`` tuple.

    Accepts ``'#RRGGBB'``, ``'#RGB'``, bare ``'RRGGBB'``, any CSS colour name
    Pillow understands, or an RGB(A) sequence.

    Raises:
        ValueError: if the value cannot be interpreted as a colour.
    """
    if isinstance(value, (tuple, list)):
        if len(value) < 3:
            raise ValueError("Colour sequence needs 3 components: {!r}".format(value))
        try:
            return tuple(max(0, min(255, int(c))) for c in value[:3])
        except (TypeError, ValueError):
            raise ValueError("Colour components must be numbers: {!r}".format(value))

    if not isinstance(value, str):
        raise ValueError("Unsupported colour value: {!r}".format(value))

    text = value.strip()
    if text and not text.startswith('#') and len(text) in (3, 6):
        try:
            int(text, 16)
            text = '#' + text
        except ValueError:
            pass
    rgb = ImageColor.getrgb(text)
    return tuple(rgb[:3])


def _is_rgb(value):
    return (isinstance(value, (tuple, list)) and len(value) in (3, 4)
            and all(isinstance(c, numbers.Number) for c in value))


def parse_palette(colors):
    """
    Parse a sequence of colour values, dropping entries that fail to parse.

    A single colour (a string or one RGB tuple) counts as a one-entry
    palette.  Anything that is neither a colour nor iterable is ignored.

    Returns:
        List of ``(r, g, b)`` tuples (possibly empty).
    """
    if colors is None:
        return []
    if isinstance(colors, str) or _is_rgb(colors):
        colors = [colors]
    try:
        values = list(colors)
    except TypeError:
        log.warning("Ignoring palette %r: not a colour sequence", colors)
        return []
    palette = []
    for value in values:
        try:
            palette.append(parse_color(value))
        except ValueError:
            log.warning("Ignoring unparsable colour %r", value)
    return palette


def rgb_to_hex(rgb):
    return '#{:02X}{:02X}{:02X}'.format(*rgb[:3])


# ---------------------------------------------------------------------------
# Raster
# ---------------------------------------------------------------------------

class Raster:
    """
    Width x height RGB pixel buffer, row-major.

    Attributes:
        width:  Raster width in pixels.
        height: Raster height in pixels.
    """

    __slots__ = ('width', 'height', '_image', '_draw')

    def __init__(self, width, height, fill=(0, 0, 0)):
        width = int(width)
        height = int(height)
        if width <= 0 or height <= 0:
            raise ValueError(
                "Raster size must be positive, got {}x{}".format(width, height)
            )
        self.width = width
        self.height = height
        self._image = Image.new(RASTER_MODE, (width, height), parse_color(fill))
        self._draw = ImageDraw.Draw(self._image)

    @classmethod
    def from_image(cls, img):
        """Wrap a copy of a Pillow image (converted to RGB)."""
        raster = cls(img.width, img.height)
        raster._image.paste(img.convert(RASTER_MODE))
        return raster

    @classmethod
    def from_array(cls, arr):
        """Build a raster from an ``(H, W, 3)`` uint8-compatible array."""
        arr = np.asarray(arr)
        raster = cls(arr.shape[1], arr.shape[0])
        raster.put_pixels(arr)
        return raster

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    @property
    def size(self):
        return (self.width, self.height)

    @property
    def closed(self):
        return self._image is None

    @property
    def image(self):
        """The underlying Pillow image (live, not a copy)."""
        self._require_open()
        return self._image

    def _require_open(self):
        if self._image is None:
            raise RasterAccessError("Raster pixel buffer has been released")

    def close(self):
        """Release the pixel buffer; further access raises RasterAccessError."""
        if self._image is not None:
            self._image.close()
        self._image = None
        self._draw = None

    # ------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------

    def fill(self, color):
        """Fill the whole raster with *color*."""
        self._require_open()
        self._draw.rectangle([0, 0, self.width, self.height], fill=parse_color(color))

    def fill_polygon(self, points, color):
        """
        Fill a closed polygon.  Vertices may lie outside the raster.

        Args:
            points: Sequence of ``(x, y)`` float tuples (at least 3).
            color:  Colour value understood by :func:`parse_color`.
        """
        self._require_open()
        if len(points) < 3:
            return
        self._draw.polygon([(float(x), float(y)) for x, y in points],
                           fill=parse_color(color))

    def fill_rect(self, x0, y0, x1, y1, color):
        """Fill the axis-aligned rectangle ``[x0, x1) x [y0, y1)``."""
        self._require_open()
        if x1 <= x0 or y1 <= y0:
            return
        # ImageDraw rectangles are inclusive of the far corner
        self._draw.rectangle([x0, y0, x1 - 1, y1 - 1], fill=parse_color(color))

    # ------------------------------------------------------------------
    # Pixel regions
    # ------------------------------------------------------------------

    def pixels(self):
        """Return a copy of the pixel buffer as an ``(H, W, 3)`` uint8 array."""
        self._require_open()
        try:
            return np.array(self._image, dtype=np.uint8)
        except (OSError, ValueError) as exc:
            raise RasterAccessError("Cannot read raster pixels: {}".format(exc))

    def put_pixels(self, arr):
        """
        Replace the pixel buffer with *arr* (clipped to 0-255).

        Args:
            arr: ``(H, W, 3)`` numeric array matching the raster size.
        """
        self._require_open()
        arr = np.asarray(arr)
        if arr.shape[:2] != (self.height, self.width):
            raise ValueError(
                "Pixel array shape {} does not match raster {}x{}".format(
                    arr.shape, self.width, self.height)
            )
        data = np.clip(np.rint(arr[..., :3]), 0, 255).astype(np.uint8)
        self._image.paste(Image.fromarray(data))

    def get_region(self, x, y, w, h):
        """Return a copy of the ``w x h`` block at (*x*, *y*), clipped to the raster."""
        arr = self.pixels()
        return arr[max(0, y):max(0, y + h), max(0, x):max(0, x + w)].copy()

    def put_region(self, x, y, block):
        """Write *block* with its top-left corner at (*x*, *y*), clipped."""
        arr = self.pixels()
        block = np.asarray(block)
        bh, bw = block.shape[:2]
        x0, y0 = max(0, x), max(0, y)
        x1, y1 = min(self.width, x + bw), min(self.height, y + bh)
        if x1 <= x0 or y1 <= y0:
            return
        arr[y0:y1, x0:x1] = block[y0 - y:y1 - y, x0 - x:x1 - x, :3]
        self.put_pixels(arr)

    def get_pixel(self, x, y):
        """Return the ``(r, g, b)`` at (*x*, *y*), coordinates wrapped."""
        self._require_open()
        return tuple(self._image.getpixel((x % self.width, y % self.height))[:3])

    def count_colors(self):
        """Number of distinct RGB values in the raster."""
        arr = self.pixels().reshape(-1, 3)
        return len(np.unique(arr, axis=0))

    # ------------------------------------------------------------------
    # Copies
    # ------------------------------------------------------------------

    def copy(self):
        self._require_open()
        return Raster.from_image(self._image)

    def tiled(self, nx=2, ny=2):
        """
        Return a Pillow image with the raster repeated *nx* x *ny* times.

        Useful for eyeballing seams.
        """
        self._require_open()
        out = Image.new(RASTER_MODE, (self.width * nx, self.height * ny))
        for ty in range(ny):
            for tx in range(nx):
                out.paste(self._image, (tx * self.width, ty * self.height))
        return out

    def __repr__(self):
        state = 'closed' if self._image is None else 'open'
        return "Raster({}x{}, {})".format(self.width, self.height, state)
