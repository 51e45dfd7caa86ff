"""
Tiger-stripe family: directional mid-tone patches plus black stripes.

Two passes:

1. Patches.  For each patch a path is walked along the pattern
   orientation; at every step the path is pushed sideways by noise
   interpolated from a coarse 4x4 grid and widened into a band.  The
   resulting outline is replicated toroidally.
2. Stripes.  The edge finder locates the boundaries of the mid-tone
   patches; at each surviving boundary point a long thin polygon is laid
   along the pattern axis with a small random angle jitter.

Options:
    orientation -- stripe axis in degrees (default 45)
"""

import logging
import math

log = logging.getLogger(__name__)

try:
    import numpy as np
except ImportError:
    raise ImportError(
        "numpy is required for the tiger-stripe pattern. "
        "Install it with: pip install numpy"
    )

from ..edge_finder import find_edge_points
from ..shape_compositor import draw_wrapped
from .common import add_noise_texture, complexity_ratio, raster_factor, scale_factor

_COARSE_GRID = 4
_PATH_STEPS = 20
_ANGLE_JITTER = 0.4
_STRIPE_NOISE_SCALE = 0.05


# ---------------------------------------------------------------------------
# Coarse noise
# ---------------------------------------------------------------------------

def coarse_noise(noise, width, height, noise_scale, grid=_COARSE_GRID):
    """
    Signed noise sampled on a *grid* x *grid* lattice over the raster.

    Returns:
        ``(grid, grid)`` float array in [-1, 1].
    """
    xs = np.arange(grid, dtype=np.float64) * (width / float(grid)) * noise_scale
    ys = np.arange(grid, dtype=np.float64) * (height / float(grid)) * noise_scale
    return noise.noise_grid(xs, ys) * 2.0 - 1.0


def sample_coarse(values, x, y, width, height):
    """Bilinear lookup of the coarse grid at pixel (x, y), wrapped into the raster."""
    grid = values.shape[0]
    gx = ((x % width) / float(width)) * grid
    gy = ((y % height) / float(height)) * grid
    x0 = min(int(gx), grid - 1)
    y0 = min(int(gy), grid - 1)
    x1 = min(x0 + 1, grid - 1)
    y1 = min(y0 + 1, grid - 1)
    sx = gx - x0
    sy = gy - y0
    top = values[y0, x0] * (1.0 - sx) + values[y0, x1] * sx
    bottom = values[y1, x0] * (1.0 - sx) + values[y1, x1] * sx
    return float(top * (1.0 - sy) + bottom * sy)


# ---------------------------------------------------------------------------
# Patches
# ---------------------------------------------------------------------------

def patch_centre(index, spacing, width, height, angle):
    """Centre of patch *index*, offset across the axis and wrapped into the raster."""
    perp = angle + math.pi / 2.0
    offset = index * spacing
    return ((width / 2.0 + offset * math.cos(perp)) % width,
            (height / 2.0 + offset * math.sin(perp)) % height)


def build_patch_outline(centre, width, height, stripe_width, irregularity,
                        angle, coarse):
    """
    Outline of one mid-tone patch.

    A path of 20 points runs through *centre* along *angle*, spanning the
    raster diagonal.  Each path point is displaced sideways by the coarse
    noise and expanded to a band whose half-width also follows the noise.

    Args:
        centre:       (x, y) the path passes through.
        width/height: Raster size.
        stripe_width: Nominal half-width of the band in pixels.
        irregularity: Strength of the noise displacement.
        angle:        Orientation in radians.
        coarse:       Array from :func:`coarse_noise`.

    Returns:
        Closed polygon as a list of (x, y) tuples (one side, then the other
        side reversed).
    """
    dx, dy = math.cos(angle), math.sin(angle)
    px, py = -dy, dx
    step_len = math.hypot(width, height) / (_PATH_STEPS - 1)

    left = []
    right = []
    for step in range(_PATH_STEPS):
        t = (step - _PATH_STEPS / 2.0) * step_len
        bx = centre[0] + t * dx
        by = centre[1] + t * dy
        shift = sample_coarse(coarse, bx, by, width, height) * stripe_width * 2.0 * irregularity
        x = bx + shift * px
        y = by + shift * py
        n = sample_coarse(coarse, x + 50.0, y + 50.0, width, height)
        half = max(1.0, stripe_width * (0.7 + n * 0.6 * irregularity))
        left.append((x - half * px, y - half * py))
        right.append((x + half * px, y + half * py))
    right.reverse()
    return left + right


# ---------------------------------------------------------------------------
# Stripes
# ---------------------------------------------------------------------------

def stripe_outline(x, y, length, width, angle, irregularity, noise, rng):
    """Long thin polygon centred on (x, y) along *angle* with noisy edges."""
    dx, dy = math.cos(angle), math.sin(angle)
    px, py = -dy, dx
    count = rng.randint(6, 9)

    def side(sign, shift):
        points = []
        for i in range(count + 1):
            t = (i / float(count) - 0.5) * length
            bx = x + t * dx
            by = y + t * dy
            n = noise.noise2D(bx * _STRIPE_NOISE_SCALE + shift,
                              by * _STRIPE_NOISE_SCALE + shift) * 2.0 - 1.0
            half = max(0.5, width * 0.5 + width * 0.5 * irregularity * n)
            points.append((bx + sign * px * half, by + sign * py * half))
        return points

    return side(1.0, 0.0) + list(reversed(side(-1.0, 100.0)))


def generate(raster, options, noise, rng):
    """Paint a tiger-stripe pattern onto *raster*."""
    c = complexity_ratio(options)
    size_mult = scale_factor(options) * raster_factor(raster)
    try:
        orientation = float(options.get('orientation', 45))
    except (TypeError, ValueError):
        log.warning("Ignoring non-numeric orientation %r", options.get('orientation'))
        orientation = 45.0
    angle = math.radians(orientation)
    width, height = raster.width, raster.height

    raster.fill(options.base_color)

    patch_color = options.color(1)
    if patch_color is not None:
        irregularity = 0.3 + c * 0.4
        patch_count = 5 + int(c * 5)
        stripe_width = 25.0 * size_mult
        spacing = width / float(patch_count - 1)
        coarse = coarse_noise(noise, width, height, 0.005 + irregularity * 0.005)
        for i in range(patch_count):
            centre = patch_centre(i, spacing, width, height, angle)
            outline = build_patch_outline(centre, width, height, stripe_width,
                                          irregularity, angle, coarse)
            draw_wrapped(raster, outline, patch_color)
        log.debug("Tiger: %d patches", patch_count)

    stripe_color = options.color(2)
    if patch_color is not None and stripe_color is not None:
        irregularity = 0.4 + c * 0.5
        stripe_width = 8.0 * size_mult
        edges = find_edge_points(raster, patch_color, 0.4 + c * 0.5, rng, noise)
        for x, y in edges:
            length = stripe_width * (1.5 + rng.random() * 1.5)
            thickness = stripe_width * (0.8 + rng.random() * 0.4)
            jitter = (rng.random() - 0.5) * _ANGLE_JITTER
            outline = stripe_outline(x, y, length, thickness, angle + jitter,
                                     irregularity, noise, rng)
            draw_wrapped(raster, outline, stripe_color)
        log.debug("Tiger: %d stripes", len(edges))

    if options.texture:
        add_noise_texture(raster, noise, intensity=0.05 + c * 0.15, frequency=0.01)
