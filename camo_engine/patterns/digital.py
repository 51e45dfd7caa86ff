"""
Digital family: pixelated MARPAT/CADPAT-style blocks.

Noise is sampled once per grid cell, quantised into one band per
foreground colour, cleaned up by the cellular-automaton smoother and
painted as axis-aligned tiles.  The cell noise is sampled on a lattice
that wraps at the grid size, and the smoother wraps toroidally, so the
block grid tiles without a seam.
"""

import logging

log = logging.getLogger(__name__)

try:
    import numpy as np
except ImportError:
    raise ImportError(
        "numpy is required for the digital pattern. "
        "Install it with: pip install numpy"
    )

from ..grid_smoother import iterations_for_complexity, smooth_grid
from ..raster import parse_color
from .common import add_noise_texture, complexity_ratio

_MIN_BLOCK = 3
_MAX_BLOCK = 10


def block_size_for(options):
    """Block edge in pixels: the ``block_size`` option or 3-10 from scale."""
    explicit = options.get('block_size')
    if explicit is not None:
        try:
            return max(1, int(explicit))
        except (TypeError, ValueError):
            log.warning("Ignoring non-numeric block_size %r", explicit)
    size = int(round((options.scale / 100.0) * 8)) + 2
    return max(_MIN_BLOCK, min(_MAX_BLOCK, size))


def grid_shape(width, height, block):
    """(rows, cols) of the block grid; cells stretch to cover the raster exactly."""
    cols = max(1, int(round(width / float(block))))
    rows = max(1, int(round(height / float(block))))
    return rows, cols


def cell_noise(noise, rows, cols, noise_scale):
    """
    Per-cell noise in [0, 1], periodic over the grid.

    Cell (r, c) samples ``noise2D(c * s, r * s)`` where *s* is adjusted so
    the grid spans a whole number of lattice cells.
    """
    lattice_x = max(1, int(round(cols * noise_scale)))
    lattice_y = max(1, int(round(rows * noise_scale)))
    xs = np.arange(cols, dtype=np.float64) * (lattice_x / float(cols))
    ys = np.arange(rows, dtype=np.float64) * (lattice_y / float(rows))
    return noise.noise_grid(xs, ys, period=(lattice_x, lattice_y))


def quantize(values, layers):
    """
    Map noise values in [0, 1] onto band ids ``0..layers``.

    Args:
        values: Array of noise values.
        layers: Number of foreground colours.

    Returns:
        int64 array of the same shape.
    """
    values = np.asarray(values, dtype=np.float64)
    bands = np.floor(values * (layers + 1)).astype(np.int64)
    return np.clip(bands, 0, layers)


def paint_grid(raster, grid, colors):
    """
    Paint band ids onto *raster* as tiles.

    Band ``k`` is drawn in ``colors[k + 1]``; the top band (and any band
    without a colour) keeps the base colour already on the raster.
    """
    rows, cols = grid.shape
    height, width = raster.height, raster.width
    cell_y = (np.arange(height) * rows) // height
    cell_x = (np.arange(width) * cols) // width
    bands = grid[np.ix_(cell_y, cell_x)]

    arr = raster.pixels()
    for band in range(len(colors) - 1):
        mask = bands == band
        if mask.any():
            arr[mask] = parse_color(colors[band + 1])
    raster.put_pixels(arr)


def generate(raster, options, noise, rng):
    """Paint a digital pattern onto *raster*."""
    raster.fill(options.base_color)
    layers = len(options.colors) - 1
    if layers < 1:
        log.debug("Digital: single-colour palette, nothing to layer")
    else:
        block = block_size_for(options)
        rows, cols = grid_shape(raster.width, raster.height, block)
        noise_scale = 0.01 + ((100 - options.complexity) / 100.0) * 0.05

        grid = quantize(cell_noise(noise, rows, cols, noise_scale), layers)
        grid = smooth_grid(grid, iterations_for_complexity(options.complexity))
        paint_grid(raster, grid, options.colors)
        log.debug("Digital grid %dx%d, block %dpx", cols, rows, block)

    if options.texture:
        c = complexity_ratio(options)
        add_noise_texture(raster, noise, intensity=0.02 + c * 0.05, frequency=0.5)
