"""
Woodland family: layered, elongated organic blobs.

Four foreground layers are painted over the base colour, each with a
shrinking size band and a rising irregularity:

    layer 1 -- large dark-green masses
    layer 2 -- medium light-green patches
    layer 3 -- smaller brown patches
    layer 4 -- small black accents (only when the palette has five colours)

Shape centres are spread over a jittered grid so coverage stays even, and
every outline is stretched along its rotation axis by
``1 + elongation * cos(2 * angle)`` before quadratic smoothing.
"""

import logging
import math

log = logging.getLogger(__name__)

from ..shape_compositor import ShapeSpec, draw_shape, random_noise_offset
from .common import (
    add_noise_texture,
    complexity_ratio,
    raster_factor,
    scale_factor,
)


# (palette index, base count, count per complexity, min size, max size,
#  base irregularity, irregularity per complexity, elongation)
_LAYERS = (
    (1, 6, 10, 60, 200, 0.4, 0.4, 0.4),
    (2, 8, 12, 40, 140, 0.5, 0.3, 0.4),
    (3, 10, 15, 30, 100, 0.6, 0.3, 0.4),
    (4, 5, 10, 15, 60, 0.7, 0.3, 0.6),
)

_MIN_POINTS = 6
_MAX_POINTS = 12


def grid_centres(count, width, height, rng):
    """
    Spread *count* centres over a jittered square grid.

    Each centre lands in the middle 40 % of its grid cell, so the layer
    covers the raster evenly without looking regular.

    Returns:
        List of (x, y) tuples.
    """
    side = max(1, int(math.ceil(math.sqrt(count))))
    cell_w = width / float(side)
    cell_h = height / float(side)
    centres = []
    for i in range(count):
        gx = i % side
        gy = (i // side) % side
        centres.append(((gx + 0.3 + rng.random() * 0.4) * cell_w,
                        (gy + 0.3 + rng.random() * 0.4) * cell_h))
    return centres


def generate(raster, options, noise, rng):
    """
    Paint a woodland pattern onto *raster*.

    Args:
        raster:  Raster to fill (mutated in place).
        options: Resolved PatternOptions.
        noise:   Seeded NoiseField.
        rng:     random.Random driving the geometry.
    """
    c = complexity_ratio(options)
    size_mult = scale_factor(options) * raster_factor(raster)

    raster.fill(options.base_color)

    for (index, base, per_c, min_size, max_size,
         irr_base, irr_c, elongation) in _LAYERS:
        color = options.color(index)
        if color is None:
            continue
        count = int(base + c * per_c)
        irregularity = irr_base + c * irr_c
        lo = min_size * size_mult
        hi = max_size * size_mult

        for cx, cy in grid_centres(count, raster.width, raster.height, rng):
            spec = ShapeSpec(
                cx, cy,
                radius=lo + rng.random() * (hi - lo),
                points=rng.randint(_MIN_POINTS, _MAX_POINTS),
                irregularity=irregularity,
                elongation=elongation,
                rotation=rng.random() * math.pi * 2.0,
                bias=0.7,
                noise_offset=random_noise_offset(rng),
            )
            draw_shape(raster, spec, color, noise, rng, smoothing='quadratic')
        log.debug("Woodland layer %d: %d shapes", index, count)

    if options.texture:
        add_noise_texture(raster, noise,
                          intensity=0.05 + c * 0.15,
                          frequency=0.005 + ((100 - options.scale) / 100.0) * 0.01)
