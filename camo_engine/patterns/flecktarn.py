"""
Flecktarn family: dense clusters of small irregular spots.

Spot placement is a two-pass pipeline so it can be tested without
drawing anything:

    propose_spots  -- over-generate twice the target count of random
                      positions and keep those where the noise is above
                      a threshold (this is what makes spots cluster)
    cull_spots     -- Fisher-Yates shuffle the survivors and truncate to
                      the target count

Spots are 5-9 point outlines mixing straight and curved edges, with a
little angular jitter per vertex.  Spot counts are tuned for a 512x512
raster and scale with raster area.
"""

import logging
import math

log = logging.getLogger(__name__)

from ..shape_compositor import ShapeSpec, draw_shape, random_noise_offset
from .common import add_noise_texture, complexity_ratio, raster_factor, scale_factor

# (palette index, base count, count per complexity, min size, max size,
#  base irregularity, irregularity per complexity)
_LAYERS = (
    (1, 500, 300, 5, 12, 0.4, 0.4),
    (2, 400, 300, 4, 10, 0.5, 0.3),
    (3, 350, 250, 3, 9, 0.5, 0.3),
    (4, 300, 200, 2, 7, 0.6, 0.3),
)

_REFERENCE_AREA = 512.0 * 512.0
_ANGLE_JITTER = 0.2


class Spot:
    """One proposed spot: centre and radius in pixels."""

    __slots__ = ('x', 'y', 'size')

    def __init__(self, x, y, size):
        self.x = x
        self.y = y
        self.size = size

    def __repr__(self):
        return "Spot({:.1f}, {:.1f}, r={:.1f})".format(self.x, self.y, self.size)


def gate_threshold(irregularity):
    """Noise level (in [0, 1]) a candidate must exceed to survive."""
    return 0.4 + irregularity * 0.15


def propose_spots(count, width, height, noise, rng, irregularity,
                  min_size, max_size):
    """
    Over-generate candidate spots and keep the noise-approved ones.

    Args:
        count:        Target spot count; ``2 * count`` candidates are tried.
        width/height: Raster size.
        noise:        NoiseField used for the clustering gate.
        rng:          random.Random.
        irregularity: Layer irregularity; sets the gate frequency and threshold.
        min_size/max_size: Spot radius range.

    Returns:
        List of :class:`Spot`.
    """
    noise_scale = 0.01 + irregularity * 0.02
    threshold = gate_threshold(irregularity)
    spots = []
    for _ in range(count * 2):
        x = rng.random() * width
        y = rng.random() * height
        if noise.noise2D(x * noise_scale, y * noise_scale) > threshold:
            spots.append(Spot(x, y, min_size + rng.random() * (max_size - min_size)))
    return spots


def cull_spots(spots, count, rng):
    """
    Randomly subsample *spots* down to *count*.

    Returns a new list; input with ``count`` or fewer entries is returned
    unshuffled.
    """
    spots = list(spots)
    if len(spots) <= count:
        return spots
    for i in range(len(spots) - 1, 0, -1):
        j = rng.randint(0, i)
        spots[i], spots[j] = spots[j], spots[i]
    return spots[:count]


def layer_count(base, per_c, c, width, height):
    """Spot target for one layer, scaled by raster area (at least 1)."""
    area = (width * height) / _REFERENCE_AREA
    return max(1, int((base + int(c * per_c)) * area))


def generate(raster, options, noise, rng):
    """Paint a flecktarn pattern onto *raster*."""
    c = complexity_ratio(options)
    size_mult = scale_factor(options, reference=40.0) * raster_factor(raster)

    raster.fill(options.base_color)

    for index, base, per_c, min_size, max_size, irr_base, irr_c in _LAYERS:
        color = options.color(index)
        if color is None:
            continue
        irregularity = irr_base + c * irr_c
        count = layer_count(base, per_c, c, raster.width, raster.height)

        proposed = propose_spots(count, raster.width, raster.height, noise, rng,
                                 irregularity, min_size * size_mult,
                                 max_size * size_mult)
        spots = cull_spots(proposed, count, rng)
        for spot in spots:
            spec = ShapeSpec(
                spot.x, spot.y,
                radius=spot.size,
                points=rng.randint(5, 9),
                irregularity=irregularity,
                rotation=rng.random() * math.pi * 2.0,
                bias=0.6,
                noise_offset=random_noise_offset(rng),
            )
            draw_shape(raster, spec, color, noise, rng, smoothing='mixed',
                       angle_jitter=_ANGLE_JITTER)
        log.debug("Flecktarn layer %d: %d proposed, %d drawn",
                  index, len(proposed), len(spots))

    if options.texture:
        add_noise_texture(raster, noise, intensity=0.05 + c * 0.1, frequency=0.01)
