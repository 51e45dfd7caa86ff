"""
Desert family: a few large, smooth sand-tone blobs with a grain overlay.

At most three foreground layers are shown regardless of palette length.
Outlines are low-irregularity and joined with Catmull-Rom cubic curves,
then a two-octave sand-grain texture at roughly five times the base
noise frequency is added over the whole raster.
"""

import logging
import math

log = logging.getLogger(__name__)

from ..shape_compositor import ShapeSpec, draw_shape, random_noise_offset
from .common import add_noise_texture, raster_factor, scale_factor

_MAX_VISIBLE_LAYERS = 3
_MIN_SIZE = 50
_MAX_SIZE = 150
_BASE_NOISE_FREQUENCY = 0.008
_NOISE_INTENSITY = 0.15


def visible_layers(options):
    """Number of foreground layers drawn for this palette."""
    return min(len(options.colors) - 1, _MAX_VISIBLE_LAYERS)


def generate(raster, options, noise, rng):
    """Paint a desert pattern onto *raster*."""
    sf = scale_factor(options)
    size_mult = sf * raster_factor(raster)
    blob_count = max(1, int(options.complexity * 0.5))

    raster.fill(options.base_color)

    lo = _MIN_SIZE * size_mult
    hi = _MAX_SIZE * size_mult
    for index in range(1, visible_layers(options) + 1):
        color = options.color(index)
        for _ in range(blob_count):
            spec = ShapeSpec(
                rng.random() * raster.width,
                rng.random() * raster.height,
                radius=lo + rng.random() * (hi - lo),
                points=rng.randint(5, 8),
                irregularity=0.2,
                rotation=rng.random() * math.pi * 2.0,
                bias=0.9,
                noise_offset=random_noise_offset(rng),
            )
            draw_shape(raster, spec, color, noise, rng, smoothing='cubic')
        log.debug("Desert layer %d: %d blobs", index, blob_count)

    if options.texture:
        try:
            intensity = float(options.get('noise_intensity', _NOISE_INTENSITY))
        except (TypeError, ValueError):
            log.warning("Ignoring non-numeric noise_intensity %r",
                        options.get('noise_intensity'))
            intensity = _NOISE_INTENSITY
        add_noise_texture(raster, noise,
                          intensity=intensity,
                          frequency=(_BASE_NOISE_FREQUENCY / sf) * 5.0,
                          octave_weights=(0.7, 0.3))
