"""
Urban family: hard-edged geometric fragments.

Every foreground layer scatters rectangles, triangles and irregular
4-7-gons.  The shape type is picked per draw (50 % rectangle, 30 %
triangle, 20 % polygon) and half the rectangles are rotated.  All shapes
are straight-edged polygons replicated toroidally.
"""

import logging
import math

log = logging.getLogger(__name__)

from ..shape_compositor import draw_wrapped
from .common import add_noise_texture, raster_factor


def rectangle(cx, cy, w, h, angle=0.0):
    """Corners of a *w* x *h* rectangle centred on (cx, cy), rotated by *angle*."""
    ca = math.cos(angle)
    sa = math.sin(angle)
    corners = []
    for dx, dy in ((-w / 2.0, -h / 2.0), (w / 2.0, -h / 2.0),
                   (w / 2.0, h / 2.0), (-w / 2.0, h / 2.0)):
        corners.append((cx + dx * ca - dy * sa, cy + dx * sa + dy * ca))
    return corners


def triangle(cx, cy, size, rng):
    """
    Triangle with its vertices on a circle of radius *size* around (cx, cy).

    Successive vertices are 0.5-0.9 pi apart, so the closing gap is at
    least 0.2 pi and the triangle never degenerates into a sliver.
    """
    a1 = rng.random() * math.pi * 2.0
    a2 = a1 + math.pi * (0.5 + rng.random() * 0.4)
    a3 = a2 + math.pi * (0.5 + rng.random() * 0.4)
    return [(cx + math.cos(a) * size, cy + math.sin(a) * size) for a in (a1, a2, a3)]


def polygon(cx, cy, size, rng):
    """Irregular 4-7-gon with per-vertex radius between 0.8 and 1.2 of *size*/2."""
    sides = rng.randint(4, 7)
    step = (2.0 * math.pi) / sides
    points = []
    for i in range(sides):
        r = size * 0.5 * (0.8 + rng.random() * 0.4)
        a = i * step
        points.append((cx + math.cos(a) * r, cy + math.sin(a) * r))
    return points


def random_shape(cx, cy, block, rng):
    """Pick a shape type and return its outline."""
    pick = rng.random()
    if pick < 0.5:
        w = block * (1.0 + rng.random() * 3.0)
        h = block * (1.0 + rng.random() * 3.0)
        angle = rng.random() * math.pi / 4.0 if rng.random() > 0.5 else 0.0
        return rectangle(cx, cy, w, h, angle)
    if pick < 0.8:
        return triangle(cx, cy, block * (2.0 + rng.random() * 3.0), rng)
    return polygon(cx, cy, block * (1.5 + rng.random() * 2.0), rng)


def generate(raster, options, noise, rng):
    """Paint an urban pattern onto *raster*."""
    shapes_per_layer = max(1, int(options.complexity * 0.4))
    block = max(1.0, options.scale * 0.3 * raster_factor(raster))

    raster.fill(options.base_color)

    for index in range(1, len(options.colors)):
        color = options.colors[index]
        for _ in range(shapes_per_layer):
            outline = random_shape(rng.random() * raster.width,
                                   rng.random() * raster.height, block, rng)
            draw_wrapped(raster, outline, color)
        log.debug("Urban layer %d: %d shapes", index, shapes_per_layer)

    if options.texture:
        add_noise_texture(raster, noise, intensity=0.1, frequency=0.05,
                          octave_weights=(0.6, 0.4), lacunarity=3)
