"""
Filled-shape synthesis with toroidal replication.

Every organic-shape pattern family draws through this module.  A shape is
described by a :class:`ShapeSpec`, turned into a closed outline whose
radius is perturbed by noise, optionally smoothed into quadratic or cubic
curve segments, and finally filled on the raster at the 3x3 tile offsets
(and further offsets if the shape is larger than a tile).  Anything that
crosses one raster edge therefore reappears on the opposite edge.
"""

import logging
import math

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Shape description
# ---------------------------------------------------------------------------

class ShapeSpec:
    """
    Parameters of one irregular blob.

    Attributes:
        cx, cy:        Centre in pixels.
        radius:        Base radius in pixels.
        points:        Number of outline vertices.
        irregularity:  Weight of the noise term in the radius.
        elongation:    Stretch factor applied as ``1 + e*cos(2*angle)``.
        rotation:      Angle offset of the first vertex (radians).
        bias:          Constant term of the radius factor.
        noise_offset:  (x, y) origin of this shape's noise samples.
        noise_radius:  Radius of the circle sampled in noise space.
    """

    __slots__ = ('cx', 'cy', 'radius', 'points', 'irregularity', 'elongation',
                 'rotation', 'bias', 'noise_offset', 'noise_radius')

    def __init__(self, cx, cy, radius, points, irregularity=0.5, elongation=0.0,
                 rotation=0.0, bias=0.7, noise_offset=(0.0, 0.0),
                 noise_radius=0.5):
        self.cx = float(cx)
        self.cy = float(cy)
        self.radius = max(0.5, float(radius))
        self.points = max(3, int(points))
        self.irregularity = float(irregularity)
        self.elongation = float(elongation)
        self.rotation = float(rotation)
        self.bias = float(bias)
        self.noise_offset = (float(noise_offset[0]), float(noise_offset[1]))
        self.noise_radius = float(noise_radius)

    def __repr__(self):
        return "ShapeSpec(c=({:.1f}, {:.1f}), r={:.1f}, n={})".format(
            self.cx, self.cy, self.radius, self.points)


def random_noise_offset(rng, spread=256.0):
    """Pick a random origin in noise space for one shape."""
    return (rng.uniform(0.0, spread), rng.uniform(0.0, spread))


# ---------------------------------------------------------------------------
# Outline synthesis
# ---------------------------------------------------------------------------

def blob_outline(spec, noise, angle_jitter=0.0, rng=None):
    """
    Compute the vertices of a noise-perturbed blob.

    The radius at each angular step is::

        radius * (1 + elongation * cos(2 * angle))
               * (bias + noise(f(angle)) * irregularity)

    where ``f`` walks a small circle in noise space around the shape's
    noise origin, so the outline closes without a jump.

    Args:
        spec:         A :class:`ShapeSpec`.
        noise:        A NoiseField.
        angle_jitter: Maximum random extra angle per vertex (radians).
        rng:          random.Random used for the jitter.

    Returns:
        List of (x, y) tuples.
    """
    step = (2.0 * math.pi) / spec.points
    ox, oy = spec.noise_offset
    nr = spec.noise_radius
    vertices = []
    for i in range(spec.points):
        angle = i * step + spec.rotation
        if angle_jitter and rng is not None:
            angle += rng.random() * angle_jitter
        stretch = 1.0 + spec.elongation * math.cos(angle * 2.0)
        n = noise.noise2D(ox + math.cos(angle) * nr, oy + math.sin(angle) * nr)
        r = spec.radius * stretch * (spec.bias + n * spec.irregularity)
        r = max(0.5, r)
        vertices.append((spec.cx + math.cos(angle) * r,
                         spec.cy + math.sin(angle) * r))
    return vertices


# ---------------------------------------------------------------------------
# Curve flattening
# ---------------------------------------------------------------------------

def _quad_point(p0, c, p1, t):
    mt = 1.0 - t
    return (mt * mt * p0[0] + 2.0 * mt * t * c[0] + t * t * p1[0],
            mt * mt * p0[1] + 2.0 * mt * t * c[1] + t * t * p1[1])


def _cubic_point(p0, c1, c2, p1, t):
    mt = 1.0 - t
    a = mt * mt * mt
    b = 3.0 * mt * mt * t
    c = 3.0 * mt * t * t
    d = t * t * t
    return (a * p0[0] + b * c1[0] + c * c2[0] + d * p1[0],
            a * p0[1] + b * c1[1] + c * c2[1] + d * p1[1])


def quadratic_path(vertices, center, rng, bulge=0.3, jitter=0.5, steps=6):
    """
    Join *vertices* with outward-bulging quadratic segments.

    Each control point sits on the chord midpoint, pushed away from
    *center* by ``bulge`` times half the chord length, with up to
    ``jitter / 2`` radians of random angular wobble.

    Returns:
        Flattened list of (x, y) points.
    """
    out = []
    n = len(vertices)
    cx, cy = center
    for i in range(n):
        p0 = vertices[i]
        p1 = vertices[(i + 1) % n]
        mx = (p0[0] + p1[0]) * 0.5
        my = (p0[1] + p1[1]) * 0.5
        mid_angle = math.atan2(my - cy, mx - cx)
        mid_angle += (rng.random() - 0.5) * jitter
        half_chord = math.hypot(p1[0] - p0[0], p1[1] - p0[1]) * 0.5
        ctrl = (mx + math.cos(mid_angle) * half_chord * bulge,
                my + math.sin(mid_angle) * half_chord * bulge)
        for s in range(steps):
            out.append(_quad_point(p0, ctrl, p1, s / float(steps)))
    return out


def cubic_path(vertices, steps=8, tension=1.0 / 6.0):
    """
    Smooth closed curve through *vertices* (Catmull-Rom as cubic Bezier).

    Returns:
        Flattened list of (x, y) points.
    """
    out = []
    n = len(vertices)
    for i in range(n):
        p_prev = vertices[(i - 1) % n]
        p0 = vertices[i]
        p1 = vertices[(i + 1) % n]
        p_next = vertices[(i + 2) % n]
        c1 = (p0[0] + (p1[0] - p_prev[0]) * tension,
              p0[1] + (p1[1] - p_prev[1]) * tension)
        c2 = (p1[0] - (p_next[0] - p0[0]) * tension,
              p1[1] - (p_next[1] - p0[1]) * tension)
        for s in range(steps):
            out.append(_cubic_point(p0, c1, c2, p1, s / float(steps)))
    return out


def mixed_path(vertices, rng, radius, wobble=0.3, steps=4):
    """
    Randomly alternate straight and slightly curved segments.

    Half the segments are straight lines (jagged look), the rest are
    quadratics whose control point is jittered by up to
    ``wobble * radius / 2`` in each axis.
    """
    out = []
    n = len(vertices)
    for i in range(n):
        p0 = vertices[i]
        p1 = vertices[(i + 1) % n]
        if rng.random() > 0.5:
            out.append(p0)
            continue
        ctrl = ((p0[0] + p1[0]) * 0.5 + (rng.random() - 0.5) * radius * wobble,
                (p0[1] + p1[1]) * 0.5 + (rng.random() - 0.5) * radius * wobble)
        for s in range(steps):
            out.append(_quad_point(p0, ctrl, p1, s / float(steps)))
    return out


# ---------------------------------------------------------------------------
# Toroidal replication
# ---------------------------------------------------------------------------

def _axis_offsets(lo, hi, extent):
    """Tile multiples k such that [lo + k*extent, hi + k*extent] meets [0, extent)."""
    k_min = min(-1, int(math.floor(-hi / float(extent))))
    k_max = max(1, int(math.ceil((extent - lo) / float(extent))) - 1)
    return range(k_min, k_max + 1)


def wrap_offsets(points, width, height):
    """
    Pixel offsets at which a shape must be drawn to tile seamlessly.

    Always includes the full 3x3 neighbourhood; shapes whose bounding box
    spans more than one tile get the extra offsets they need.

    Returns:
        List of (dx, dy) tuples.
    """
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    kxs = _axis_offsets(min(xs), max(xs), width)
    kys = _axis_offsets(min(ys), max(ys), height)
    return [(kx * width, ky * height) for ky in kys for kx in kxs]


def draw_wrapped(raster, points, color):
    """
    Fill the polygon *points* on *raster* at every toroidal offset.

    Args:
        raster: Target Raster (mutated in place).
        points: Closed polygon as (x, y) tuples, may extend past the edges.
        color:  Fill colour.
    """
    if len(points) < 3:
        return
    for dx, dy in wrap_offsets(points, raster.width, raster.height):
        raster.fill_polygon([(x + dx, y + dy) for x, y in points], color)


def draw_shape(raster, spec, color, noise, rng, smoothing='quadratic',
               angle_jitter=0.0):
    """
    Synthesise one blob from *spec* and composite it seamlessly.

    Args:
        raster:       Target Raster.
        spec:         ShapeSpec.
        color:        Fill colour.
        noise:        NoiseField for the boundary perturbation.
        rng:          random.Random for curve jitter.
        smoothing:    ``'straight'``, ``'quadratic'``, ``'cubic'`` or ``'mixed'``.
        angle_jitter: Random extra angle per vertex (radians).

    Returns:
        The flattened outline that was drawn (before replication).
    """
    vertices = blob_outline(spec, noise, angle_jitter=angle_jitter, rng=rng)
    if smoothing == 'quadratic':
        outline = quadratic_path(vertices, (spec.cx, spec.cy), rng)
    elif smoothing == 'cubic':
        outline = cubic_path(vertices)
    elif smoothing == 'mixed':
        outline = mixed_path(vertices, rng, spec.radius)
    else:
        outline = vertices
    draw_wrapped(raster, outline, color)
    return outline
