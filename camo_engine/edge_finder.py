"""
Boundary detection for stripe placement.

Scans a raster on a fixed stride for pixels of a reference colour that
border a different colour (neighbourhood sampled at the same stride, with
wraparound), then thins those candidates by a random density and a noise
gate so the resulting stripe seeds cluster organically.
"""

import logging

log = logging.getLogger(__name__)

try:
    import numpy as np
except ImportError:
    raise ImportError(
        "numpy is required for edge detection. "
        "Install it with: pip install numpy"
    )

from .config import (
    EDGE_SAMPLE_STEP,
    EDGE_COLOR_TOLERANCE,
    EDGE_NOISE_SCALE,
    EDGE_NOISE_THRESHOLD,
)
from .raster import parse_color


def color_match_mask(pixels, reference, tolerance=EDGE_COLOR_TOLERANCE):
    """
    Boolean ``(H, W)`` mask of pixels within *tolerance* of *reference*.

    Every RGB channel must differ by less than *tolerance*.
    """
    ref = np.asarray(parse_color(reference), dtype=np.int16)
    diff = np.abs(pixels[..., :3].astype(np.int16) - ref[None, None, :])
    return np.all(diff < tolerance, axis=2)


def find_boundary_candidates(raster, reference, step=EDGE_SAMPLE_STEP,
                             tolerance=EDGE_COLOR_TOLERANCE):
    """
    Sampled pixels of *reference* colour that touch another colour.

    Args:
        raster:    Raster to scan.
        reference: Colour whose region boundaries are wanted.
        step:      Sampling stride in pixels (also the neighbour distance).
        tolerance: Per-channel colour tolerance.

    Returns:
        List of (x, y) integer tuples in row-major order.
    """
    step = max(1, int(step))
    match = color_match_mask(raster.pixels(), reference, tolerance)
    height, width = match.shape

    ys = np.arange(0, height, step)
    xs = np.arange(0, width, step)
    centre = match[np.ix_(ys, xs)]

    border = np.zeros_like(centre)
    for dy in (-step, 0, step):
        for dx in (-step, 0, step):
            if dx == 0 and dy == 0:
                continue
            neighbour = match[np.ix_((ys + dy) % height, (xs + dx) % width)]
            border |= ~neighbour

    hits = centre & border
    rows, cols = np.nonzero(hits)
    return [(int(xs[c]), int(ys[r])) for r, c in zip(rows, cols)]


def find_edge_points(raster, reference, density, rng, noise,
                     step=EDGE_SAMPLE_STEP, tolerance=EDGE_COLOR_TOLERANCE,
                     noise_scale=EDGE_NOISE_SCALE,
                     noise_threshold=EDGE_NOISE_THRESHOLD):
    """
    Boundary candidates thinned by *density* and gated by noise.

    A candidate survives when ``rng.random() < density`` and the noise at
    ``(x * noise_scale, y * noise_scale)`` exceeds *noise_threshold*.

    Args:
        raster:          Raster to scan.
        reference:       Region colour whose edges seed stripes.
        density:         Keep probability in [0, 1].
        rng:             random.Random instance.
        noise:           NoiseField.
        step:            Sampling stride.
        tolerance:       Per-channel colour tolerance.
        noise_scale:     Noise frequency for the gate.
        noise_threshold: Gate threshold in noise units [0, 1].

    Returns:
        List of (x, y) tuples; may be empty.
    """
    candidates = find_boundary_candidates(raster, reference, step, tolerance)
    points = []
    for x, y in candidates:
        keep = rng.random() < density
        if keep and noise.noise2D(x * noise_scale, y * noise_scale) > noise_threshold:
            points.append((x, y))
    log.debug("Edge finder kept %d of %d boundary candidates",
              len(points), len(candidates))
    return points
