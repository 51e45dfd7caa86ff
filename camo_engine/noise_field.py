"""
Seeded 2D gradient noise for camouflage synthesis.

Implements Ken Perlin's improved noise in two dimensions: lattice-cell
hashing through a seeded 256-entry permutation table (duplicated to 512
entries for overflow-free lookups), a quintic fade curve and bilinear
interpolation of the four corner gradient contributions.

The raw gradient value lies in [-1, 1]; the public API remaps it to
[0, 1] so that ``noise * 2 - 1`` recovers the signed form.

An optional *period* wraps the integer lattice, which makes noise sampled
across exactly one period tileable.  Full-raster texture passes use this
so that the texture itself never introduces a seam.

Dependencies:
    numpy  - vectorised evaluation over whole sample grids
"""

import logging
import math
import random

log = logging.getLogger(__name__)

try:
    import numpy as np
except ImportError:
    raise ImportError(
        "numpy is required for noise generation. "
        "Install it with: pip install numpy"
    )

from .config import NOISE_TABLE_SIZE, NOISE_FRACTIONAL_SEED_SCALE


def _fade(t):
    """Quintic fade 6t^5 - 15t^4 + 10t^3 (works on floats and arrays)."""
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _lerp(a, b, t):
    return a + t * (b - a)


def _split_period(period):
    """Normalise *period* to an ``(px, py)`` pair or ``(None, None)``."""
    if period is None:
        return None, None
    if isinstance(period, (tuple, list)):
        px, py = period
    else:
        px = py = period
    px = max(1, int(px)) if px else None
    py = max(1, int(py)) if py else None
    return px, py


class NoiseField:
    """
    Improved Perlin noise evaluator with a seeded permutation table.

    Two fields with the same seed (or one field reseeded to the same
    value) return identical values for identical coordinates, so one
    generation run can revisit the same noise in several drawing passes.
    """

    # 2D projections of the twelve improved-noise gradient directions
    _GRAD2 = [
        (1, 1), (-1, 1), (1, -1), (-1, -1),
        (1, 0), (-1, 0), (1, 0), (-1, 0),
        (0, 1), (0, -1), (0, 1), (0, -1),
    ]

    def __init__(self, seed=0):
        """Initialise with a deterministic seed."""
        self._seed = None
        self._perm = None
        self._grad = None
        self._perm_arr = None
        self._grad_arr = None
        self.seed(seed)

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    @staticmethod
    def _normalise_seed(value):
        """Scale fractional seeds in (0, 1) up to an integer range."""
        if value is None:
            return 0
        value = float(value)
        if 0.0 < value < 1.0:
            value *= NOISE_FRACTIONAL_SEED_SCALE
        return int(math.floor(value))

    @staticmethod
    def _generate_permutation(seed):
        """Build a 512-entry permutation table from *seed*."""
        rng = random.Random(seed)
        p = list(range(NOISE_TABLE_SIZE))
        rng.shuffle(p)
        return p + p  # double for wrapping

    def seed(self, value):
        """
        Rebuild the permutation and gradient tables from *value*.

        Args:
            value: int or float seed.  Fractional seeds in (0, 1) are
                   scaled by 65536 before flooring.
        """
        self._seed = self._normalise_seed(value)
        self._perm = self._generate_permutation(self._seed)
        self._grad = [self._GRAD2[v % 12] for v in self._perm]
        self._perm_arr = np.asarray(self._perm, dtype=np.int64)
        self._grad_arr = np.asarray(self._grad, dtype=np.float64)
        log.debug("NoiseField seeded with %d", self._seed)

    @property
    def current_seed(self):
        return self._seed

    # ------------------------------------------------------------------
    # Scalar evaluation
    # ------------------------------------------------------------------

    def _signed(self, x, y, period=None):
        px, py = _split_period(period)

        fx = math.floor(x)
        fy = math.floor(y)
        x -= fx
        y -= fy
        X0 = int(fx)
        Y0 = int(fy)

        if px:
            X0 %= px
            X1 = (X0 + 1) % px
        else:
            X1 = X0 + 1
        if py:
            Y0 %= py
            Y1 = (Y0 + 1) % py
        else:
            Y1 = Y0 + 1

        X0 &= 255
        X1 &= 255
        Y0 &= 255
        Y1 &= 255

        perm = self._perm
        grad = self._grad

        g00 = grad[X0 + perm[Y0]]
        g01 = grad[X0 + perm[Y1]]
        g10 = grad[X1 + perm[Y0]]
        g11 = grad[X1 + perm[Y1]]

        n00 = g00[0] * x + g00[1] * y
        n01 = g01[0] * x + g01[1] * (y - 1)
        n10 = g10[0] * (x - 1) + g10[1] * y
        n11 = g11[0] * (x - 1) + g11[1] * (y - 1)

        u = _fade(x)
        v = _fade(y)

        return _lerp(_lerp(n00, n10, u), _lerp(n01, n11, u), v)

    def noise2D(self, x, y, period=None):
        """
        Evaluate noise at (*x*, *y*).

        Args:
            x, y:   Sample coordinates (lattice units).
            period: Optional int or (px, py) lattice period.  When given,
                    ``noise2D(x + px, y) == noise2D(x, y)``.

        Returns:
            float in [0, 1].
        """
        value = (self._signed(x, y, period) + 1.0) * 0.5
        return min(1.0, max(0.0, value))

    def fbm2D(self, x, y, octaves=4, persistence=0.5, lacunarity=2.0):
        """
        Fractal Brownian motion built from :meth:`noise2D` octaves.

        Returns:
            float in [0, 1] (amplitude-normalised).
        """
        total = 0.0
        amplitude = 1.0
        frequency = 1.0
        max_amplitude = 0.0

        for _ in range(octaves):
            total += self.noise2D(x * frequency, y * frequency) * amplitude
            max_amplitude += amplitude
            amplitude *= persistence
            frequency *= lacunarity

        if max_amplitude > 0.0:
            total /= max_amplitude
        return total

    # ------------------------------------------------------------------
    # Vectorised evaluation
    # ------------------------------------------------------------------

    def noise_grid(self, xs, ys, period=None):
        """
        Evaluate :meth:`noise2D` over the outer product of *xs* and *ys*.

        Args:
            xs: 1-D sequence of x coordinates (columns).
            ys: 1-D sequence of y coordinates (rows).
            period: Optional lattice period, as for :meth:`noise2D`.

        Returns:
            2-D float64 array of shape ``(len(ys), len(xs))`` in [0, 1].
        """
        px, py = _split_period(period)
        xs = np.asarray(xs, dtype=np.float64).reshape(1, -1)
        ys = np.asarray(ys, dtype=np.float64).reshape(-1, 1)

        fx = np.floor(xs)
        fy = np.floor(ys)
        x = xs - fx
        y = ys - fy
        X0 = fx.astype(np.int64)
        Y0 = fy.astype(np.int64)

        if px:
            X0 = np.mod(X0, px)
            X1 = np.mod(X0 + 1, px)
        else:
            X1 = X0 + 1
        if py:
            Y0 = np.mod(Y0, py)
            Y1 = np.mod(Y0 + 1, py)
        else:
            Y1 = Y0 + 1

        X0 = X0 & 255
        X1 = X1 & 255
        Y0 = Y0 & 255
        Y1 = Y1 & 255

        perm = self._perm_arr
        grad = self._grad_arr

        g00 = grad[X0 + perm[Y0]]
        g01 = grad[X0 + perm[Y1]]
        g10 = grad[X1 + perm[Y0]]
        g11 = grad[X1 + perm[Y1]]

        n00 = g00[..., 0] * x + g00[..., 1] * y
        n01 = g01[..., 0] * x + g01[..., 1] * (y - 1.0)
        n10 = g10[..., 0] * (x - 1.0) + g10[..., 1] * y
        n11 = g11[..., 0] * (x - 1.0) + g11[..., 1] * (y - 1.0)

        u = _fade(x)
        v = _fade(y)

        signed = _lerp(_lerp(n00, n10, u), _lerp(n01, n11, u), v)
        return np.clip((signed + 1.0) * 0.5, 0.0, 1.0)

    def tileable_grid(self, width, height, frequency, octave_weights=(1.0,),
                      lacunarity=2):
        """
        Sample a seamless noise texture covering a *width* x *height* raster.

        The requested *frequency* (lattice cells per pixel) is rounded so
        that the raster spans a whole number of lattice cells, then the
        lattice is wrapped at that count.  Additional octaves multiply the
        cell count by *lacunarity* (an integer) and stay tileable.

        Args:
            width, height:  Raster size in pixels.
            frequency:      Approximate noise frequency per pixel.
            octave_weights: Weights of successive octaves; normalised.
            lacunarity:     Integer frequency multiplier per octave.

        Returns:
            2-D float64 array ``(height, width)`` of signed noise in [-1, 1].
        """
        cells_x = max(1, int(round(width * frequency)))
        cells_y = max(1, int(round(height * frequency)))
        lacunarity = max(1, int(lacunarity))

        total = np.zeros((height, width), dtype=np.float64)
        weight_sum = 0.0
        mult = 1
        for weight in octave_weights:
            cx = cells_x * mult
            cy = cells_y * mult
            xs = np.arange(width, dtype=np.float64) * (cx / float(width))
            ys = np.arange(height, dtype=np.float64) * (cy / float(height))
            total += (self.noise_grid(xs, ys, period=(cx, cy)) * 2.0 - 1.0) * weight
            weight_sum += abs(weight)
            mult *= lacunarity

        if weight_sum > 0.0:
            total /= weight_sum
        return total
