"""
Heuristic check that a raster tiles without a visible seam.

The last column is compared with the first and the last row with the
first.  A pixel pair mismatches when any RGB channel differs by more than
the channel tolerance.  Each axis may have up to:

    2 % of the compared pixels
    + 1.5 x the largest mismatch count between two adjacent interior
      columns (rows)

The second term lets ordinary edges sit on the seam: block grids and
shape boundaries that happen to end exactly there cost no more than the
sharpest edge inside the raster.  A genuinely cut seam on a smooth raster
mismatches far more than any interior neighbour pair and still fails.

This is a diagnostic.  Nothing in the engine refuses a raster because of
it.
"""

import logging

log = logging.getLogger(__name__)

try:
    import numpy as np
except ImportError:
    raise ImportError(
        "NumPy is required for seam verification.  Install with: pip install numpy"
    )

from .config import (
    SEAMLESS_CHANNEL_TOLERANCE,
    SEAMLESS_MISMATCH_RATIO,
    SEAMLESS_PEAK_FACTOR,
)


class AxisReport:
    """
    Result of comparing one pair of opposite edges.

    Attributes:
        axis:       ``'horizontal'`` (left/right columns) or ``'vertical'``
                    (top/bottom rows).
        samples:    Number of pixel pairs compared.
        mismatches: Pairs differing beyond the channel tolerance.
        peak:       Largest mismatch count between adjacent interior lines.
        allowed:    Mismatch allowance for this axis.
    """

    __slots__ = ('axis', 'samples', 'mismatches', 'peak', 'allowed')

    def __init__(self, axis, samples, mismatches, peak, allowed):
        self.axis = axis
        self.samples = samples
        self.mismatches = mismatches
        self.peak = peak
        self.allowed = allowed

    @property
    def passed(self):
        return self.mismatches <= self.allowed

    def __repr__(self):
        return "AxisReport({}, {}/{} mismatches, allowed {:.1f})".format(
            self.axis, self.mismatches, self.samples, self.allowed)


class SeamReport:
    """Both axes of a seam check."""

    __slots__ = ('horizontal', 'vertical')

    def __init__(self, horizontal, vertical):
        self.horizontal = horizontal
        self.vertical = vertical

    @property
    def seamless(self):
        return self.horizontal.passed and self.vertical.passed

    def __repr__(self):
        return "SeamReport(seamless={}, {!r}, {!r})".format(
            self.seamless, self.horizontal, self.vertical)


def _mismatch_counts(a, b, tolerance):
    """Per-line mismatching pixel counts between stacks of lines *a* and *b*."""
    diff = np.abs(a.astype(np.int16) - b.astype(np.int16))
    return np.count_nonzero(np.any(diff > tolerance, axis=-1), axis=-1)


def _axis_report(axis, lines, tolerance, ratio, peak_factor):
    """
    Compare the last line of *lines* with the first.

    *lines* is an ``(N, L, 3)`` array: N lines of L pixels each.
    """
    length = lines.shape[1]
    seam = int(_mismatch_counts(lines[-1], lines[0], tolerance))
    if lines.shape[0] > 1:
        peak = int(_mismatch_counts(lines[1:], lines[:-1], tolerance).max())
    else:
        peak = 0
    allowed = length * ratio + peak * peak_factor
    return AxisReport(axis, length, seam, peak, allowed)


def seam_report(raster, tolerance=SEAMLESS_CHANNEL_TOLERANCE,
                ratio=SEAMLESS_MISMATCH_RATIO, peak_factor=SEAMLESS_PEAK_FACTOR):
    """
    Detailed seam comparison for *raster*.

    Args:
        raster:    Raster to inspect.
        tolerance: Per-channel difference still counted as a match.
        ratio:     Fraction of compared pixels always allowed to differ.
        peak_factor: Multiplier on the interior peak.

    Returns:
        :class:`SeamReport`.
    """
    arr = raster.pixels()[..., :3]
    # columns as lines: (W, H, 3)
    horizontal = _axis_report('horizontal', arr.transpose(1, 0, 2),
                              tolerance, ratio, peak_factor)
    vertical = _axis_report('vertical', arr, tolerance, ratio, peak_factor)
    return SeamReport(horizontal, vertical)


def check(raster, **kwargs):
    """True if *raster* passes the seam check on both axes."""
    report = seam_report(raster, **kwargs)
    if not report.seamless:
        log.warning("Seam check failed: %r", report)
    return report.seamless
