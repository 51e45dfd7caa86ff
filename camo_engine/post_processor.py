"""
Contrast and sharpening applied to a finished pattern raster.

Both adjustments are neutral at their midpoint settings:

    contrast  50 -> unchanged; above stretches channels away from 128,
                    below pulls them towards 128
    sharpness <= 50 -> unchanged; above applies an unsharp mask of
                    strength up to 0.8

The unsharp mask blurs with a wrap-mode Gaussian so sharpening sees the
raster as a torus and never introduces a seam.

Dependencies:
    NumPy  -- per-channel arithmetic
    SciPy  -- gaussian_filter for the blurred copy
"""

import logging

log = logging.getLogger(__name__)

try:
    import numpy as np
except ImportError:
    raise ImportError(
        "NumPy is required for post-processing.  Install with: pip install numpy"
    )

try:
    from scipy.ndimage import gaussian_filter
except ImportError:
    raise ImportError(
        "SciPy is required for post-processing.  Install with: pip install scipy"
    )

from .config import (
    CONTRAST_NEUTRAL,
    SHARPNESS_THRESHOLD,
    UNSHARP_BLUR_SIGMA,
    UNSHARP_MAX_AMOUNT,
)
from .raster import RasterAccessError


def contrast_factor(contrast):
    return 1.0 + (contrast - CONTRAST_NEUTRAL) / 100.0


def sharpen_amount(sharpness):
    """Unsharp strength for *sharpness*; 0.0 at or below the threshold."""
    if sharpness <= SHARPNESS_THRESHOLD:
        return 0.0
    span = 100.0 - SHARPNESS_THRESHOLD
    return (sharpness - SHARPNESS_THRESHOLD) / span * UNSHARP_MAX_AMOUNT


def apply_contrast(raster, contrast):
    """
    Scale every channel about mid-grey.

    ``v' = 128 + (v - 128) * (1 + (contrast - 50) / 100)``, clamped.

    Returns:
        True if pixels were changed.
    """
    if contrast == CONTRAST_NEUTRAL:
        return False
    arr = raster.pixels().astype(np.float64)
    arr = 128.0 + (arr - 128.0) * contrast_factor(contrast)
    raster.put_pixels(arr)
    return True


def apply_sharpness(raster, sharpness, sigma=UNSHARP_BLUR_SIGMA):
    """
    Unsharp mask: push each channel away from a blurred copy.

    Returns:
        True if pixels were changed.
    """
    amount = sharpen_amount(sharpness)
    if amount <= 0.0:
        return False
    arr = raster.pixels().astype(np.float64)
    # sigma 0 on the channel axis keeps channels independent
    blurred = gaussian_filter(arr, sigma=(sigma, sigma, 0), mode='wrap')
    raster.put_pixels(arr + (arr - blurred) * amount)
    return True


def apply(raster, contrast, sharpness):
    """
    Apply contrast then sharpening to *raster* in place.

    A raster whose pixels cannot be read or written is left as it is and
    a warning is logged.

    Args:
        raster:    Raster to adjust.
        contrast:  0-100 contrast slider.
        sharpness: 0-100 sharpness slider.

    Returns:
        True if post-processing completed, False if it was skipped
        because the raster was unreadable.
    """
    try:
        apply_contrast(raster, contrast)
        apply_sharpness(raster, sharpness)
    except RasterAccessError as exc:
        log.warning("Post-processing skipped: %s", exc)
        return False
    return True
