"""
Pattern families.

Each family module exposes ``generate(raster, options, noise, rng)`` which
paints the whole pattern onto an exclusively owned Raster.  ``FAMILIES``
maps canonical family names to those functions.
"""

from . import desert, digital, flecktarn, tiger, urban, woodland
from .common import PatternOptions, merge_options

FAMILIES = {
    'woodland': woodland.generate,
    'desert': desert.generate,
    'urban': urban.generate,
    'digital': digital.generate,
    'tiger': tiger.generate,
    'flecktarn': flecktarn.generate,
}

__all__ = ['FAMILIES', 'PatternOptions', 'merge_options']
