"""
camo_engine - procedural generator for seamlessly tiling camouflage textures.

Six pattern families (woodland, desert, urban, digital, tiger stripe and
flecktarn) are synthesised from a few sliders (scale, complexity,
contrast, sharpness) and a colour palette, post-processed, and checked for
seams.  The usual entry point is :func:`generate`::

    result = generate('flecktarn', {'complexity': 80, 'seed': 7})
    if result.ok:
        result.raster.image.save('flecktarn.png')
"""

from .config import DEFAULT_FAMILY, DEFAULT_OPTIONS, DEFAULT_RASTER_SIZE
from .noise_field import NoiseField
from .raster import Raster, RasterAccessError, parse_color, rgb_to_hex
from .palettes import pattern_types, preset_colors, preset_settings
from .patterns import FAMILIES, PatternOptions, merge_options
from .post_processor import apply as post_process
from .seamless_verifier import check as check_seamless, seam_report
from .generation_service import (GenerationResult, GenerationService,
                                 generate, regenerate)
from .scheduler import GenerationScheduler

__version__ = '0.1.0'
