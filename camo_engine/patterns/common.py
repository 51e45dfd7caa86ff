"""
Shared plumbing for the pattern families.

Option merging (global defaults <- family defaults <- caller options),
range clamping, palette handling and the fine-grain noise texture pass
that every family finishes with.
"""

import logging
import numbers

log = logging.getLogger(__name__)

try:
    import numpy as np
except ImportError:
    raise ImportError(
        "NumPy is required for pattern generation.  Install with: pip install numpy"
    )

from ..config import DEFAULT_OPTIONS, DEFAULT_RASTER_SIZE, OPTION_RANGES
from ..palettes import family_defaults
from ..raster import parse_palette


# camelCase spellings used by web front ends -> option names used here
_OPTION_ALIASES = {
    'blockSize': 'block_size',
    'noiseIntensity': 'noise_intensity',
}

_CORE_FIELDS = ('scale', 'complexity', 'contrast', 'sharpness')


class PatternOptions:
    """
    Fully-resolved options for one generation run.

    Attributes:
        scale, complexity, contrast, sharpness: Clamped slider values.
        colors:  List of (r, g, b) tuples; index 0 is the base fill.
        width, height: Raster size.
        seed:    Seed for the run, or None (chosen by the service).
        texture: Whether the family's fine-grain texture pass runs.
        extras:  Family-specific options (orientation, block_size, ...).
    """

    __slots__ = ('scale', 'complexity', 'contrast', 'sharpness', 'colors',
                 'width', 'height', 'seed', 'texture', 'extras')

    def __init__(self, scale=50, complexity=50, contrast=50, sharpness=50,
                 colors=None, width=None, height=None, seed=None,
                 texture=True, extras=None):
        self.scale = scale
        self.complexity = complexity
        self.contrast = contrast
        self.sharpness = sharpness
        self.colors = list(colors or [])
        self.width = width or DEFAULT_RASTER_SIZE[0]
        self.height = height or DEFAULT_RASTER_SIZE[1]
        self.seed = seed
        self.texture = texture
        self.extras = dict(extras or {})

    def get(self, name, default=None):
        """Family-specific option lookup; None counts as missing."""
        value = self.extras.get(name)
        return default if value is None else value

    def color(self, index):
        """Palette entry *index*, or None when the palette is shorter."""
        if 0 <= index < len(self.colors):
            return self.colors[index]
        return None

    @property
    def base_color(self):
        return self.colors[0]

    def as_dict(self):
        data = {
            'scale': self.scale,
            'complexity': self.complexity,
            'contrast': self.contrast,
            'sharpness': self.sharpness,
            'colors': list(self.colors),
            'width': self.width,
            'height': self.height,
            'seed': self.seed,
            'texture': self.texture,
        }
        data.update(self.extras)
        return data

    def __repr__(self):
        return "PatternOptions(scale={}, complexity={}, colors={})".format(
            self.scale, self.complexity, len(self.colors))


def clamp_option(name, value):
    """
    Clamp slider *name* into its documented range.

    Non-numeric values fall back to the global default with a warning.
    """
    lo, hi = OPTION_RANGES[name]
    try:
        number = float(value)
    except (TypeError, ValueError):
        log.warning("Option %s=%r is not numeric, using %s",
                    name, value, DEFAULT_OPTIONS[name])
        return DEFAULT_OPTIONS[name]
    if number != number:  # NaN
        return DEFAULT_OPTIONS[name]
    if number < lo or number > hi:
        log.warning("Option %s=%s outside [%s, %s], clamping", name, value, lo, hi)
        number = max(lo, min(hi, number))
    return number


def _seed_value(value):
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, numbers.Number):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        log.warning("Ignoring non-numeric seed %r", value)
        return None


def _positive_int(value, fallback):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return fallback
    return number if number > 0 else fallback


def merge_options(family, options=None):
    """
    Resolve caller *options* against the defaults of *family*.

    Args:
        family:  Canonical family name.
        options: dict of caller options (may be None or partial).  A
                 PatternOptions instance is accepted and re-resolved.

    Returns:
        PatternOptions with clamped sliders and a non-empty palette.
    """
    if isinstance(options, PatternOptions):
        options = options.as_dict()
    elif options is not None and not hasattr(options, 'items'):
        log.warning("Ignoring options %r for %s: expected a mapping", options, family)
        options = None
    merged = dict(DEFAULT_OPTIONS)
    merged.update(family_defaults(family))
    for key, value in (options or {}).items():
        key = _OPTION_ALIASES.get(key, key)
        if value is not None:
            merged[key] = value

    family_palette = family_defaults(family)['colors']
    colors = parse_palette(merged.pop('colors', None))
    if not colors:
        log.warning("No usable colours for %s, using the family palette", family)
        colors = parse_palette(family_palette)

    core = {name: clamp_option(name, merged.pop(name)) for name in _CORE_FIELDS}
    width = _positive_int(merged.pop('width', None), DEFAULT_RASTER_SIZE[0])
    height = _positive_int(merged.pop('height', None), DEFAULT_RASTER_SIZE[1])
    seed = _seed_value(merged.pop('seed', None))
    texture = bool(merged.pop('texture', True))

    return PatternOptions(colors=colors, width=width, height=height, seed=seed,
                          texture=texture, extras=merged, **core)


# ---------------------------------------------------------------------------
# Texture pass
# ---------------------------------------------------------------------------

def add_noise_texture(raster, noise, intensity, frequency,
                      octave_weights=(1.0,), lacunarity=2):
    """
    Perturb every RGB channel by tileable noise.

    Each channel moves by ``(noise * 2 - 1) * intensity * 255`` and is
    clamped to 0-255.  The noise lattice is wrapped at the raster size so
    the texture does not create a seam.

    Args:
        raster:         Raster to modify in place.
        noise:          NoiseField.
        intensity:      Strength as a fraction of the channel range.
        frequency:      Noise frequency per pixel.
        octave_weights: Relative weights of successive octaves.
        lacunarity:     Integer frequency multiplier between octaves.
    """
    if intensity <= 0.0:
        return
    field = noise.tileable_grid(raster.width, raster.height, frequency,
                                octave_weights=octave_weights,
                                lacunarity=lacunarity)
    arr = raster.pixels().astype(np.float64)
    arr += (field * (intensity * 255.0))[:, :, None]
    raster.put_pixels(arr)


def scale_factor(options, reference=50.0):
    """Slider scale relative to the family's reference scale."""
    return options.scale / float(reference)


def complexity_ratio(options):
    """Complexity as a fraction in (0, 1]."""
    return options.complexity / 100.0


def raster_factor(raster, reference=512.0):
    """Size multiplier so shape sizes track the raster's smaller side."""
    return min(raster.width, raster.height) / float(reference)
