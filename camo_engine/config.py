"""
Engine-wide constants for camo_engine.

Everything tunable lives here as plain module constants so that callers
can read (or monkeypatch in tests) a single source of truth.
"""

# ---------------------------------------------------------------------------
# Raster
# ---------------------------------------------------------------------------

DEFAULT_RASTER_SIZE = (512, 512)
RASTER_MODE = 'RGB'

# ---------------------------------------------------------------------------
# Pattern options
# ---------------------------------------------------------------------------

# (min, max) inclusive ranges for the shared numeric sliders
OPTION_RANGES = {
    'scale': (10, 100),
    'complexity': (1, 100),
    'contrast': (0, 100),
    'sharpness': (0, 100),
}

DEFAULT_OPTIONS = {
    'scale': 50,
    'complexity': 50,
    'contrast': 50,
    'sharpness': 50,
}

DEFAULT_FAMILY = 'woodland'

# ---------------------------------------------------------------------------
# Noise
# ---------------------------------------------------------------------------

NOISE_TABLE_SIZE = 256

# Fractional seeds in (0, 1) are scaled into this integer range
NOISE_FRACTIONAL_SEED_SCALE = 65536

# ---------------------------------------------------------------------------
# Edge finder
# ---------------------------------------------------------------------------

EDGE_SAMPLE_STEP = 4
EDGE_COLOR_TOLERANCE = 8
EDGE_NOISE_SCALE = 0.01
EDGE_NOISE_THRESHOLD = 0.35

# ---------------------------------------------------------------------------
# Post-processing
# ---------------------------------------------------------------------------

CONTRAST_NEUTRAL = 50
SHARPNESS_THRESHOLD = 50
UNSHARP_MAX_AMOUNT = 0.8
UNSHARP_BLUR_SIGMA = 1.0

# ---------------------------------------------------------------------------
# Seamless verification
# ---------------------------------------------------------------------------

SEAMLESS_CHANNEL_TOLERANCE = 10
SEAMLESS_MISMATCH_RATIO = 0.02

# Multiplier on the sharpest interior edge allowed at the seam
SEAMLESS_PEAK_FACTOR = 1.5
