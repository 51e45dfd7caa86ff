"""
Preset colour palettes and slider settings for each camouflage family.

Two groups of tables live here:

    PRESET_COLORS / PRESET_SETTINGS
        What a front end offers when the user picks a family preset.

    FAMILY_DEFAULTS
        The defaults each generator falls back to for any option the
        caller omits (palette, sliders and family-specific extras).

Palettes (index 0 is always the base fill):
    woodland  -- olive base, dark green, light green, brown, black
    desert    -- sand tones from light khaki to dark brown
    urban     -- light to dark greys
    digital   -- MARPAT-like greens and browns
    tiger     -- khaki base, olive mid-tone, black stripes
    flecktarn -- Bundeswehr spot palette
"""

import copy

from .config import DEFAULT_FAMILY


PATTERN_TYPES = ('woodland', 'desert', 'urban', 'digital', 'tiger', 'flecktarn')

# Accepted spellings -> canonical family name
FAMILY_ALIASES = {
    'woodland': 'woodland',
    'desert': 'desert',
    'urban': 'urban',
    'digital': 'digital',
    'tiger': 'tiger',
    'tigerstripe': 'tiger',
    'tiger_stripe': 'tiger',
    'tiger-stripe': 'tiger',
    'flecktarn': 'flecktarn',
}


# ---------------------------------------------------------------------------
# Front-end presets
# ---------------------------------------------------------------------------

PRESET_COLORS = {
    'woodland': ['#4A7023', '#3B5323', '#78866B', '#A9BA9D', '#000000'],
    'desert': ['#D4C09E', '#C2B280', '#A68C69', '#856D54', '#4D3B24'],
    'urban': ['#D9D9D9', '#9E9E9E', '#616161', '#212121', '#000000'],
    'digital': ['#445C2B', '#79573E', '#B7A998', '#1B0E00', '#000000'],
    'tiger': ['#4A7023', '#3B5323', '#78866B', '#A9BA9D', '#000000'],
    'flecktarn': ['#2F3D28', '#526138', '#9C8438', '#AB4E19', '#35241A'],
}

PRESET_SETTINGS = {
    'woodland': {'scale': 50, 'complexity': 60, 'contrast': 60, 'sharpness': 50},
    'desert': {'scale': 40, 'complexity': 50, 'contrast': 40, 'sharpness': 40},
    'urban': {'scale': 60, 'complexity': 70, 'contrast': 70, 'sharpness': 60},
    'digital': {'scale': 30, 'complexity': 30, 'contrast': 80, 'sharpness': 90},
    'tiger': {'scale': 50, 'complexity': 70, 'contrast': 60, 'sharpness': 40},
    'flecktarn': {'scale': 40, 'complexity': 80, 'contrast': 60, 'sharpness': 50},
}


# ---------------------------------------------------------------------------
# Generator defaults
# ---------------------------------------------------------------------------

FAMILY_DEFAULTS = {
    'woodland': {
        'scale': 50,
        'complexity': 50,
        'colors': ['#4B5320', '#222D12', '#6B8E23', '#7B6E52', '#000000'],
    },
    'desert': {
        'scale': 40,
        'complexity': 50,
        'colors': ['#D4C09E', '#C2B280', '#A68C69', '#856D54', '#4D3B24'],
        'noise_intensity': 0.15,
    },
    'urban': {
        'scale': 60,
        'complexity': 70,
        'colors': ['#D9D9D9', '#9E9E9E', '#616161', '#212121', '#000000'],
        'blockiness': 0.8,
        'angularity': 0.7,
    },
    'digital': {
        'scale': 30,
        'complexity': 30,
        'colors': ['#445C2B', '#79573E', '#B7A998', '#1B0E00', '#000000'],
        'block_size': None,
    },
    'tiger': {
        'scale': 50,
        'complexity': 70,
        'colors': ['#8C7E5C', '#505B35', '#000000'],
        'orientation': 45,
    },
    'flecktarn': {
        'scale': 40,
        'complexity': 80,
        'colors': ['#4D5D2F', '#313C14', '#6B4C30', '#929367', '#000000'],
    },
}


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

def canonical_family(name):
    """Return the canonical family for *name*, or None if unrecognised."""
    if not isinstance(name, str):
        return None
    return FAMILY_ALIASES.get(name.strip().lower())


def pattern_types():
    """All supported family names, in presentation order."""
    return list(PATTERN_TYPES)


def preset_colors(family):
    """Preset palette for *family* (woodland's for unknown names)."""
    key = canonical_family(family) or DEFAULT_FAMILY
    return list(PRESET_COLORS[key])


def preset_settings(family):
    """Preset slider values for *family* (woodland's for unknown names)."""
    key = canonical_family(family) or DEFAULT_FAMILY
    return dict(PRESET_SETTINGS[key])


def family_defaults(family):
    """Deep copy of the generator defaults for a canonical *family*."""
    key = canonical_family(family) or DEFAULT_FAMILY
    return copy.deepcopy(FAMILY_DEFAULTS[key])
