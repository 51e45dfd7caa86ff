"""
Tests for the pattern families and option merging.

Tests:
  merge_options: defaults, clamping, palette fallback, aliases
  palettes:      presets, family lookup
  families:      every family paints, degrades to a single colour,
                 handles complexity extremes
  Flecktarn:     propose / cull pipeline
  Digital:       block size, quantisation, grid painting
  TigerStripe:   coarse noise lookup, patch outline geometry
"""

import math
import random
import sys

from _harness import run_module

import numpy as np

from camo_engine.noise_field import NoiseField
from camo_engine.palettes import (canonical_family, pattern_types, preset_colors,
                                  preset_settings)
from camo_engine.patterns import FAMILIES, merge_options
from camo_engine.patterns import desert, digital, flecktarn, tiger, urban, woodland
from camo_engine.raster import Raster


class _ConstantNoise:

    def __init__(self, value):
        self.value = value

    def noise2D(self, x, y, period=None):
        return self.value


def _run(family, options, size=96, seed=5):
    opts = merge_options(family, dict(options, width=size, height=size))
    raster = Raster(opts.width, opts.height, fill=opts.base_color)
    FAMILIES[family](raster, opts, NoiseField(seed), random.Random(seed))
    return raster, opts


# ---------------------------------------------------------------------------
# Options and palettes
# ---------------------------------------------------------------------------

def test_merge_uses_family_defaults():
    opts = merge_options('tiger')
    assert opts.scale == 50 and opts.complexity == 70
    assert opts.contrast == 50 and opts.sharpness == 50
    assert opts.colors == [(0x8C, 0x7E, 0x5C), (0x50, 0x5B, 0x35), (0, 0, 0)]
    assert opts.get('orientation') == 45
    assert (opts.width, opts.height) == (512, 512)
    assert opts.texture is True


def test_merge_clamps_sliders():
    opts = merge_options('woodland', {'scale': 500, 'complexity': 0,
                                      'contrast': -3, 'sharpness': 'sharp'})
    assert opts.scale == 100
    assert opts.complexity == 1
    assert opts.contrast == 0
    assert opts.sharpness == 50


def test_merge_palette_fallback():
    opts = merge_options('desert', {'colors': ['nope', 42]})
    assert opts.colors[0] == (0xD4, 0xC0, 0x9E)
    assert len(opts.colors) == 5
    opts = merge_options('desert', {'colors': []})
    assert len(opts.colors) == 5


def test_merge_keeps_partial_palette_and_aliases():
    opts = merge_options('digital', {'colors': ['#112233', 'bogus', '#445566'],
                                     'blockSize': 6, 'width': 64, 'height': 32,
                                     'seed': 9, 'texture': False})
    assert opts.colors == [(0x11, 0x22, 0x33), (0x44, 0x55, 0x66)]
    assert opts.get('block_size') == 6
    assert (opts.width, opts.height) == (64, 32)
    assert opts.seed == 9
    assert opts.texture is False


def test_merge_accepts_pattern_options():
    first = merge_options('urban', {'scale': 20})
    second = merge_options('urban', first)
    assert second.scale == 20
    assert second.colors == first.colors


def test_presets():
    assert pattern_types() == ['woodland', 'desert', 'urban', 'digital',
                               'tiger', 'flecktarn']
    assert preset_settings('digital') == {'scale': 30, 'complexity': 30,
                                          'contrast': 80, 'sharpness': 90}
    assert preset_colors('flecktarn')[0] == '#2F3D28'
    assert preset_colors('no-such') == preset_colors('woodland')


def test_family_aliases():
    assert canonical_family('Tiger') == 'tiger'
    assert canonical_family('tigerstripe') == 'tiger'
    assert canonical_family('tiger_stripe') == 'tiger'
    assert canonical_family(' WOODLAND ') == 'woodland'
    assert canonical_family('camouflage-xyz') is None
    assert canonical_family(None) is None


# ---------------------------------------------------------------------------
# All families
# ---------------------------------------------------------------------------

def test_every_family_paints_layers():
    for family in pattern_types():
        size = 160 if family == 'digital' else 96
        extra = {'complexity': 1} if family == 'digital' else {}
        raster, _ = _run(family, dict(extra, texture=False), size=size)
        assert raster.count_colors() >= 2, family


def test_single_colour_palette_fills_base():
    for family in pattern_types():
        raster, _ = _run(family, {'colors': ['#336699'], 'texture': False})
        assert (raster.pixels() == [0x33, 0x66, 0x99]).all(), family


def test_texture_stays_near_base():
    for family in pattern_types():
        raster, _ = _run(family, {'colors': ['#336699']}, size=64)
        diff = np.abs(raster.pixels().astype(int) - [0x33, 0x66, 0x99])
        assert diff.max() <= 45, family


def test_complexity_extremes():
    for family in pattern_types():
        for complexity in (1, 100):
            for scale in (10, 100):
                raster, _ = _run(family, {'complexity': complexity, 'scale': scale},
                                 size=64, seed=complexity + scale)
                assert raster.size == (64, 64)


def test_texture_flag_controls_noise_pass():
    plain, _ = _run('woodland', {'texture': False}, size=64)
    textured, _ = _run('woodland', {'texture': True}, size=64)
    assert plain.count_colors() <= 5
    assert textured.count_colors() > plain.count_colors()


# ---------------------------------------------------------------------------
# Woodland / Urban helpers
# ---------------------------------------------------------------------------

def test_woodland_grid_centres_cover_raster():
    centres = woodland.grid_centres(16, 100, 60, random.Random(2))
    assert len(centres) == 16
    for x, y in centres:
        assert 0 <= x < 100 and 0 <= y < 60
    # one centre per cell of the 4x4 grid
    cells = set((int(x // 25), int(y // 15)) for x, y in centres)
    assert len(cells) == 16


def _captured_radii(module, family):
    """Run *family* at 512 px with shape drawing replaced by a recorder."""
    radii = {}

    def record(raster, spec, color, noise, rng, **kwargs):
        radii.setdefault(color, []).append(spec.radius)
        return []

    opts = merge_options(family, {'texture': False, 'seed': 3})
    raster = Raster(opts.width, opts.height, fill=opts.base_color)
    original = module.draw_shape
    module.draw_shape = record
    try:
        module.generate(raster, opts, NoiseField(3), random.Random(3))
    finally:
        module.draw_shape = original
    return opts, radii


def test_woodland_size_band_is_the_radius():
    opts, radii = _captured_radii(woodland, 'woodland')
    largest = radii[opts.color(1)]
    assert all(60.0 <= r <= 200.0 for r in largest)
    assert max(largest) > 100.0
    assert all(15.0 <= r <= 60.0 for r in radii[opts.color(4)])


def test_desert_size_band_is_the_radius():
    opts, radii = _captured_radii(desert, 'desert')
    # scale 40 -> 0.8 x the 50-150 band
    values = [r for layer in radii.values() for r in layer]
    assert len(values) == 3 * 25
    assert all(40.0 - 1e-9 <= r <= 120.0 + 1e-9 for r in values)
    assert max(values) > 60.0


def test_urban_triangles_are_not_slivers():
    rng = random.Random(11)
    for _ in range(500):
        (x1, y1), (x2, y2), (x3, y3) = urban.triangle(0.0, 0.0, 10.0, rng)
        area = abs((x2 - x1) * (y3 - y1) - (x3 - x1) * (y2 - y1)) * 0.5
        assert area > 0.25 * 10.0 * 10.0
        for x, y in ((x1, y1), (x2, y2), (x3, y3)):
            assert abs(math.hypot(x, y) - 10.0) < 1e-9


def test_urban_shapes():
    rect = urban.rectangle(10, 10, 4, 2)
    assert rect == [(8.0, 9.0), (12.0, 9.0), (12.0, 11.0), (8.0, 11.0)]
    rng = random.Random(4)
    for _ in range(50):
        pts = urban.random_shape(50, 50, 6, rng)
        assert len(pts) >= 3


# ---------------------------------------------------------------------------
# Flecktarn
# ---------------------------------------------------------------------------

def test_propose_spots_gated_by_noise():
    rng = random.Random(1)
    spots = flecktarn.propose_spots(30, 100, 80, _ConstantNoise(1.0), rng,
                                    0.5, 2.0, 5.0)
    assert len(spots) == 60
    for s in spots:
        assert 0 <= s.x < 100 and 0 <= s.y < 80
        assert 2.0 <= s.size <= 5.0
    assert flecktarn.propose_spots(30, 100, 80, _ConstantNoise(0.0), rng,
                                   0.5, 2.0, 5.0) == []


def test_cull_spots_subsamples():
    spots = [flecktarn.Spot(i, i, 1.0) for i in range(40)]
    culled = flecktarn.cull_spots(spots, 10, random.Random(8))
    assert len(culled) == 10
    assert len(set(id(s) for s in culled)) == 10
    assert all(s in spots for s in culled)
    assert [s.x for s in spots] == list(range(40))
    few = flecktarn.cull_spots(spots[:5], 10, random.Random(8))
    assert few == spots[:5]


def test_flecktarn_gate_threshold():
    assert abs(flecktarn.gate_threshold(0.0) - 0.4) < 1e-12
    assert abs(flecktarn.gate_threshold(1.0) - 0.55) < 1e-12


def test_flecktarn_layer_count_scales_with_area():
    assert flecktarn.layer_count(500, 300, 1.0, 512, 512) == 800
    assert flecktarn.layer_count(500, 300, 1.0, 256, 256) == 200
    assert flecktarn.layer_count(500, 300, 1.0, 4, 4) == 1


# ---------------------------------------------------------------------------
# Digital
# ---------------------------------------------------------------------------

def test_digital_block_size():
    assert digital.block_size_for(merge_options('digital', {'scale': 30})) == 4
    assert digital.block_size_for(merge_options('digital', {'scale': 100})) == 10
    assert digital.block_size_for(merge_options('digital', {'scale': 10})) == 3
    assert digital.block_size_for(merge_options('digital', {'block_size': 7})) == 7


def test_digital_grid_shape():
    assert digital.grid_shape(96, 48, 8) == (6, 12)
    assert digital.grid_shape(2, 2, 8) == (1, 1)


def test_quantize_bands():
    out = digital.quantize([0.0, 0.19, 0.2, 0.99, 1.0], 4)
    assert out.tolist() == [0, 0, 1, 4, 4]


def test_paint_grid_tiles():
    r = Raster(4, 4, fill='#FFFFFF')
    grid = np.array([[0, 1], [2, 3]])
    colors = [(255, 255, 255), (10, 10, 10), (20, 20, 20), (30, 30, 30)]
    digital.paint_grid(r, grid, colors)
    assert r.get_pixel(0, 0) == (10, 10, 10)
    assert r.get_pixel(3, 0) == (20, 20, 20)
    assert r.get_pixel(1, 3) == (30, 30, 30)
    assert r.get_pixel(3, 3) == (255, 255, 255)


def test_digital_cell_noise_is_periodic():
    values = digital.cell_noise(NoiseField(6), 20, 30, 0.1)
    assert values.shape == (20, 30)
    assert values.min() >= 0.0 and values.max() <= 1.0


# ---------------------------------------------------------------------------
# TigerStripe
# ---------------------------------------------------------------------------

def test_sample_coarse_bilinear():
    values = np.array([[0.0, 1.0], [2.0, 3.0]])
    assert tiger.sample_coarse(values, 0, 0, 100, 100) == 0.0
    assert abs(tiger.sample_coarse(values, 25, 0, 100, 100) - 0.5) < 1e-12
    assert abs(tiger.sample_coarse(values, 0, 25, 100, 100) - 1.0) < 1e-12
    # wrapped coordinates
    assert tiger.sample_coarse(values, 100, -100, 100, 100) == 0.0


def test_patch_centre_wrapped():
    for i in range(8):
        x, y = tiger.patch_centre(i, 40.0, 128, 96, math.radians(45))
        assert 0 <= x < 128 and 0 <= y < 96


def test_build_patch_outline_geometry():
    angle = math.radians(30)
    centre = (50.0, 40.0)
    outline = tiger.build_patch_outline(centre, 100, 80, 10.0, 0.5, angle,
                                        np.zeros((4, 4)))
    assert len(outline) == 40
    dx, dy = math.cos(angle), math.sin(angle)
    for x, y in outline:
        # with flat noise every point sits 0.7 * width off the axis
        dist = abs((x - centre[0]) * dy - (y - centre[1]) * dx)
        assert abs(dist - 7.0) < 1e-9


if __name__ == '__main__':
    sys.exit(run_module("camo_engine pattern family tests", globals()))
