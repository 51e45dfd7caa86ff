"""
Tests for the Raster buffer and the shape compositor.

Tests:
  Raster: creation, colour parsing, rect/polygon fills, pixel and region
          access, closing, tiled previews
  Shapes: blob outlines, curve flattening, toroidal replication offsets,
          wrapped drawing
"""

import math
import random
import sys

from _harness import run_module

import numpy as np

from camo_engine.noise_field import NoiseField
from camo_engine.raster import (Raster, RasterAccessError, parse_color,
                                parse_palette, rgb_to_hex)
from camo_engine.shape_compositor import (ShapeSpec, blob_outline, cubic_path,
                                          draw_shape, draw_wrapped,
                                          quadratic_path, wrap_offsets)


# ---------------------------------------------------------------------------
# Colour parsing
# ---------------------------------------------------------------------------

def test_parse_color_forms():
    assert parse_color('#FF8000') == (255, 128, 0)
    assert parse_color('#abc') == (170, 187, 204)
    assert parse_color('abc') == (170, 187, 204)
    assert parse_color('445C2B') == (0x44, 0x5C, 0x2B)
    assert parse_color('red') == (255, 0, 0)
    assert parse_color((1, 2, 3, 4)) == (1, 2, 3)
    assert parse_color([300, -4, 7]) == (255, 0, 7)


def test_parse_color_rejects_garbage():
    for bad in ('not-a-colour', 12, None, (1, 2)):
        try:
            parse_color(bad)
        except ValueError:
            continue
        raise AssertionError("accepted {!r}".format(bad))


def test_parse_palette_drops_invalid():
    assert parse_palette(['#000000', 'bogus', '#FFFFFF']) == [(0, 0, 0), (255, 255, 255)]
    assert parse_palette(None) == []
    assert rgb_to_hex((0x4B, 0x53, 0x20)) == '#4B5320'


def test_parse_palette_single_colours_and_junk():
    assert parse_palette('#336699') == [(0x33, 0x66, 0x99)]
    assert parse_palette((1, 2, 3)) == [(1, 2, 3)]
    assert parse_palette([10, 20, 30, 255]) == [(10, 20, 30)]
    assert parse_palette(5) == []
    assert parse_palette([['a', 'b', 'c'], '#000']) == [(0, 0, 0)]


# ---------------------------------------------------------------------------
# Raster
# ---------------------------------------------------------------------------

def test_new_raster_is_filled():
    r = Raster(8, 6, fill='#FF0000')
    assert r.size == (8, 6)
    arr = r.pixels()
    assert arr.shape == (6, 8, 3)
    assert (arr == [255, 0, 0]).all()


def test_non_positive_size_rejected():
    for w, h in [(0, 5), (5, 0), (-1, 3)]:
        try:
            Raster(w, h)
        except ValueError:
            continue
        raise AssertionError("accepted {}x{}".format(w, h))


def test_fill_rect_is_exclusive():
    r = Raster(10, 10)
    r.fill_rect(2, 2, 5, 5, '#FFFFFF')
    arr = r.pixels()
    assert int((arr[..., 0] == 255).sum()) == 9
    assert r.get_pixel(4, 4) == (255, 255, 255)
    assert r.get_pixel(5, 5) == (0, 0, 0)


def test_fill_polygon_clips_off_raster():
    r = Raster(10, 10)
    r.fill_polygon([(-5, -5), (5, -5), (5, 5), (-5, 5)], '#00FF00')
    assert r.get_pixel(0, 0) == (0, 255, 0)
    assert r.get_pixel(8, 8) == (0, 0, 0)


def test_get_pixel_wraps():
    r = Raster(4, 4)
    r.fill_rect(3, 3, 4, 4, '#0000FF')
    assert r.get_pixel(-1, -1) == (0, 0, 255)
    assert r.get_pixel(7, 7) == (0, 0, 255)


def test_put_pixels_clips_and_rounds():
    r = Raster(3, 2)
    data = np.array([[[300, -5, 10.6]] * 3] * 2, dtype=np.float64)
    r.put_pixels(data)
    assert r.get_pixel(1, 1) == (255, 0, 11)


def test_put_pixels_shape_mismatch():
    r = Raster(3, 2)
    try:
        r.put_pixels(np.zeros((3, 3, 3)))
    except ValueError:
        return
    raise AssertionError("shape mismatch not detected")


def test_regions():
    r = Raster(6, 6)
    block = np.full((2, 3, 3), 200, dtype=np.uint8)
    r.put_region(4, 1, block)  # clipped to 2 columns
    region = r.get_region(3, 0, 3, 3)
    assert region.shape == (3, 3, 3)
    assert (region[1, 1:] == 200).all()
    assert (region[1, 0] == 0).all()
    assert (region[0] == 0).all()


def test_count_colors_and_copy():
    r = Raster(4, 4, fill='#101010')
    r.fill_rect(0, 0, 2, 2, '#202020')
    r.fill_rect(2, 2, 4, 4, '#303030')
    assert r.count_colors() == 3
    c = r.copy()
    c.fill('#000000')
    assert r.count_colors() == 3
    assert c.count_colors() == 1


def test_closed_raster_raises():
    r = Raster(4, 4)
    r.close()
    assert r.closed
    for op in (r.pixels, lambda: r.fill('#000000'), lambda: r.get_pixel(0, 0)):
        try:
            op()
        except RasterAccessError:
            continue
        raise AssertionError("closed raster still accessible")
    r.close()


def test_tiled_preview():
    r = Raster(5, 3, fill='#123456')
    r.fill_rect(0, 0, 1, 1, '#FFFFFF')
    img = r.tiled(3, 2)
    assert img.size == (15, 6)
    assert img.getpixel((5, 3))[:3] == (255, 255, 255)


def test_from_array():
    arr = np.zeros((4, 5, 3), dtype=np.uint8)
    arr[1, 2] = (9, 8, 7)
    r = Raster.from_array(arr)
    assert r.size == (5, 4)
    assert r.get_pixel(2, 1) == (9, 8, 7)


# ---------------------------------------------------------------------------
# Shape compositor
# ---------------------------------------------------------------------------

def test_blob_outline_without_noise_terms_is_circle():
    spec = ShapeSpec(50, 40, radius=10, points=8, irregularity=0.0,
                     elongation=0.0, bias=1.0)
    pts = blob_outline(spec, NoiseField(1))
    assert len(pts) == 8
    for x, y in pts:
        assert abs(math.hypot(x - 50, y - 40) - 10) < 1e-9


def test_blob_outline_elongation_stretches_axis():
    spec = ShapeSpec(0, 0, radius=10, points=4, irregularity=0.0,
                     elongation=0.5, bias=1.0)
    pts = blob_outline(spec, NoiseField(1))
    # angle 0 -> 1.5x, angle pi/2 -> 0.5x
    assert abs(pts[0][0] - 15.0) < 1e-9
    assert abs(pts[1][1] - 5.0) < 1e-9


def test_blob_outline_radius_bounds():
    noise = NoiseField(4)
    spec = ShapeSpec(0, 0, radius=20, points=12, irregularity=0.5,
                     elongation=0.0, bias=0.7, noise_offset=(13.3, 7.1))
    for x, y in blob_outline(spec, noise):
        d = math.hypot(x, y)
        assert 20 * 0.7 - 1e-9 <= d <= 20 * 1.2 + 1e-9


def test_curve_paths():
    verts = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]
    cubic = cubic_path(verts, steps=5)
    assert len(cubic) == 20
    assert cubic[0] == verts[0]
    assert cubic[5] == verts[1]
    quad = quadratic_path(verts, (5.0, 5.0), random.Random(0), steps=4)
    assert len(quad) == 16
    assert quad[4] == verts[1]


def test_wrap_offsets_small_shape_is_3x3():
    offsets = wrap_offsets([(10, 10), (20, 10), (15, 20)], 100, 80)
    assert len(offsets) == 9
    assert (-100, -80) in offsets and (100, 80) in offsets and (0, 0) in offsets


def test_wrap_offsets_large_shape_extends():
    offsets = wrap_offsets([(-10, 5), (250, 5), (120, 30)], 100, 100)
    kxs = set(dx // 100 for dx, dy in offsets)
    assert {-2, -1, 0, 1}.issubset(kxs)


def test_draw_wrapped_crosses_edge():
    r = Raster(40, 40)
    draw_wrapped(r, [(35, 10), (45, 10), (45, 20), (35, 20)], '#FFFFFF')
    assert r.get_pixel(37, 15) == (255, 255, 255)
    assert r.get_pixel(2, 15) == (255, 255, 255)
    assert r.get_pixel(20, 15) == (0, 0, 0)


def test_draw_wrapped_corner_shape_is_toroidal():
    # drawing a shape, or the same shape moved half a tile, must give
    # rasters that are rolls of each other
    size = 48
    outline = [(40.2, 41.7), (55.9, 38.3), (57.1, 52.6), (44.4, 58.8), (37.0, 50.1)]
    a = Raster(size, size)
    b = Raster(size, size)
    draw_wrapped(a, outline, '#FFFFFF')
    draw_wrapped(b, [(x - size / 2, y - size / 2) for x, y in outline], '#FFFFFF')
    rolled = np.roll(a.pixels(), (-size // 2, -size // 2), axis=(0, 1))
    differing = np.count_nonzero(np.any(rolled != b.pixels(), axis=2))
    assert differing <= size * size * 0.01


def test_draw_shape_returns_outline_and_paints():
    r = Raster(64, 64)
    spec = ShapeSpec(32, 32, radius=12, points=8, irregularity=0.3,
                     noise_offset=(3.0, 4.0))
    for smoothing in ('straight', 'quadratic', 'cubic', 'mixed'):
        outline = draw_shape(r, spec, '#FFFFFF', NoiseField(2), random.Random(1),
                             smoothing=smoothing)
        assert len(outline) >= 8
    assert r.get_pixel(32, 32) == (255, 255, 255)
    assert r.get_pixel(0, 0) == (0, 0, 0)


if __name__ == '__main__':
    sys.exit(run_module("camo_engine Raster / ShapeCompositor tests", globals()))
