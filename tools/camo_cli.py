#!/usr/bin/env python
"""
Command-line front end for camo_engine.

Subcommands:
  generate  Generate one pattern, report the seam check, optionally save PNG
  presets   List the pattern families with their preset palettes and sliders

Usage:
  python camo_cli.py generate woodland -o woodland.png
  python camo_cli.py generate flecktarn --complexity 80 --seed 7 --tile 3
  python camo_cli.py generate digital --colors 445C2B 79573E B7A998 --size 256 256
  python camo_cli.py presets
"""

import os
import sys
import argparse
import logging

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, PROJECT_ROOT)

from camo_engine import (GenerationService, pattern_types, preset_colors,
                         preset_settings, rgb_to_hex)


def _build_options(args):
    options = {}
    for name in ('scale', 'complexity', 'contrast', 'sharpness', 'seed',
                 'orientation', 'block_size'):
        value = getattr(args, name)
        if value is not None:
            options[name] = value
    if args.preset:
        for name, value in preset_settings(args.family).items():
            options.setdefault(name, value)
        if not args.colors:
            options['colors'] = preset_colors(args.family)
    if args.colors:
        options['colors'] = args.colors
    if args.size:
        options['width'], options['height'] = args.size
    if args.no_texture:
        options['texture'] = False
    return options


def cmd_generate(args):
    service = GenerationService(post_process=not args.raw)
    result = service.generate(args.family, _build_options(args))
    if not result.ok:
        print("Generation failed: {}".format(result.error))
        return 1

    raster = result.raster
    print("{} {}x{} seed={} seamless={} ({:.2f}s)".format(
        result.family, raster.width, raster.height, result.seed,
        'yes' if result.seamless else 'NO', result.elapsed))
    print("palette: {}".format(' '.join(rgb_to_hex(c) for c in result.options.colors)))
    for warning in result.warnings:
        print("warning: {}".format(warning))

    if args.output:
        raster.image.save(args.output)
        print("-> {}".format(args.output))
    if args.tile:
        tile_path = args.tile_output or '{}_tiled.png'.format(result.family)
        raster.tiled(args.tile, args.tile).save(tile_path)
        print("-> {} ({}x{} tiles)".format(tile_path, args.tile, args.tile))
    raster.close()
    return 0


def cmd_presets(args):
    for family in pattern_types():
        settings = preset_settings(family)
        print("{:<10} {}".format(family, ' '.join(preset_colors(family))))
        print("{:<10} scale={scale} complexity={complexity} "
              "contrast={contrast} sharpness={sharpness}".format('', **settings))
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Seamless camouflage pattern generator')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Debug logging')
    subparsers = parser.add_subparsers(dest='command')

    # -- generate -------------------------------------------------------
    p_gen = subparsers.add_parser('generate', help='Generate one pattern')
    p_gen.add_argument('family', help='Pattern family ({})'.format(
        ', '.join(pattern_types())))
    p_gen.add_argument('-o', '--output', help='Write the raster to this PNG')
    p_gen.add_argument('--scale', type=float)
    p_gen.add_argument('--complexity', type=float)
    p_gen.add_argument('--contrast', type=float)
    p_gen.add_argument('--sharpness', type=float)
    p_gen.add_argument('--seed', type=int)
    p_gen.add_argument('--orientation', type=float,
                       help='Tiger stripe axis in degrees')
    p_gen.add_argument('--block-size', dest='block_size', type=int,
                       help='Digital block edge in pixels')
    p_gen.add_argument('--colors', nargs='+',
                       help='Palette, base colour first (hex or CSS names)')
    p_gen.add_argument('--size', nargs=2, type=int, metavar=('W', 'H'))
    p_gen.add_argument('--preset', action='store_true',
                       help='Start from the family preset sliders and palette')
    p_gen.add_argument('--no-texture', action='store_true',
                       help='Skip the fine-grain noise texture')
    p_gen.add_argument('--raw', action='store_true',
                       help='Skip contrast and sharpening')
    p_gen.add_argument('--tile', type=int, default=0,
                       help='Also save an N x N tiled preview')
    p_gen.add_argument('--tile-output', help='Path for the tiled preview')

    # -- presets --------------------------------------------------------
    subparsers.add_parser('presets', help='List families and presets')

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s %(name)s: %(message)s')

    if args.command == 'generate':
        return cmd_generate(args)
    if args.command == 'presets':
        return cmd_presets(args)
    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
