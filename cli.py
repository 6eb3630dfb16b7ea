import argparse
import sys
import time

import ray
from imagefile import write_ppm
from scenes import EXAMPLES


def render(scene_def, output_path=None, verbose=True):
    """Render a scene definition to output_path, or as PPM text on stdout."""
    start_time = time.time()
    if output_path is None:
        s = scene_def.settings
        write_ppm(sys.stdout, scene_def.viewport(), s.width, s.height, s.max_value)
    else:
        scene_def.render(output_path, verbose=verbose)
    if verbose:
        print(f"Render finished in {time.time() - start_time:.2f} seconds.", file=sys.stderr)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Sphere ray caster')
    parser.add_argument('--scene', choices=sorted(EXAMPLES), default='single-sphere',
                        help='Built-in scene to render')
    parser.add_argument('--lighting', choices=ray.LIGHTING_MODES, default=None,
                        help='Override the scene lighting mode')
    parser.add_argument('--light-direction', type=float, nargs=3, default=None,
                        metavar=('X', 'Y', 'Z'), help='Direction towards the light')
    parser.add_argument('--projection', choices=ray.PROJECTIONS, default=None,
                        help='Override the scene camera projection')
    parser.add_argument('--width', type=int, default=None, help='Image width')
    parser.add_argument('--height', type=int, default=None, help='Image height')
    parser.add_argument('-o', '--output', default=None,
                        help='Output .ppm or .png file (default: PPM on stdout)')
    parser.add_argument('--quiet', action='store_true', help='Suppress progress messages')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    overrides = {}
    for name in ('lighting', 'light_direction', 'projection', 'width', 'height'):
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value

    try:
        scene_def = EXAMPLES[args.scene]()
        if overrides:
            scene_def = scene_def.with_settings(**overrides)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if not args.quiet:
        s = scene_def.settings
        print(f"Scene: {args.scene} {s.width}x{s.height} {s.projection} {s.lighting}", file=sys.stderr)
    render(scene_def, args.output, verbose=not args.quiet)
    return 0


if __name__ == '__main__':
    sys.exit(main())
