import argparse
import sys

from .fractals import FRACTAL_NAMES, ConfigurationError, fractal_from_name, parse_iterations
from .log import error, log, set_verbose
from .view import DEFAULT_HEIGHT, DEFAULT_SCALE, DEFAULT_WIDTH, ViewState


def build_parser():
    parser = argparse.ArgumentParser(
        prog="pyfractal",
        description="Interactive escape-time fractal viewer",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "fractal",
        help=f"the fractal to render, one of: {', '.join(FRACTAL_NAMES)}",
    )
    parser.add_argument(
        "iterations",
        nargs="?",
        default=None,
        help="the number of iterations per pixel (default: 30)",
    )
    parser.add_argument(
        "--dims",
        type=int,
        default=[DEFAULT_WIDTH, DEFAULT_HEIGHT],
        nargs=2,
        metavar=("WIDTH", "HEIGHT"),
        help="The initial window dimensions, in pixels",
    )
    parser.add_argument(
        "--scale",
        type=float,
        default=DEFAULT_SCALE,
        help="The initial zoom, in pixels per complex-plane unit",
    )
    parser.add_argument(
        "--pan",
        type=float,
        default=[0.0, 0.0],
        nargs=2,
        metavar=("X", "Y"),
        help="The complex-plane point shown at the window center",
    )
    parser.add_argument(
        "-o",
        "--out-file",
        default=None,
        help="render a single frame to this image file instead of opening a window",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="print per-frame diagnostics",
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    set_verbose(args.verbose)

    try:
        iterations = None if args.iterations is None else parse_iterations(args.iterations)
        spec = fractal_from_name(args.fractal, iterations)
    except ConfigurationError as e:
        parser.error(str(e))

    try:
        view = ViewState(
            width=args.dims[0],
            height=args.dims[1],
            pan_x=args.pan[0],
            pan_y=args.pan[1],
            scale=args.scale,
        )
    except ValueError as e:
        parser.error(str(e))

    print(f"Fractal: {spec.name}")
    print(f"iterations: {spec.max_iterations}")
    log(f"dims: {view.width}x{view.height}")
    log(f"scale: {view.scale}")
    log(f"pan: {view.pan}")

    if args.out_file:
        from .engine import render

        try:
            path = render(spec, view).save(args.out_file)
        except (OSError, ValueError) as e:
            error(f"could not write {args.out_file}: {e}")
            return 1
        print(f"Saved: {path}")
        return 0

    import pygame

    from .viewer import FractalViewer

    try:
        FractalViewer(spec, view).run()
    except pygame.error as e:
        error(f"display failure: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
