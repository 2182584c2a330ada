import logging
import os
import sys
import warnings
from argparse import ArgumentParser
from dataclasses import dataclass
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import numpy as np
import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

import PIL.Image

from fracit import FracError, Grid, RenderParameters, locked_aspect, run
from fracit.palettes import PALETTES, colorize, get_palette, parse_hex_color
from fracit.presets import FRACTALS, build_fractal, is_escape_time
from fracit.shading import shade


def select_device():
    """Place shading on the first visible GPU when there is one."""

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, shading on CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        log(e)
        return '/CPU:0'
    log("GPU found, shading on %s" % gpus[0].name)
    return '/GPU:0'


@dataclass
class OutputConfig:
    image_path: Path
    image_format: str


def build_parser():
    parser = ArgumentParser(description="Render an escape-time or polynomiograph fractal to an image.")

    parser.add_argument('--fractal', type=str, choices=FRACTALS, default='mandelbrot',
                        help='iteration rule to render')

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='maximum number of iterations per sample',
                        metavar='MAX_ITERATIONS', default=500)

    parser.add_argument('--radius', type=float,
                        dest='radius', help='bailout radius of escape-time fractals',
                        metavar='RADIUS', default=4.0)

    parser.add_argument('--c-real', type=float,
                        dest='c_real', help='real part of the Julia parameter C',
                        metavar='C_REAL', default=-0.8)

    parser.add_argument('--c-imag', type=float,
                        dest='c_imag', help='imaginary part of the Julia parameter C',
                        metavar='C_IMAG', default=0.156)

    parser.add_argument('--lam', type=float,
                        dest='lam', help='pole weight of the rational Julia map z^2 + lam/z^2 + C',
                        metavar='LAM', default=0.01)

    parser.add_argument('--eps', type=float,
                        dest='eps', help='convergence threshold of polynomiographs',
                        metavar='EPS', default=1e-6)

    parser.add_argument('--order', type=int,
                        dest='order', help='order of the polynomial z^n - 1 solved by polynomiographs',
                        metavar='ORDER', default=3)

    parser.add_argument('--x-res', type=int,
                        dest='x_res', help='resolution of samples along the x-axis',
                        metavar='X_RES', default=512)

    parser.add_argument('--y-res', type=int,
                        dest='y_res', help='resolution of samples along the y-axis',
                        metavar='Y_RES', default=512)

    parser.add_argument('--x-center', type=float,
                        dest='x_center', help='x coordinate of the window center in the complex plane',
                        metavar='X_CENTER', default=-0.75)

    parser.add_argument('--x-width', type=float,
                        dest='x_width', help='width of the sample window in the complex plane',
                        metavar='X_WIDTH', default=2.5)

    parser.add_argument('--y-center', type=float,
                        dest='y_center', help='y coordinate of the window center in the complex plane',
                        metavar='Y_CENTER', default=0)

    parser.add_argument('--y-width', type=float,
                        dest='y_width', help='height of the sample window in the complex plane',
                        metavar='Y_WIDTH', default=2.5)

    parser.add_argument('--lock-aspect', action='store_true',
                        help='Maintains y_width = x_width * (y_res/x_res) to avoid stretching.')

    parser.add_argument('--workers', type=int, default=None,
                        help='number of worker threads. Default: one per CPU.')

    parser.add_argument('--palette', type=str,
                        dest='palette',
                        help='palette name (%s) or any matplotlib colormap' % ', '.join(PALETTES),
                        metavar='PALETTE', default='twilight_shifted')

    parser.add_argument('--output', dest='output', type=str, default=None,
                        help='Destination image file. Default: fractal.<format>.')

    parser.add_argument('--format', type=str,
                        dest='format', help='image file format. Can be any extension supported by Pillow. Default: "png".',
                        metavar='FORMAT', default='png')

    parser.add_argument('--show-edges', help='render the edge detection beside',
                        dest='show_edges', action="store_true")

    parser.add_argument('--normalize', choices=['outside', 'all'], default='outside',
                        help='Normalization strategy: "outside" uses only escaping points; "all" uses every sample.')
    parser.add_argument('--gamma', type=float, default=0.85, help='Gamma correction for tone mapping.')
    parser.add_argument('--clip-low', type=float, default=0.5, help='Lower percentile for normalization clipping.')
    parser.add_argument('--clip-high', type=float, default=99.5, help='Upper percentile for normalization clipping.')
    parser.add_argument('--invert', action='store_true', help='Invert the selected palette.')
    parser.add_argument('--inside-color', type=str, default='#000000', help='Hex color for points that never escape.')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    image_format = (getattr(opt, "format", "png") or "png").lower().lstrip(".")
    if not image_format:
        image_format = "png"

    output_arg = getattr(opt, "output", None)
    if not output_arg:
        return OutputConfig(
            image_path=Path(f"fractal.{image_format}").expanduser().resolve(),
            image_format=image_format,
        )

    if str(output_arg).endswith(tuple(filter(None, {os.sep, os.altsep}))):
        parser.error("--output must be a file path.")
    output_path = Path(output_arg).expanduser()
    if output_path.exists() and output_path.is_dir():
        parser.error("--output must point to a file, not a directory.")

    suffix = output_path.suffix
    expected_suffix = f".{image_format}"
    if suffix:
        if suffix.lower() != expected_suffix.lower():
            parser.error(f"--output extension {suffix} does not match --format {image_format}.")
    else:
        output_path = output_path.with_suffix(expected_suffix)

    return OutputConfig(image_path=output_path.resolve(), image_format=image_format)


def write_single_image(image: PIL.Image.Image, output_path: Path, image_format: str) -> None:
    """Write a single image to ``output_path`` using the provided format."""

    pil_format = _pil_format_name(image_format)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    output_config = resolve_output_config(opt, parser)

    global VERBOSE
    VERBOSE = bool(opt.verbose)
    logging.basicConfig(
        format="%(levelname)s: %(message)s",
        level=logging.DEBUG if VERBOSE else logging.WARNING,
    )

    if opt.order < 2:
        parser.error("--order must be at least 2.")

    params = RenderParameters(
        x_res=opt.x_res,
        y_res=opt.y_res,
        x_center=opt.x_center,
        y_center=opt.y_center,
        x_width=opt.x_width,
        y_width=opt.y_width,
    )
    if opt.lock_aspect:
        params = locked_aspect(params)
    grid = Grid(params)

    try:
        palette = get_palette(opt.palette)
    except ValueError as e:
        parser.error(str(e))

    try:
        inside_rgb = parse_hex_color(opt.inside_color)
    except ValueError:
        print(f"Invalid inside_color '{opt.inside_color}', defaulting to black.")
        inside_rgb = (0.0, 0.0, 0.0)

    fractal = build_fractal(
        opt.fractal,
        radius=opt.radius,
        c=complex(opt.c_real, opt.c_imag),
        eps=opt.eps,
        order=opt.order,
        lam=opt.lam,
    )

    log("Rendering %s at %dx%d, %d iterations" % (opt.fractal, opt.x_res, opt.y_res, opt.max_iterations))
    try:
        results = run(grid, fractal, opt.max_iterations, workers=opt.workers)
    except FracError as e:
        parser.error(str(e))

    shading = shade(results, fractal.config, escape_time=is_escape_time(fractal), device=select_device())

    rgba_uint8 = colorize(
        shading,
        palette,
        normalize=opt.normalize,
        gamma=opt.gamma,
        clip_low=opt.clip_low,
        clip_high=opt.clip_high,
        invert=opt.invert,
        inside_color=inside_rgb,
    )

    if opt.show_edges:
        edges_rgba = np.uint8(np.stack((shading.edges,) * 4, axis=-1) * 255)
        frame_array = np.concatenate((rgba_uint8, edges_rgba), axis=1)
    else:
        frame_array = rgba_uint8

    image = PIL.Image.fromarray(frame_array)
    if output_config.image_format in ("jpg", "jpeg"):
        image = image.convert("RGB")
    write_single_image(image, output_config.image_path, output_config.image_format)
    log("Wrote %s" % output_config.image_path)


if __name__ == '__main__':
    main()
