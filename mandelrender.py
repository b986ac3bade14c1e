import os
import sys
import warnings
from dataclasses import dataclass
from itertools import chain
from pathlib import Path
from typing import Any

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import numpy as np
import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")

import PIL.Image
import imageio

from mandelview import (
    DEFAULT_MAX_ITER,
    ScalarRenderer,
    ViewParameters,
    colormap_colors,
    compute_zoom_factors,
    initial_scale,
    iteration_counts,
    zoom_sequence,
)
from mandelview.parallel import ParallelRenderer

from argparse import ArgumentParser

BACKENDS = ("scalar", "parallel")
VALID_MODES = ("image", "gif")


@dataclass(frozen=True)
class OutputConfig:
    modes: tuple[str, ...]
    gif_path: Path | None
    image_path: Path | None
    image_format: str


def build_parser():
    parser = ArgumentParser(description="Render the Mandelbrot set to an image or a zoom animation.")

    parser.add_argument('--backend', choices=BACKENDS, default='parallel',
                        help='"scalar" evaluates pixels one by one in double precision; '
                             '"parallel" evaluates all pixels at once with TensorFlow in single precision.')

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration budget before a point counts as inside the set',
                        metavar='MAX_ITERATIONS', default=DEFAULT_MAX_ITER)

    parser.add_argument('--width', type=int,
                        dest='width', help='image width in pixels',
                        metavar='WIDTH', default=800)

    parser.add_argument('--height', type=int,
                        dest='height', help='image height in pixels',
                        metavar='HEIGHT', default=600)

    parser.add_argument('--center-re', type=float,
                        dest='center_re', help='real part of the view center',
                        metavar='CENTER_RE', default=-0.5)

    parser.add_argument('--center-im', type=float,
                        dest='center_im', help='imaginary part of the view center',
                        metavar='CENTER_IM', default=0.0)

    parser.add_argument('--scale', type=float,
                        dest='scale', help='plane units per pixel. Default: 4 / HEIGHT.',
                        metavar='SCALE', default=None)

    parser.add_argument('--workers', type=int, default=None,
                        help='number of processes sharing the rows of a scalar render.')

    parser.add_argument('--frames', type=int,
                        dest='frames', help='number of frames to generate',
                        metavar='FRAMES', default=1)

    parser.add_argument('--zoom-factor', type=float,
                        dest='zoom_factor', help='the factor by which to multiply the scale each frame. Choose < 1 for zoom in, >1 for zoom out',
                        metavar='ZOOM_FACTOR', default=0.8)

    parser.add_argument('--final-zoom', type=float, default=None,
                        help='Overall scale applied by the last frame (e.g., 1e-4 narrows the window by 10000x). If set, overrides --zoom-factor.')

    parser.add_argument('--easing', choices=['linear', 'ease'], default='ease',
                        help='Temporal curve used for --final-zoom: "linear" or "ease" for smooth ease-in-out.')

    parser.add_argument('--mode', dest='modes', action='append', metavar='MODE',
                        help='Output modes to generate. May be repeated. Choices: image, gif.')

    parser.add_argument('--output', dest='output', type=str,
                        help='Destination for single-file outputs (gif/image) or container directory when both are requested.')

    parser.add_argument('--colormap', type=str,
                        dest='colormap', help='matplotlib colormap replacing the backend palette (e.g. "viridis", "inferno")',
                        metavar='COLORMAP', default=None)

    parser.add_argument('--format', type=str,
                        dest='format', help='file format for image outputs. Can be any extension supported by Pillow. Default: "png".',
                        metavar='FORMAT', default='png')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


def resolve_output_config(opt, parser: ArgumentParser) -> OutputConfig:
    if opt.width <= 0 or opt.height <= 0:
        parser.error("--width and --height must be positive.")
    if opt.max_iterations < 0:
        parser.error("--max-iterations must be non-negative.")
    if opt.frames < 1:
        parser.error("--frames must be at least 1.")
    if opt.workers is not None and opt.backend != "scalar":
        parser.error("--workers only applies to the scalar backend.")

    modes: list[str] = []
    for mode in opt.modes or ["gif" if opt.frames > 1 else "image"]:
        if mode not in VALID_MODES:
            parser.error(f"Unknown output mode '{mode}'. Valid choices: {', '.join(VALID_MODES)}.")
        if mode not in modes:
            modes.append(mode)

    if "gif" in modes and opt.frames == 1:
        warnings.warn("gif mode with a single frame produces a still GIF.", UserWarning, stacklevel=2)

    image_format = (opt.format or "png").lower().lstrip(".") or "png"

    gif_path: Path | None = None
    image_path: Path | None = None
    output_arg = opt.output

    if len(modes) == 1:
        if output_arg:
            output_path = Path(output_arg).expanduser()
            if output_path.exists() and output_path.is_dir():
                parser.error("--output must point to a file, not a directory, when a single file mode is active.")
            if modes[0] == "gif":
                if output_path.suffix and output_path.suffix.lower() != ".gif":
                    parser.error("GIF outputs must end with .gif.")
                gif_path = output_path.with_suffix(".gif").resolve()
            else:
                expected_suffix = f".{image_format}"
                if output_path.suffix and output_path.suffix.lower() != expected_suffix:
                    parser.error(f"--output extension {output_path.suffix} does not match --format {image_format}.")
                image_path = output_path.with_suffix(expected_suffix).resolve()
        elif modes[0] == "gif":
            gif_path = Path("mandelbrot.gif").resolve()
        else:
            image_path = Path(f"mandelbrot.{image_format}").resolve()
    else:
        base_dir = Path(output_arg).expanduser() if output_arg else Path.cwd()
        if base_dir.exists() and not base_dir.is_dir():
            parser.error("--output must be a directory when both gif and image modes are active.")
        gif_path = (base_dir / "mandelbrot.gif").resolve()
        image_path = (base_dir / f"mandelbrot.{image_format}").resolve()

    return OutputConfig(
        modes=tuple(modes),
        gif_path=gif_path,
        image_path=image_path,
        image_format=image_format,
    )


def select_device() -> str:
    """Place TensorFlow work on the first visible GPU, or on the CPU."""

    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        log("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        log(e)
        return '/CPU:0'
    log("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def write_single_image(frame: np.ndarray, output_path: Path, image_format: str) -> None:
    """Write an RGBA frame to ``output_path`` using the provided format."""

    image = PIL.Image.fromarray(frame)
    pil_format = _pil_format_name(image_format)
    if pil_format == "JPEG":
        image = image.convert("RGB")
    output_path.parent.mkdir(parents=True, exist_ok=True)
    image.save(str(output_path), format=pil_format)


def render_view(opt, view: ViewParameters, device: str) -> np.ndarray:
    """Render one frame as a ``(height, width, 4)`` uint8 array."""

    if opt.backend == "scalar":
        if opt.colormap:
            return colormap_colors(iteration_counts(view, opt.max_iterations), opt.max_iterations, opt.colormap)
        return ScalarRenderer(max_iter=opt.max_iterations, workers=opt.workers).render_array(view)

    renderer = ParallelRenderer(max_iter=opt.max_iterations, device=device)
    if opt.colormap:
        return colormap_colors(renderer.iterations(view), opt.max_iterations, opt.colormap)
    return renderer.render(view)


def main(argv: list[str] | None = None) -> OutputConfig:
    parser = build_parser()
    opt = parser.parse_args(argv)

    output_config = resolve_output_config(opt, parser)

    global VERBOSE
    VERBOSE = bool(opt.verbose)
    log("TensorFlow version: %s" % tf.__version__)

    device = select_device() if opt.backend == "parallel" else '/CPU:0'

    scale = opt.scale if opt.scale is not None else initial_scale(opt.height)
    view = ViewParameters(
        center_re=opt.center_re,
        center_im=opt.center_im,
        scale=scale,
        width=opt.width,
        height=opt.height,
    )

    factors = compute_zoom_factors(
        opt.frames,
        opt.zoom_factor,
        final_zoom=opt.final_zoom,
        easing=opt.easing,
    )
    if opt.frames == 1 and opt.final_zoom is not None:
        views = zoom_sequence(view, factors)
    else:
        views = chain([view], zoom_sequence(view, factors[1:]))

    gif_writer: Any = None
    if output_config.gif_path is not None:
        output_config.gif_path.parent.mkdir(parents=True, exist_ok=True)
        gif_writer = imageio.get_writer(str(output_config.gif_path), mode='I', duration=0.1, loop=0)

    final_frame: np.ndarray | None = None
    try:
        for i, frame_view in enumerate(views):
            if opt.frames > 1:
                print("frame {0} out of {1}".format(i, opt.frames), end='\r')
            log("center=(%.17g, %.17g) scale=%.6g" % (frame_view.center_re, frame_view.center_im, frame_view.scale))
            final_frame = render_view(opt, frame_view, device)
            if gif_writer is not None:
                gif_writer.append_data(final_frame)
    finally:
        if gif_writer is not None:
            gif_writer.close()

    if output_config.image_path is not None and final_frame is not None:
        write_single_image(final_frame, output_config.image_path, output_config.image_format)

    return output_config


if __name__ == '__main__':
    main()
