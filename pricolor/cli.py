"""
pricolor - PricolorPicker command line.

Picks the primary color of an image file. The primary color is the most used
chromatic color: first the most used color whose chroma is at least the first
threshold, then one at least the second threshold, and finally the most used
color overall.
"""
import argparse
import sys
from dataclasses import replace
from typing import List, Optional, Tuple

from pricolor import __version__
from pricolor.config import PickerSettings
from pricolor.errors import PricolorError
from pricolor.services.colors.formatting import format_result
from pricolor.services.picker import pick_from_file
from pricolor.utils.logging import get_logger


def _size(raw: str) -> Optional[Tuple[int, int]]:
    if raw == "0":
        return None
    try:
        width, height = raw.lower().split("x")
        return int(width), int(height)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT or 0, got '{raw}'")


def build_parser() -> argparse.ArgumentParser:
    defaults = PickerSettings.from_config()

    parser = argparse.ArgumentParser(
        prog="pricolor",
        description="Get the primary color of an image file."
    )
    parser.add_argument("image", metavar="IMAGEFILE", help="Image file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    output = parser.add_mutually_exclusive_group()
    output.add_argument("-x", "--hex", dest="style", action="store_const", const="hex",
                        help="Output with hexadecimals (rrggbb)")
    output.add_argument("-s", "--css", dest="style", action="store_const", const="css",
                        help="Output CSS format (#rgb or #rrggbb)")
    output.add_argument("--hsv-output", dest="style", action="store_const", const="hsv",
                        help="Output 'H S%% V%%' with hue in degrees")
    parser.set_defaults(style="decimal")

    parser.add_argument("-p", "--peak-only", action="store_true",
                        help="Simply, most used color picking")
    parser.add_argument("--policy", choices=("rgb", "hsv"), default=defaults.policy,
                        help=f"Histogram policy (default {defaults.policy})")

    rgb = parser.add_argument_group("rgb policy")
    rgb.add_argument("-c", "--upper-chroma", type=float, default=defaults.upper_chroma,
                     help=f"0<n<1.0. First pickup threshold (default {defaults.upper_chroma})")
    rgb.add_argument("-n", "--lower-chroma", type=float, default=defaults.lower_chroma,
                     help=f"0<n<1.0. Second pickup threshold (default {defaults.lower_chroma})")
    rgb.add_argument("-d", "--depth", type=int, default=defaults.color_depth,
                     help=f"Bits kept per channel, 0-8 (default {defaults.color_depth})")
    rgb.add_argument("--chroma-model", choices=("conic", "columnar"), default=defaults.chroma_model,
                     help=f"Chroma model (default {defaults.chroma_model})")

    hsv = parser.add_argument_group("hsv policy")
    hsv.add_argument("--hbins", type=int, default=defaults.hbins,
                     help=f"Hue shift, 0-5 (default {defaults.hbins})")
    hsv.add_argument("--sbins", type=int, default=defaults.sbins,
                     help=f"Saturation/value shift, 0-7 (default {defaults.sbins})")
    hsv.add_argument("--hue-window", type=int, nargs=2, metavar=("START", "END"),
                     default=list(defaults.hue_window),
                     help="Excluded hue range in half degrees, negative START wraps "
                          f"(default {defaults.hue_window[0]} {defaults.hue_window[1]})")
    hsv.add_argument("--sat-window", type=int, nargs=2, metavar=("START", "END"),
                     default=list(defaults.saturation_window),
                     help="Saturation band the hue exclusion applies to "
                          f"(default {defaults.saturation_window[0]} {defaults.saturation_window[1]})")
    hsv.add_argument("-w", "--whiten", type=float, default=None, metavar="FACTOR",
                     help="Divide the picked value channel by FACTOR (> 0.0)")

    pre = parser.add_argument_group("preprocessing")
    pre.add_argument("-r", "--clip-ratio", type=float, default=defaults.clip_ratio,
                     help=f"Center crop ratio, 0-0.9 (default {defaults.clip_ratio})")
    pre.add_argument("--resize", type=_size, default=defaults.resize, metavar="WxH",
                     help="Working resolution, 0 disables (default 200x200)")
    pre.add_argument("-m", "--median-kernel", type=int, default=defaults.median_kernel,
                     help=f"Median filter kernel, 0 or odd 3-9 (default {defaults.median_kernel})")

    return parser


def settings_from_args(args: argparse.Namespace) -> PickerSettings:
    return replace(
        PickerSettings.from_config(),
        policy=args.policy,
        color_depth=args.depth,
        upper_chroma=args.upper_chroma,
        lower_chroma=args.lower_chroma,
        chroma_model=args.chroma_model,
        hbins=args.hbins,
        sbins=args.sbins,
        peak_only=args.peak_only,
        hue_window=tuple(args.hue_window),
        saturation_window=tuple(args.sat_window),
        clip_ratio=args.clip_ratio,
        resize=args.resize,
        median_kernel=args.median_kernel,
        whitening_factor=args.whiten
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    get_logger()

    try:
        result = pick_from_file(args.image, settings_from_args(args))
    except PricolorError as e:
        print(str(e), file=sys.stderr)
        return 1

    print(format_result(result, args.style))
    return 0


if __name__ == "__main__":
    sys.exit(main())
