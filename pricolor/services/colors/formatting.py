"""
Output formatting for picked colors.
"""

from typing import Tuple

OUTPUT_STYLES = ("decimal", "hex", "css", "hsv")


def format_decimal(rgb: Tuple[int, int, int]) -> str:
    """RGB as "R G B"."""
    r, g, b = rgb
    return f"{r} {g} {b}"


def format_hex(rgb: Tuple[int, int, int]) -> str:
    """RGB as "rrggbb"."""
    r, g, b = rgb
    return f"{r:02x}{g:02x}{b:02x}"


def format_css(rgb: Tuple[int, int, int], depth: int = 8) -> str:
    """
    RGB as a CSS hex color.

    The short "#rgb" form is used when the quantization depth is 4 bits or
    less and every channel is exactly one repeated hex digit; otherwise the
    full "#rrggbb" form.
    """
    if depth <= 4 and all(c % 17 == 0 for c in rgb):
        return "#" + "".join(f"{c // 17:x}" for c in rgb)
    return "#" + format_hex(rgb)


def format_hsv(hsv: Tuple[int, int, int]) -> str:
    """OpenCV HSV as "H S% V%" with hue in degrees [0, 360)."""
    h, s, v = hsv
    degrees = (h * 2) % 360
    return f"{degrees} {round(s * 100 / 255)}% {round(v * 100 / 255)}%"


def format_result(result, style: str = "decimal") -> str:
    """
    Render a PickResult in one of the supported output styles.

    Raises:
        ValueError: For an unknown style
    """
    if style == "decimal":
        return format_decimal(result.rgb)
    if style == "hex":
        return format_hex(result.rgb)
    if style == "css":
        return format_css(result.rgb, result.depth)
    if style == "hsv":
        return format_hsv(result.hsv)
    raise ValueError(f"Unknown output style '{style}'. Supported: {', '.join(OUTPUT_STYLES)}")
