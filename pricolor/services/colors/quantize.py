"""
Channel quantization helpers.

All helpers accept Python ints or numpy integer arrays. A *level* is the
reduced channel value left after shifting away low bits; a *shift* is the
number of bits removed.
"""

from typing import Tuple, Union

import numpy as np

IntOrArray = Union[int, np.ndarray]

CONIC = "conic"
COLUMNAR = "columnar"


def to_level(values: IntOrArray, shift: int) -> IntOrArray:
    """Reduce 8-bit channel values to levels."""
    return values >> shift


def from_level(levels: IntOrArray, shift: int) -> IntOrArray:
    """Inverse shift: the lowest channel value mapping to each level."""
    return levels << shift


def quantize(values: IntOrArray, shift: int) -> IntOrArray:
    """Snap values to their level floor. Idempotent."""
    return from_level(to_level(values, shift), shift)


def bins_per_axis(channel_range: int, shift: int) -> int:
    """Number of distinct levels for a channel of the given range."""
    return ((channel_range - 1) >> shift) + 1


def pack_rgb_key(r_q: IntOrArray, g_q: IntOrArray, b_q: IntOrArray, depth: int) -> IntOrArray:
    return (r_q << (depth * 2)) | (g_q << depth) | b_q


def unpack_rgb_key(key: int, depth: int) -> Tuple[int, int, int]:
    mask = (1 << depth) - 1
    b_q = key & mask
    key >>= depth
    g_q = key & mask
    key >>= depth
    r_q = key & mask
    return r_q, g_q, b_q


def full_scale(level: int, depth: int) -> int:
    """
    Expand an RGB level kept at `depth` bits back to the 0..255 range.

    The top level maps to 255 and zero stays zero, and re-quantizing the
    result at the same depth gives the level back.
    """
    if depth == 0:
        return 0
    return level * 255 // ((1 << depth) - 1)


def chroma(r_q: int, g_q: int, b_q: int, depth: int, model: str = CONIC) -> float:
    """
    Colorfulness of a quantized RGB bin in [0.0, 1.0].

    conic:    (max - min) / (2^depth - 1)
    columnar: (max - min) / max
    """
    cmax = max(r_q, g_q, b_q)
    cmin = min(r_q, g_q, b_q)

    if cmax <= 0 or cmax == cmin:
        return 0.0

    if model == COLUMNAR:
        return (cmax - cmin) / cmax
    return (cmax - cmin) / ((1 << depth) - 1)
