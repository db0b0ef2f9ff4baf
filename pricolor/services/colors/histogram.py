"""
Quantizing histogram builder.

Turns an RGB pixel buffer into a sparse histogram of quantized color bins.
Two policies are supported:

- RGB direct: every pixel is counted in a packed (r, g, b) level key and each
  occupied bin carries a cached chroma score.
- HSV with exclusion windows: pixels are converted to OpenCV HSV (hue in
  half-degree units), near-monotone pixels and pixels inside the configured
  hue/saturation window are skipped, and the rest are counted in
  (h, s, v) level keys.
"""

from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterator, Optional, Tuple

import cv2
import numpy as np
from loguru import logger

from .quantize import CONIC, chroma, pack_rgb_key, to_level, unpack_rgb_key

HUE_RANGE = 180


@dataclass
class ColorHistogram:
    """Sparse bin -> count mapping with an optional parallel chroma map."""
    counts: Dict[Hashable, int] = field(default_factory=dict)
    chromas: Dict[Hashable, float] = field(default_factory=dict)

    def add(self, key: Hashable, count: int = 1, chroma_value: Optional[float] = None) -> None:
        """Add pixels to a bin; the first chroma seen for a bin is kept."""
        self.counts[key] = self.counts.get(key, 0) + count
        if chroma_value is not None and key not in self.chromas:
            self.chromas[key] = chroma_value

    def merge(self, other: "ColorHistogram") -> "ColorHistogram":
        """Sum counts from another histogram into this one."""
        for key, count in other.counts.items():
            self.add(key, count, other.chromas.get(key))
        return self

    def items(self) -> Iterator[Tuple[Hashable, int, float]]:
        """Yield (key, count, chroma) in ascending key order."""
        for key in sorted(self.counts):
            yield key, self.counts[key], self.chromas.get(key, 0.0)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def __len__(self) -> int:
        return len(self.counts)

    def __bool__(self) -> bool:
        return bool(self.counts)


@dataclass(frozen=True)
class HueWindow:
    """
    Hue exclusion window in half-degree units.

    A negative start wraps around the hue circle: the window then covers
    [start + 180, 180] and [0, end].
    """
    start: int
    end: int

    def contains(self, hue: np.ndarray) -> np.ndarray:
        if self.start < 0:
            return (hue >= self.start + HUE_RANGE) | (hue <= self.end)
        return (hue >= self.start) & (hue <= self.end)


def _count_keys(keys: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    return np.unique(keys, return_counts=True)


def build_rgb_histogram(rgb: np.ndarray, depth: int = 4, model: str = CONIC) -> ColorHistogram:
    """
    Count every pixel in a packed RGB level bin.

    Args:
        rgb: Pixel buffer (H, W, 3) uint8 in RGB order
        depth: Bits kept per channel (0..8)
        model: Chroma model, "conic" or "columnar"

    Returns:
        Histogram whose chroma map holds one score per occupied bin
    """
    shift = 8 - depth
    pixels = rgb.reshape(-1, 3).astype(np.int64)
    levels = to_level(pixels, shift)
    keys = pack_rgb_key(levels[:, 0], levels[:, 1], levels[:, 2], depth)

    histogram = ColorHistogram()
    unique_keys, counts = _count_keys(keys)
    for key, count in zip(unique_keys.tolist(), counts.tolist()):
        r_q, g_q, b_q = unpack_rgb_key(key, depth)
        histogram.add(key, count, chroma(r_q, g_q, b_q, depth, model))

    logger.debug(f"RGB histogram: {len(pixels)} pixels in {len(histogram)} bins (depth={depth}, model={model})")
    return histogram


def hsv_filter_mask(hsv: np.ndarray,
                    hue_window: HueWindow,
                    saturation_window: Tuple[int, int],
                    ignore_monotone: int) -> np.ndarray:
    """
    Boolean mask of the HSV pixels (N, 3) that survive the filters.

    A pixel is dropped when its saturation is below the monotone floor, or
    when its saturation lies in the saturation window and its hue lies in
    the hue window.
    """
    hue = hsv[:, 0].astype(np.int32)
    sat = hsv[:, 1].astype(np.int32)

    keep = sat >= ignore_monotone

    sat_start, sat_end = saturation_window
    in_sat_band = (sat >= sat_start) & (sat <= sat_end)
    keep &= ~(in_sat_band & hue_window.contains(hue))

    return keep


def rgb_to_hsv_pixels(rgb: np.ndarray) -> np.ndarray:
    """Convert an RGB buffer to a flat (N, 3) OpenCV HSV array."""
    return cv2.cvtColor(rgb, cv2.COLOR_RGB2HSV).reshape(-1, 3)


def build_hsv_histogram(rgb: np.ndarray,
                        hbins: int = 2,
                        sbins: int = 5,
                        hue_window: HueWindow = HueWindow(-3, 24),
                        saturation_window: Tuple[int, int] = (40, 180),
                        ignore_monotone: int = 16,
                        peak_only: bool = False) -> ColorHistogram:
    """
    Count filtered pixels in (hue, saturation, value) level bins.

    Args:
        rgb: Pixel buffer (H, W, 3) uint8 in RGB order
        hbins: Hue shift (0..5)
        sbins: Saturation and value shift (0..7)
        hue_window: Hue exclusion window
        saturation_window: Saturation band the hue exclusion applies to
        ignore_monotone: Saturation floor below which pixels are ignored
        peak_only: Count every pixel, bypassing both filters

    Returns:
        Histogram keyed by (h_q, s_q, v_q); empty when every pixel is filtered
    """
    hsv = rgb_to_hsv_pixels(rgb)
    initial_count = hsv.shape[0]

    if not peak_only:
        hsv = hsv[hsv_filter_mask(hsv, hue_window, saturation_window, ignore_monotone)]

    levels = hsv.astype(np.int64)
    keys = (
        (to_level(levels[:, 0], hbins) << 16)
        | (to_level(levels[:, 1], sbins) << 8)
        | to_level(levels[:, 2], sbins)
    )

    histogram = ColorHistogram()
    unique_keys, counts = _count_keys(keys)
    for key, count in zip(unique_keys.tolist(), counts.tolist()):
        histogram.add((key >> 16, (key >> 8) & 0xFF, key & 0xFF), count)

    logger.debug(f"HSV histogram: kept {histogram.total}/{initial_count} pixels "
                 f"in {len(histogram)} bins (hbins={hbins}, sbins={sbins}, peak_only={peak_only})")
    return histogram
