"""
Peak Selection Module

Chooses the single histogram bin that represents the primary color and
expands it back into 8-bit color values.

RGB histograms use a three-tier fallback: the most used bin with chroma at
or above the upper threshold, else the most used bin at or above the lower
threshold, else the most used bin overall. HSV histograms are already
filtered during construction and use a plain maximum.
"""

from dataclasses import dataclass
from typing import Hashable, Optional, Tuple

import cv2
import numpy as np
from loguru import logger

from .histogram import ColorHistogram
from .quantize import from_level, full_scale, unpack_rgb_key

TIER_STRICT = "strict"
TIER_LOOSE = "loose"
TIER_ANY = "any"
TIER_PEAK = "peak"
TIER_NONE = "none"

BLACK = (0, 0, 0)


@dataclass(frozen=True)
class Selection:
    """Winning bin of a histogram, or no data when nothing was counted."""
    key: Optional[Hashable]
    count: int
    tier: str

    @classmethod
    def empty(cls) -> "Selection":
        return cls(key=None, count=0, tier=TIER_NONE)

    @property
    def no_data(self) -> bool:
        return self.key is None


class _RunningPeak:
    """Tracks the first bin reaching the highest count seen so far."""

    def __init__(self):
        self.key = None
        self.count = 0

    def offer(self, key: Hashable, count: int) -> None:
        if count > self.count:
            self.key = key
            self.count = count

    @property
    def found(self) -> bool:
        return self.key is not None


def select_tiered(histogram: ColorHistogram,
                  upper_threshold: float = 0.5,
                  lower_threshold: float = 0.2,
                  peak_only: bool = False) -> Selection:
    """
    Pick a bin using the strict -> loose -> any fallback.

    All three running maxima are tracked in one ascending-key pass, so ties
    inside a tier go to the lowest bin key.

    Args:
        histogram: RGB histogram with a chroma map
        upper_threshold: Chroma floor of the strict tier
        lower_threshold: Chroma floor of the loose tier
        peak_only: Skip the chroma tiers and return the most used bin

    Returns:
        Selection tagged with the tier that produced it
    """
    peak_any = _RunningPeak()
    peak_strict = _RunningPeak()
    peak_loose = _RunningPeak()

    for key, count, bin_chroma in histogram.items():
        peak_any.offer(key, count)

        if peak_only:
            continue

        if bin_chroma >= upper_threshold:
            peak_strict.offer(key, count)

        if bin_chroma >= lower_threshold:
            peak_loose.offer(key, count)

    if peak_strict.found:
        selection = Selection(peak_strict.key, peak_strict.count, TIER_STRICT)
    elif peak_loose.found:
        selection = Selection(peak_loose.key, peak_loose.count, TIER_LOOSE)
    elif peak_any.found:
        selection = Selection(peak_any.key, peak_any.count, TIER_PEAK if peak_only else TIER_ANY)
    else:
        selection = Selection.empty()

    logger.debug(f"Tiered selection over {len(histogram)} bins: key={selection.key} "
                 f"count={selection.count} tier={selection.tier}")
    return selection


def select_peak(histogram: ColorHistogram) -> Selection:
    """Pick the most used bin, or no data for an empty histogram."""
    peak = _RunningPeak()
    for key, count, _ in histogram.items():
        peak.offer(key, count)

    if not peak.found:
        return Selection.empty()
    return Selection(peak.key, peak.count, TIER_PEAK)


def expand_rgb_selection(selection: Selection, depth: int) -> Tuple[int, int, int]:
    """Expand a packed RGB bin key into 8-bit channel values."""
    if selection.no_data:
        return BLACK
    r_q, g_q, b_q = unpack_rgb_key(selection.key, depth)
    return full_scale(r_q, depth), full_scale(g_q, depth), full_scale(b_q, depth)


def whiten(value: int, factor: Optional[float]) -> int:
    """Lighten a value channel by dividing it by the whitening factor."""
    if factor is None:
        return value
    return min(255, int(round(value / factor)))


def expand_hsv_selection(selection: Selection,
                         hbins: int,
                         sbins: int,
                         whitening_factor: Optional[float] = None) -> Tuple[int, int, int]:
    """Expand an (h, s, v) level bin into OpenCV HSV values, optionally whitened."""
    if selection.no_data:
        return BLACK
    h_q, s_q, v_q = selection.key
    value = whiten(from_level(v_q, sbins), whitening_factor)
    return from_level(h_q, hbins), from_level(s_q, sbins), value


def hsv_to_rgb(hsv: Tuple[int, int, int]) -> Tuple[int, int, int]:
    """Standard HSV -> RGB conversion for one OpenCV HSV triple."""
    pixel = np.uint8([[hsv]])
    r, g, b = cv2.cvtColor(pixel, cv2.COLOR_HSV2RGB)[0, 0]
    return int(r), int(g), int(b)


def rgb_to_hsv(rgb: Tuple[int, int, int]) -> Tuple[int, int, int]:
    """Standard RGB -> HSV conversion for one triple (hue in half degrees)."""
    pixel = np.uint8([[rgb]])
    h, s, v = cv2.cvtColor(pixel, cv2.COLOR_RGB2HSV)[0, 0]
    return int(h), int(s), int(v)
