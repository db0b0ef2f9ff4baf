"""
Primary Color Picker Orchestrator

Coordinates the full pipeline from settings validation and decoding through
preprocessing, histogram construction and peak selection.
"""

import time
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import numpy as np

from pricolor.config import config, PickerSettings
from pricolor.errors import PricolorError
from pricolor.services.imaging import (
    decode_image_bytes, load_image_file, preprocess, get_image_dimensions
)
from pricolor.services.colors.histogram import (
    ColorHistogram, HueWindow, build_rgb_histogram, build_hsv_histogram
)
from pricolor.services.colors.selection import (
    Selection, select_tiered, select_peak, expand_rgb_selection,
    expand_hsv_selection, hsv_to_rgb, rgb_to_hsv
)
from pricolor.utils.ids import generate_request_id
from pricolor.utils.logging import get_logger
from pricolor.utils.metrics import get_metrics, timed


@dataclass(frozen=True)
class PickResult:
    """Outcome of one pick."""
    rgb: Tuple[int, int, int]
    hsv: Tuple[int, int, int]
    policy: str
    tier: str
    bin_count: int
    counted_pixels: int
    total_pixels: int
    depth: int
    no_data: bool
    request_id: str = ""
    timings: Dict[str, float] = field(default_factory=dict, compare=False)


def build_histogram(image: np.ndarray, settings: PickerSettings, band_rows: int = 0) -> ColorHistogram:
    """
    Build the policy's histogram for a preprocessed image.

    With band_rows > 0 the image is split into horizontal bands whose
    histograms are built independently and merged.
    """
    if band_rows > 0 and image.shape[0] > band_rows:
        histogram = ColorHistogram()
        for top in range(0, image.shape[0], band_rows):
            histogram.merge(build_histogram(image[top:top + band_rows], settings))
        return histogram

    if settings.policy == "hsv":
        return build_hsv_histogram(
            image,
            hbins=settings.hbins,
            sbins=settings.sbins,
            hue_window=HueWindow(*settings.hue_window),
            saturation_window=settings.saturation_window,
            ignore_monotone=settings.ignore_monotone,
            peak_only=settings.peak_only
        )
    return build_rgb_histogram(image, depth=settings.color_depth, model=settings.chroma_model)


def select_color(histogram: ColorHistogram, settings: PickerSettings) -> Tuple[Selection, Tuple[int, int, int], Tuple[int, int, int]]:
    """
    Select the winning bin and expand it.

    Returns:
        Tuple of (selection, rgb, hsv)
    """
    if settings.policy == "hsv":
        selection = select_peak(histogram)
        hsv = expand_hsv_selection(selection, settings.hbins, settings.sbins, settings.whitening_factor)
        rgb = hsv_to_rgb(hsv)
    else:
        selection = select_tiered(
            histogram,
            upper_threshold=settings.upper_chroma,
            lower_threshold=settings.lower_chroma,
            peak_only=settings.peak_only
        )
        rgb = expand_rgb_selection(selection, settings.color_depth)
        hsv = rgb_to_hsv(rgb)
    return selection, rgb, hsv


def pick_primary_color(rgb: np.ndarray,
                       settings: Optional[PickerSettings] = None,
                       request_id: Optional[str] = None,
                       timings: Optional[Dict[str, float]] = None) -> PickResult:
    """
    Pick the primary color of an RGB pixel buffer.

    Args:
        rgb: Pixel buffer (H, W, 3) uint8 in RGB order; never modified
        settings: Picker settings (defaults from configuration)
        request_id: Tracing ID, generated when omitted
        timings: Timings already collected by the caller

    Returns:
        PickResult; black with no_data=True when every pixel was filtered

    Raises:
        ConfigurationError: For out-of-range settings, before any work
        ImageDecodeError: For an unusable buffer or an empty crop
    """
    if settings is None:
        settings = PickerSettings.from_config()
    settings.validate()

    request_id = request_id or generate_request_id("pick")
    timings = dict(timings or {})
    logger = get_logger()
    metrics = get_metrics()
    start_time = time.time()

    metrics.increment_request_count()
    metrics.increment_policy_count(settings.policy)

    try:
        with timed("preprocess", timings):
            image = preprocess(rgb, settings)
        width, height = get_image_dimensions(image)

        with timed("histogram", timings):
            histogram = build_histogram(image, settings, config.BAND_ROWS)

        with timed("selection", timings):
            selection, color_rgb, color_hsv = select_color(histogram, settings)

    except PricolorError as e:
        logger.error(f"Primary color pick failed: {str(e)}", extra={
            "request_id": request_id,
            "error_type": type(e).__name__
        })
        metrics.increment_failure_count(type(e).__name__.lower())
        raise

    total_ms = (time.time() - start_time) * 1000
    metrics.record_timing("pick", total_ms)
    metrics.increment_tier_count(selection.tier)

    if selection.no_data:
        metrics.increment_no_data_count()
        logger.warning("No usable pixels after filtering, returning black", extra={
            "request_id": request_id,
            "policy": settings.policy
        })

    result = PickResult(
        rgb=color_rgb,
        hsv=color_hsv,
        policy=settings.policy,
        tier=selection.tier,
        bin_count=selection.count,
        counted_pixels=histogram.total,
        total_pixels=width * height,
        depth=settings.color_depth if settings.policy == "rgb" else 8,
        no_data=selection.no_data,
        request_id=request_id,
        timings=timings
    )

    logger.info("Primary color picked", extra={
        "request_id": request_id,
        "policy": settings.policy,
        "dims": f"{width}x{height}",
        "bins": len(histogram),
        "tier": selection.tier,
        "rgb": color_rgb,
        "ms_total": total_ms,
        "settings": settings.to_dict()
    })

    return result


def pick_from_bytes(data: bytes, settings: Optional[PickerSettings] = None) -> PickResult:
    """Decode encoded image bytes and pick their primary color."""
    if settings is None:
        settings = PickerSettings.from_config()
    settings.validate()

    request_id = generate_request_id("pick")
    timings: Dict[str, float] = {}
    try:
        with timed("decode", timings):
            rgb = decode_image_bytes(data)
    except PricolorError as e:
        get_logger().error(f"Image decode failed: {str(e)}", extra={"request_id": request_id})
        get_metrics().increment_failure_count(type(e).__name__.lower())
        raise

    return pick_primary_color(rgb, settings, request_id=request_id, timings=timings)


def pick_from_file(path: str, settings: Optional[PickerSettings] = None) -> PickResult:
    """Read an image file and pick its primary color."""
    if settings is None:
        settings = PickerSettings.from_config()
    settings.validate()

    request_id = generate_request_id("pick")
    timings: Dict[str, float] = {}
    try:
        with timed("decode", timings):
            rgb = load_image_file(path)
    except PricolorError as e:
        get_logger().error(f"Image load failed: {str(e)}", extra={"request_id": request_id, "path": path})
        get_metrics().increment_failure_count(type(e).__name__.lower())
        raise

    return pick_primary_color(rgb, settings, request_id=request_id, timings=timings)
