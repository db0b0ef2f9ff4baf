"""
Pricolor v1 API Routes
Implements /v1/primary-color and supporting routes.
"""
from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException, UploadFile, File, Query

from pricolor.config import config, PickerSettings
from pricolor.errors import ConfigurationError, ImageDecodeError
from pricolor.schemas import PrimaryColorResponse, ErrorResponse
from pricolor.services.colors.formatting import format_decimal, format_hex, format_css, format_hsv
from pricolor.services.picker import pick_from_bytes
from pricolor.utils.metrics import get_metrics

router = APIRouter(prefix="/v1", tags=["Primary Color"])


@router.post("/primary-color",
             response_model=PrimaryColorResponse,
             responses={400: {"model": ErrorResponse}},
             summary="Pick Primary Color",
             description="Pick the single representative chromatic color of an uploaded image")
async def primary_color(
    file: UploadFile = File(..., description="Image file"),

    policy: str = Query(config.POLICY, pattern="^(rgb|hsv)$", description="Histogram policy"),
    peak_only: bool = Query(False, description="Most used color, no chroma or hue bias"),

    # RGB policy
    depth: int = Query(config.COLOR_DEPTH, description="Bits kept per RGB channel (0-8)"),
    upper_chroma: float = Query(config.UPPER_CHROMA, description="First pickup chroma threshold"),
    lower_chroma: float = Query(config.LOWER_CHROMA, description="Second pickup chroma threshold"),
    chroma_model: str = Query(config.CHROMA_MODEL, pattern="^(conic|columnar)$", description="Chroma model"),

    # HSV policy
    hbins: int = Query(config.HBINS, description="Hue shift (0-5)"),
    sbins: int = Query(config.SBINS, description="Saturation/value shift (0-7)"),
    hue_start: int = Query(config.HUE_WINDOW[0], description="Hue exclusion start, half degrees"),
    hue_end: int = Query(config.HUE_WINDOW[1], description="Hue exclusion end, half degrees"),
    sat_start: int = Query(config.SATURATION_WINDOW[0], description="Saturation band start"),
    sat_end: int = Query(config.SATURATION_WINDOW[1], description="Saturation band end"),
    whiten: Optional[float] = Query(None, description="Divide the value channel by this factor"),

    # Preprocessing
    clip_ratio: float = Query(config.CLIP_RATIO, description="Center crop ratio (0-0.9)"),
    resize_width: int = Query(config.RESIZE[0] if config.RESIZE else 0, description="Working width, 0 disables resize"),
    resize_height: int = Query(config.RESIZE[1] if config.RESIZE else 0, description="Working height, 0 disables resize"),
    median_kernel: int = Query(config.MEDIAN_KERNEL, description="Median kernel (0 or odd 3-9)")
) -> PrimaryColorResponse:
    """
    Pick the primary color of an uploaded image.

    Range checks happen in PickerSettings.validate so the HTTP and CLI
    front-ends report the same messages.
    """
    resize = (resize_width, resize_height) if resize_width and resize_height else None

    settings = PickerSettings(
        policy=policy,
        color_depth=depth,
        upper_chroma=upper_chroma,
        lower_chroma=lower_chroma,
        chroma_model=chroma_model,
        hbins=hbins,
        sbins=sbins,
        peak_only=peak_only,
        hue_window=(hue_start, hue_end),
        saturation_window=(sat_start, sat_end),
        ignore_monotone=config.IGNORE_MONOTONE_SATURATION,
        clip_ratio=clip_ratio,
        resize=resize,
        median_kernel=median_kernel,
        whitening_factor=whiten
    )

    try:
        settings.validate()
        data = await file.read()
        result = pick_from_bytes(data, settings)
    except (ConfigurationError, ImageDecodeError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return PrimaryColorResponse(
        rgb=list(result.rgb),
        hsv=list(result.hsv),
        decimal=format_decimal(result.rgb),
        hex=format_hex(result.rgb),
        css=format_css(result.rgb, result.depth),
        hsv_text=format_hsv(result.hsv),
        policy=result.policy,
        tier=result.tier,
        bin_count=result.bin_count,
        counted_pixels=result.counted_pixels,
        no_data=result.no_data,
        request_id=result.request_id,
        timings_ms=result.timings
    )


@router.get("/metrics", summary="Picker Metrics")
async def metrics_summary() -> Dict[str, Any]:
    """In-process counters and timing statistics."""
    return get_metrics().get_summary()
