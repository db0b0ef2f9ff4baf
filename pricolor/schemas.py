"""
Pricolor API Schemas
Pydantic models for primary color response validation.
"""
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class PrimaryColorResponse(BaseModel):
    """Primary color picked from an uploaded image."""
    rgb: List[int] = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Picked color as [R, G, B], each 0-255"
    )
    hsv: List[int] = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Picked color as OpenCV HSV [H (0-179, half degrees), S, V]"
    )
    decimal: str = Field(..., description="Color formatted as 'R G B'")
    hex: str = Field(..., pattern=r"^[0-9a-f]{6}$", description="Color formatted as 'rrggbb'")
    css: str = Field(
        ...,
        pattern=r"^#([0-9a-f]{3}|[0-9a-f]{6})$",
        description="CSS color, short '#rgb' form when exactly representable"
    )
    hsv_text: str = Field(..., description="Color formatted as 'H S% V%', hue in degrees")
    policy: str = Field(..., description="Histogram policy used: 'rgb' or 'hsv'")
    tier: str = Field(
        ...,
        description="Selection tier: 'strict', 'loose', 'any', 'peak' or 'none'"
    )
    bin_count: int = Field(..., ge=0, description="Pixels in the winning bin")
    counted_pixels: int = Field(..., ge=0, description="Pixels that passed the filters")
    no_data: bool = Field(
        ...,
        description="True when every pixel was filtered out and black was substituted"
    )
    request_id: str = Field(..., description="Request ID for tracing")
    timings_ms: Optional[Dict[str, float]] = Field(None, description="Stage timings in milliseconds")


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("pricolor", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")
