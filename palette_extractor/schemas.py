"""
Palette Extractor API Schemas
Pydantic models for palette extraction responses.
"""
from typing import List, Optional
from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""
    ok: bool = Field(True, description="Service health status")
    version: str = Field(..., description="Service version")
    service: str = Field("palette-extractor", description="Service name")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


class PaletteColor(BaseModel):
    """Single palette color with its sample count."""
    hex: str = Field(
        ...,
        pattern=r"^#[0-9A-F]{6}$",
        description="Uppercase hex color code in format #RRGGBB"
    )
    rgb: List[int] = Field(
        ...,
        min_length=3,
        max_length=3,
        description="Color as [r, g, b], each 0-255"
    )
    count: int = Field(..., ge=0, description="Number of samples assigned to this color")
    percent: float = Field(
        ...,
        ge=0.0,
        le=100.0,
        description="Share of all samples, in percent with one decimal"
    )


class PaletteArtifacts(BaseModel):
    """Optional rendered outputs."""
    swatch_png_b64: Optional[str] = Field(
        None,
        description="Base64-encoded PNG strip of the palette colors"
    )


class PaletteExtractResponse(BaseModel):
    """Palette extraction response."""
    request_id: str = Field(..., description="Request identifier for tracing")
    width: int = Field(..., description="Sampled canvas width in pixels")
    height: int = Field(..., description="Sampled canvas height in pixels")
    k: int = Field(..., ge=1, le=20, description="Cluster count used after clamping")
    stride: int = Field(..., ge=1, le=50, description="Sampling stride used after clamping")
    sampled_pixels: int = Field(..., ge=1, description="Number of samples clustered")
    iterations: int = Field(..., ge=1, description="k-means iterations performed")
    converged: bool = Field(..., description="Whether assignments stopped changing")
    palette: List[PaletteColor] = Field(..., description="Colors sorted by count, descending")
    artifacts: Optional[PaletteArtifacts] = Field(None, description="Optional artifacts")


class PickResponse(BaseModel):
    """Single pixel color pick."""
    hex: str = Field(..., pattern=r"^#[0-9A-F]{6}$", description="Picked color")
    x: int = Field(..., ge=0, description="Canvas x coordinate")
    y: int = Field(..., ge=0, description="Canvas y coordinate")
