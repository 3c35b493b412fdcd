from typing import Any, Dict, Optional

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from palette_extractor import __version__
from palette_extractor.config import config
from palette_extractor.schemas import ErrorResponse, HealthResponse, PaletteExtractResponse, PickResponse
from palette_extractor.services.colors.extract_api import handle_extract, run_extraction
from palette_extractor.services.colors.palette import palette_to_json
from palette_extractor.services.colors.sampler import NoSamplesError
from palette_extractor.services.imaging import (
    decode_rgba, fit_to_max_dim, map_display_to_canvas, pick_color, validate_file_upload
)
from palette_extractor.utils.logging import logger
from palette_extractor.utils.metrics import get_metrics

app = FastAPI(
    title="Palette Extractor",
    description="Dominant color palette extraction with k-means on sampled pixels",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in config.ALLOWED_ORIGINS.split(",")],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"]
)


UPLOAD_ERRORS = {
    400: {"model": ErrorResponse, "description": "Unreadable or oversized image"},
    415: {"model": ErrorResponse, "description": "Upload is not an image"},
}

EXTRACT_ERRORS = {
    **UPLOAD_ERRORS,
    422: {"model": ErrorResponse, "description": "No opaque pixels were sampled"},
}


def _no_samples(e: NoSamplesError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(e))


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Palette extraction service health check."""
    return HealthResponse(ok=True, version=__version__, service="palette-extractor")


@app.post("/palette/extract", response_model=PaletteExtractResponse, responses=EXTRACT_ERRORS)
async def extract_palette(
    file: UploadFile = File(...),
    k: Optional[int] = Query(None, description="Number of colors (clamped to 1-20, default 6)"),
    sample: Optional[int] = Query(None, description="Sampling stride in pixels (clamped to 1-50, default 8)"),
    include_swatch: bool = Query(False, description="Include a PNG swatch strip in the response")
):
    """
    Extract the dominant colors of an uploaded image.

    - **file**: any image Pillow can decode; transparent pixels are ignored
    - **k**: number of palette colors
    - **sample**: sample every Nth pixel in both directions

    Returns colors sorted by sample count, most common first.
    """
    try:
        return await handle_extract(file, k=k, stride=sample, include_swatch=include_swatch)
    except NoSamplesError as e:
        raise _no_samples(e)


@app.post("/palette/export", responses=EXTRACT_ERRORS)
async def export_palette(
    file: UploadFile = File(...),
    k: Optional[int] = Query(None, description="Number of colors (clamped to 1-20, default 6)"),
    sample: Optional[int] = Query(None, description="Sampling stride in pixels (clamped to 1-50, default 8)")
):
    """
    Extract a palette and return it as a ``palette.json`` download.

    The file holds a pretty-printed array of ``{hex, rgb, count}`` objects.
    """
    try:
        extraction = await run_extraction(file, k=k, stride=sample)
    except NoSamplesError as e:
        raise _no_samples(e)

    return Response(
        content=palette_to_json(extraction.entries),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{config.EXPORT_FILENAME}"'}
    )


@app.post(
    "/palette/pick",
    response_model=PickResponse,
    responses={**UPLOAD_ERRORS, 404: {"model": ErrorResponse, "description": "Point is outside the image"}}
)
async def pick_palette_color(
    file: UploadFile = File(...),
    x: float = Query(..., description="Click x relative to the preview's left edge"),
    y: float = Query(..., description="Click y relative to the preview's top edge"),
    display_width: int = Query(..., ge=1, description="Preview element width"),
    display_height: int = Query(..., ge=1, description="Preview element height")
):
    """
    Color of the pixel under a click on a contain-fitted preview.

    The image is sampled at the same down-scaled size used for extraction.
    """
    validate_file_upload(file)
    rgba = decode_rgba(await file.read())
    canvas = fit_to_max_dim(rgba)

    natural_h, natural_w = rgba.shape[:2]
    canvas_h, canvas_w = canvas.shape[:2]
    point = map_display_to_canvas(
        x, y,
        natural_size=(natural_w, natural_h),
        display_size=(display_width, display_height),
        canvas_size=(canvas_w, canvas_h)
    )
    if point is None:
        raise HTTPException(status_code=404, detail="Point is outside the image")

    canvas_x, canvas_y = point
    hex_color = pick_color(canvas, canvas_x, canvas_y)
    logger.debug(f"Picked {hex_color} at canvas ({canvas_x}, {canvas_y})")
    return PickResponse(hex=hex_color, x=canvas_x, y=canvas_y)


@app.get("/metrics")
def metrics_summary() -> Dict[str, Any]:
    """In-process request counters and timing statistics."""
    return get_metrics().get_summary()
