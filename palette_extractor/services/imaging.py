"""
Palette Extractor Imaging Utilities
Handles upload validation, decoding to RGBA, down-scaling and pixel picking.
"""
import io
import math
from typing import Optional, Tuple

import cv2
import numpy as np
from fastapi import HTTPException, UploadFile
from PIL import Image, UnidentifiedImageError

from palette_extractor.config import config
from palette_extractor.services.colors.palette import rgb_to_hex


def validate_file_upload(file: UploadFile) -> None:
    """
    Validate uploaded file type and declared size.

    Args:
        file: FastAPI UploadFile object

    Raises:
        HTTPException: 400 for oversized files, 415 for non-image files
    """
    if file.size and file.size > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    content_type = file.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(
            status_code=415,
            detail="Please provide an image file"
        )


def decode_rgba(file_bytes: bytes) -> np.ndarray:
    """
    Decode image bytes to an (H, W, 4) uint8 RGBA array.

    Raises:
        HTTPException: 400 for undecodable or empty images
    """
    if len(file_bytes) > config.MAX_FILE_MB * 1024 * 1024:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size: {config.MAX_FILE_MB}MB"
        )

    try:
        pil_image = Image.open(io.BytesIO(file_bytes))
        pil_image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise HTTPException(status_code=400, detail=f"Failed to load image: {str(e)}")

    rgba = np.array(pil_image.convert("RGBA"), dtype=np.uint8)

    height, width = rgba.shape[:2]
    if width == 0 or height == 0:
        raise HTTPException(status_code=400, detail="Image not ready")

    return rgba


async def read_image(file: UploadFile) -> np.ndarray:
    """
    Validate, read and decode an uploaded image, fitted to ``MAX_DIM``.

    Returns:
        RGBA array (H, W, 4) uint8
    """
    validate_file_upload(file)

    try:
        file_bytes = await file.read()
    except OSError as e:
        raise HTTPException(status_code=400, detail=f"Failed to read file: {str(e)}")

    return fit_to_max_dim(decode_rgba(file_bytes))


def scaled_size(width: int, height: int, max_dim: int) -> Tuple[int, int]:
    """Size after scaling the long edge down to ``max_dim``; never upscales."""
    scale = min(1.0, max_dim / max(width, height))
    return max(1, int(width * scale + 0.5)), max(1, int(height * scale + 0.5))


def fit_to_max_dim(rgba: np.ndarray, max_dim: Optional[int] = None) -> np.ndarray:
    """
    Resize image so the longest edge is at most ``max_dim`` pixels.

    Args:
        rgba: Input image (H, W, 4)
        max_dim: Maximum edge size (default from config)

    Returns:
        Resized image, or the input unchanged when already small enough
    """
    if max_dim is None:
        max_dim = config.MAX_DIM

    height, width = rgba.shape[:2]
    new_width, new_height = scaled_size(width, height, max_dim)

    if (new_width, new_height) == (width, height):
        return rgba

    # Resample premultiplied color so fully transparent pixels contribute nothing
    alpha = rgba[..., 3:4].astype(np.float32)
    premultiplied = np.concatenate([rgba[..., :3].astype(np.float32) * (alpha / 255.0), alpha], axis=2)

    # Use INTER_AREA for downscaling (better quality)
    resized = cv2.resize(premultiplied, (new_width, new_height), interpolation=cv2.INTER_AREA)

    new_alpha = resized[..., 3:4]
    rgb = np.divide(
        resized[..., :3] * 255.0,
        new_alpha,
        out=np.zeros_like(resized[..., :3]),
        where=new_alpha > 0
    )
    out = np.concatenate([rgb, new_alpha], axis=2)
    return np.clip(np.rint(out), 0, 255).astype(np.uint8)


def map_display_to_canvas(x: float, y: float,
                          natural_size: Tuple[int, int],
                          display_size: Tuple[int, int],
                          canvas_size: Tuple[int, int]) -> Optional[Tuple[int, int]]:
    """
    Map a click on a contain-fitted preview to canvas pixel coordinates.

    The preview shows the natural-size image scaled to fit inside
    ``display_size`` and centered. The canvas holds the same image at
    ``canvas_size``.

    Args:
        x, y: Click position relative to the preview's top-left corner
        natural_size: (width, height) of the source image
        display_size: (width, height) of the preview element
        canvas_size: (width, height) of the sampled canvas

    Returns:
        (x, y) on the canvas, or None when the click misses the image
    """
    img_w, img_h = natural_size
    disp_w, disp_h = display_size
    canvas_w, canvas_h = canvas_size

    if min(img_w, img_h, disp_w, disp_h, canvas_w, canvas_h) <= 0:
        return None

    scale = min(disp_w / img_w, disp_h / img_h)
    offset_x = (disp_w - img_w * scale) / 2
    offset_y = (disp_h - img_h * scale) / 2
    img_x = math.floor((x - offset_x) / scale + 0.5)
    img_y = math.floor((y - offset_y) / scale + 0.5)

    if img_x < 0 or img_y < 0 or img_x >= img_w or img_y >= img_h:
        return None

    canvas_x = int(img_x * (canvas_w / img_w) + 0.5)
    canvas_y = int(img_y * (canvas_h / img_h) + 0.5)

    # Rounding can land one past the last column or row
    return min(canvas_x, canvas_w - 1), min(canvas_y, canvas_h - 1)


def pick_color(rgba: np.ndarray, x: int, y: int) -> str:
    """
    Hex color of a single canvas pixel.

    Raises:
        IndexError: If (x, y) lies outside the image
    """
    height, width = rgba.shape[:2]
    if not (0 <= x < width and 0 <= y < height):
        raise IndexError(f"Pixel ({x}, {y}) outside {width}x{height} image")
    return rgb_to_hex(rgba[y, x, :3])
