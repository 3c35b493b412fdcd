"""
Pixel sampling for palette extraction.

Reduces a dense RGBA pixel buffer to the candidate set of RGB samples that
the clusterer works on.
"""

from typing import Union

import numpy as np
from loguru import logger

PixelBuffer = Union[bytes, bytearray, memoryview, np.ndarray]

CHANNELS = 4


class NoSamplesError(ValueError):
    """Raised when there is nothing to cluster."""


def as_rgba_grid(pixels: PixelBuffer, width: int, height: int) -> np.ndarray:
    """
    View a row-major RGBA buffer as an (H, W, 4) uint8 array.

    Raises:
        ValueError: If the buffer size does not match ``width * height * 4``
    """
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        flat = np.frombuffer(pixels, dtype=np.uint8)
    else:
        flat = np.asarray(pixels, dtype=np.uint8)

    expected = width * height * CHANNELS
    if flat.size != expected:
        raise ValueError(
            f"Pixel buffer size mismatch: got {flat.size} values, "
            f"expected {width}x{height}x{CHANNELS}={expected}"
        )

    return flat.reshape(height, width, CHANNELS)


def sample_pixels(pixels: PixelBuffer, width: int, height: int, stride: int = 8) -> np.ndarray:
    """
    Sample opaque pixels on a regular grid.

    Visits ``(x, y)`` for every multiple of ``stride`` inside the image,
    row by row from the top-left corner. Fully transparent pixels
    (alpha == 0) are skipped; alpha is dropped from the rest.

    Args:
        pixels: Row-major RGBA data, flat or shaped (H, W, 4)
        width: Image width in pixels
        height: Image height in pixels
        stride: Grid step in both axes (>= 1)

    Returns:
        RGB samples (N, 3) uint8 in scan order

    Raises:
        ValueError: If stride is below 1 or the buffer has the wrong size
        NoSamplesError: If the image is empty or every visited pixel is transparent
    """
    if stride < 1:
        raise ValueError(f"stride must be >= 1, got {stride}")
    if width <= 0 or height <= 0:
        raise NoSamplesError(f"Image has no pixels: {width}x{height}")

    rgba = as_rgba_grid(pixels, width, height)
    grid = rgba[::stride, ::stride]
    opaque = grid[..., 3] != 0

    # Boolean indexing on the 2-D grid keeps row-major order
    samples = grid[opaque][:, :3].copy()

    logger.debug(
        f"Sampled {samples.shape[0]}/{opaque.size} grid pixels "
        f"from {width}x{height} at stride {stride}"
    )

    if samples.shape[0] == 0:
        raise NoSamplesError("No pixels sampled. Try decreasing sample rate.")

    return samples
