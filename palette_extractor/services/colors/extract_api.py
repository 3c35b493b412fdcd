"""
Palette Extraction API Orchestrator

Coordinates the pipeline from uploaded image through stride sampling and
k-means clustering to the response model, with logging and metrics.
"""

import time
from typing import List, NamedTuple, Optional, Sequence

import numpy as np
from fastapi import UploadFile

from palette_extractor.config import config
from palette_extractor.schemas import PaletteArtifacts, PaletteColor, PaletteExtractResponse
from palette_extractor.services.colors.clustering import ClusteringResult, RandomIndex, cluster_palette
from palette_extractor.services.colors.palette import PaletteEntry, palette_percentages
from palette_extractor.services.colors.sampler import sample_pixels
from palette_extractor.services.colors.swatches import render_swatch_strip
from palette_extractor.services.imaging import read_image
from palette_extractor.utils.ids import generate_request_id
from palette_extractor.utils.logging import logger
from palette_extractor.utils.metrics import get_metrics


class PaletteExtraction(NamedTuple):
    """Outcome of one sample-and-cluster run."""
    width: int
    height: int
    k: int
    stride: int
    sampled_pixels: int
    clustering: ClusteringResult

    @property
    def entries(self) -> List[PaletteEntry]:
        return self.clustering.entries


def extract_palette(rgba: np.ndarray, k: int, stride: int,
                    max_iter: Optional[int] = None,
                    rand_index: Optional[RandomIndex] = None) -> PaletteExtraction:
    """
    Sample an RGBA image and cluster the samples into a palette.

    ``k`` and ``stride`` are used as given; clamp them with
    ``Config.clamp_k`` / ``Config.clamp_stride`` first.

    Raises:
        NoSamplesError: If no opaque pixel is visited
    """
    if max_iter is None:
        max_iter = config.MAX_ITERATIONS

    height, width = rgba.shape[:2]
    samples = sample_pixels(rgba, width, height, stride)
    clustering = cluster_palette(samples, k, max_iter=max_iter, rand_index=rand_index)

    return PaletteExtraction(
        width=width,
        height=height,
        k=k,
        stride=stride,
        sampled_pixels=int(samples.shape[0]),
        clustering=clustering
    )


def build_palette_colors(entries: Sequence[PaletteEntry]) -> List[PaletteColor]:
    """Response models for palette entries, with percentages."""
    percents = palette_percentages(entries)
    return [
        PaletteColor(hex=entry.hex, rgb=list(entry.color), count=entry.count, percent=percent)
        for entry, percent in zip(entries, percents)
    ]


async def run_extraction(file: UploadFile, k: Optional[int] = None,
                         stride: Optional[int] = None,
                         rand_index: Optional[RandomIndex] = None,
                         request_id: Optional[str] = None) -> PaletteExtraction:
    """
    Decode an upload and extract its palette, recording logs and metrics.

    Raises:
        HTTPException: For unreadable or non-image uploads
        NoSamplesError: If the image has no opaque sampled pixels
    """
    request_id = request_id or generate_request_id("pal")
    k = config.clamp_k(k)
    stride = config.clamp_stride(stride)
    metrics = get_metrics()
    start_time = time.time()

    logger.info("Starting palette extraction",
                extra={"request_id": request_id, "k": k, "stride": stride})

    try:
        rgba = await read_image(file)
        decode_time = time.time() - start_time

        cluster_start = time.time()
        extraction = extract_palette(rgba, k, stride, rand_index=rand_index)
        cluster_time = time.time() - cluster_start

    except Exception as e:
        error_time = time.time() - start_time
        logger.error(f"Palette extraction failed: {str(e)}",
                     extra={
                         "request_id": request_id,
                         "ms_total": error_time * 1000,
                         "result": "error",
                         "error_type": type(e).__name__
                     })
        metrics.increment_counter("palette_failed_total")
        metrics.increment_failure_count(type(e).__name__.lower())
        raise

    total_time = time.time() - start_time

    logger.info("Palette extraction completed successfully",
                extra={
                    "request_id": request_id,
                    "dims": f"{extraction.width}x{extraction.height}",
                    "sampled_pixels": extraction.sampled_pixels,
                    "iterations": extraction.clustering.iterations,
                    "converged": extraction.clustering.converged,
                    "ms_decode": decode_time * 1000,
                    "ms_kmeans": cluster_time * 1000,
                    "ms_total": total_time * 1000,
                    "result": "ok"
                })

    metrics.increment_counter("palette_requests_total")
    metrics.record_timing("extract_duration_ms", total_time * 1000)
    metrics.record_timing("kmeans_duration_ms", cluster_time * 1000)
    if not extraction.clustering.converged:
        metrics.increment_counter("kmeans_budget_exhausted_total")

    return extraction


async def handle_extract(file: UploadFile, k: Optional[int] = None,
                         stride: Optional[int] = None,
                         include_swatch: bool = False,
                         rand_index: Optional[RandomIndex] = None) -> PaletteExtractResponse:
    """
    Main orchestrator for palette extraction.

    Args:
        file: Uploaded image file
        k: Requested cluster count, clamped to [1, 20] (default 6)
        stride: Requested sampling stride, clamped to [1, 50] (default 8)
        include_swatch: Render a PNG strip of the palette
        rand_index: Random index source for clustering (tests)

    Returns:
        PaletteExtractResponse with the ordered palette
    """
    request_id = generate_request_id("pal")
    extraction = await run_extraction(file, k=k, stride=stride,
                                      rand_index=rand_index, request_id=request_id)

    artifacts = None
    if include_swatch:
        swatch_b64 = render_swatch_strip(
            [entry.hex for entry in extraction.entries],
            chip_size=config.SWATCH_CHIP_SIZE
        )
        artifacts = PaletteArtifacts(swatch_png_b64=swatch_b64)

    return PaletteExtractResponse(
        request_id=request_id,
        width=extraction.width,
        height=extraction.height,
        k=extraction.k,
        stride=extraction.stride,
        sampled_pixels=extraction.sampled_pixels,
        iterations=extraction.clustering.iterations,
        converged=extraction.clustering.converged,
        palette=build_palette_colors(extraction.entries),
        artifacts=artifacts
    )
