"""
Palette Extractor Colors Module

Provides stride sampling of RGBA pixels, k-means clustering into a weighted
palette, hex/JSON formatting and swatch rendering.
"""

from .sampler import NoSamplesError, sample_pixels
from .clustering import ClusteringResult, cluster_palette, kmeans
from .palette import PaletteEntry, hex_to_rgb, rgb_to_hex

__all__ = [
    "NoSamplesError",
    "sample_pixels",
    "ClusteringResult",
    "cluster_palette",
    "kmeans",
    "PaletteEntry",
    "hex_to_rgb",
    "rgb_to_hex",
]
