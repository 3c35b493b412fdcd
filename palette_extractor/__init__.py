"""
Palette Extractor

Dominant-color palette extraction: stride sampling of RGBA pixels followed by
k-means clustering on RGB triples.
"""

__version__ = "1.0.0"
