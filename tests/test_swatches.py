"""
Test swatch strip rendering.
"""
import base64

import cv2
import numpy as np
import pytest

from palette_extractor.services.colors.swatches import hex_to_bgr, render_swatch_strip


def _decode_rgb(b64_png: str) -> np.ndarray:
    buffer = np.frombuffer(base64.b64decode(b64_png), dtype=np.uint8)
    return cv2.cvtColor(cv2.imdecode(buffer, cv2.IMREAD_COLOR), cv2.COLOR_BGR2RGB)


def test_hex_to_bgr():
    assert hex_to_bgr("#FF8000") == (0, 128, 255)


def test_render_swatch_strip_dimensions_and_colors():
    """One chip per color, in palette order"""
    strip = _decode_rgb(render_swatch_strip(["#FF0000", "#00FF00", "#0000FF"], chip_size=10))

    assert strip.shape == (10, 30, 3)
    assert strip[5, 5].tolist() == [255, 0, 0]
    assert strip[5, 15].tolist() == [0, 255, 0]
    assert strip[5, 25].tolist() == [0, 0, 255]


def test_render_swatch_strip_chips_are_solid():
    strip = _decode_rgb(render_swatch_strip(["#1F4E79"], chip_size=8))
    assert np.all(strip == (31, 78, 121))


def test_render_swatch_strip_empty():
    with pytest.raises(ValueError):
        render_swatch_strip([])


def test_render_swatch_strip_invalid_hex():
    with pytest.raises(ValueError):
        render_swatch_strip(["#XYZXYZ"])


def test_render_swatch_strip_invalid_chip_size():
    with pytest.raises(ValueError):
        render_swatch_strip(["#000000"], chip_size=0)
