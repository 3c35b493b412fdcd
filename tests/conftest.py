"""
Test configuration and fixtures for palette extraction tests.
"""
import io
from typing import Iterable

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

# Import the main app
from main import app


class SequenceIndex:
    """Deterministic random index source replaying a fixed sequence."""

    def __init__(self, values: Iterable[int]):
        self._values = list(values)
        self.calls = []

    def __call__(self, n: int) -> int:
        if not self._values:
            raise AssertionError(f"Random index sequence exhausted (n={n})")
        self.calls.append(n)
        return self._values.pop(0)


def rgba_png_bytes(rgba: np.ndarray) -> bytes:
    """Encode an (H, W, 4) uint8 array as PNG bytes."""
    buf = io.BytesIO()
    Image.fromarray(rgba).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def two_color_rgba():
    """40x20 image: left half red, right quarter green, last quarter transparent."""
    img = np.zeros((20, 40, 4), dtype=np.uint8)
    img[:, :20] = (255, 0, 0, 255)
    img[:, 20:30] = (0, 255, 0, 255)
    img[:, 30:] = (0, 0, 255, 0)
    return img


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from palette_extractor.utils.metrics import reset_metrics
    reset_metrics()
