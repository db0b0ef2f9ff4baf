"""
Test configuration and fixtures for pricolor tests.
"""
import io

import numpy as np
import pytest
from fastapi.testclient import TestClient
from PIL import Image

from pricolor.main import app


def encode_png(rgb: np.ndarray) -> bytes:
    """Encode an RGB uint8 array as PNG bytes."""
    buffer = io.BytesIO()
    Image.fromarray(rgb).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def test_client():
    """Create test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def reset_metrics():
    """Reset metrics before each test."""
    from pricolor.utils.metrics import reset_metrics
    reset_metrics()


@pytest.fixture
def red_gray_4x4():
    """4x4 image: top three rows pure red, bottom row mid gray."""
    img = np.zeros((4, 4, 3), dtype=np.uint8)
    img[:3, :] = (255, 0, 0)
    img[3, :] = (128, 128, 128)
    return img


@pytest.fixture
def gray_image():
    """Fully monochrome 64x64 image."""
    return np.full((64, 64, 3), 90, dtype=np.uint8)


@pytest.fixture
def red_gray_png(red_gray_4x4):
    return encode_png(red_gray_4x4)


@pytest.fixture
def red_gray_file(tmp_path, red_gray_png):
    path = tmp_path / "red_gray.png"
    path.write_bytes(red_gray_png)
    return path


@pytest.fixture
def png_encoder():
    """Encoder for building upload payloads from arrays."""
    return encode_png
