# Hide Lab test configuration
# Shared fixtures for codec, service, API and CLI tests

from io import BytesIO

import numpy as np
import pytest
from PIL import Image

from hidelab.utility.constants_manager import ServerConfig


def png_bytes(image: Image.Image) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def noise_pixels():
    """Random 40x50 RGB cover."""
    rng = np.random.default_rng(7)
    return rng.integers(0, 256, size=(40, 50, 3), dtype=np.uint8)


@pytest.fixture
def gradient_pixels():
    """Smooth 20x20 RGB cover like the one used for round-trip checks."""
    arr = np.zeros((20, 20, 3), dtype=np.uint8)
    for y in range(20):
        for x in range(20):
            arr[y, x] = (x * 12, y * 12, (x + y) * 6)
    return arr


@pytest.fixture
def rgba_pixels():
    rng = np.random.default_rng(11)
    arr = rng.integers(0, 256, size=(30, 30, 4), dtype=np.uint8)
    arr[:, :, 3] = 255
    return arr


@pytest.fixture
def cover_image(gradient_pixels):
    return Image.fromarray(gradient_pixels)


@pytest.fixture
def cover_png(cover_image):
    return png_bytes(cover_image)


@pytest.fixture
def server_config(tmp_path):
    return ServerConfig(
        upload_dir=str(tmp_path / "uploads"),
        max_image_bytes=1024 * 1024,
        max_message_bytes=4096,
    )


@pytest.fixture
def client(server_config):
    from fastapi.testclient import TestClient
    from hidelab.services.steganography.main import create_app

    return TestClient(create_app(server_config))
