"""Shared pytest fixtures for pngfuse tests."""

import io
import struct
import zlib
from pathlib import Path

import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def sample_text() -> str:
    """Sample text for testing."""
    return "Hello, World! This is sample text for testing."


@pytest.fixture
def sample_binary() -> bytes:
    """Sample binary data for testing."""
    return b"\x00\x01\x02\x03\x04\x05\x06\x07\x08\x09\x0a\x0b\x0c\x0d\x0e\x0f"


@pytest.fixture
def minimal_png() -> bytes:
    """Create a minimal 1x1 transparent PNG image."""
    signature = b"\x89PNG\r\n\x1a\n"

    # IHDR chunk: 1x1 pixel, RGBA
    ihdr_data = struct.pack(">IIBBBBB", 1, 1, 8, 6, 0, 0, 0)
    ihdr = (
        struct.pack(">I", 13)
        + b"IHDR"
        + ihdr_data
        + struct.pack(">I", zlib.crc32(b"IHDR" + ihdr_data) & 0xFFFFFFFF)
    )

    # IDAT chunk: minimal compressed pixel data (transparent black)
    pixel = b"\x00\x00\x00\x00\x00"  # filter byte + RGBA
    compressed = zlib.compress(pixel)
    idat = (
        struct.pack(">I", len(compressed))
        + b"IDAT"
        + compressed
        + struct.pack(">I", zlib.crc32(b"IDAT" + compressed) & 0xFFFFFFFF)
    )

    # IEND chunk
    iend = (
        struct.pack(">I", 0)
        + b"IEND"
        + struct.pack(">I", zlib.crc32(b"IEND") & 0xFFFFFFFF)
    )

    return signature + ihdr + idat + iend


@pytest.fixture
def noise_png() -> bytes:
    """Create a 256x256 RGB noise PNG.

    Random pixels do not compress, so Pillow splits the image data over
    several IDAT chunks.
    """
    rng = np.random.default_rng(1234)
    pixels = rng.integers(0, 256, size=(256, 256, 3), dtype=np.uint8)
    buf = io.BytesIO()
    Image.fromarray(pixels).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def sample_png_path(tmp_path: Path, minimal_png: bytes) -> Path:
    """Create a sample PNG file in a temp directory."""
    png_path = tmp_path / "sample.png"
    png_path.write_bytes(minimal_png)
    return png_path


@pytest.fixture
def noise_png_path(tmp_path: Path, noise_png: bytes) -> Path:
    """Write the noise PNG to a temp directory."""
    png_path = tmp_path / "noise.png"
    png_path.write_bytes(noise_png)
    return png_path


@pytest.fixture
def sample_text_file(tmp_path: Path, sample_text: str) -> Path:
    """Create a sample text file in a temp directory."""
    text_path = tmp_path / "sample.txt"
    text_path.write_text(sample_text)
    return text_path


@pytest.fixture
def hello_file(tmp_path: Path) -> Path:
    """Create hello.txt containing 'world'."""
    path = tmp_path / "hello.txt"
    path.write_bytes(b"world")
    return path


@pytest.fixture
def sample_binary_file(tmp_path: Path, sample_binary: bytes) -> Path:
    """Create a small binary file in a temp directory."""
    path = tmp_path / "sample.bin"
    path.write_bytes(sample_binary)
    return path


@pytest.fixture
def extract_dir(tmp_path: Path) -> Path:
    """Create an empty directory to extract into."""
    out = tmp_path / "extracted"
    out.mkdir()
    return out
