"""I/O helpers."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import cv2
import numpy as np


def ensure_dir(path: Path) -> None:
    """Create a directory if it doesn't exist.

    @param path Directory path to create.
    @return None
    """
    path.mkdir(parents=True, exist_ok=True)


def decode_image(data: bytes) -> np.ndarray:
    """Decode encoded image bytes into a BGR array.

    @param data Encoded image bytes (JPEG, PNG, ...).
    @return Decoded image in BGR format.
    """
    if not data:
        raise ValueError("Empty image data")
    buf = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buf, cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError("Failed to decode image data")
    return image


def encode_jpeg(image: np.ndarray, quality: int = 92) -> bytes:
    """Encode a BGR array as JPEG bytes.

    @param image Image array (BGR).
    @param quality JPEG quality (0-100).
    @return Encoded bytes.
    """
    ok, buf = cv2.imencode(".jpg", image, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    if not ok:
        raise ValueError("Failed to encode image")
    return buf.tobytes()


def write_bytes(path: Path, data: bytes) -> None:
    """Write bytes atomically, creating parent directories if needed.

    The data lands in a temporary sibling first and is moved into place, so
    readers see either the old file or the complete new one.

    @param path Destination path.
    @param data Bytes to write.
    @return None
    """
    ensure_dir(path.parent)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
