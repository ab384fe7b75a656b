"""Shared test doubles."""

from __future__ import annotations

import threading

import cv2
import numpy as np

from street_scanner.detectors.base import Detection, DetectionModel
from street_scanner.errors import ProviderNotFound


def make_jpeg(width: int = 64, height: int = 64, value: int = 0) -> bytes:
    image = np.full((height, width, 3), value, dtype=np.uint8)
    ok, buf = cv2.imencode(".jpg", image)
    assert ok
    return buf.tobytes()


class StubModel(DetectionModel):
    """Returns the same detections for every image."""

    def __init__(self, detections=None, error: Exception | None = None):
        self.detections = list(detections or [])
        self.error = error
        self.calls = 0
        self.last_shape = None
        self._lock = threading.Lock()

    def analyze(self, image):
        with self._lock:
            self.calls += 1
            self.last_shape = image.shape
        if self.error:
            raise self.error
        return [Detection(d.label, d.bbox, d.score, d.meta) for d in self.detections]


class StubFetcher:
    """Counts calls and returns a fixed image, or NotFound for chosen headings."""

    def __init__(self, data: bytes, missing_headings=(), error: Exception | None = None):
        self.data = data
        self.missing_headings = set(missing_headings)
        self.error = error
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, coordinate, heading):
        with self._lock:
            self.calls += 1
        if self.error:
            raise self.error
        if heading in self.missing_headings:
            raise ProviderNotFound(f"nothing at heading {heading}")
        return self.data
