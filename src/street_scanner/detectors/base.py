"""Detector base classes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import numpy as np


@dataclass
class Detection:
    """A detection result.

    @field label Class name (e.g. "dog").
    @field bbox Box as (x, y, width, height) in source pixels.
    @field score Confidence in [0, 1].
    @field meta Optional model-specific extras.
    """

    label: str
    bbox: Tuple[float, float, float, float]
    score: float
    meta: Dict[str, Any] | None = None


class DetectionModel:
    """Base interface for pluggable object detection models."""

    def analyze(self, image: np.ndarray) -> List[Detection]:
        """Analyze an image and return detections.

        @param image Input image (BGR).
        @return List of detections.
        """
        raise NotImplementedError
