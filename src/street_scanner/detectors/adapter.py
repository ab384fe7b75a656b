"""Bridge from raw image bytes to filtered detections."""

from __future__ import annotations

import logging
from typing import List

from street_scanner.detectors.base import Detection, DetectionModel
from street_scanner.errors import DetectionFailure
from street_scanner.utils.io import decode_image

logger = logging.getLogger(__name__)


class DetectionAdapter:
    """Decode, detect, and apply the confidence filter.

    A failure on one image is logged and reported as zero detections.
    """

    def __init__(self, model: DetectionModel) -> None:
        self.model = model

    def detect(self, image_bytes: bytes, min_confidence: float) -> List[Detection]:
        """Run the wrapped model on encoded image bytes.

        @param image_bytes Encoded source image.
        @param min_confidence Minimum score to keep.
        @return Detections with score >= min_confidence.
        """
        try:
            detections = self._run(image_bytes)
        except DetectionFailure as exc:
            logger.warning("Detection failed: %s", exc)
            return []
        return [det for det in detections if det.score >= min_confidence]

    def _run(self, image_bytes: bytes) -> List[Detection]:
        try:
            image = decode_image(image_bytes)
        except ValueError as exc:
            raise DetectionFailure(f"decode error: {exc}") from exc

        try:
            return list(self.model.analyze(image))
        except Exception as exc:
            raise DetectionFailure(f"{type(exc).__name__}: {exc}") from exc
        finally:
            del image
