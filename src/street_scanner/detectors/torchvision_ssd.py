"""COCO object detector backed by torchvision SSDLite."""

from __future__ import annotations

import logging
from typing import List

import cv2
import numpy as np

from street_scanner.config import DetectorConfig
from street_scanner.detectors.base import Detection, DetectionModel
from street_scanner.errors import ModelLoadError

logger = logging.getLogger(__name__)


class TorchvisionDetector(DetectionModel):
    """Pretrained SSDLite320 MobileNetV3 detector with COCO class names.

    Scores are reported unfiltered; thresholding belongs to the adapter.
    """

    def __init__(self, config: DetectorConfig | None = None) -> None:
        self.config = config or DetectorConfig()
        self._model, self.labels = self._load_model()

    def analyze(self, image: np.ndarray) -> List[Detection]:
        """Run the detector on a BGR image.

        @param image Input image (BGR).
        @return List of detections with (x, y, w, h) boxes.
        """
        import torch

        image_rgb = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
        tensor = torch.from_numpy(image_rgb).permute(2, 0, 1).float() / 255.0
        tensor = tensor.to(self.config.device)

        with torch.no_grad():
            output = self._model([tensor])[0]

        boxes = output["boxes"].cpu().numpy()
        scores = output["scores"].cpu().numpy()
        label_ids = output["labels"].cpu().numpy()

        detections: List[Detection] = []
        for (x1, y1, x2, y2), score, label_id in zip(boxes, scores, label_ids):
            label_id = int(label_id)
            name = self.labels[label_id] if label_id < len(self.labels) else f"class_{label_id}"
            detections.append(
                Detection(
                    name,
                    (float(x1), float(y1), float(x2 - x1), float(y2 - y1)),
                    float(score),
                    meta={"class_id": label_id},
                )
            )
        return detections

    def _load_model(self):
        """Build the model and its label list.

        Local weights at ``config.weights_path`` win; otherwise the COCO
        weights published with torchvision are used.

        @return Tuple of (model, labels).
        """
        try:
            import torch
            from torchvision.models.detection import (
                SSDLite320_MobileNet_V3_Large_Weights,
                ssdlite320_mobilenet_v3_large,
            )
        except ImportError as exc:
            raise ModelLoadError(f"torchvision is not available: {exc}") from exc

        weights = SSDLite320_MobileNet_V3_Large_Weights.COCO_V1
        labels = list(weights.meta["categories"])
        weights_path = self.config.weights_path

        try:
            if weights_path.exists():
                logger.info("Loading detector weights from %s", weights_path)
                model = ssdlite320_mobilenet_v3_large(weights=None, weights_backbone=None, num_classes=len(labels))
                state = torch.load(str(weights_path), map_location="cpu")
                model.load_state_dict(state)
            else:
                logger.info("Loading pretrained COCO detector weights")
                model = ssdlite320_mobilenet_v3_large(weights=weights)
        except Exception as exc:
            raise ModelLoadError(f"Failed to load detection model: {exc}") from exc

        model.to(self.config.device)
        model.eval()
        return model, labels
