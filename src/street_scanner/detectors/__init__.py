"""Detector subpackage."""

from .adapter import DetectionAdapter
from .base import Detection, DetectionModel

__all__ = ["Detection", "DetectionModel", "DetectionAdapter"]
