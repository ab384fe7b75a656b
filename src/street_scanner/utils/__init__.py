"""Utility helpers."""

from .annotate import annotate, draw_detections, label_band_geometry
from .io import decode_image, encode_jpeg, ensure_dir, write_bytes
from .logging_utils import log_jsonl

__all__ = [
    "annotate",
    "draw_detections",
    "label_band_geometry",
    "decode_image",
    "encode_jpeg",
    "ensure_dir",
    "write_bytes",
    "log_jsonl",
]
