"""Annotation helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

import cv2
import numpy as np

from street_scanner.config import AnnotatorConfig
from street_scanner.detectors.base import Detection
from street_scanner.utils.io import decode_image, encode_jpeg


@dataclass(frozen=True)
class LabelPlacement:
    """Where a label band and its text go for one box.

    @field band_x Left edge of the band.
    @field band_y Top edge of the band.
    @field band_width Band width.
    @field band_height Band height.
    @field text_x Text origin x.
    @field text_y Text baseline y.
    @field below True when the band sits under the box.
    """

    band_x: int
    band_y: int
    band_width: int
    band_height: int
    text_x: int
    text_y: int
    below: bool


def label_band_geometry(
    bbox: Tuple[float, float, float, float],
    min_label_width: int,
    band_height: int = 16,
) -> LabelPlacement:
    """Compute the label band for a box.

    A box whose top is closer than one band height to the image edge gets
    its label underneath, otherwise above.

    @param bbox Box as (x, y, width, height).
    @param min_label_width Minimum band width in pixels.
    @param band_height Band height in pixels.
    @return LabelPlacement.
    """
    below = bbox[1] < band_height
    x, y, w, h = (int(round(v)) for v in bbox)
    if below:
        band_y = y + h
        text_y = y + h + band_height - 4
    else:
        band_y = y - band_height
        text_y = y - 4
    return LabelPlacement(
        band_x=x,
        band_y=band_y,
        band_width=max(int(min_label_width), w),
        band_height=band_height,
        text_x=x + 4,
        text_y=text_y,
        below=below,
    )


def format_label(det: Detection) -> str:
    """Label text such as ``"90% dog"``."""
    return f"{int(round(det.score * 100))}% {det.label}"


def draw_detections(
    image: np.ndarray,
    detections: Iterable[Detection],
    config: AnnotatorConfig | None = None,
    min_label_width: Optional[int] = None,
) -> np.ndarray:
    """Return a copy of the image annotated with detections.

    @param image Input image (BGR).
    @param detections Iterable of Detection objects.
    @param config Drawing settings.
    @param min_label_width Overrides config.min_label_width when given.
    @return Annotated image copy with the source dimensions.
    """
    cfg = config or AnnotatorConfig()
    min_width = cfg.min_label_width if min_label_width is None else min_label_width
    annotated = image.copy()
    for det in detections:
        x, y, w, h = (int(round(v)) for v in det.bbox)
        place = label_band_geometry(det.bbox, min_width, cfg.band_height)

        cv2.rectangle(annotated, (x, y), (x + w, y + h), cfg.box_color, 1)
        cv2.rectangle(
            annotated,
            (place.band_x, place.band_y),
            (place.band_x + place.band_width - 1, place.band_y + place.band_height - 1),
            cfg.box_color,
            -1,
        )
        cv2.putText(
            annotated,
            format_label(det),
            (place.text_x, place.text_y),
            cv2.FONT_HERSHEY_SIMPLEX,
            cfg.font_scale,
            cfg.text_color,
            1,
            cv2.LINE_AA,
        )
    return annotated


def annotate(
    image_bytes: bytes,
    detections: Sequence[Detection],
    target_class: str,
    config: AnnotatorConfig | None = None,
    min_label_width: Optional[int] = None,
) -> Optional[bytes]:
    """Render the detections of one class onto a copy of the image.

    @param image_bytes Encoded source image; never modified.
    @param detections Detections for the image.
    @param target_class Class to draw.
    @param config Drawing settings.
    @param min_label_width Overrides config.min_label_width when given.
    @return JPEG bytes, or None when no detection has target_class.
    """
    matching = [det for det in detections if det.label == target_class]
    if not matching:
        return None

    cfg = config or AnnotatorConfig()
    image = decode_image(image_bytes)
    annotated = draw_detections(image, matching, cfg, min_label_width)
    return encode_jpeg(annotated, cfg.jpeg_quality)
