"""Configuration objects and paths."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from street_scanner.errors import InvalidConfig
from street_scanner.sampler import Coordinate


ROOT_DIR = Path(__file__).resolve().parents[2]
CACHE_DIR = ROOT_DIR / "cache"
OUTPUT_DIR = ROOT_DIR / "output"
LOG_DIR = ROOT_DIR / "logs"
MODELS_DIR = ROOT_DIR / "models"
CONFIG_FILE = ROOT_DIR / ".config.json"

DEFAULT_HEADINGS = (0, 90, 180, 270)
DEFAULT_BATCH_SIZE = 5
DEFAULT_LABEL_MIN_WIDTH = 110


@dataclass(frozen=True)
class ProviderConfig:
    """Settings for the Google imagery and geocoding endpoints.

    @field streetview_url Street View Static API endpoint.
    @field geocode_url Geocoding API endpoint.
    @field image_size Requested image size (WxH).
    @field pitch Camera pitch in degrees.
    @field timeout HTTP timeout in seconds.
    """

    streetview_url: str = "https://maps.googleapis.com/maps/api/streetview"
    geocode_url: str = "https://maps.googleapis.com/maps/api/geocode/json"
    image_size: str = "640x640"
    pitch: int = 15
    timeout: float = 30.0


@dataclass(frozen=True)
class AnnotatorConfig:
    """Drawing settings for annotated outputs.

    @field box_color Box and label band color (BGR).
    @field text_color Label text color (BGR).
    @field band_height Label band height in pixels.
    @field min_label_width Minimum label band width in pixels.
    @field font_scale OpenCV font scale for labels.
    @field jpeg_quality Output JPEG quality.
    """

    box_color: Tuple[int, int, int] = (0, 128, 0)
    text_color: Tuple[int, int, int] = (255, 255, 255)
    band_height: int = 16
    min_label_width: int = DEFAULT_LABEL_MIN_WIDTH
    font_scale: float = 0.4
    jpeg_quality: int = 92


@dataclass(frozen=True)
class DetectorConfig:
    """Configuration for the torchvision object detector.

    @field weights_path Optional local weights file; COCO weights otherwise.
    @field device Torch device string.
    """

    weights_path: Path = MODELS_DIR / "ssdlite320_mobilenet_v3_large.pth"
    device: str = "cpu"


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration.

    @field provider ProviderConfig.
    @field annotator AnnotatorConfig.
    @field detector DetectorConfig.
    @field cache_dir Image cache directory.
    @field output_dir Annotated output directory.
    @field log_path Per-run JSONL log path.
    @field config_file Stored preferences file.
    """

    provider: ProviderConfig = ProviderConfig()
    annotator: AnnotatorConfig = AnnotatorConfig()
    detector: DetectorConfig = DetectorConfig()

    cache_dir: Path = CACHE_DIR
    output_dir: Path = OUTPUT_DIR
    log_path: Path = LOG_DIR / "scans.jsonl"
    config_file: Path = CONFIG_FILE


@dataclass(frozen=True)
class ScanConfig:
    """Validated input for one scan run.

    @field center Scan center.
    @field radius_km Scan radius in kilometers.
    @field density Number of ring steps between center and radius.
    @field headings Camera headings sampled at every coordinate, in order.
    @field min_confidence Minimum detection score kept.
    @field batch_size Coordinates processed concurrently per batch.
    @field label_min_width Minimum label band width in pixels.
    """

    center: Coordinate
    radius_km: float
    density: int = 10
    headings: Tuple[int, ...] = DEFAULT_HEADINGS
    min_confidence: float = 0.5
    batch_size: int = DEFAULT_BATCH_SIZE
    label_min_width: int = DEFAULT_LABEL_MIN_WIDTH

    def __post_init__(self) -> None:
        object.__setattr__(self, "headings", tuple(self.headings))
        if self.radius_km < 0:
            raise InvalidConfig(f"radius_km must be >= 0, got {self.radius_km}")
        if self.density <= 0:
            raise InvalidConfig(f"density must be >= 1, got {self.density}")
        if not 0.0 <= self.min_confidence <= 1.0:
            raise InvalidConfig(f"min_confidence must be within [0, 1], got {self.min_confidence}")
        if not self.headings:
            raise InvalidConfig("at least one heading is required")
        if self.batch_size <= 0:
            raise InvalidConfig(f"batch_size must be >= 1, got {self.batch_size}")
        if self.label_min_width < 0:
            raise InvalidConfig(f"label_min_width must be >= 0, got {self.label_min_width}")
