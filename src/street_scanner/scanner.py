"""Area scan orchestration: fetch, detect, annotate, aggregate."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from street_scanner.cache import Fetcher, ImageCache
from street_scanner.config import AnnotatorConfig, ScanConfig
from street_scanner.detectors.adapter import DetectionAdapter
from street_scanner.detectors.base import Detection
from street_scanner.sampler import Coordinate, generate_coordinates
from street_scanner.utils.annotate import annotate
from street_scanner.utils.io import ensure_dir, write_bytes
from street_scanner.utils.logging_utils import detections_to_dicts, iso_timestamp, log_jsonl

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def output_path(output_dir: Path, coordinate: Coordinate, heading: int, label: str) -> Path:
    """Destination of an annotated image.

    @param output_dir Root output directory.
    @param coordinate Sample coordinate.
    @param heading Camera heading.
    @param label Detected class.
    @return ``{output_dir}/{label}/{lat:.6f}_{lng:.6f}_{heading}.jpg``.
    """
    return output_dir / label / f"{coordinate.lat:.6f}_{coordinate.lng:.6f}_{heading}.jpg"


def iter_batches(items: Sequence[Coordinate], size: int) -> List[Sequence[Coordinate]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


@dataclass
class ClassCounts:
    """Per-class detection totals, overall and per coordinate.

    Increments and merges hold a lock, so coordinates of one batch can count
    into the same instance from worker threads.
    """

    total: Dict[str, int] = field(default_factory=dict)
    per_coordinate: Dict[Coordinate, Dict[str, int]] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def increment(self, coordinate: Coordinate, label: str, amount: int = 1) -> None:
        with self._lock:
            self.total[label] = self.total.get(label, 0) + amount
            sub = self.per_coordinate.setdefault(coordinate, {})
            sub[label] = sub.get(label, 0) + amount

    def merge(self, other: "ClassCounts") -> "ClassCounts":
        """Fold another accumulator into this one and return self."""
        with other._lock:
            total = dict(other.total)
            per_coordinate = {coord: dict(sub) for coord, sub in other.per_coordinate.items()}
        with self._lock:
            for label, count in total.items():
                self.total[label] = self.total.get(label, 0) + count
            for coord, sub in per_coordinate.items():
                mine = self.per_coordinate.setdefault(coord, {})
                for label, count in sub.items():
                    mine[label] = mine.get(label, 0) + count
        return self


@dataclass
class CoordinateResult:
    """Outcome of all headings at one coordinate."""

    coordinate: Coordinate
    fetched: int = 0
    missing: int = 0
    output_files: List[Path] = field(default_factory=list)


@dataclass
class ScanResult:
    """Outcome of a scan run.

    @field total_counts Class to count over the whole run.
    @field per_coordinate_counts Coordinate to class counts.
    @field output_files Annotated files written, in completion order.
    @field coordinates Number of sampled coordinates.
    @field samples_fetched Samples with imagery.
    @field samples_missing Samples without imagery or with a failed fetch.
    """

    total_counts: Dict[str, int]
    per_coordinate_counts: Dict[Coordinate, Dict[str, int]]
    output_files: List[Path]
    coordinates: int = 0
    samples_fetched: int = 0
    samples_missing: int = 0


class Scanner:
    """Run area scans against an imagery source and a detection model.

    Coordinates are consumed in sampler order, ``batch_size`` at a time. A
    batch runs concurrently; the next one starts after it fully completes.
    Headings within a coordinate run sequentially.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        adapter: DetectionAdapter,
        cache: ImageCache,
        output_dir: Path,
        annotator_config: AnnotatorConfig | None = None,
        log_path: Optional[Path] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.fetcher = fetcher
        self.adapter = adapter
        self.cache = cache
        self.output_dir = Path(output_dir)
        self.annotator_config = annotator_config or AnnotatorConfig()
        self.log_path = log_path
        self.progress = progress
        self._log_lock = threading.Lock()
        ensure_dir(self.output_dir)

    def run(self, config: ScanConfig) -> ScanResult:
        """Scan the disc described by config.

        @param config Validated scan settings.
        @return ScanResult with counts and written files.
        """
        coordinates = generate_coordinates(config.center, config.radius_km, config.density)
        batches = iter_batches(coordinates, config.batch_size)
        logger.info(
            "Scanning %d coordinates x %d headings in %d batches",
            len(coordinates),
            len(config.headings),
            len(batches),
        )

        counts = ClassCounts()
        result = ScanResult(total_counts=counts.total, per_coordinate_counts=counts.per_coordinate, output_files=[])
        result.coordinates = len(coordinates)

        for index, batch in enumerate(batches, start=1):
            batch_counts, coord_results = self._run_batch(batch, config)
            counts.merge(batch_counts)
            for coord_result in coord_results:
                result.samples_fetched += coord_result.fetched
                result.samples_missing += coord_result.missing
                result.output_files.extend(coord_result.output_files)
            logger.debug("Batch %d/%d done", index, len(batches))
            if self.progress is not None:
                self.progress(index, len(batches))

        self._log(
            {
                "timestamp": iso_timestamp(),
                "event": "scan_complete",
                "center": [config.center.lat, config.center.lng],
                "radius_km": config.radius_km,
                "coordinates": result.coordinates,
                "samples_fetched": result.samples_fetched,
                "samples_missing": result.samples_missing,
                "total_counts": dict(counts.total),
            }
        )
        return result

    def _run_batch(self, batch: Sequence[Coordinate], config: ScanConfig):
        """Process one batch concurrently.

        @param batch Coordinates of this batch.
        @param config Scan settings.
        @return Tuple of (batch ClassCounts, list of CoordinateResult).
        """
        batch_counts = ClassCounts()
        with ThreadPoolExecutor(max_workers=len(batch)) as pool:
            results = list(pool.map(lambda c: self._process_coordinate(c, config, batch_counts), batch))
        return batch_counts, results

    def _process_coordinate(self, coordinate: Coordinate, config: ScanConfig, counts: ClassCounts) -> CoordinateResult:
        result = CoordinateResult(coordinate)
        for heading in config.headings:
            image_bytes = self.cache.fetch_or_load(coordinate, heading, self.fetcher)
            if image_bytes is None:
                result.missing += 1
                continue
            result.fetched += 1

            detections = self.adapter.detect(image_bytes, config.min_confidence)
            if not detections:
                continue

            for det in detections:
                counts.increment(coordinate, det.label)

            result.output_files.extend(
                self._write_annotations(image_bytes, detections, coordinate, heading, config)
            )
        return result

    def _write_annotations(
        self,
        image_bytes: bytes,
        detections: List[Detection],
        coordinate: Coordinate,
        heading: int,
        config: ScanConfig,
    ) -> List[Path]:
        written: List[Path] = []
        labels = sorted({det.label for det in detections})
        for label in labels:
            path = output_path(self.output_dir, coordinate, heading, label)
            try:
                ensure_dir(path.parent)
                data = annotate(
                    image_bytes,
                    detections,
                    label,
                    self.annotator_config,
                    min_label_width=config.label_min_width,
                )
                if data is None:
                    continue
                write_bytes(path, data)
            except (OSError, ValueError) as exc:
                logger.warning("Dropping annotation %s: %s", path, exc)
                continue
            written.append(path)

        self._log(
            {
                "timestamp": iso_timestamp(),
                "event": "sample",
                "lat": coordinate.lat,
                "lng": coordinate.lng,
                "heading": heading,
                "detections": detections_to_dicts(detections),
                "outputs": [str(p) for p in written],
            }
        )
        return written

    def _log(self, record: dict) -> None:
        if self.log_path is None:
            return
        try:
            with self._log_lock:
                log_jsonl(self.log_path, record)
        except OSError as exc:
            logger.warning("Could not append to %s: %s", self.log_path, exc)
