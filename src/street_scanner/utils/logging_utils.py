"""Logging helpers."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable

from street_scanner.utils.io import ensure_dir

NOISY_LOGGERS = ("urllib3", "requests", "PIL", "torch")


def configure_logging(debug: bool = False) -> None:
    """Set up console logging for a CLI run.

    @param debug Enable DEBUG level for this package.
    @return None
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def iso_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp string.

    @return Timestamp in UTC (YYYY-MM-DDTHH:MM:SSZ).
    """
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def log_jsonl(path: Path, record: Dict[str, Any]) -> None:
    """Append a record to a JSONL file.

    @param path JSONL file path.
    @param record Serializable dict to append.
    @return None
    """
    ensure_dir(path.parent)
    with path.open("a", encoding="utf-8") as f:
        f.write(json.dumps(record, ensure_ascii=True) + "\n")


def detections_to_dicts(detections: Iterable[Any]) -> list[dict]:
    """Convert detections to serializable dictionaries.

    @param detections Iterable of detection objects.
    @return List of dicts with class, score, bbox.
    """
    out = []
    for det in detections:
        out.append(
            {
                "class": det.label,
                "score": float(det.score),
                "bbox": [float(v) for v in det.bbox],
            }
        )
    return out
