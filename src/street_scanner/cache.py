"""Content-addressed image cache backed by the filesystem."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Callable, Optional

from street_scanner.errors import IOFailure, ProviderError, ProviderNotFound
from street_scanner.sampler import Coordinate
from street_scanner.utils.io import ensure_dir, write_bytes

logger = logging.getLogger(__name__)

Fetcher = Callable[[Coordinate, int], bytes]


def sample_key(lat: float, lng: float, heading: int) -> str:
    """Stable cache key for a coordinate and heading.

    @param lat Latitude in degrees.
    @param lng Longitude in degrees.
    @param heading Camera heading in degrees.
    @return Hex digest used as the cache identity.
    """
    return hashlib.md5(f"{lat!r}_{lng!r}_{heading!r}".encode("utf-8")).hexdigest()


class ImageCache:
    """Append-only key to bytes store.

    Entries are written once and never evicted, so they survive across runs.
    """

    def __init__(self, root: Path, suffix: str = ".jpg") -> None:
        self.root = Path(root)
        self.suffix = suffix
        ensure_dir(self.root)

    def path_for(self, key: str) -> Path:
        return self.root / f"{key}{self.suffix}"

    def contains(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def get(self, key: str) -> Optional[bytes]:
        """Return cached bytes or None on a miss.

        @param key Cache key.
        @return Cached bytes or None.
        """
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Unreadable cache entry %s, treating as a miss: %s", path, exc)
            return None

    def put(self, key: str, data: bytes) -> Path:
        """Store bytes under a key.

        @param key Cache key.
        @param data Bytes to store.
        @return Path of the stored entry.
        """
        path = self.path_for(key)
        try:
            write_bytes(path, data)
        except OSError as exc:
            raise IOFailure(f"Failed to write cache entry {path}: {exc}") from exc
        return path

    def fetch_or_load(self, coordinate: Coordinate, heading: int, fetcher: Fetcher) -> Optional[bytes]:
        """Return cached imagery, fetching and storing it on a miss.

        @param coordinate Sample coordinate.
        @param heading Camera heading.
        @param fetcher Callable invoked only on a cache miss.
        @return Image bytes, or None when no imagery is available.
        """
        key = sample_key(coordinate.lat, coordinate.lng, heading)
        cached = self.get(key)
        if cached is not None:
            logger.debug("Cache hit %s (%s, %s, %s)", key, coordinate.lat, coordinate.lng, heading)
            return cached

        try:
            data = fetcher(coordinate, heading)
        except ProviderNotFound:
            logger.debug("No imagery at %s,%s heading %s", coordinate.lat, coordinate.lng, heading)
            return None
        except ProviderError as exc:
            logger.warning(
                "Imagery fetch failed at %s,%s heading %s: %s", coordinate.lat, coordinate.lng, heading, exc
            )
            return None

        try:
            self.put(key, data)
        except IOFailure as exc:
            logger.warning("%s", exc)
        return data
