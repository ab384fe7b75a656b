"""Exception types for scan runs.

Only ``InvalidConfig``, ``GeocodingError`` and ``ModelLoadError`` abort a run.
The rest are raised by collaborators for a single sample and are absorbed by
the cache, adapter and scanner.
"""

from __future__ import annotations


class ScanError(Exception):
    """Base class for street scanner errors."""


class InvalidConfig(ScanError):
    """Bad radius, density, confidence or batch settings."""


class ProviderNotFound(ScanError):
    """No imagery exists for the requested location."""


class ProviderError(ScanError):
    """Transport, auth or quota failure from the imagery provider."""


class DetectionFailure(ScanError):
    """Decode or inference failure on a single image."""


class IOFailure(ScanError):
    """Cache or output write failure."""


class GeocodingError(ScanError):
    """The scan center could not be resolved from an address."""


class ModelLoadError(ScanError):
    """The detection model could not be loaded."""
