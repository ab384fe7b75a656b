"""Street Scanner package."""

from .config import AppConfig, ScanConfig
from .sampler import Coordinate, generate_coordinates
from .scanner import ScanResult, Scanner

__all__ = ["AppConfig", "ScanConfig", "Coordinate", "generate_coordinates", "ScanResult", "Scanner"]
