"""Imagery and geocoding providers."""

from .base import Geocoder, ImageryProvider
from .google import GoogleGeocoder, StreetViewProvider

__all__ = ["Geocoder", "ImageryProvider", "GoogleGeocoder", "StreetViewProvider"]
