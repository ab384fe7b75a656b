"""Google Maps Platform clients (Street View Static and Geocoding)."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from street_scanner.config import ProviderConfig
from street_scanner.errors import GeocodingError, ProviderError, ProviderNotFound
from street_scanner.providers.base import Geocoder, ImageryProvider
from street_scanner.sampler import Coordinate

logger = logging.getLogger(__name__)


class StreetViewProvider(ImageryProvider):
    """Street View Static API client.

    ``return_error_code=true`` makes the API answer 404 instead of a grey
    placeholder image when there is no panorama nearby.
    """

    def __init__(
        self,
        api_key: str,
        config: ProviderConfig | None = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key:
            raise ValueError("A Google Maps API key is required")
        self.api_key = api_key
        self.config = config or ProviderConfig()
        self.session = session or requests.Session()

    def fetch(self, lat: float, lng: float, heading: int) -> bytes:
        params = {
            "size": self.config.image_size,
            "location": f"{lat},{lng}",
            "heading": heading,
            "pitch": self.config.pitch,
            "return_error_code": "true",
            "key": self.api_key,
        }
        try:
            response = self.session.get(self.config.streetview_url, params=params, timeout=self.config.timeout)
        except requests.RequestException as exc:
            raise ProviderError(f"Street View request failed: {exc}") from exc

        if response.status_code == 404:
            raise ProviderNotFound(f"No imagery at {lat},{lng} heading {heading}")
        if response.status_code != 200:
            raise ProviderError(f"Street View returned HTTP {response.status_code}")
        return response.content


class GoogleGeocoder(Geocoder):
    """Geocoding API client returning the first match."""

    def __init__(
        self,
        api_key: str,
        config: ProviderConfig | None = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not api_key:
            raise ValueError("A Google Maps API key is required")
        self.api_key = api_key
        self.config = config or ProviderConfig()
        self.session = session or requests.Session()

    def resolve(self, address: str) -> Coordinate:
        try:
            response = self.session.get(
                self.config.geocode_url,
                params={"address": address, "key": self.api_key},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise GeocodingError(f"Geocoding request failed: {exc}") from exc

        status = data.get("status")
        results = data.get("results") or []
        if status != "OK" or not results:
            raise GeocodingError(f"Geocoding failed: {status}")

        location = results[0]["geometry"]["location"]
        coordinate = Coordinate(float(location["lat"]), float(location["lng"]))
        logger.info("Resolved %r to %.6f,%.6f", address, coordinate.lat, coordinate.lng)
        return coordinate
