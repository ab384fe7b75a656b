"""Provider base classes."""

from __future__ import annotations

from street_scanner.sampler import Coordinate


class ImageryProvider:
    """Base interface for street-level imagery sources."""

    def fetch(self, lat: float, lng: float, heading: int) -> bytes:
        """Fetch one image.

        @param lat Latitude in degrees.
        @param lng Longitude in degrees.
        @param heading Camera heading in degrees.
        @return Encoded image bytes.
        @raise ProviderNotFound No imagery exists at this location.
        @raise ProviderError Transport, auth or quota failure.
        """
        raise NotImplementedError

    def __call__(self, coordinate: Coordinate, heading: int) -> bytes:
        return self.fetch(coordinate.lat, coordinate.lng, heading)


class Geocoder:
    """Base interface for address lookup."""

    def resolve(self, address: str) -> Coordinate:
        """Resolve an address to a coordinate.

        @param address Free-form address.
        @return Coordinate of the best match.
        @raise GeocodingError Lookup failed.
        """
        raise NotImplementedError
