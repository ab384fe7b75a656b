"""Deterministic spatial sampling around a scan center."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List

from street_scanner.errors import InvalidConfig

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinate:
    """A point on the globe.

    @field lat Latitude in degrees.
    @field lng Longitude in degrees.
    """

    lat: float
    lng: float


def destination_point(origin: Coordinate, bearing_rad: float, distance_km: float) -> Coordinate:
    """Move from origin along a bearing on a spherical earth.

    @param origin Start coordinate.
    @param bearing_rad Bearing in radians, clockwise from north.
    @param distance_km Distance to travel in kilometers.
    @return Destination coordinate.
    """
    delta = distance_km / EARTH_RADIUS_KM
    lat1 = math.radians(origin.lat)

    lat2 = math.asin(
        math.sin(lat1) * math.cos(delta) + math.cos(lat1) * math.sin(delta) * math.cos(bearing_rad)
    )
    dlng = math.atan2(
        math.sin(bearing_rad) * math.sin(delta) * math.cos(lat1),
        math.cos(delta) - math.sin(lat1) * math.sin(lat2),
    )
    return Coordinate(math.degrees(lat2), origin.lng + math.degrees(dlng))


def ring_point_count(radius_km: float, ring_radius_km: float) -> int:
    """Number of samples placed on a ring.

    @param radius_km Outer scan radius.
    @param ring_radius_km Radius of this ring.
    @return Point count, never below 6.
    """
    ratio = ring_radius_km / radius_km
    return max(6, int(math.floor(12 * ratio)) * 2)


def generate_coordinates(center: Coordinate, radius_km: float, density: int) -> List[Coordinate]:
    """Cover a disc with concentric rings of sample points.

    Rings run out to ``radius_km`` in ``density`` equal steps; the exact
    center is always appended as the final sample. The zero-radius ring would
    only repeat the center, so it is folded into that final sample.

    @param center Scan center.
    @param radius_km Disc radius in kilometers (>= 0).
    @param density Number of ring steps (>= 1).
    @return Ordered list of coordinates.
    """
    if radius_km < 0:
        raise InvalidConfig(f"radius_km must be >= 0, got {radius_km}")
    if density <= 0:
        raise InvalidConfig(f"density must be >= 1, got {density}")

    coordinates: List[Coordinate] = []
    if radius_km > 0:
        step = radius_km / density
        for ring in range(1, density + 1):
            r = ring * step
            count = ring_point_count(radius_km, r)
            for i in range(count):
                bearing = i * 2 * math.pi / count
                coordinates.append(destination_point(center, bearing, r))

    coordinates.append(Coordinate(center.lat, center.lng))
    return coordinates
