"""Geographic calculations - Pure functions.

This module provides distance and bounding box calculations around the
home location. All functions are pure with no side effects.

Distances are in miles throughout.
"""

import math
from dataclasses import dataclass

from flight_alerts.core.aircraft import Aircraft


# Earth's radius in miles
EARTH_RADIUS_MILES = 3959.0

# Approximate length of one degree of latitude in miles
MILES_PER_DEGREE_LATITUDE = 69.0


@dataclass(frozen=True)
class BoundingBox:
    """Geographic bounding box.

    Attributes:
        min_latitude: Southern boundary
        max_latitude: Northern boundary
        min_longitude: Western boundary
        max_longitude: Eastern boundary
    """
    min_latitude: float
    max_latitude: float
    min_longitude: float
    max_longitude: float

    def to_params(self) -> dict[str, str]:
        """Render as OpenSky query parameters (lamin, lamax, lomin, lomax)."""
        return {
            "lamin": str(self.min_latitude),
            "lamax": str(self.max_latitude),
            "lomin": str(self.min_longitude),
            "lomax": str(self.max_longitude),
        }


@dataclass(frozen=True)
class NearbyAircraft:
    """An aircraft annotated with its distance from home.

    Attributes:
        aircraft: The tracked aircraft
        distance_miles: Great-circle distance from home (never negative)
    """
    aircraft: Aircraft
    distance_miles: float

    @property
    def icao24(self) -> str:
        return self.aircraft.icao24


def calculate_distance(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
) -> float:
    """Calculate distance between two points using Haversine formula.

    Pure function.

    Args:
        lat1: Latitude of first point
        lon1: Longitude of first point
        lat2: Latitude of second point
        lon2: Longitude of second point

    Returns:
        Distance in miles
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    # Floating point error can push a fraction above 1 for antipodal points
    a = min(1.0, a)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_MILES * c


def bounding_box(
    latitude: float,
    longitude: float,
    radius_miles: float,
) -> BoundingBox:
    """Calculate a bounding box around a point.

    Pure function. The box over-fetches (its corners lie outside the
    radius); exact filtering happens in filter_and_sort().

    Args:
        latitude: Center latitude
        longitude: Center longitude
        radius_miles: Radius in miles

    Returns:
        BoundingBox enclosing the radius
    """
    lat_delta = radius_miles / MILES_PER_DEGREE_LATITUDE
    lon_delta = radius_miles / (
        MILES_PER_DEGREE_LATITUDE * math.cos(math.radians(latitude))
    )

    return BoundingBox(
        min_latitude=latitude - lat_delta,
        max_latitude=latitude + lat_delta,
        min_longitude=longitude - lon_delta,
        max_longitude=longitude + lon_delta,
    )


def get_distance_to_aircraft(
    aircraft: Aircraft,
    latitude: float,
    longitude: float,
) -> float:
    """Calculate distance from a point to an aircraft.

    Pure function.
    """
    return calculate_distance(
        latitude,
        longitude,
        aircraft.latitude,
        aircraft.longitude,
    )


def filter_and_sort(
    aircraft: list[Aircraft],
    latitude: float,
    longitude: float,
    radius_miles: float,
) -> list[NearbyAircraft]:
    """Keep aircraft within a radius of a point, closest first.

    Pure function. The radius is inclusive and aircraft at equal distances
    keep their input order.

    Args:
        aircraft: Aircraft to filter
        latitude: Home latitude
        longitude: Home longitude
        radius_miles: Maximum distance in miles

    Returns:
        NearbyAircraft within the radius, sorted by distance ascending
    """
    annotated = [
        NearbyAircraft(
            aircraft=a,
            distance_miles=get_distance_to_aircraft(a, latitude, longitude),
        )
        for a in aircraft
    ]
    nearby = [n for n in annotated if n.distance_miles <= radius_miles]

    return sorted(nearby, key=lambda n: n.distance_miles)
