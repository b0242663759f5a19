"""Aircraft data models and parsing - Pure functions.

This module handles parsing OpenSky state vectors and aircraft metadata
into typed objects. All functions are pure with no side effects.

OpenSky state vector format (array indices):
0: icao24, 1: callsign, 2: origin_country, 3: time_position,
4: last_contact, 5: longitude, 6: latitude, 7: baro_altitude,
8: on_ground, 9: velocity, 10: true_track, 11: vertical_rate,
12: sensors, 13: geo_altitude, 14: squawk, 15: spi, 16: position_source
"""

from dataclasses import dataclass
from typing import Any


STATE_VECTOR_LENGTH = 17

FEET_PER_METER = 3.28084
KNOTS_PER_MS = 1.94384


@dataclass(frozen=True)
class Aircraft:
    """Immutable aircraft position report for one polling cycle.

    Attributes:
        icao24: ICAO 24-bit transponder address (lowercase hex)
        callsign: Callsign, stripped of padding (may be empty)
        origin_country: Country of registration
        latitude: WGS84 latitude
        longitude: WGS84 longitude
        baro_altitude: Barometric altitude in meters (optional)
        geo_altitude: Geometric altitude in meters (optional)
        on_ground: Whether the aircraft reports being on the ground
        velocity: Ground speed in m/s (optional)
        true_track: Track angle in degrees clockwise from north (optional)
        vertical_rate: Vertical rate in m/s (optional)
        squawk: Transponder code (optional)
    """
    icao24: str
    callsign: str
    origin_country: str
    latitude: float
    longitude: float
    baro_altitude: float | None = None
    geo_altitude: float | None = None
    on_ground: bool = False
    velocity: float | None = None
    true_track: float | None = None
    vertical_rate: float | None = None
    squawk: str | None = None

    @property
    def label(self) -> str:
        """Display label: callsign, or the ICAO address when there is none."""
        return self.callsign or self.icao24

    @property
    def altitude_m(self) -> float | None:
        """Barometric altitude, falling back to geometric altitude."""
        return self.baro_altitude or self.geo_altitude

    @property
    def altitude_feet(self) -> int | None:
        return meters_to_feet(self.altitude_m)


@dataclass(frozen=True)
class AircraftMetadata:
    """Classification data from the OpenSky metadata endpoint.

    Attributes:
        registration: Tail number (e.g., "EI-DVM")
        manufacturer_name: Manufacturer (e.g., "Airbus")
        model: Model name (e.g., "A320 214")
        typecode: ICAO type designator (e.g., "A320", "B738")
        owner: Registered owner/operator
    """
    registration: str | None = None
    manufacturer_name: str | None = None
    model: str | None = None
    typecode: str | None = None
    owner: str | None = None


@dataclass(frozen=True)
class EnrichedAircraft:
    """A nearby aircraft with optional classification data.

    Attributes:
        aircraft: The tracked aircraft
        distance_miles: Distance from home
        metadata: Classification data, None when unavailable
    """
    aircraft: Aircraft
    distance_miles: float
    metadata: AircraftMetadata | None = None

    @property
    def typecode(self) -> str | None:
        return self.metadata.typecode if self.metadata else None

    @property
    def model(self) -> str | None:
        return self.metadata.model if self.metadata else None

    @property
    def registration(self) -> str | None:
        return self.metadata.registration if self.metadata else None


def meters_to_feet(meters: float | None) -> int | None:
    """Convert meters to whole feet. Unknown or zero altitude is None."""
    return round(meters * FEET_PER_METER) if meters else None


def ms_to_knots(ms: float | None) -> int | None:
    """Convert m/s to whole knots. Unknown or zero speed is None."""
    return round(ms * KNOTS_PER_MS) if ms else None


def _optional_float(value: Any) -> float | None:
    return float(value) if value is not None else None


def parse_state_vector(state: list[Any]) -> Aircraft | None:
    """Parse a single OpenSky state vector into an Aircraft.

    Pure function: takes the raw positional array, returns a typed Aircraft
    or None if it is malformed or has no position.

    Args:
        state: 17-field state vector array

    Returns:
        Aircraft object or None if parsing fails
    """
    try:
        if not state or len(state) < STATE_VECTOR_LENGTH:
            return None

        icao24 = state[0]
        if not icao24 or not isinstance(icao24, str):
            return None

        longitude = state[5]
        latitude = state[6]
        if latitude is None or longitude is None:
            return None

        return Aircraft(
            icao24=icao24.strip().lower(),
            callsign=(state[1] or "").strip(),
            origin_country=state[2] or "",
            latitude=float(latitude),
            longitude=float(longitude),
            baro_altitude=_optional_float(state[7]),
            geo_altitude=_optional_float(state[13]),
            on_ground=bool(state[8]),
            velocity=_optional_float(state[9]),
            true_track=_optional_float(state[10]),
            vertical_rate=_optional_float(state[11]),
            squawk=state[14],
        )
    except (TypeError, ValueError, AttributeError):
        return None


def parse_states(payload: dict[str, Any]) -> list[Aircraft]:
    """Parse an OpenSky /states/all response into airborne aircraft.

    Pure function: drops malformed vectors, aircraft without a position,
    and aircraft on the ground.

    Args:
        payload: JSON body from the states endpoint

    Returns:
        List of airborne Aircraft, in response order
    """
    states = payload.get("states") or []
    if not isinstance(states, list):
        return []

    aircraft = []

    for state in states:
        parsed = parse_state_vector(state)
        if parsed is not None and not parsed.on_ground:
            aircraft.append(parsed)

    return aircraft


def parse_metadata(payload: dict[str, Any]) -> AircraftMetadata:
    """Parse an OpenSky metadata response.

    Pure function. Empty strings are normalized to None.
    """
    return AircraftMetadata(
        registration=payload.get("registration") or None,
        manufacturer_name=payload.get("manufacturerName") or None,
        model=payload.get("model") or None,
        typecode=payload.get("typecode") or None,
        owner=payload.get("owner") or None,
    )
