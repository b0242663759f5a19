"""Message formatting - Pure functions.

This module formats aircraft data into LaMetric notification payloads
and log lines. All functions are pure with no side effects.
"""

from typing import Any

from flight_alerts.core.aircraft import EnrichedAircraft


# LaMetric built-in airplane icon
AIRPLANE_ICON = "8879"

DEFAULT_LIFETIME_MS = 10000
DEFAULT_CYCLES = 3
DEFAULT_SOUND = "notification"

# Separator between parts of the scrolling text
PART_SEPARATOR = "  "


def format_altitude(altitude_ft: int | None) -> str:
    """Format an altitude for the display.

    Pure function.

    Examples:
        35000 -> "35k ft"
        5000 -> "5,000 ft"
        None or 0 -> "Ground"
    """
    if not altitude_ft or altitude_ft <= 0:
        return "Ground"
    if altitude_ft >= 10000:
        # Halves round up
        return f"{int(altitude_ft / 1000 + 0.5)}k ft"
    return f"{altitude_ft:,} ft"


def format_distance(distance_miles: float) -> str:
    """Format a distance for the display, e.g. "2.4mi"."""
    return f"{distance_miles:.1f}mi"


def format_flight_text(
    label: str | None,
    altitude_ft: int | None,
    typecode: str | None = None,
    distance_miles: float | None = None,
    origin: str | None = None,
    destination: str | None = None,
) -> str:
    """Build the single scrolling line shown on the device.

    Pure function.

    Args:
        label: Callsign or ICAO address
        altitude_ft: Altitude in feet (None if unknown)
        typecode: Aircraft type designator (optional)
        distance_miles: Distance from home (omitted if None or 0)
        origin: Origin airport code (optional)
        destination: Destination airport code (optional)

    Returns:
        e.g. "EIN123  A320  35k ft  2.4mi"
    """
    parts = [label or "Aircraft"]

    if typecode:
        parts.append(typecode)

    if origin and destination:
        parts.append(f"{origin}>{destination}")

    parts.append(format_altitude(altitude_ft))

    if distance_miles:
        parts.append(format_distance(distance_miles))

    return PART_SEPARATOR.join(parts)


def build_notification_payload(
    text: str,
    lifetime_ms: int = DEFAULT_LIFETIME_MS,
    cycles: int = DEFAULT_CYCLES,
    icon: str = AIRPLANE_ICON,
    sound: str | None = DEFAULT_SOUND,
) -> dict[str, Any]:
    """Build a LaMetric local push notification body.

    Pure function.

    Args:
        text: Frame text
        lifetime_ms: Dismiss after this many milliseconds
        cycles: How many times the frame scrolls
        icon: LaMetric icon id
        sound: Notification sound id (None for silent)

    Returns:
        Notification payload dict
    """
    model: dict[str, Any] = {
        "cycles": cycles,
        "frames": [
            {
                "icon": icon,
                "text": text,
            },
        ],
    }

    if sound:
        model["sound"] = {"category": "notifications", "id": sound}

    return {
        "priority": "info",
        "icon_type": "none",
        "lifetime": lifetime_ms,
        "model": model,
    }


def format_aircraft_summary(enriched: EnrichedAircraft) -> str:
    """Format a one-line log summary of an aircraft.

    Pure function.

    Example:
        "EIN123 (A320): 35,000 ft, 2.4 mi"
    """
    aircraft = enriched.aircraft
    type_info = f" ({enriched.typecode})" if enriched.typecode else ""
    altitude_ft = aircraft.altitude_feet
    altitude = f"{altitude_ft:,} ft" if altitude_ft else "ground"

    return (
        f"{aircraft.label}{type_info}: {altitude}, "
        f"{enriched.distance_miles:.1f} mi"
    )
