"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- OpenSky state vector parsing
- Geo/distance calculations
- Notification deduplication
- Rate-limit and token bookkeeping
- Message formatting

All functions here are deterministic and have no I/O.
"""

from flight_alerts.core.aircraft import Aircraft, AircraftMetadata, EnrichedAircraft, parse_states
from flight_alerts.core.geo import BoundingBox, NearbyAircraft, bounding_box, calculate_distance, filter_and_sort
from flight_alerts.core.dedup import NotificationLedger, is_eligible
from flight_alerts.core.rate_limit import RateLimitState, is_rate_limited
from flight_alerts.core.auth import AuthMode, AuthToken, needs_refresh
from flight_alerts.core.formatter import format_flight_text, build_notification_payload

__all__ = [
    # Aircraft
    "Aircraft",
    "AircraftMetadata",
    "EnrichedAircraft",
    "parse_states",
    # Geo
    "BoundingBox",
    "NearbyAircraft",
    "bounding_box",
    "calculate_distance",
    "filter_and_sort",
    # Dedup
    "NotificationLedger",
    "is_eligible",
    # Rate limit
    "RateLimitState",
    "is_rate_limited",
    # Auth
    "AuthMode",
    "AuthToken",
    "needs_refresh",
    # Formatter
    "format_flight_text",
    "build_notification_payload",
]
