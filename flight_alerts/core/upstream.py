"""Shared upstream state.

One UpstreamState is created by the monitor and handed to the OpenSky
client. It is only touched from the single polling flow, so it needs no
locking.
"""

from dataclasses import dataclass, field

from flight_alerts.core.aircraft import AircraftMetadata
from flight_alerts.core.auth import AuthToken
from flight_alerts.core.rate_limit import RateLimitState


@dataclass
class UpstreamState:
    """Process-wide state shared by all upstream calls.

    Attributes:
        rate_limit: Current backoff window
        token: Cached OAuth2 token (None until fetched or after rejection)
        metadata_cache: icao24 -> metadata, or None meaning "unavailable".
                        An address absent from the dict has not been looked up.
    """
    rate_limit: RateLimitState = field(default_factory=RateLimitState)
    token: AuthToken | None = None
    metadata_cache: dict[str, AircraftMetadata | None] = field(default_factory=dict)
