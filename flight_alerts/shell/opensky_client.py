"""OpenSky API Client - Imperative Shell.

This module handles HTTP communication with the OpenSky Network REST API.
All I/O is contained here; parsing and bookkeeping live in the core module.

Every failure degrades to "no data this cycle". Nothing here raises into
the monitor: a rate-limited or unreachable upstream just yields empty
results until it recovers.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

import requests

from flight_alerts.core.aircraft import (
    Aircraft,
    AircraftMetadata,
    EnrichedAircraft,
    parse_metadata,
    parse_states,
)
from flight_alerts.core.auth import AuthMode, needs_refresh, parse_token_response
from flight_alerts.core.config import OpenSkyConfig
from flight_alerts.core.geo import BoundingBox, NearbyAircraft, bounding_box
from flight_alerts.core.rate_limit import (
    is_rate_limited,
    record_rate_limit,
    seconds_remaining,
)
from flight_alerts.core.upstream import UpstreamState


logger = logging.getLogger(__name__)


class FetchStatus(str, Enum):
    """Why a fetch produced the result it did."""
    OK = "ok"
    BACKING_OFF = "backing_off"
    RATE_LIMITED = "rate_limited"
    AUTH_REJECTED = "auth_rejected"
    NO_TOKEN = "no_token"
    HTTP_ERROR = "http_error"
    NETWORK_ERROR = "network_error"
    MALFORMED = "malformed"


@dataclass
class FetchResult:
    """Result of fetching state vectors.

    An empty aircraft list means either "nothing in range" (status OK) or
    "no data this cycle" (any other status). The monitor treats both the
    same way.

    Attributes:
        status: Outcome of the request
        aircraft: Airborne aircraft with a position
        error: Error description if the fetch failed
    """
    status: FetchStatus
    aircraft: list[Aircraft] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == FetchStatus.OK


class OpenSkyClient:
    """Client for fetching aircraft data from the OpenSky API.

    This is part of the imperative shell - it handles HTTP I/O. The
    rate-limit window, OAuth2 token and metadata cache live in the
    UpstreamState passed in by the owner.
    """

    def __init__(
        self,
        config: OpenSkyConfig | None = None,
        state: UpstreamState | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize OpenSky client.

        Args:
            config: OpenSky configuration (defaults to anonymous access)
            state: Shared upstream state (created if not provided)
            clock: Source of "now" for backoff and token expiry
        """
        self.config = config or OpenSkyConfig()
        self.state = state or UpstreamState()
        self.clock = clock

        if self.config.auth_mode == AuthMode.OAUTH2_CLIENT_CREDENTIALS:
            logger.info("OpenSky: OAuth2 client credentials (%s)", self.config.client_id)
        elif self.config.auth_mode == AuthMode.BASIC:
            logger.info("OpenSky: basic auth as %s", self.config.username)
        else:
            logger.info("OpenSky: anonymous mode (limited daily credits)")

    @property
    def base_url(self) -> str:
        return self.config.base_url.rstrip("/")

    def ensure_token(self) -> str | None:
        """Return a valid OAuth2 access token, refreshing it if needed.

        This method performs HTTP I/O when the cached token is missing or
        within the refresh margin of expiry.

        Returns:
            Access token, or None if not in OAuth2 mode or the exchange failed
        """
        if self.config.auth_mode != AuthMode.OAUTH2_CLIENT_CREDENTIALS:
            return None

        now = self.clock()
        if not needs_refresh(self.state.token, now):
            return self.state.token.access_token

        if is_rate_limited(self.state.rate_limit, now):
            logger.info("Rate limited, not refreshing token")
            return None

        logger.info("Refreshing OpenSky access token")

        try:
            response = requests.post(
                self.config.token_url,
                data={"grant_type": "client_credentials"},
                auth=(self.config.client_id or "", self.config.client_secret or ""),
                timeout=self.config.timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error("OpenSky token request failed: %s", str(e))
            return None

        if response.status_code == 429:
            self._back_off()
            return None

        if response.status_code != 200:
            logger.error(
                "OpenSky token endpoint returned %d - %s",
                response.status_code,
                response.text,
            )
            return None

        try:
            payload = response.json()
        except ValueError:
            logger.error("OpenSky token response is not valid JSON")
            return None

        token = parse_token_response(payload, now) if isinstance(payload, dict) else None
        if token is None:
            logger.error("OpenSky token response has no access_token")
            return None

        self.state.token = token
        logger.info(
            "OpenSky access token valid for %ds",
            int(token.expires_at - now),
        )
        return token.access_token

    def _back_off(self) -> None:
        """Open the rate-limit window shared by every upstream call."""
        backoff = self.config.rate_limit_backoff_seconds
        self.state.rate_limit = record_rate_limit(self.clock(), backoff)
        logger.warning("Rate limited! Backing off for %d seconds", int(backoff))

    def invalidate_token(self) -> None:
        """Drop the cached token so the next call re-authenticates."""
        self.state.token = None

    def _get(
        self,
        url: str,
        params: dict[str, str] | None = None,
    ) -> tuple[FetchStatus, Any]:
        """Perform an authenticated, rate-limit aware GET.

        Returns:
            Tuple of (status, decoded JSON body or None)
        """
        now = self.clock()
        if is_rate_limited(self.state.rate_limit, now):
            logger.info(
                "Rate limited, waiting %ds",
                math.ceil(seconds_remaining(self.state.rate_limit, now)),
            )
            return FetchStatus.BACKING_OFF, None

        headers: dict[str, str] = {}
        auth = None

        if self.config.auth_mode == AuthMode.OAUTH2_CLIENT_CREDENTIALS:
            token = self.ensure_token()
            if token is None:
                if is_rate_limited(self.state.rate_limit, self.clock()):
                    return FetchStatus.RATE_LIMITED, None
                logger.warning("No OpenSky access token, skipping request")
                return FetchStatus.NO_TOKEN, None
            headers["Authorization"] = f"Bearer {token}"
        elif self.config.auth_mode == AuthMode.BASIC:
            auth = (self.config.username or "", self.config.password or "")

        try:
            response = requests.get(
                url,
                params=params,
                headers=headers,
                auth=auth,
                timeout=self.config.timeout_seconds,
            )
        except requests.Timeout:
            logger.error("OpenSky request timed out")
            return FetchStatus.NETWORK_ERROR, None
        except requests.RequestException as e:
            logger.error("OpenSky request failed: %s", str(e))
            return FetchStatus.NETWORK_ERROR, None

        if response.status_code == 429:
            self._back_off()
            return FetchStatus.RATE_LIMITED, None

        if response.status_code == 401:
            self.invalidate_token()
            logger.warning("OpenSky rejected credentials, will re-authenticate next call")
            return FetchStatus.AUTH_REJECTED, None

        if response.status_code != 200:
            logger.error("OpenSky API error: HTTP %d", response.status_code)
            return FetchStatus.HTTP_ERROR, None

        try:
            data = response.json()
        except ValueError:
            logger.error("OpenSky returned a malformed body")
            return FetchStatus.MALFORMED, None

        if not isinstance(data, dict):
            logger.error("OpenSky returned unexpected JSON: %s", type(data).__name__)
            return FetchStatus.MALFORMED, None

        return FetchStatus.OK, data

    def fetch_states(self, bbox: BoundingBox) -> FetchResult:
        """Fetch airborne aircraft within a bounding box.

        This method performs HTTP I/O (unless backing off).

        Args:
            bbox: Area to query

        Returns:
            FetchResult; aircraft on the ground or without a position
            are already excluded
        """
        status, data = self._get(f"{self.base_url}/states/all", params=bbox.to_params())

        if status != FetchStatus.OK:
            return FetchResult(status=status, error=status.value)

        aircraft = parse_states(data)
        logger.info("Found %d aircraft in flight", len(aircraft))

        return FetchResult(status=FetchStatus.OK, aircraft=aircraft)

    def fetch_aircraft_near(
        self,
        latitude: float,
        longitude: float,
        radius_miles: float,
    ) -> FetchResult:
        """Convenience method to fetch aircraft around a point.

        Args:
            latitude: Center latitude
            longitude: Center longitude
            radius_miles: Search radius (the query box over-fetches)

        Returns:
            FetchResult for the enclosing bounding box
        """
        logger.info("Searching for aircraft within %s miles", radius_miles)
        return self.fetch_states(bounding_box(latitude, longitude, radius_miles))

    def get_metadata(self, icao24: str) -> AircraftMetadata | None:
        """Look up aircraft type and registration.

        Each lookup costs API credits, so results are cached for the process
        lifetime, including failures: an address that once came back empty
        is never requested again.

        Args:
            icao24: ICAO 24-bit address

        Returns:
            AircraftMetadata, or None if unavailable
        """
        key = icao24.lower()
        cache = self.state.metadata_cache

        if key in cache:
            return cache[key]

        status, data = self._get(f"{self.base_url}/metadata/aircraft/icao/{key}")

        metadata = parse_metadata(data) if status == FetchStatus.OK else None
        if metadata is None:
            logger.debug("No metadata for %s (%s)", key, status.value)

        cache[key] = metadata
        return metadata

    def enrich(self, nearby: NearbyAircraft) -> EnrichedAircraft:
        """Attach metadata to a nearby aircraft."""
        return EnrichedAircraft(
            aircraft=nearby.aircraft,
            distance_miles=nearby.distance_miles,
            metadata=self.get_metadata(nearby.icao24),
        )
