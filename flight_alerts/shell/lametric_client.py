"""LaMetric Local Push Client - Imperative Shell.

This module pushes notifications to a LaMetric Time device on the local
network. All I/O is contained here; message formatting is in the core module.
"""

import logging
from dataclasses import dataclass
from typing import Any

import requests

from flight_alerts.core.config import LaMetricConfig
from flight_alerts.core.formatter import build_notification_payload, format_flight_text


logger = logging.getLogger(__name__)


# Default timeout for device requests (seconds)
DEFAULT_TIMEOUT = 10

# The local API uses a fixed basic-auth username
DEVICE_USERNAME = "dev"


@dataclass
class LaMetricResponse:
    """Response from the LaMetric device.

    Attributes:
        success: Whether the request succeeded
        status_code: HTTP status code (0 if no response)
        data: Decoded JSON body, if any
        error: Error message if failed
    """
    success: bool
    status_code: int
    data: dict[str, Any] | None = None
    error: str | None = None


class LaMetricClient:
    """Client for the LaMetric local push API.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        config: LaMetricConfig,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize LaMetric client.

        Args:
            config: Device address, API key and notification defaults
            timeout: Request timeout in seconds
        """
        self.config = config
        self.timeout = timeout
        self.base_url = f"http://{config.device_ip}:{config.port}/api/v2"

        logger.info("LaMetric client initialized for device %s", config.device_ip)

    def _request(
        self,
        method: str,
        endpoint: str,
        payload: dict[str, Any] | None = None,
    ) -> LaMetricResponse:
        """Send a request to the device.

        This method performs HTTP I/O.
        """
        try:
            response = requests.request(
                method,
                f"{self.base_url}{endpoint}",
                json=payload,
                auth=(DEVICE_USERNAME, self.config.api_key),
                timeout=self.timeout,
            )
        except requests.Timeout:
            logger.error("LaMetric request timed out")
            return LaMetricResponse(
                success=False,
                status_code=0,
                error="Request timed out",
            )
        except requests.RequestException as e:
            logger.error("LaMetric request failed: %s", str(e))
            return LaMetricResponse(
                success=False,
                status_code=0,
                error=str(e),
            )

        if not 200 <= response.status_code < 300:
            error_text = response.text
            logger.warning(
                "LaMetric returned non-2xx: %d - %s",
                response.status_code,
                error_text,
            )
            return LaMetricResponse(
                success=False,
                status_code=response.status_code,
                error=error_text,
            )

        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = {}

        return LaMetricResponse(
            success=True,
            status_code=response.status_code,
            data=data if isinstance(data, dict) else {},
        )

    def push_payload(self, payload: dict[str, Any]) -> LaMetricResponse:
        """Push a raw notification payload."""
        logger.info("Pushing notification to LaMetric")
        result = self._request("POST", "/device/notifications", payload)

        if result.success:
            logger.info("Notification sent")

        return result

    def push_notification(
        self,
        text: str,
        icon: str | None = None,
        sound: str | None = None,
    ) -> LaMetricResponse:
        """Push a plain text notification.

        Args:
            text: Text to show
            icon: Icon id (defaults to the configured icon)
            sound: Sound id (defaults to silent)

        Returns:
            LaMetricResponse indicating success or failure
        """
        payload = build_notification_payload(
            text,
            lifetime_ms=self.config.lifetime_ms,
            cycles=self.config.cycles,
            icon=icon or self.config.icon,
            sound=sound,
        )
        return self.push_payload(payload)

    def push(
        self,
        label: str,
        altitude_ft: int | None,
        typecode: str | None,
        distance_miles: float | None,
        lifetime_ms: int | None = None,
        cycles: int | None = None,
    ) -> LaMetricResponse:
        """Push a scrolling flight notification.

        Args:
            label: Callsign or ICAO address
            altitude_ft: Altitude in feet (None if unknown)
            typecode: Aircraft type designator (optional)
            distance_miles: Distance from home
            lifetime_ms: Dismiss after (defaults to config)
            cycles: Scroll repetitions (defaults to config)

        Returns:
            LaMetricResponse indicating success or failure
        """
        text = format_flight_text(
            label,
            altitude_ft,
            typecode=typecode,
            distance_miles=distance_miles,
        )
        payload = build_notification_payload(
            text,
            lifetime_ms=lifetime_ms if lifetime_ms is not None else self.config.lifetime_ms,
            cycles=cycles if cycles is not None else self.config.cycles,
            icon=self.config.icon,
            sound=self.config.sound,
        )
        return self.push_payload(payload)

    def check_connection(self) -> LaMetricResponse:
        """Check that the device is reachable and the API key works."""
        logger.info("Connecting to %s/device", self.base_url)
        result = self._request("GET", "/device")

        if result.success:
            logger.info("Connected to LaMetric: %s", (result.data or {}).get("name"))
        else:
            logger.error("Cannot connect to LaMetric: %s", result.error)

        return result
