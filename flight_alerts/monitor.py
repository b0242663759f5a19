"""Flight Monitor - Wires Functional Core and Imperative Shell.

This module coordinates the flow of data between the pure functional
core and the I/O-performing shell components. Each cycle runs:

    fetch -> filter by distance -> dedup check -> enrich -> dispatch -> mark

on a fixed interval in a single background thread. Cycles never overlap:
the next one is only scheduled after the previous one returns.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable

from flight_alerts.core.aircraft import EnrichedAircraft
from flight_alerts.core.config import Config
from flight_alerts.core.dedup import NotificationLedger
from flight_alerts.core.formatter import format_aircraft_summary
from flight_alerts.core.geo import NearbyAircraft, filter_and_sort
from flight_alerts.core.upstream import UpstreamState
from flight_alerts.shell.lametric_client import LaMetricClient
from flight_alerts.shell.opensky_client import FetchStatus, OpenSkyClient


logger = logging.getLogger(__name__)


@dataclass
class NotificationResult:
    """Result of notifying for a single aircraft.

    Attributes:
        aircraft: The aircraft that was notified
        success: Whether the device accepted the notification
        error: Error message if failed
    """
    aircraft: EnrichedAircraft
    success: bool
    error: str | None = None


@dataclass
class CycleResult:
    """Result of one monitoring cycle.

    Attributes:
        fetched: Airborne aircraft returned for the bounding box
        nearby: Aircraft within the radius
        notified: Successful notifications
        failed: Failed notification attempts
        skipped: icao24 addresses skipped due to cooldown
        errors: Unexpected errors caught at the cycle boundary
        fetch_status: Outcome of the upstream fetch
    """
    fetched: int = 0
    nearby: int = 0
    notified: list[NotificationResult] = field(default_factory=list)
    failed: list[NotificationResult] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    fetch_status: FetchStatus | None = None

    @property
    def success(self) -> bool:
        """Returns True if no unexpected errors occurred."""
        return len(self.errors) == 0

    @property
    def summary(self) -> str:
        """Human-readable summary of the cycle."""
        return (
            f"Fetched {self.fetched} aircraft, "
            f"{self.nearby} nearby, "
            f"{len(self.notified)} notified, "
            f"{len(self.skipped)} skipped, "
            f"{len(self.failed)} failed"
        )


class FlightMonitor:
    """Polls OpenSky for nearby aircraft and notifies the LaMetric device.

    The monitor owns all process-wide state: the upstream state shared
    with the OpenSky client and the notification ledger.

    Two states: idle (not started) and running (scheduled). start() and
    stop() move between them; both are safe to call twice.
    """

    def __init__(
        self,
        config: Config,
        opensky_client: OpenSkyClient | None = None,
        dispatcher: LaMetricClient | None = None,
        ledger: NotificationLedger | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize monitor with configuration.

        Args:
            config: Application configuration
            opensky_client: OpenSky client (created if not provided)
            dispatcher: Notification dispatcher (LaMetric client created
                        if not provided)
            ledger: Notification ledger (created if not provided)
            clock: Monotonic clock used for cooldowns and scheduling
            sleep: Used for the pause between notifications
        """
        self.config = config
        self.clock = clock
        self.sleep = sleep
        self.upstream_state = UpstreamState()
        self.opensky_client = opensky_client or OpenSkyClient(
            config.opensky,
            state=self.upstream_state,
            clock=clock,
        )
        self.dispatcher = dispatcher or LaMetricClient(config.lametric)
        self.ledger = ledger or NotificationLedger(config.cooldown_seconds)

        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and not self._stop_event.is_set()

    def _enrich(self, nearby: NearbyAircraft) -> EnrichedAircraft:
        """Look up aircraft type, if metadata fetching is enabled."""
        if self.config.fetch_metadata:
            return self.opensky_client.enrich(nearby)
        return EnrichedAircraft(
            aircraft=nearby.aircraft,
            distance_miles=nearby.distance_miles,
        )

    def _notify(self, nearby: NearbyAircraft) -> NotificationResult:
        """Enrich and dispatch a notification for one aircraft."""
        enriched = self._enrich(nearby)
        logger.info("  - %s", format_aircraft_summary(enriched))

        response = self.dispatcher.push(
            enriched.aircraft.label,
            enriched.aircraft.altitude_feet,
            enriched.typecode,
            enriched.distance_miles,
            self.config.lametric.lifetime_ms,
            self.config.lametric.cycles,
        )

        return NotificationResult(
            aircraft=enriched,
            success=response.success,
            error=response.error,
        )

    def _process(self, result: CycleResult) -> None:
        """Run the cycle steps, filling in `result` as it goes."""
        home = self.config.home
        radius = self.config.radius_miles

        fetch = self.opensky_client.fetch_aircraft_near(
            home.latitude,
            home.longitude,
            radius,
        )
        result.fetch_status = fetch.status
        result.fetched = len(fetch.aircraft)

        if not fetch.aircraft:
            logger.info("No aircraft in bounding box")
            return

        nearby = filter_and_sort(fetch.aircraft, home.latitude, home.longitude, radius)
        result.nearby = len(nearby)

        if not nearby:
            logger.info("No aircraft within radius")
            return

        logger.info("%d aircraft within %s miles:", len(nearby), radius)

        for plane in nearby:
            # Checked per aircraft, right before dispatch
            if not self.ledger.is_eligible(plane.icao24, self.clock()):
                logger.info("  - %s: (skipped - recently notified)", plane.aircraft.label)
                result.skipped.append(plane.icao24)
                continue

            notification = self._notify(plane)

            if notification.success:
                self.ledger.mark_notified(plane.icao24, self.clock())
                result.notified.append(notification)
            else:
                logger.error(
                    "Failed to notify for %s: %s",
                    plane.aircraft.label,
                    notification.error,
                )
                result.failed.append(notification)

            self.sleep(self.config.notification_delay_seconds)

    def poll(self) -> CycleResult:
        """Run one complete monitoring cycle.

        Never raises: any unexpected error is logged and recorded on the
        result so the schedule keeps going.

        Returns:
            CycleResult with details of what happened
        """
        result = CycleResult()

        try:
            self._process(result)
        except Exception as e:
            logger.exception("Poll error")
            result.errors.append(f"Poll error: {e}")

        logger.debug("Cycle complete: %s", result.summary)
        return result

    def _run(self, stop_event: threading.Event) -> None:
        """Poll immediately, then on a fixed interval until stopped."""
        interval = self.config.poll_interval_seconds
        next_tick = self.clock()

        while not stop_event.is_set():
            self.poll()

            next_tick += interval
            delay = next_tick - self.clock()
            if delay < 0:
                logger.warning("Cycle overran the poll interval by %.1fs", -delay)
                next_tick = self.clock()
                delay = 0

            stop_event.wait(delay)

    def start(self) -> None:
        """Start polling in a background thread."""
        if self.is_running:
            logger.warning("Monitor already running")
            return

        # A stopped thread may still be finishing its last cycle
        if self._thread is not None and self._thread.is_alive():
            logger.warning("Previous cycle still in flight, not starting")
            return

        config = self.config
        logger.info("Flight Monitor Starting")
        logger.info("Home: %.4f, %.4f", config.home.latitude, config.home.longitude)
        logger.info("Radius: %s miles", config.radius_miles)
        logger.info("Poll interval: %s seconds", config.poll_interval_seconds)
        logger.info("Cooldown: %s minutes", config.cooldown_minutes)

        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run,
            args=(self._stop_event,),
            name="flight-monitor",
            daemon=True,
        )
        self._thread.start()
        logger.info("Monitor running")

    def stop(self, timeout: float | None = None) -> None:
        """Stop scheduling new cycles.

        A cycle already in flight runs to completion; this waits for it
        (up to `timeout` seconds) unless called from the monitor thread.
        start() refuses to launch a new thread until that cycle finishes.
        """
        thread = self._thread
        if thread is None or self._stop_event.is_set():
            return

        self._stop_event.set()

        if thread is not threading.current_thread():
            thread.join(timeout)

        logger.info("Flight Monitor Stopped")

    def wait(self) -> None:
        """Block until the monitor is stopped."""
        while True:
            thread = self._thread
            if thread is None or not thread.is_alive():
                return
            thread.join(timeout=0.5)
