"""Deduplication logic.

This module decides which aircraft are eligible for a fresh notification.
The decision functions are pure; NotificationLedger holds the in-memory
last-notified timestamps for the process lifetime.

Timestamps are monotonic clock readings in seconds. Callers supply "now";
nothing in this module reads the clock.
"""


def is_eligible(
    last_notified: float | None,
    now: float,
    cooldown_seconds: float,
) -> bool:
    """Determine whether an aircraft may be notified again.

    Pure function.

    Args:
        last_notified: When it was last notified, None if never
        now: Current timestamp
        cooldown_seconds: Minimum time between notifications

    Returns:
        True if never notified or the cooldown has elapsed
    """
    if last_notified is None:
        return True
    return now - last_notified >= cooldown_seconds


def compute_expired_ids(
    records: dict[str, float],
    now: float,
    max_age_seconds: float,
) -> set[str]:
    """Compute which ledger entries are old enough to drop.

    Pure function.

    Args:
        records: icao24 -> last-notified timestamp
        now: Current timestamp
        max_age_seconds: Entries strictly older than this expire

    Returns:
        Set of icao24 addresses to remove
    """
    return {
        icao24
        for icao24, notified_at in records.items()
        if now - notified_at > max_age_seconds
    }


class NotificationLedger:
    """Tracks when each aircraft was last notified.

    Entries are swept on every mark_notified() call once they are older
    than twice the cooldown, so the ledger stays the size of the local
    airspace.
    """

    def __init__(self, cooldown_seconds: float) -> None:
        """Initialize an empty ledger.

        Args:
            cooldown_seconds: Minimum time between notifications per aircraft
        """
        self.cooldown_seconds = cooldown_seconds
        self._records: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, icao24: object) -> bool:
        return icao24 in self._records

    @property
    def max_age_seconds(self) -> float:
        return 2 * self.cooldown_seconds

    def last_notified(self, icao24: str) -> float | None:
        return self._records.get(icao24)

    def is_eligible(self, icao24: str, now: float) -> bool:
        """Check whether an aircraft may be notified at `now`."""
        return is_eligible(self._records.get(icao24), now, self.cooldown_seconds)

    def mark_notified(self, icao24: str, now: float) -> None:
        """Record a successful notification and sweep stale entries."""
        self._records[icao24] = now

        for expired in compute_expired_ids(self._records, now, self.max_age_seconds):
            del self._records[expired]
