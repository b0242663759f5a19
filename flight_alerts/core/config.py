"""Configuration models - Pure data structures.

These are domain models for configuration. The actual loading
(I/O) is handled by the shell layer.
"""

from dataclasses import dataclass, field

from flight_alerts.core.auth import AuthMode
from flight_alerts.core.formatter import (
    AIRPLANE_ICON,
    DEFAULT_CYCLES,
    DEFAULT_LIFETIME_MS,
    DEFAULT_SOUND,
)
from flight_alerts.core.rate_limit import DEFAULT_BACKOFF_SECONDS


OPENSKY_API_BASE = "https://opensky-network.org/api"
OPENSKY_TOKEN_URL = (
    "https://auth.opensky-network.org/auth/realms/opensky-network"
    "/protocol/openid-connect/token"
)


@dataclass
class HomeLocation:
    """The point aircraft distances are measured from.

    Attributes:
        latitude: Home latitude
        longitude: Home longitude
    """
    latitude: float = 53.313912009645804
    longitude: float = -6.287110040207438


@dataclass
class OpenSkyConfig:
    """OpenSky API configuration.

    Attributes:
        base_url: REST API base URL
        auth_mode: How requests are authenticated (chosen once at load time)
        username: Account username (basic auth)
        password: Account password (basic auth)
        client_id: API client id (OAuth2 client credentials)
        client_secret: API client secret (OAuth2 client credentials)
        token_url: OAuth2 token endpoint
        timeout_seconds: Per-request timeout
        rate_limit_backoff_seconds: How long to stop calling after a 429
    """
    base_url: str = OPENSKY_API_BASE
    auth_mode: AuthMode = AuthMode.NONE
    username: str | None = None
    password: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    token_url: str = OPENSKY_TOKEN_URL
    timeout_seconds: float = 15.0
    rate_limit_backoff_seconds: float = DEFAULT_BACKOFF_SECONDS


@dataclass
class LaMetricConfig:
    """LaMetric device configuration.

    Attributes:
        device_ip: Device address on the local network
        api_key: Device API key (from the LaMetric developer portal)
        port: Local API port
        lifetime_ms: Dismiss notifications after this long
        cycles: How many times each notification scrolls
        icon: Icon id shown with the notification
        sound: Notification sound id (None for silent)
    """
    device_ip: str = ""
    api_key: str = ""
    port: int = 8080
    lifetime_ms: int = DEFAULT_LIFETIME_MS
    cycles: int = DEFAULT_CYCLES
    icon: str = AIRPLANE_ICON
    sound: str | None = DEFAULT_SOUND


@dataclass
class Config:
    """Application configuration.

    This is a pure data structure - no I/O or side effects.

    Attributes:
        home: Location to monitor around
        radius_miles: Notify for aircraft within this distance
        poll_interval_seconds: How often to poll OpenSky
        cooldown_minutes: Minimum time between notifications per aircraft
        fetch_metadata: Look up aircraft type (costs extra API credits)
        notification_delay_seconds: Pause between notifications in one cycle
        opensky: OpenSky API configuration
        lametric: LaMetric device configuration
    """
    home: HomeLocation = field(default_factory=HomeLocation)
    radius_miles: float = 10.0
    poll_interval_seconds: float = 30.0
    cooldown_minutes: float = 5.0
    fetch_metadata: bool = False
    notification_delay_seconds: float = 0.5
    opensky: OpenSkyConfig = field(default_factory=OpenSkyConfig)
    lametric: LaMetricConfig = field(default_factory=LaMetricConfig)

    @property
    def cooldown_seconds(self) -> float:
        return self.cooldown_minutes * 60


@dataclass
class ValidationError:
    """A configuration validation error.

    Attributes:
        field: The field that has an error
        message: Human-readable error description
        severity: 'error' or 'warning'
    """
    field: str
    message: str
    severity: str = "error"


@dataclass
class ValidationResult:
    """Result of validating configuration.

    Attributes:
        valid: True if no errors (warnings are OK)
        errors: List of validation errors/warnings
    """
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def warnings(self) -> list[ValidationError]:
        """Get only warnings."""
        return [e for e in self.errors if e.severity == "warning"]

    @property
    def critical_errors(self) -> list[ValidationError]:
        """Get only critical errors."""
        return [e for e in self.errors if e.severity == "error"]


def validate_coordinates(lat: float, lon: float, field_name: str) -> list[ValidationError]:
    """Validate latitude/longitude coordinates.

    Pure function.

    Args:
        lat: Latitude value
        lon: Longitude value
        field_name: Name of the field for error messages

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not -90 <= lat <= 90:
        errors.append(ValidationError(
            field=field_name,
            message=f"Latitude {lat} out of range [-90, 90]",
        ))

    if not -180 <= lon <= 180:
        errors.append(ValidationError(
            field=field_name,
            message=f"Longitude {lon} out of range [-180, 180]",
        ))

    return errors


def validate_credentials(opensky: OpenSkyConfig) -> list[ValidationError]:
    """Check that the chosen auth mode has the credentials it needs.

    Pure function.
    """
    errors = []

    if opensky.auth_mode == AuthMode.BASIC:
        if not (opensky.username and opensky.password):
            errors.append(ValidationError(
                field="opensky",
                message="Basic auth selected but username or password is missing",
            ))
    elif opensky.auth_mode == AuthMode.OAUTH2_CLIENT_CREDENTIALS:
        if not (opensky.client_id and opensky.client_secret):
            errors.append(ValidationError(
                field="opensky",
                message="OAuth2 selected but client_id or client_secret is missing",
            ))
    else:
        errors.append(ValidationError(
            field="opensky",
            message="Anonymous OpenSky access has a low daily credit limit",
            severity="warning",
        ))

    return errors


def validate_config(config: Config) -> ValidationResult:
    """Validate configuration for errors and warnings.

    Pure function.

    Args:
        config: Configuration to validate

    Returns:
        ValidationResult with any errors/warnings found
    """
    errors: list[ValidationError] = []

    errors.extend(validate_coordinates(
        config.home.latitude, config.home.longitude,
        "home",
    ))

    if config.radius_miles <= 0:
        errors.append(ValidationError(
            field="radius_miles",
            message=f"Radius must be positive, got {config.radius_miles}",
        ))

    if config.poll_interval_seconds <= 0:
        errors.append(ValidationError(
            field="poll_interval_seconds",
            message=f"Poll interval must be positive, got {config.poll_interval_seconds}",
        ))

    if config.cooldown_minutes < 0:
        errors.append(ValidationError(
            field="cooldown_minutes",
            message=f"Cooldown cannot be negative, got {config.cooldown_minutes}",
        ))

    if config.notification_delay_seconds < 0:
        errors.append(ValidationError(
            field="notification_delay_seconds",
            message=f"Delay cannot be negative, got {config.notification_delay_seconds}",
        ))

    errors.extend(validate_credentials(config.opensky))

    if not config.lametric.device_ip:
        errors.append(ValidationError(
            field="lametric.device_ip",
            message="LaMetric device IP not set",
            severity="warning",
        ))

    if not config.lametric.api_key or config.lametric.api_key.startswith("${"):
        errors.append(ValidationError(
            field="lametric.api_key",
            message="LaMetric API key not resolved (missing or still a placeholder)",
            severity="warning",
        ))

    has_critical = any(e.severity == "error" for e in errors)

    return ValidationResult(
        valid=not has_critical,
        errors=errors,
    )
