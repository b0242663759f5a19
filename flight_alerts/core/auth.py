"""Upstream authentication models - Pure functions.

The auth mode is decided once at startup from the configured credentials.
Token expiry is tracked as a timestamp on the same clock the caller uses
for "now".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


# Refresh tokens this long before they actually expire
TOKEN_REFRESH_MARGIN_SECONDS = 60.0

# Used when the token endpoint omits expires_in
DEFAULT_TOKEN_LIFETIME_SECONDS = 1800.0


class AuthMode(str, Enum):
    """How requests to OpenSky are authenticated."""
    NONE = "none"
    BASIC = "basic"
    OAUTH2_CLIENT_CREDENTIALS = "oauth2"


@dataclass(frozen=True)
class AuthToken:
    """OAuth2 bearer token.

    Attributes:
        access_token: Bearer token string
        expires_at: Timestamp at which the token stops being valid
    """
    access_token: str
    expires_at: float


def resolve_auth_mode(
    username: str | None = None,
    password: str | None = None,
    client_id: str | None = None,
    client_secret: str | None = None,
) -> AuthMode:
    """Pick the auth mode from whichever credentials are present.

    Pure function. Client credentials win over username/password.
    """
    if client_id and client_secret:
        return AuthMode.OAUTH2_CLIENT_CREDENTIALS
    if username and password:
        return AuthMode.BASIC
    return AuthMode.NONE


def needs_refresh(
    token: AuthToken | None,
    now: float,
    margin_seconds: float = TOKEN_REFRESH_MARGIN_SECONDS,
) -> bool:
    """Check whether a token is missing or within the margin of expiry.

    Pure function.
    """
    if token is None:
        return True
    return now >= token.expires_at - margin_seconds


def parse_token_response(payload: dict[str, Any], now: float) -> AuthToken | None:
    """Parse an OAuth2 token endpoint response.

    Pure function.

    Args:
        payload: JSON body with access_token and expires_in
        now: Time the response was received

    Returns:
        AuthToken, or None if there is no access_token
    """
    access_token = payload.get("access_token")
    if not access_token or not isinstance(access_token, str):
        return None

    try:
        expires_in = float(payload.get("expires_in", DEFAULT_TOKEN_LIFETIME_SECONDS))
    except (TypeError, ValueError):
        expires_in = DEFAULT_TOKEN_LIFETIME_SECONDS

    return AuthToken(access_token=access_token, expires_at=now + expires_in)
