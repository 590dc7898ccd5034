import time
from typing import Callable, Optional

from app.config import Settings
from app.core import (
    ErrorKind,
    ProxyError,
    Session,
    log_error,
    log_step,
    parse_session,
)

from .client import SpotifyClient

ClientFactory = Callable[..., SpotifyClient]


def now_ms() -> int:
    return int(time.time() * 1000)


def get_valid_access_token(
    credentials: str | Session | None,
    settings: Settings,
    now: Optional[int] = None,
    client_factory: ClientFactory = SpotifyClient,
) -> str:
    """
    Return an access token usable right now for the given session.

    - unexpired session (expiresAt - now > 0): the stored token, no network call
    - expired session: exactly one refresh call on a transient client

    A failed refresh is not retried; it is raised as an unauthorized
    ProxyError so that the caller restarts the OAuth flow.
    """
    session = (
        credentials if isinstance(credentials, Session) else parse_session(credentials)
    )
    current = now_ms() if now is None else now

    if not session.is_expired(current):
        return session.access_token

    log_step("Access token expired, refreshing...")
    api = client_factory(
        settings,
        access_token=session.access_token,
        refresh_token=session.refresh_token,
    )
    try:
        token_info = api.refresh_access_token()
    except ProxyError as e:
        log_error(f"Token refresh failed: {e.message}")
        raise e.with_kind(ErrorKind.UNAUTHORIZED) from e

    return token_info["access_token"]


def client_for_session(
    credentials: str | None,
    settings: Settings,
    client_factory: ClientFactory = SpotifyClient,
) -> SpotifyClient:
    """
    Build the request-scoped client for a serialized session.
    """
    token = get_valid_access_token(
        credentials, settings, client_factory=client_factory
    )
    return client_factory(settings, access_token=token)
