from typing import Dict, Optional

from app.config import SCOPES, Settings
from app.core import ErrorKind, ProxyError, log_error, log_step, log_success

from .client import SpotifyClient
from .session import now_ms


def build_spotify_auth_url(
    settings: Settings,
    state: Optional[str] = None,
    show_dialog: bool = False,
) -> str:
    return SpotifyClient(settings).create_authorize_url(
        SCOPES, state=state, show_dialog=show_dialog
    )


def exchange_code_for_token(settings: Settings, code: str) -> Dict:
    """
    Exchange an authorization code for a token bundle.

    The Spotify body is returned as-is, plus `expiresAt` (epoch ms) so the
    frontend can build its session without doing the arithmetic itself.
    Any failure of the exchange is reported as unauthorized.
    """
    log_step("Exchanging authorization code for tokens...")
    issued_at = now_ms()
    try:
        token_info = SpotifyClient(settings).authorization_code_grant(code)
    except ProxyError as e:
        log_error(f"Authorization code exchange failed: {e.message}")
        raise e.with_kind(ErrorKind.UNAUTHORIZED) from e

    expires_in = token_info.get("expires_in")
    if isinstance(expires_in, (int, float)):
        token_info["expiresAt"] = issued_at + int(expires_in * 1000)

    log_success("Authorization code exchanged.")
    return token_info
