"""Public façade for the app.spotify package.

This module exposes the Spotify Web API integration: the request-scoped
client, the authorization helpers and the session validity helper that
turns a client-held session into a usable access token. Callers should
import these symbols from this façade instead of the internal modules.
"""

from .auth import build_spotify_auth_url, exchange_code_for_token
from .client import SpotifyClient, raise_for_spotify_status
from .session import client_for_session, get_valid_access_token, now_ms

__all__ = [
    "SpotifyClient",
    "raise_for_spotify_status",
    "build_spotify_auth_url",
    "exchange_code_for_token",
    "get_valid_access_token",
    "client_for_session",
    "now_ms",
]
