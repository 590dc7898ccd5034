"""Public façade for the app.aggregation package.

Each entry point orchestrates several SpotifyClient calls for one endpoint
and returns the response envelope. Failures are raised as ProxyError.
"""

from .features import (
    fetch_combined_audio_features,
    fetch_playlists_items,
    flatten_track_ids,
)
from .playlists import create_playlist_with_tracks
from .profile import fetch_user_overview

__all__ = [
    "fetch_user_overview",
    "fetch_combined_audio_features",
    "fetch_playlists_items",
    "flatten_track_ids",
    "create_playlist_with_tracks",
]
