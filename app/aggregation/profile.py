from typing import Dict

from app.config import PLAYLIST_PAGE_SIZE
from app.core import log_info, log_step, validation_error
from app.spotify import SpotifyClient


def fetch_user_overview(client: SpotifyClient, page: int = 0) -> Dict:
    """
    Profile of the current user plus one page of their playlists.

    The caller keeps track of the page number; page n starts at offset
    n * PLAYLIST_PAGE_SIZE.
    """
    if page < 0:
        raise validation_error("'page' must be zero or greater.")

    log_step("Fetching Spotify profile...")
    user_info = client.get_me()

    offset = page * PLAYLIST_PAGE_SIZE
    log_step(f"Fetching playlists page {page} (offset {offset})...")
    playlists = client.get_user_playlists(offset=offset, limit=PLAYLIST_PAGE_SIZE)
    log_info(f"Playlists page {page}: {len(playlists.get('items', []))} playlists.")

    return {"userInfo": user_info, "userPlaylists": playlists}
