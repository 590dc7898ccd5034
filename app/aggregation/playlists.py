from typing import Dict, List

from app.core import ProxyError, log_step, log_success, log_warning, validation_error
from app.spotify import SpotifyClient


def create_playlist_with_tracks(
    client: SpotifyClient,
    name: str,
    track_ids: List[str],
) -> Dict:
    """
    Create a playlist owned by the current user, fill it and return it.

    Steps run strictly in order: profile -> create -> add tracks -> re-fetch.
    Nothing is rolled back: if adding tracks or the re-fetch fails, the
    playlist stays on Spotify as created.
    """
    if not name or not name.strip():
        raise validation_error("Missing or empty 'playlistName' parameter.")
    if not track_ids:
        raise validation_error("Missing or empty 'tracks' parameter.")

    log_step("Fetching Spotify profile for playlist owner...")
    user_id = client.get_me()["id"]

    log_step(f"Creating playlist '{name}' for {user_id}...")
    playlist_id = client.create_playlist(user_id, name)["id"]

    try:
        log_step(f"Adding {len(track_ids)} tracks to playlist {playlist_id}...")
        client.add_tracks_to_playlist(playlist_id, track_ids)
        retrieved = client.get_playlist(playlist_id)
    except ProxyError as e:
        log_warning(
            f"Playlist {playlist_id} was created but not completed: {e.message}"
        )
        raise

    log_success(f"Playlist {playlist_id} created with {len(track_ids)} tracks.")
    return {"retrievedPlaylist": retrieved}
