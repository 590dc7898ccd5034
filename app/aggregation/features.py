"""Combined audio features across several playlists.

The audio-features endpoint only takes a bounded batch, so the tracks of all
requested playlists are fetched concurrently, flattened in playlist-then-
position order and cut down to AUDIO_FEATURES_BATCH_LIMIT ids before a single
lookup. Tracks past the limit are dropped; the response says so through its
`truncated` flag.
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Sequence, Tuple

from app.config import AUDIO_FEATURES_BATCH_LIMIT, FEATURES_MAX_WORKERS
from app.core import (
    ErrorKind,
    ProxyError,
    log_error,
    log_info,
    log_step,
    log_warning,
)
from app.spotify import SpotifyClient


def _item_track_id(item: Optional[Dict]) -> Optional[str]:
    # Local files and removed tracks come back with a null track or id
    track = (item or {}).get("track")
    if not track:
        return None
    return track.get("id")


def flatten_track_ids(
    playlists_items: Sequence[List[Dict]],
    limit: int = AUDIO_FEATURES_BATCH_LIMIT,
) -> Tuple[List[str], bool]:
    """
    Flatten playlist items into one ordered id list of at most `limit` ids.

    Returns (track_ids, truncated).
    """
    track_ids: List[str] = []
    for items in playlists_items:
        for item in items:
            track_id = _item_track_id(item)
            if track_id:
                track_ids.append(track_id)

    truncated = len(track_ids) > limit
    return track_ids[:limit], truncated


def fetch_playlists_items(
    client: SpotifyClient,
    playlist_ids: List[str],
    max_workers: int = FEATURES_MAX_WORKERS,
) -> List[List[Dict]]:
    """
    Fetch the items of every playlist concurrently and wait for all of them.

    Results keep the order of playlist_ids. The first failing fetch fails
    the whole call; fetches not yet started are cancelled.
    """
    results: List[Optional[List[Dict]]] = [None] * len(playlist_ids)
    workers = max(1, min(max_workers, len(playlist_ids)))

    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_to_index = {
            executor.submit(client.get_playlist_tracks, playlist_id): index
            for index, playlist_id in enumerate(playlist_ids)
        }

        for future in as_completed(future_to_index):
            index = future_to_index[future]
            try:
                results[index] = future.result()
            except ProxyError as e:
                log_error(
                    f"Fetching tracks of playlist {playlist_ids[index]} failed: {e.message}"
                )
                for pending in future_to_index:
                    pending.cancel()
                raise

    return [items or [] for items in results]


def fetch_combined_audio_features(
    client: SpotifyClient,
    playlist_ids: List[str],
    max_workers: int = FEATURES_MAX_WORKERS,
) -> Dict:
    log_step(f"Fetching tracks of {len(playlist_ids)} playlist(s)...")
    playlists_items = fetch_playlists_items(client, playlist_ids, max_workers)

    track_ids, truncated = flatten_track_ids(playlists_items)
    if truncated:
        log_warning(
            f"More than {AUDIO_FEATURES_BATCH_LIMIT} tracks across playlists; "
            f"only the first {AUDIO_FEATURES_BATCH_LIMIT} are looked up."
        )

    if not track_ids:
        log_info("No tracks found, skipping audio-features lookup.")
        return {"trackFeatures": {"audio_features": []}, "truncated": False}

    log_step(f"Fetching audio features for {len(track_ids)} tracks...")
    try:
        features = client.get_audio_features(track_ids)
    except ProxyError as e:
        # 403 here: the app itself is not allowed to call audio-features
        token_rejected = e.kind is ErrorKind.UNAUTHORIZED and e.upstream_status != 403
        if token_rejected or e.kind is ErrorKind.UPSTREAM_TIMEOUT:
            raise
        log_error(f"Audio-features lookup failed: {e.message}")
        raise e.with_kind(ErrorKind.FEATURE_LOOKUP) from e

    return {"trackFeatures": features, "truncated": truncated}
