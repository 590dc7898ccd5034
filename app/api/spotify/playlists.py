from fastapi import APIRouter, Depends, Query

from app.aggregation import (
    create_playlist_with_tracks,
    fetch_combined_audio_features,
    fetch_user_overview,
)
from app.api.deps import get_settings
from app.config import FEATURES_MAX_WORKERS, Settings
from app.core import log_info, split_csv
from app.spotify import client_for_session

from .schemas import (
    CreatePlaylistResponse,
    ErrorResponse,
    FeaturesResponse,
    UserOverviewResponse,
)

router = APIRouter()

_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}


@router.get("/user", response_model=UserOverviewResponse, responses=_ERRORS)
def get_user(
    credentials: str | None = Query(default=None),
    page: int = Query(default=0),
    settings: Settings = Depends(get_settings),
):
    """
    Profile of the session's user plus one page (20) of their playlists.
    """
    client = client_for_session(credentials, settings)
    return fetch_user_overview(client, page)


@router.get("/features", response_model=FeaturesResponse, responses=_ERRORS)
def get_features(
    credentials: str | None = Query(default=None),
    playlist_ids: str | None = Query(default=None, alias="playlistIds"),
    playlist_id: str | None = Query(default=None, alias="playlistId"),
    settings: Settings = Depends(get_settings),
):
    """
    Audio features for up to 99 tracks taken from the given playlists.

    `playlistIds` is a comma-separated list; the single `playlistId` form
    is still accepted.
    """
    ids = split_csv(playlist_ids or playlist_id, "playlistIds")
    client = client_for_session(credentials, settings)
    result = fetch_combined_audio_features(client, ids, FEATURES_MAX_WORKERS)
    log_info(f"Features: {len(ids)} playlist(s), truncated={result['truncated']}.")
    return result


@router.get(
    "/createPlaylist", response_model=CreatePlaylistResponse, responses=_ERRORS
)
def create_playlist(
    credentials: str | None = Query(default=None),
    playlist_name: str | None = Query(default=None, alias="playlistName"),
    tracks: str | None = Query(default=None),
    settings: Settings = Depends(get_settings),
):
    """
    Create a playlist, add the comma-separated `tracks` and return it.
    """
    track_ids = split_csv(tracks, "tracks")
    client = client_for_session(credentials, settings)
    return create_playlist_with_tracks(client, playlist_name or "", track_ids)
