from dataclasses import dataclass
import os

from dotenv import load_dotenv

load_dotenv()

# Spotify API constants
SPOTIFY_AUTH_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_API_BASE = "https://api.spotify.com/v1"

SCOPES = [
    "user-read-private",
    "user-read-email",
    "playlist-read-private",
    "playlist-modify-public",
    "playlist-modify-private",
    "user-read-playback-state",
    "user-read-currently-playing",
    "user-modify-playback-state",
]

DEFAULT_PORT = 8888
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_LOG_LEVEL = "INFO"

# Playlists returned per /user page
PLAYLIST_PAGE_SIZE = 20

# Upper bound of ids sent to a single audio-features call
AUDIO_FEATURES_BATCH_LIMIT = 99

# Spotify accepts at most 100 uris per add-tracks call
ADD_TRACKS_BATCH_SIZE = 100

# Fan-out workers for multi-playlist track fetches
FEATURES_MAX_WORKERS = 10


@dataclass(frozen=True)
class Settings:
    """Read-only process configuration, built once at startup."""

    client_id: str | None
    client_secret: str | None
    redirect_uri: str | None
    port: int = DEFAULT_PORT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL


def load_settings() -> Settings:
    """
    Build Settings from the environment (and .env, loaded on import).
    """
    return Settings(
        client_id=os.getenv("CLIENT_ID"),
        client_secret=os.getenv("CLIENT_SECRET"),
        redirect_uri=os.getenv("REDIRECT_URI"),
        port=int(os.getenv("PORT", str(DEFAULT_PORT))),
        request_timeout=float(
            os.getenv("SPOTIFY_REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT))
        ),
        log_level=os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL),
    )
