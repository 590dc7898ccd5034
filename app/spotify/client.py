"""Request-scoped wrapper around the Spotify Web API.

A SpotifyClient is built per request from the process Settings and the
caller's tokens; it never outlives the request and holds no shared state.
All HTTP goes through SpotifyClient._request so that every upstream failure
is turned into a ProxyError in one place.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import requests

from app.config import (
    ADD_TRACKS_BATCH_SIZE,
    AUDIO_FEATURES_BATCH_LIMIT,
    SPOTIFY_API_BASE,
    SPOTIFY_AUTH_URL,
    SPOTIFY_TOKEN_URL,
    Settings,
)
from app.core import ErrorKind, ProxyError, log_error, validation_error


def _error_message(r: requests.Response) -> str:
    try:
        data = r.json()
    except ValueError:
        return r.text or r.reason or "Spotify request failed."

    err = data.get("error") if isinstance(data, dict) else None
    if isinstance(err, dict):
        return err.get("message") or str(err)
    if isinstance(err, str):
        # Accounts endpoint: {"error": "invalid_grant", "error_description": "..."}
        desc = data.get("error_description")
        return f"{err}: {desc}" if desc else err
    return r.text or "Spotify request failed."


def _retry_after(r: requests.Response) -> Optional[int]:
    value = r.headers.get("Retry-After")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def response_json(r: requests.Response) -> Any:
    """
    Body of a successful Spotify response; a non-JSON body is an upstream failure.
    """
    try:
        return r.json()
    except ValueError as e:
        raise ProxyError(
            ErrorKind.UPSTREAM_NOT_FOUND,
            "Spotify returned a response that is not JSON.",
            upstream_status=r.status_code,
        ) from e


def raise_for_spotify_status(r: requests.Response, token_endpoint: bool = False) -> None:
    """
    Map a non-2xx Spotify response onto a ProxyError.

    On the accounts token endpoint a 400 means a bad code or a revoked
    refresh token, so it is reported as unauthorized too.
    """
    if r.ok:
        return

    message = _error_message(r)
    if r.status_code in (401, 403) or (token_endpoint and r.status_code == 400):
        kind = ErrorKind.UNAUTHORIZED
    elif r.status_code == 429:
        kind = ErrorKind.UPSTREAM_RATE_LIMITED
    else:
        # 404 and everything else Spotify can throw at us
        kind = ErrorKind.UPSTREAM_NOT_FOUND

    raise ProxyError(
        kind,
        message,
        upstream_status=r.status_code,
        retry_after=_retry_after(r) if kind is ErrorKind.UPSTREAM_RATE_LIMITED else None,
    )


class SpotifyClient:
    def __init__(
        self,
        settings: Settings,
        access_token: Optional[str] = None,
        refresh_token: Optional[str] = None,
    ) -> None:
        self.settings = settings
        self.access_token = access_token
        self.refresh_token = refresh_token

    # ------------------------------------------------------------------ http

    def _request(
        self,
        method: str,
        url: str,
        *,
        authenticated: bool = True,
        **kwargs: Any,
    ) -> requests.Response:
        if authenticated:
            if not self.access_token:
                raise ProxyError(ErrorKind.UNAUTHORIZED, "No access token available.")
            headers = kwargs.pop("headers", None) or {}
            headers["Authorization"] = f"Bearer {self.access_token}"
            kwargs["headers"] = headers

        try:
            r = requests.request(
                method, url, timeout=self.settings.request_timeout, **kwargs
            )
        except requests.Timeout as e:
            log_error(f"Spotify {method} {url} timed out.")
            raise ProxyError(
                ErrorKind.UPSTREAM_TIMEOUT,
                f"Spotify did not answer within {self.settings.request_timeout:g}s.",
            ) from e
        except requests.RequestException as e:
            log_error(f"Spotify {method} {url} failed: {e}")
            raise ProxyError(
                ErrorKind.UPSTREAM_NOT_FOUND, f"Spotify request failed: {e}"
            ) from e

        raise_for_spotify_status(r, token_endpoint=not authenticated)
        return r

    def _get(self, path_or_url: str, params: Optional[Dict] = None) -> Dict:
        url = (
            path_or_url
            if path_or_url.startswith("http")
            else f"{SPOTIFY_API_BASE}{path_or_url}"
        )
        return response_json(self._request("GET", url, params=params))

    # ------------------------------------------------------------------ auth

    def create_authorize_url(
        self,
        scopes: List[str],
        state: Optional[str] = None,
        show_dialog: bool = False,
    ) -> str:
        params = {
            "client_id": self.settings.client_id or "",
            "response_type": "code",
            "redirect_uri": self.settings.redirect_uri or "",
            "scope": " ".join(scopes),
        }
        if state:
            params["state"] = state
        if show_dialog:
            params["show_dialog"] = "true"
        return f"{SPOTIFY_AUTH_URL}?{urlencode(params)}"

    def _token_request(self, payload: Dict[str, str]) -> Dict:
        payload = {
            **payload,
            "client_id": self.settings.client_id or "",
            "client_secret": self.settings.client_secret or "",
        }
        r = self._request("POST", SPOTIFY_TOKEN_URL, authenticated=False, data=payload)
        return response_json(r)

    def authorization_code_grant(self, code: str) -> Dict:
        token_info = self._token_request(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.settings.redirect_uri or "",
            }
        )
        self.access_token = token_info.get("access_token")
        self.refresh_token = token_info.get("refresh_token")
        return token_info

    def refresh_access_token(self) -> Dict:
        if not self.refresh_token:
            raise ProxyError(
                ErrorKind.UNAUTHORIZED, "Session has no refresh token."
            )
        token_info = self._token_request(
            {"grant_type": "refresh_token", "refresh_token": self.refresh_token}
        )
        if not token_info.get("access_token"):
            raise ProxyError(
                ErrorKind.UNAUTHORIZED, "Token refresh returned no access token."
            )
        self.access_token = token_info["access_token"]
        # Spotify does not always rotate the refresh token
        self.refresh_token = token_info.get("refresh_token", self.refresh_token)
        return token_info

    # ------------------------------------------------------------------ reads

    def get_me(self) -> Dict:
        return self._get("/me")

    def get_user_playlists(self, offset: int = 0, limit: int = 20) -> Dict:
        return self._get("/me/playlists", params={"offset": offset, "limit": limit})

    def get_playlist(self, playlist_id: str) -> Dict:
        return self._get(f"/playlists/{playlist_id}")

    def get_playlist_tracks(self, playlist_id: str) -> List[Dict]:
        """
        Return every item of a playlist, page after page, in playlist order.
        """
        items: List[Dict] = []
        url: Optional[str] = f"{SPOTIFY_API_BASE}/playlists/{playlist_id}/tracks"
        params: Optional[Dict] = {"limit": 100}

        while url:
            data = self._get(url, params=params)
            items.extend(data.get("items", []))
            url = data.get("next")
            params = None  # next URL already includes params

        return items

    def get_audio_features(self, track_ids: List[str]) -> Dict:
        if len(track_ids) > AUDIO_FEATURES_BATCH_LIMIT:
            raise validation_error(
                f"At most {AUDIO_FEATURES_BATCH_LIMIT} track ids per audio-features call."
            )
        return self._get("/audio-features", params={"ids": ",".join(track_ids)})

    # ------------------------------------------------------------------ writes

    def create_playlist(
        self,
        user_id: str,
        name: str,
        public: bool = True,
        description: Optional[str] = None,
    ) -> Dict:
        payload: Dict[str, Any] = {"name": name, "public": public}
        if description:
            payload["description"] = description
        r = self._request(
            "POST", f"{SPOTIFY_API_BASE}/users/{user_id}/playlists", json=payload
        )
        return response_json(r)

    def add_tracks_to_playlist(self, playlist_id: str, track_ids: List[str]) -> List[str]:
        """
        Append tracks to a playlist in batches of 100.
        Returns the snapshot ids Spotify reported for each batch.
        """
        uris = [
            tid if tid.startswith("spotify:") else f"spotify:track:{tid}"
            for tid in track_ids
        ]
        url = f"{SPOTIFY_API_BASE}/playlists/{playlist_id}/tracks"
        snapshots: List[str] = []
        for i in range(0, len(uris), ADD_TRACKS_BATCH_SIZE):
            batch = uris[i : i + ADD_TRACKS_BATCH_SIZE]
            r = self._request("POST", url, json={"uris": batch})
            snapshots.append(response_json(r).get("snapshot_id"))
        return snapshots
