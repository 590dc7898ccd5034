import json
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import parse_qs, urlparse

import pytest
from fastapi.testclient import TestClient

from app.api.fastapi_app import create_app
from app.config import SPOTIFY_API_BASE, SPOTIFY_TOKEN_URL, Settings


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        payload: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        self.reason = "OK" if status_code < 400 else "Error"

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def text(self) -> str:
        return "" if self._payload is None else json.dumps(self._payload)

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


@dataclass
class Call:
    method: str
    url: str
    kwargs: Dict[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return self.url.split("?")[0]


Handler = Callable[[str, Dict[str, Any]], FakeResponse]


class FakeSpotify:
    """
    Stand-in for requests.request: routes (method, url-without-query) to
    canned responses or handlers and records every call.
    """

    def __init__(self) -> None:
        self.routes: Dict[tuple, Any] = {}
        self.calls: List[Call] = []
        self._lock = threading.Lock()
        self.playlists: Dict[str, Dict[str, Any]] = {}

    def __call__(self, method: str, url: str, timeout=None, **kwargs) -> FakeResponse:
        with self._lock:
            self.calls.append(Call(method, url, kwargs))
        route = self.routes.get((method, url.split("?")[0]))
        if route is None:
            return FakeResponse(
                404, {"error": {"status": 404, "message": "Resource not found"}}
            )
        if callable(route):
            return route(url, kwargs)
        return route

    def add(self, method: str, path_or_url: str, route: Any) -> None:
        url = path_or_url if path_or_url.startswith("http") else SPOTIFY_API_BASE + path_or_url
        self.routes[(method, url)] = route

    def calls_to(self, method: str, path_or_url: str) -> List[Call]:
        url = path_or_url if path_or_url.startswith("http") else SPOTIFY_API_BASE + path_or_url
        return [c for c in self.calls if c.method == method and c.path == url]

    # -- canned Spotify behaviour ----------------------------------------

    def add_me(self, user_id: str = "user-1") -> None:
        self.add("GET", "/me", FakeResponse(200, {"id": user_id, "display_name": "Test User"}))

    def add_token(self, access_token: str = "fresh-token") -> None:
        self.add(
            "POST",
            SPOTIFY_TOKEN_URL,
            FakeResponse(
                200,
                {
                    "access_token": access_token,
                    "token_type": "Bearer",
                    "expires_in": 3600,
                    "refresh_token": "refresh-2",
                },
            ),
        )

    def add_playlist_tracks(
        self, playlist_id: str, track_ids: List[Optional[str]], page_size: int = 100
    ) -> None:
        base = f"{SPOTIFY_API_BASE}/playlists/{playlist_id}/tracks"

        def handler(url: str, kwargs: Dict[str, Any]) -> FakeResponse:
            query = parse_qs(urlparse(url).query)
            offset = int(query.get("offset", ["0"])[0])
            page = track_ids[offset : offset + page_size]
            next_offset = offset + page_size
            next_url = (
                f"{base}?offset={next_offset}&limit={page_size}"
                if next_offset < len(track_ids)
                else None
            )
            items = [{"track": {"id": tid} if tid else None} for tid in page]
            return FakeResponse(
                200, {"items": items, "next": next_url, "total": len(track_ids)}
            )

        self.add("GET", base, handler)

    def add_audio_features(self) -> None:
        def handler(url: str, kwargs: Dict[str, Any]) -> FakeResponse:
            ids = kwargs["params"]["ids"].split(",")
            return FakeResponse(
                200, {"audio_features": [{"id": tid, "tempo": 120.0} for tid in ids]}
            )

        self.add("GET", "/audio-features", handler)

    def add_playlist_store(self, user_id: str = "user-1", new_id: str = "new-playlist") -> None:
        """
        Create/add/get endpoints backed by self.playlists.
        """

        def create(url: str, kwargs: Dict[str, Any]) -> FakeResponse:
            playlist = {"id": new_id, "name": kwargs["json"]["name"], "uris": []}
            self.playlists[new_id] = playlist
            return FakeResponse(201, {"id": new_id, "name": playlist["name"]})

        def add_tracks(url: str, kwargs: Dict[str, Any]) -> FakeResponse:
            self.playlists[new_id]["uris"].extend(kwargs["json"]["uris"])
            return FakeResponse(201, {"snapshot_id": f"snap-{len(self.playlists[new_id]['uris'])}"})

        def get(url: str, kwargs: Dict[str, Any]) -> FakeResponse:
            playlist = self.playlists[new_id]
            items = [
                {"track": {"id": uri.rsplit(":", 1)[-1], "uri": uri}}
                for uri in playlist["uris"]
            ]
            return FakeResponse(
                200,
                {"id": playlist["id"], "name": playlist["name"], "tracks": {"items": items}},
            )

        self.add("POST", f"/users/{user_id}/playlists", create)
        self.add("POST", f"/playlists/{new_id}/tracks", add_tracks)
        self.add("GET", f"/playlists/{new_id}", get)


def session_json(
    expires_at: int,
    access_token: str = "stored-token",
    refresh_token: Optional[str] = "refresh-1",
) -> str:
    data: Dict[str, Any] = {"accessToken": access_token, "expiresAt": expires_at}
    if refresh_token is not None:
        data["refreshToken"] = refresh_token
    return json.dumps(data)


# Far in the future (year 2286) / far in the past
FUTURE_MS = 10_000_000_000_000
PAST_MS = 1_000


@pytest.fixture
def settings() -> Settings:
    return Settings(
        client_id="client-id",
        client_secret="client-secret",
        redirect_uri="http://localhost:3000/callback",
        request_timeout=5.0,
    )


@pytest.fixture
def fake_spotify(monkeypatch) -> FakeSpotify:
    fake = FakeSpotify()
    monkeypatch.setattr("app.spotify.client.requests.request", fake)
    return fake


@pytest.fixture
def client(settings: Settings) -> TestClient:
    return TestClient(create_app(settings))
