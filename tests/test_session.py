import json

import pytest

from app.config import SPOTIFY_TOKEN_URL
from app.core import ErrorKind, ProxyError, parse_session
from app.spotify import get_valid_access_token
from conftest import FUTURE_MS, PAST_MS, FakeResponse, session_json


def test_parse_session_reads_camel_case_fields() -> None:
    session = parse_session(session_json(1234, refresh_token="r"))

    assert session.access_token == "stored-token"
    assert session.refresh_token == "r"
    assert session.expires_at == 1234


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "{not json",
        "[1, 2]",
        json.dumps({"expiresAt": 1}),
        json.dumps({"accessToken": "a", "expiresAt": "soon"}),
        json.dumps({"accessToken": "a", "expiresAt": True}),
        '{"accessToken": "a", "expiresAt": NaN}',
        '{"accessToken": "a", "expiresAt": Infinity}',
        '{"accessToken": "a", "expiresAt": -Infinity}',
    ],
)
def test_parse_session_rejects_malformed_input(raw) -> None:
    with pytest.raises(ProxyError) as exc_info:
        parse_session(raw)

    assert exc_info.value.kind is ErrorKind.VALIDATION
    assert exc_info.value.status_code == 400


def test_unexpired_session_returns_stored_token_without_refresh(
    settings, fake_spotify
) -> None:
    token = get_valid_access_token(session_json(FUTURE_MS), settings)

    assert token == "stored-token"
    assert fake_spotify.calls == []


def test_session_expiring_at_now_is_refreshed(settings, fake_spotify) -> None:
    fake_spotify.add_token("fresh-token")

    token = get_valid_access_token(session_json(5_000), settings, now=5_000)

    assert token == "fresh-token"
    assert len(fake_spotify.calls_to("POST", SPOTIFY_TOKEN_URL)) == 1


def test_expired_session_refreshes_exactly_once(settings, fake_spotify) -> None:
    fake_spotify.add_token("fresh-token")

    token = get_valid_access_token(session_json(PAST_MS), settings)

    assert token == "fresh-token"
    refresh_calls = fake_spotify.calls_to("POST", SPOTIFY_TOKEN_URL)
    assert len(refresh_calls) == 1
    payload = refresh_calls[0].kwargs["data"]
    assert payload["grant_type"] == "refresh_token"
    assert payload["refresh_token"] == "refresh-1"
    assert payload["client_id"] == "client-id"


def test_failed_refresh_is_unauthorized_and_not_retried(settings, fake_spotify) -> None:
    fake_spotify.add(
        "POST",
        SPOTIFY_TOKEN_URL,
        FakeResponse(
            400,
            {"error": "invalid_grant", "error_description": "Refresh token revoked"},
        ),
    )

    with pytest.raises(ProxyError) as exc_info:
        get_valid_access_token(session_json(PAST_MS), settings)

    assert exc_info.value.kind is ErrorKind.UNAUTHORIZED
    assert "invalid_grant" in exc_info.value.message
    assert len(fake_spotify.calls_to("POST", SPOTIFY_TOKEN_URL)) == 1


def test_expired_session_without_refresh_token_is_unauthorized(
    settings, fake_spotify
) -> None:
    with pytest.raises(ProxyError) as exc_info:
        get_valid_access_token(session_json(PAST_MS, refresh_token=None), settings)

    assert exc_info.value.kind is ErrorKind.UNAUTHORIZED
    assert fake_spotify.calls == []


def test_refresh_uses_client_factory(settings) -> None:
    created = []

    class StubClient:
        def __init__(self, settings, access_token=None, refresh_token=None):
            created.append((access_token, refresh_token))

        def refresh_access_token(self):
            return {"access_token": "stub-token"}

    token = get_valid_access_token(
        session_json(PAST_MS), settings, client_factory=StubClient
    )

    assert token == "stub-token"
    assert created == [("stored-token", "refresh-1")]
