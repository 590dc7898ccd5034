from typing import Any, Dict

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse

from app.api.deps import get_settings
from app.config import Settings
from app.core import validation_error
from app.spotify import build_spotify_auth_url, exchange_code_for_token

router = APIRouter()


@router.get("/get-auth-url", response_class=PlainTextResponse)
def get_auth_url(
    state: str | None = Query(default=None),
    show_dialog: bool = Query(default=False),
    settings: Settings = Depends(get_settings),
) -> str:
    """
    Spotify authorization URL the frontend should redirect the user to.
    """
    return build_spotify_auth_url(settings, state=state, show_dialog=show_dialog)


@router.get("/authorize")
def authorize(
    code: str | None = Query(default=None),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """
    Exchange the `code` from the Spotify redirect for a token bundle.

    Nothing is stored server side; the frontend keeps the tokens and sends
    them back as `credentials` on later calls. A rejected code gives 401.
    """
    if not code:
        raise validation_error("Missing 'code' parameter.")

    return exchange_code_for_token(settings, code)
