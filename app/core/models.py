from dataclasses import dataclass
import json
import math
from typing import Any, Optional

from .errors import validation_error


@dataclass(frozen=True)
class Session:
    """
    Client-held Spotify session, sent as JSON in the `credentials` query param.

    - access_token  : bearer token for API calls
    - refresh_token : used once the access token has expired (may be absent)
    - expires_at    : absolute expiry, epoch milliseconds
    """

    access_token: str
    refresh_token: Optional[str]
    expires_at: int

    def remaining_ms(self, now_ms: int) -> int:
        return self.expires_at - now_ms

    def is_expired(self, now_ms: int) -> bool:
        # No clock-skew margin: valid up to the last millisecond.
        return self.remaining_ms(now_ms) <= 0


def parse_session(raw: str | None) -> Session:
    """
    Parse the serialized session blob.

    Raises a validation ProxyError when the blob is missing, is not a JSON
    object, lacks an access token or carries a non-numeric expiry.
    """
    if not raw:
        raise validation_error("Missing 'credentials' parameter.")

    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError as e:
        raise validation_error(f"Malformed credentials: {e.msg}.") from e

    if not isinstance(data, dict):
        raise validation_error("Credentials must be a JSON object.")

    access_token = data.get("accessToken")
    if not isinstance(access_token, str) or not access_token:
        raise validation_error("Credentials are missing 'accessToken'.")

    expires_at = data.get("expiresAt")
    if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
        raise validation_error("Credentials 'expiresAt' must be a number.")
    # json.loads accepts NaN and Infinity
    if isinstance(expires_at, float) and not math.isfinite(expires_at):
        raise validation_error("Credentials 'expiresAt' must be a finite number.")

    refresh_token = data.get("refreshToken")
    if refresh_token is not None and not isinstance(refresh_token, str):
        raise validation_error("Credentials 'refreshToken' must be a string.")

    return Session(
        access_token=access_token,
        refresh_token=refresh_token or None,
        expires_at=int(expires_at),
    )


def split_csv(raw: str | None, param: str) -> list[str]:
    """
    Split a comma-separated query value, dropping blanks.
    Raises a validation ProxyError when nothing is left.
    """
    values = [v.strip() for v in (raw or "").split(",")]
    values = [v for v in values if v]
    if not values:
        raise validation_error(f"Missing or empty '{param}' parameter.")
    return values
