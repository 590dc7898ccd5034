"""Error kinds shared by the Spotify client, the aggregation layer and the API.

Every failure a request can run into is raised as a ProxyError tagged with
one ErrorKind. The HTTP layer turns it into a response using
ErrorKind.status_code, so handlers never pick status codes themselves.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UNAUTHORIZED = "unauthorized"
    UPSTREAM_NOT_FOUND = "upstream_not_found"
    UPSTREAM_RATE_LIMITED = "upstream_rate_limited"
    FEATURE_LOOKUP = "feature_lookup"
    UPSTREAM_TIMEOUT = "upstream_timeout"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.UPSTREAM_NOT_FOUND: 404,
    ErrorKind.UPSTREAM_RATE_LIMITED: 429,
    ErrorKind.FEATURE_LOOKUP: 400,
    ErrorKind.UPSTREAM_TIMEOUT: 504,
}


class ProxyError(Exception):
    """
    A failed proxy operation.

    - kind           : what went wrong, drives the HTTP status
    - message        : human readable description
    - upstream_status: status code returned by Spotify, if any
    - retry_after    : seconds to wait, only for rate-limited responses
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        upstream_status: Optional[int] = None,
        retry_after: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.upstream_status = upstream_status
        self.retry_after = retry_after

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def with_kind(self, kind: ErrorKind) -> "ProxyError":
        return ProxyError(
            kind,
            self.message,
            upstream_status=self.upstream_status,
            retry_after=self.retry_after,
        )

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.kind.value, "message": self.message}
        if self.upstream_status is not None:
            body["upstream_status"] = self.upstream_status
        if self.retry_after is not None:
            body["retry_after"] = self.retry_after
        return body


def validation_error(message: str) -> ProxyError:
    return ProxyError(ErrorKind.VALIDATION, message)
