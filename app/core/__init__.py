"""Public façade for the app.core package.

This module exposes logging helpers, error kinds and the session model
that are safe to import from other packages. Callers should import these
cross-cutting concerns from this façade instead of the internal submodules.
"""

from .errors import ErrorKind, ProxyError, validation_error
from .logging_config import configure_logging, resolve_log_level
from .logging_utils import (
    log_error,
    log_info,
    log_step,
    log_success,
    log_warning,
)
from .models import Session, parse_session, split_csv

__all__ = [
    "configure_logging",
    "resolve_log_level",
    "log_info",
    "log_step",
    "log_success",
    "log_warning",
    "log_error",
    "ErrorKind",
    "ProxyError",
    "validation_error",
    "Session",
    "parse_session",
    "split_csv",
]
