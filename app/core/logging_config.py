import logging
import sys

from .logging_utils import logger


def resolve_log_level(level: int | str) -> int:
    """
    Turn a LOG_LEVEL value ("debug", "WARNING", 10...) into a logging level.
    Unknown names fall back to INFO.
    """
    if isinstance(level, int):
        return level

    name = level.strip().upper()
    if name.isdigit():
        return int(name)

    value = logging.getLevelName(name)
    if not isinstance(value, int):
        logger.warning("Unknown LOG_LEVEL %r, using INFO.", level)
        return logging.INFO
    return value


def configure_logging(level: int | str = logging.INFO) -> int:
    """
    Route the proxy's logs to stdout at the configured level.

    When uvicorn (or pytest) already installed root handlers, only the
    levels are adjusted. Returns the level actually applied.
    """
    resolved = resolve_log_level(level)
    root = logging.getLogger()

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        root.addHandler(handler)

    root.setLevel(resolved)
    logger.setLevel(resolved)
    # Per-request connection chatter from requests stays out of DEBUG output
    logging.getLogger("urllib3").setLevel(max(resolved, logging.INFO))

    return resolved
