import logging

# Global project logger (can be tuned via logging_config)
logger = logging.getLogger("spotify_proxy")


def log_info(message: str) -> None:
    """
    Neutral information message.
    """
    logger.info("%s", message)


def log_step(message: str) -> None:
    """
    Action step / outgoing upstream call.
    """
    logger.info("→ %s", message)


def log_success(message: str) -> None:
    logger.info("✅ %s", message)


def log_warning(message: str) -> None:
    """
    Non-fatal problem (lossy truncation, partial upstream state).
    """
    logger.warning("⚠️ %s", message)


def log_error(message: str) -> None:
    """
    Failed request, reported before the error is mapped to a response.
    """
    logger.error("❌ %s", message)
