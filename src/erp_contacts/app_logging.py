"""Logging configuration helpers."""

import logging

LOGGER_NAME = "erp_contacts"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# httpx logs every request line at INFO, which doubles the gateway's own log.
QUIET_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach the package stream handler once and apply ``level``.

    The level is re-applied on every call, so a second app built with other
    settings still gets its own verbosity without a duplicate handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(parse_level(level))
    if not any(handler.get_name() == LOGGER_NAME for handler in logger.handlers):
        handler = logging.StreamHandler()
        handler.set_name(LOGGER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.propagate = False
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return logger


def parse_level(level: str | int) -> int:
    """Return the numeric level for a name such as ``"debug"`` or ``"INFO"``."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved
