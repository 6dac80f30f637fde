import logging
import os
import sys

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Map a level name like "debug" to its logging constant."""
    if not value:
        return default
    return _LEVELS.get(value.strip().lower(), default)


def setup_logger(level: int = logging.INFO, name: str = "filterlab") -> logging.Logger:
    """Create or update the project logger.

    - Respects the FILTERLAB_LOG_LEVEL env override on every call.
    - Ensures there is exactly one stderr StreamHandler on the base logger and
      updates its formatter instead of adding another one.
    """
    logger = logging.getLogger(name)

    level = parse_level(os.getenv("FILTERLAB_LOG_LEVEL"), level)
    logger.setLevel(level)

    stream_handler: logging.StreamHandler | None = None
    for h in logger.handlers:
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr:
            stream_handler = h
            break

    if stream_handler is None:
        stream_handler = logging.StreamHandler(stream=sys.stderr)
        logger.addHandler(stream_handler)

    stream_handler.setFormatter(
        logging.Formatter(
            fmt="[%(asctime)s] %(levelname)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    # Do not propagate beyond the project logger
    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    base = logging.getLogger("filterlab")
    if not base.handlers:
        base = setup_logger()
    return base if not name else base.getChild(name)
