from __future__ import annotations

import logging

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

logger = logging.getLogger(__package__)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(name)s::%(threadName)s] [%(levelname)s]: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False


def set_level(level: int | str) -> None:
    """Set the level of every jobfuture logger, NOTSET leaves it untouched."""
    if isinstance(level, str) and level not in LEVELS:
        msg = f"string log_level must be one of {LEVELS}, got {level!r}"
        raise ValueError(msg)
    if level != logging.NOTSET:
        logger.setLevel(level)
