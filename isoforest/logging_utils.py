import logging
import os
import sys
import typing

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(name: str = "isoforest", level: typing.Union[str, int] = logging.INFO) -> logging.Logger:
    """
    Configure and return a logger writing to stdout. The LOG_LEVEL
    environment variable overrides the given level.
    """
    logger = logging.getLogger(name)
    lvl = os.getenv("LOG_LEVEL") or level
    if isinstance(lvl, str):
        lvl = getattr(logging, lvl.upper(), logging.INFO)
    logger.setLevel(lvl)

    # Avoid stacking handlers when called more than once
    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(console_handler)

    return logger
