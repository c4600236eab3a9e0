import logging

from ..config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name="imanage"):
    """Logger with a single stderr handler; level from IMANAGE_LOG_LEVEL."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(LOG_LEVEL)
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        # uvicorn configures the root logger too; avoid printing records twice
        logger.propagate = False
    return logger
