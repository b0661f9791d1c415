"""Logging configuration helpers."""

import logging

APP_LOGGER = "cloud_notes"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Attach a single stream handler to the application logger.

    Auth events are logged from SDK worker threads, so every record carries the
    thread name. Repeated calls only adjust the level.
    """
    logger = logging.getLogger(APP_LOGGER)
    logger.setLevel(level)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
