"""Logging configuration for the application."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(debug: bool = False) -> None:
    """Configure the root logger.

    Args:
        debug: Log DEBUG messages (layout and LUT details) instead of INFO
    """
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format=LOG_FORMAT)
    # exifread logs every malformed tag at WARNING
    logging.getLogger("exifread").setLevel(logging.ERROR)
