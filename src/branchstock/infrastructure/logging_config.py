"""Process-wide logging setup for the command line."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str) -> None:
    """Send log records to stderr at *level*.

    Library code only ever calls ``logging.getLogger(__name__)``; handlers
    are attached here, once, by the entry point.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("branchstock").setLevel(level)
