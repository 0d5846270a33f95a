"""Logging setup for the notegraph command line."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Transport libraries that log every request or cache lookup.
NOISY_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """INFO shows phase progress; ``verbose`` adds the per-field DEBUG detail.

    Transport chatter stays at WARNING either way.
    """

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
