"""Root logger setup for the CLI and for hosting apps that want the same format."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Install a stream handler on the root logger.

    Merge decisions log at INFO under ``contactmerge.domain``; rejected ledgers and
    requests that continue without a merge log at WARNING. ``force=True`` replaces
    handlers that are already installed.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
