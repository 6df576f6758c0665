"""Shared logging helpers for mastersync."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

NOISY_LOGGERS: tuple[str, ...] = ("httpx", "httpcore", "sqlalchemy.engine")


def configure_logging(
    *,
    level: int = logging.INFO,
    force: bool = False,
    quiet: Iterable[str] = NOISY_LOGGERS,
) -> None:
    """Initialise the root logger with the terse CLI format.

    Transport and SQL loggers listed in ``quiet`` are raised to WARNING so request
    lines do not drown out workflow messages. Pass ``force=True`` to reconfigure
    during tests or specialised entry points.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in quiet:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
