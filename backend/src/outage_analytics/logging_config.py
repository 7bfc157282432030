from __future__ import annotations

import logging

from .config import log_level

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=level or log_level(), format=LOG_FORMAT)
