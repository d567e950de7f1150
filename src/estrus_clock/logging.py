from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # matplotlib font discovery is noisy at DEBUG.
    logging.getLogger("matplotlib").setLevel(max(logging.getLogger().level, logging.INFO))
