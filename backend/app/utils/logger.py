# app/utils/logger.py

import logging
import sys

from app.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
HANDLER_NAME = "homework-hero-stdout"


def setup_logger(level: str = LOG_LEVEL) -> logging.Logger:
    """Attach a single stdout handler to the `app` logger.

    Safe to call more than once (e.g. one app per test): the handler is
    only added the first time.
    """
    logger = logging.getLogger("app")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not any(h.get_name() == HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.set_name(HANDLER_NAME)
        logger.addHandler(handler)

    return logger
