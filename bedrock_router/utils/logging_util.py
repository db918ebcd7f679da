from __future__ import annotations

import logging
import os

_DEFAULT_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    # Lambda reuses the process between invocations; attach the handler once.
    if logger.handlers:
        return logger

    logger.setLevel(_DEFAULT_LEVEL)
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("[%(levelname)s] %(name)s:%(lineno)d - %(message)s")
    )
    logger.addHandler(handler)
    return logger
