import logging
from typing import Optional

ROOT_LOGGER_NAME = "seqcache"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger namespaced under ``seqcache``.

    The package never configures handlers itself; the application embedding
    the cache attaches them to the ``seqcache`` logger (or the root logger).
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
