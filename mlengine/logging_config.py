import logging
import sys

from .config import DEFAULT_LOG_LEVEL, LOG_FORMAT


def setup_logging(level: int = DEFAULT_LOG_LEVEL, force: bool = False) -> None:
    """
    Install one stdout handler on the root logger.

    Does nothing if the root logger already has handlers, unless `force` is
    set, in which case existing handlers are replaced.
    """
    root = logging.getLogger()
    if root.handlers and not force:
        return
    if force:
        root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root.setLevel(level)
    root.addHandler(handler)
