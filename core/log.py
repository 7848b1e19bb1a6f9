"""Logging setup for the keystone CLI."""

import logging
from logging.handlers import RotatingFileHandler

from core.config import LOG_DIR, LOG_FILE

_HANDLER_TAG = "_keystone_handler"


def setup_logging(debug: bool = False) -> logging.Logger:
    """Log everything to ~/.keystone/logs/keystone.log, warnings to the console.

    With debug=True the console also gets DEBUG output. Safe to call more
    than once; previously installed keystone handlers are replaced.
    """
    formatter = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    root = logging.getLogger("keystone")
    root.setLevel(logging.DEBUG)
    root.propagate = False
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    # File handler with rotation (10MB, keep 5)
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=10 * 1024 * 1024,
            backupCount=5
        )
    except OSError:
        file_handler = None
    if file_handler is not None:
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        setattr(file_handler, _HANDLER_TAG, True)
        root.addHandler(file_handler)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    setattr(console_handler, _HANDLER_TAG, True)
    root.addHandler(console_handler)

    return root
