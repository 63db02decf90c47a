"""
Logging setup.

Every module logs through its own `logging.getLogger(__name__)`; this
module only installs the root handler once at application startup.
"""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """
    Installs a single stream handler on the root logger.

    Calling it again only updates the level.

    Args:
        level (str): Log level name (e.g., `INFO`, `DEBUG`).
    """

    global _configured
    root = logging.getLogger()
    root.setLevel(level.upper())

    if _configured:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _configured = True
