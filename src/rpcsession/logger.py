"""
Logging helpers built on loguru.

Modules obtain a bound logger with ``get_logger(__name__)``. Output from this
package stays disabled until ``setup_logging`` is called (the CLI does so).
"""

import sys

from loguru import logger

_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan> - <level>{message}</level>"
)

logger.disable("rpcsession")


def setup_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a stderr sink at ``level``."""
    logger.remove()
    logger.configure(extra={"name": "root"})
    logger.add(sys.stderr, level=level.upper(), format=_FORMAT)
    logger.enable("rpcsession")


def get_logger(name: str):
    """Return a logger bound to the given module name."""
    return logger.bind(name=name)
