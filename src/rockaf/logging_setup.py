"""
Logging setup for drivers that embed the Rockaf engine.

Library modules only create loggers under the ``rockaf`` namespace. A driver
calls configure_logging() once to give that namespace a console handler.
"""

import logging
import os
import sys
from typing import Optional, TextIO

PACKAGE_LOGGER = "rockaf"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Handler installed by configure_logging(), replaced on each call
_handler: Optional[logging.Handler] = None


def resolve_level(default_level: str = "WARNING") -> int:
    """
    Pick the log level from the environment.

    LOG_LEVEL wins when it names a real level. ROCKAF_VERBOSE=1 selects
    DEBUG. Anything else falls back to default_level.
    """
    if os.environ.get('ROCKAF_VERBOSE', '0') == '1':
        default_level = "DEBUG"
    fallback = getattr(logging, default_level.upper(), logging.WARNING)

    level_name = os.environ.get('LOG_LEVEL')
    if level_name is None:
        return fallback

    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        logging.getLogger(__name__).warning(
            "Invalid LOG_LEVEL '%s'; using %s", level_name, logging.getLevelName(fallback)
        )
        return fallback
    return level


def configure_logging(default_level: str = "WARNING",
                      stream: Optional[TextIO] = None) -> int:
    """Attach a console handler to the rockaf logger and return its level."""
    global _handler

    level = resolve_level(default_level)
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    if _handler is not None:
        package_logger.removeHandler(_handler)

    _handler = logging.StreamHandler(stream or sys.stdout)
    _handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    package_logger.addHandler(_handler)
    package_logger.setLevel(level)
    return level
