"""
Logging setup.

Every module gets its logger through setup_logger(__name__) so handlers and
levels are configured in one place.
"""

import logging
import sys

from milestone_planner.core.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logger(name: str) -> logging.Logger:
    """
    Get a configured logger.

    Args:
        name: Logger name (usually the module's __name__)

    Returns:
        Logger with a single stream handler attached
    """
    log = logging.getLogger(name)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    log.setLevel(get_settings().LOG_LEVEL.upper())
    return log


logger = setup_logger("milestone_planner")
