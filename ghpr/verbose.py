"""Diagnostic output controlled by the --verbose count.

The workflow never configures logging globally. The CLI builds one logger
with init() and passes it down explicitly.
"""

import logging
import sys
from typing import Optional, TextIO

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Above CRITICAL, so nothing is emitted
OFF = logging.CRITICAL + 10

VERBOSITY_LEVELS = {
    0: OFF,
    1: logging.ERROR,
    2: logging.WARNING,
    3: logging.INFO,
    4: logging.DEBUG,
}


def level_for(verbose: int) -> int:
    """Map a --verbose count to a logging level."""
    if verbose < 0:
        return OFF
    return VERBOSITY_LEVELS.get(verbose, TRACE)


def init(verbose: int, stream: Optional[TextIO] = None, name: str = "ghpr") -> logging.Logger:
    """Build the logger for one run.

    Args:
        verbose: Number of times --verbose was given.
        stream: Where to write (stderr by default).
        name: Logger name.

    Returns:
        A logger that writes bare messages at the requested verbosity and
        does not propagate to the root logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level_for(verbose))
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger
