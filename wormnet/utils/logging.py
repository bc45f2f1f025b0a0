"""Print-based logging for connectome analysis sessions.

Messages go to stdout, where a notebook shows them without any logging
configuration. Each message gets a header line naming the module and
level, then the %-formatted text.

Verbosity is shared by all loggers and set with set_level:

    from wormnet.utils import get_logger, set_level
    log = get_logger("cleaning")
    log.info("Dropped %d electrical synapses", 1031)
    set_level("WARNING")   # cleaning steps go quiet
"""

import sys
from datetime import datetime

LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}

_threshold = LEVELS["INFO"]


def set_level(level):
    """Set the lowest level printed by every wormnet logger.

    Returns the previous level name, so it can be restored.
    """
    global _threshold
    level = level.upper()
    if level not in LEVELS:
        raise ValueError(f"Unknown log level {level!r}; expected one of {list(LEVELS)}")
    previous = next(name for name, value in LEVELS.items() if value == _threshold)
    _threshold = LEVELS[level]
    return previous


def get_logger(name, out=None, compact=False):
    """Create a print-based logger.

    Parameters
    ----------
    name : str
        Shown in every message header as "wormnet:<name>".
    out : file-like, optional
        Additional output stream (e.g., an open log file).
    compact : bool
        Print header and message on one line.

    Returns
    -------
    callable
        A log function with .debug, .info, .warning, .error methods.
    """
    prefix = f"wormnet:{name}"
    rule = "_" * 72

    def log(level, msg, args):
        if LEVELS[level] < _threshold:
            return
        try:
            text = msg % args if args else str(msg)
        except (TypeError, ValueError):
            text = f"{msg} {args}"
        stamp = datetime.now().strftime("%H:%M:%S")
        for dest in [sys.stdout] + ([out] if out else []):
            if compact:
                print(f"{prefix} {level} [{stamp}] {text}", file=dest)
            else:
                print(rule, file=dest)
                print(f"{prefix} {level} [{stamp}]", file=dest)
                print(text, file=dest)

    log.debug = lambda msg, *args: log("DEBUG", msg, args)
    log.info = lambda msg, *args: log("INFO", msg, args)
    log.warning = lambda msg, *args: log("WARNING", msg, args)
    log.error = lambda msg, *args: log("ERROR", msg, args)

    return log
