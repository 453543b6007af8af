import logging
import sys


def setup_logging(level=logging.WARNING):
    """Attach a stderr handler to the ``hijritimes`` logger.

    stdout is reserved for command output (the status-bar payload in
    particular), so log records always go to stderr.
    """
    logger = logging.getLogger("hijritimes")
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S"
    ))
    logger.addHandler(handler)
    return logger
