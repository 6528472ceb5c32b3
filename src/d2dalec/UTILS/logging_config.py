"""
Logging setup for the command line.
"""
import logging

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

def configure_logging(verbose: bool = False) -> logging.Logger:
    """
    Attaches a stream handler to the package logger.

    :param verbose: Log debug messages instead of info and above.
    :return: The configured package logger.
    """
    logger = logging.getLogger("d2dalec")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    return logger
