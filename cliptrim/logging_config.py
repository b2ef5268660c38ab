"""Logging configuration for ClipTrim."""

import logging
import sys


class ColoredFormatter(logging.Formatter):
    """Prefix each record with its level name, coloured by severity."""

    cyan = "\x1b[36;20m"
    green = "\x1b[32;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"

    FORMATS = {
        logging.DEBUG: cyan + "%(levelname)s" + reset + " - %(message)s",
        logging.INFO: green + "%(levelname)s" + reset + " - %(message)s",
        logging.WARNING: yellow + "%(levelname)s" + reset + " - %(message)s",
        logging.ERROR: red + "%(levelname)s" + reset + " - %(message)s",
        logging.CRITICAL: bold_red + "%(levelname)s" + reset + " - %(message)s",
    }

    def format(self, record):
        formatter = logging.Formatter(self.FORMATS.get(record.levelno))
        return formatter.format(record)


def setup_logging(level=logging.WARNING):
    """Attach a stderr handler to the ``cliptrim`` logger and set its level."""
    log = logging.getLogger("cliptrim")
    log.setLevel(level)

    if not log.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(ColoredFormatter())
        log.addHandler(handler)
    for handler in log.handlers:
        handler.setLevel(level)

    return log


logger = logging.getLogger("cliptrim")
