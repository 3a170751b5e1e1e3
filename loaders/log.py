"""
Logging setup shared by the web app and the maintenance scripts.

Loader modules log through logging.getLogger(__name__); setup_logging()
attaches one stdout handler to the 'loaders' logger with level-labelled
output:

    INFO Fetched 120 rows from sheet 'Windows'
    WARN Fetching sheet 'ESXi' failed: 503 Server Error
"""

import logging
import sys

LEVEL_LABELS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
}

_configured = False


class LabeledFormatter(logging.Formatter):
    """Prefix each message with a short level label."""

    def format(self, record):
        label = LEVEL_LABELS.get(record.levelno, record.levelname)
        text = f"{label} {record.getMessage()}"
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


def setup_logging(level=logging.INFO):
    """Configure the 'loaders' logger once; later calls only adjust the level."""
    global _configured
    logger = logging.getLogger('loaders')
    logger.setLevel(level)
    if _configured:
        return logger

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    _configured = True
    return logger
