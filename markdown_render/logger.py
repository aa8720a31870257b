"""
Shared logging setup.

Every module logs through a child of the "markdown_render" logger, so one
call to setup_logger() controls the level and destination for the whole
package. Records go to stderr, which keeps stdout free for CLI output.
"""

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logger(
    name: str = "markdown_render",
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Configure a logger and return it.

    Handlers are attached on the first call only. Later calls (the CLI
    re-runs this after parsing --verbose) just change the level.

    Args:
        name: Logger name
        level: Logging level (default: INFO)
        log_file: Also write records to this file
        stream: Console stream (default: sys.stderr)

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler(stream if stream is not None else sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


logger = setup_logger()


def get_module_logger(module_name: str) -> logging.Logger:
    """Child logger such as "markdown_render.extractor", named after its stage."""
    return logging.getLogger(f"markdown_render.{module_name}")
