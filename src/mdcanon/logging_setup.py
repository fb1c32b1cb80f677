"""Console logging configuration for the CLI"""

import logging

from rich.console import Console
from rich.logging import RichHandler


LOGGER_NAME = "mdcanon"

console = Console(stderr=True)


def setup_logging(level: str = "INFO", verbose: bool = False) -> logging.Logger:
    """Route mdcanon loggers through a RichHandler on stderr.

    verbose forces DEBUG regardless of level. Library modules only call
    logging.getLogger(__name__); handlers are attached here and nowhere else.
    """
    log_level = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)

    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(log_level)
    logger.propagate = False
    return logger
