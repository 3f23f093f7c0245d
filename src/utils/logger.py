import logging
import os

from rich.logging import RichHandler

DEFAULT_LOGGER_NAME = "marketplace"


class CenteredFormatter(logging.Formatter):
    """Pads logger names so messages from different modules line up."""

    name_width = 14  # grows with the longest name seen so far

    def __init__(self, fmt=None, datefmt=None, style="%", initial_width=14):
        super().__init__(fmt, datefmt, style)
        CenteredFormatter.name_width = initial_width

    def format(self, record):
        CenteredFormatter.name_width = max(
            CenteredFormatter.name_width, len(record.name)
        )
        record.name = record.name.center(CenteredFormatter.name_width)
        return super().format(record)


def _log_level() -> int:
    return logging.DEBUG if os.getenv("DEBUG") else logging.INFO


def get_logger(name=None) -> logging.Logger:
    """
    Return the logger for `name`, attaching a RichHandler the first time.
    Set the DEBUG environment variable to see ledger traffic.
    """
    logger = logging.getLogger(name or DEFAULT_LOGGER_NAME)
    level = _log_level()
    logger.setLevel(level)

    if not logger.handlers:
        handler = RichHandler(
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(CenteredFormatter("[%(name)s]  %(message)s"))
        handler.setLevel(level)
        logger.addHandler(handler)

        logger.propagate = False
        logger.debug(f"Logger '{logger.name}' ready.")

    return logger
