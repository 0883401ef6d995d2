import logging
import sys
from copy import copy

import click

LOG_LEVELS = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

LOG_FORMAT = "%(levelprefix)s %(message)s"

_LEVEL_COLORS = {
    logging.DEBUG: "cyan",
    logging.INFO: "green",
    logging.WARNING: "yellow",
    logging.ERROR: "red",
    logging.CRITICAL: "bright_red",
}


class ColourizedFormatter(logging.Formatter):
    """
    Prefixes records with their level name, coloured on a terminal.
    Records may carry a `color_message` extra with click styling already applied, it replaces
    the plain message when colours are in use.
    """

    def __init__(self, fmt: str = LOG_FORMAT, use_colors: bool | None = None):
        if use_colors is None:
            use_colors = sys.stderr.isatty()
        self.use_colors = use_colors
        super().__init__(fmt)

    def formatMessage(self, record: logging.LogRecord) -> str:
        record = copy(record)
        levelname = record.levelname
        separator = " " * (8 - len(levelname))
        if self.use_colors:
            levelname = click.style(levelname, fg=_LEVEL_COLORS.get(record.levelno))
            color_message = getattr(record, "color_message", None)
            if color_message:
                record.msg = color_message
                record.message = record.getMessage()
        record.__dict__["levelprefix"] = levelname + ":" + separator
        return super().formatMessage(record)


def configure_logging(level: str = "info", use_colors: bool | None = None) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ColourizedFormatter(use_colors=use_colors))
    root = logging.getLogger("sctp_server")
    root.handlers[:] = [handler]
    root.setLevel(LOG_LEVELS[level])
    root.propagate = False
