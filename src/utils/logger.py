import logging
import os

from rich.logging import RichHandler

_ROOT = "shopadmin"


class CenteredFormatter(logging.Formatter):
    longest_name_length = 12  # Initial default width

    def __init__(self, fmt=None, datefmt=None, style="%", initial_width=12):
        super().__init__(fmt, datefmt, style)
        CenteredFormatter.longest_name_length = initial_width

    def format(self, record):
        # short names: "shopadmin.seed.workflow" -> "seed.workflow"
        name = record.name.removeprefix(_ROOT + ".")
        CenteredFormatter.longest_name_length = max(
            CenteredFormatter.longest_name_length, len(name)
        )
        record.name = name.center(CenteredFormatter.longest_name_length)
        return super().format(record)


def _default_level() -> int:
    return logging.DEBUG if os.getenv("DEBUG") else logging.INFO


def _root_logger() -> logging.Logger:
    root = logging.getLogger(_ROOT)
    if not root.handlers:
        handler = RichHandler(
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(CenteredFormatter("[%(name)s]  %(message)s"))
        root.addHandler(handler)
        root.setLevel(_default_level())
        root.propagate = False
    return root


def get_logger(name=None) -> logging.Logger:
    """
    Returns a child of the package logger; the RichHandler lives on the
    parent so set_log_level() affects every module at once.
    """
    root = _root_logger()
    if not name:
        return root
    return root.getChild(name)


def set_log_level(level: int) -> None:
    _root_logger().setLevel(level)
