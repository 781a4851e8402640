"""
Logging helpers shared by the CLI and the MCP server.

All handlers write to stderr or to a file. stdout is reserved for command
output and for the MCP stdio transport.
"""

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_file_handlers: dict[str, logging.FileHandler] = {}


def get_logger(name: str) -> logging.Logger:
    """Get a module logger.

    Args:
        name: Usually ``__name__`` of the calling module

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def setup_console_logging(level: int = logging.INFO) -> None:
    """Configure the root logger to write to stderr.

    Args:
        level: Minimum level for the root logger
    """
    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers:
        if getattr(handler, "_pumpfun_console", False):
            handler.setLevel(level)
            return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(level)
    handler._pumpfun_console = True
    root.addHandler(handler)


def setup_file_logging(
    filename: str = "pumpfun.log", level: int = logging.INFO
) -> None:
    """Add a file handler to the root logger.

    Calling this twice with the same file does not duplicate the handler.

    Args:
        filename: Path of the log file (parent directories are created)
        level: Minimum level written to the file
    """
    path = Path(filename)
    key = str(path.resolve())
    if key in _file_handlers:
        return

    path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(level)

    root = logging.getLogger()
    if root.level == logging.NOTSET or root.level > level:
        root.setLevel(level)
    root.addHandler(handler)
    _file_handlers[key] = handler
