"""
Logging setup for the todo tracker.

Handlers are attached to the ``todo_app`` package logger rather than the
root logger, so uvicorn and SQLAlchemy keep their own configuration.
Records still propagate to the root logger.
"""

import logging
from pathlib import Path
from typing import Optional, Union

PACKAGE_LOGGER = "todo_app"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def parse_level(level: Union[str, int]) -> int:
    """``"debug"``, ``"INFO"`` or a numeric level; unknown names mean INFO."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(
    level: Union[str, int] = "INFO",
    logfile: Optional[str] = None,
    name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """Configure the application logger and return it.

    Calling this again only updates the level; a console handler (and a
    file handler, when ``logfile`` is given) is attached once.
    """
    logger = logging.getLogger(name)
    logger.setLevel(parse_level(level))

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    present = {handler.get_name() for handler in logger.handlers}

    if "console" not in present:
        console_handler = logging.StreamHandler()
        console_handler.set_name("console")
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if logfile and "file" not in present:
        file_handler = logging.FileHandler(Path(logfile).resolve(), encoding="utf-8")
        file_handler.set_name("file")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
