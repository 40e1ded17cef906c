"""Logging setup shared by the Encore host and tools.

Modules keep using ``logging.getLogger(__name__)``; this module only wires
handlers and formats for the entry points (the HTTP host, self-play runs).

Usage:
    from encore.core.logging_config import setup_logging

    logger = setup_logging("encore", level="DEBUG", format_style="compact")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Union

__all__ = [
    "COMPACT_FORMAT",
    "DEFAULT_FORMAT",
    "DETAILED_FORMAT",
    "STRUCTURED_FORMAT",
    "LogContext",
    "configure_third_party_loggers",
    "get_logger",
    "setup_logging",
]

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
COMPACT_FORMAT = "%(levelname).1s %(name)s: %(message)s"
DETAILED_FORMAT = (
    "%(asctime)s [%(levelname)s] %(name)s (%(filename)s:%(lineno)d): %(message)s"
)
STRUCTURED_FORMAT = (
    '{"time": "%(asctime)s", "level": "%(levelname)s", '
    '"logger": "%(name)s", "message": "%(message)s"}'
)

_FORMATS = {
    "default": DEFAULT_FORMAT,
    "compact": COMPACT_FORMAT,
    "detailed": DETAILED_FORMAT,
    "structured": STRUCTURED_FORMAT,
}

# Libraries pulled in by the HTTP host that log chattily at INFO.
NOISY_PACKAGES = (
    "urllib3",
    "httpx",
    "httpcore",
    "asyncio",
    "multipart",
    "uvicorn.access",
)

_configured: set[str] = set()


def _resolve_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def setup_logging(
    name: str = "encore",
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    log_dir: Optional[Union[str, Path]] = None,
    console: bool = True,
    propagate: bool = False,
    format_style: str = "default",
) -> logging.Logger:
    """Configure and return the logger called ``name``.

    Handlers are attached only on the first call for a given name; later
    calls just update the level and ``propagate``. Unknown ``format_style``
    values fall back to the default format.
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))
    logger.propagate = propagate

    if name in _configured:
        return logger

    formatter = logging.Formatter(_FORMATS.get(format_style, DEFAULT_FORMAT))

    if console:
        stream = logging.StreamHandler()
        stream.setFormatter(formatter)
        logger.addHandler(stream)

    if log_file is None and log_dir is not None:
        safe_name = name.replace(".", "_") or "encore"
        log_file = Path(log_dir) / f"{safe_name}.log"
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    _configured.add(name)
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_third_party_loggers(
    quiet: bool = True,
    verbose_packages: Optional[Iterable[str]] = None,
) -> None:
    """Raise noisy library loggers to WARNING unless listed as verbose."""
    if not quiet:
        return
    keep = set(verbose_packages or ())
    for package in NOISY_PACKAGES:
        if package in keep:
            continue
        logging.getLogger(package).setLevel(logging.WARNING)


class LogContext:
    """Temporarily run ``logger`` at another level.

    Example:
        with LogContext(logger, logging.DEBUG):
            engine_step()
    """

    def __init__(self, logger: logging.Logger, level: Union[int, str]):
        self.logger = logger
        self.level = _resolve_level(level)
        self._previous: Optional[int] = None

    def __enter__(self) -> logging.Logger:
        self._previous = self.logger.level
        self.logger.setLevel(self.level)
        return self.logger

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._previous is not None:
            self.logger.setLevel(self._previous)
