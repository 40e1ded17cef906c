"""Shared infrastructure for Encore entry points."""

from .logging_config import LogContext, get_logger, setup_logging

__all__ = ["LogContext", "get_logger", "setup_logging"]
