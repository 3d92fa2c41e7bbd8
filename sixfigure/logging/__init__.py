"""Structured logging: formatters, context propagation and component loggers."""

import logging
from typing import Optional, Union

from .config import ContextualFilter, JSONFormatter, KeyValueFormatter, configure_logging
from .context import bind_log_context, clear_log_context, get_log_context, log_context, unbind_log_context


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that tags records with a component and keeps per-call extra fields."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(name: str, component: Optional[str] = None) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Module logger, wrapped so every record carries component=<component> when given.

    Example:
        >>> logger = get_logger(__name__, component="repair")
        >>> logger.info("Repair started", extra={"event": "repair.run.started"})
    """
    logger = logging.getLogger(name)
    if component:
        return ComponentLoggerAdapter(logger, {"component": component})
    return logger


__all__ = [
    "ComponentLoggerAdapter",
    "ContextualFilter",
    "JSONFormatter",
    "KeyValueFormatter",
    "configure_logging",
    "get_logger",
    "log_context",
    "bind_log_context",
    "unbind_log_context",
    "get_log_context",
    "clear_log_context",
]
