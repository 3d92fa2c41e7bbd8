"""Scoped logging context.

Fields bound here (run_id, source, job_key, policy, ...) are attached to
every log record emitted inside the scope by ContextualFilter. Storage is a
ContextVar, so scopes nest and never leak between threads.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Dict, Iterator

_context: ContextVar[Dict[str, Any]] = ContextVar("sixfigure_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Copy of the fields bound in the current scope."""
    return dict(_context.get())


def bind_log_context(**fields: Any) -> Token:
    """Merge fields into the current context; pass the token to unbind_log_context()."""
    return _context.set({**_context.get(), **fields})


def unbind_log_context(token: Token) -> None:
    _context.reset(token)


def clear_log_context() -> None:
    _context.set({})


@contextmanager
def log_context(**fields: Any) -> Iterator[Dict[str, Any]]:
    """Bind fields for the duration of a with-block.

    Example:
        >>> with log_context(run_id="abc123", policy="cents"):
        ...     logger.info("Repair started")  # record carries run_id and policy
    """
    token = bind_log_context(**fields)
    try:
        yield get_log_context()
    finally:
        unbind_log_context(token)
