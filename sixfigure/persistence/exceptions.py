"""Persistence layer exceptions.

Everything raised by the persistence layer derives from PersistenceError, so
callers can isolate a failing row or command with a single except clause.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""


class DatabaseConnectionError(PersistenceError):
    """Database URL invalid, database unreachable, or not initialized yet."""


class RecordNotFoundError(PersistenceError):
    """An update targeted a job or source that does not exist."""


class DataIntegrityError(PersistenceError):
    """A constraint (primary key, unique, not-null) was violated."""
