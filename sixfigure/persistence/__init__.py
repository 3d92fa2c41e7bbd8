"""Persistence layer for jobs and source health (SQLAlchemy, SQLite by default).

Public API:
    - init_database(database_url) / get_session() / close_database() / get_engine()
    - JobRepository: jobs, salary repair queries and listings
    - SourceRepository: source health tracking
    - PersistenceError and subclasses

Example usage:
    >>> from sixfigure.persistence import init_database, get_session, JobRepository
    >>> init_database("sqlite:///./data/six_figure_jobs.db")
    >>> with get_session() as session:
    ...     top = JobRepository(session).list_jobs(high_salary_only=True, sort="salary")
"""

from .database import close_database, get_engine, get_session, init_database
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)
from .repositories import JobRepository, SourceRepository

__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "close_database",
    "get_engine",
    # Repositories
    "JobRepository",
    "SourceRepository",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
