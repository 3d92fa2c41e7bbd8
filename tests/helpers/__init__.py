"""Test helper utilities for Six Figure Jobs tests."""

from .fixture_adapter import FixtureAdapter, load_fixture_jobs
from .memory_store import InMemorySalaryStore

__all__ = ["FixtureAdapter", "InMemorySalaryStore", "load_fixture_jobs"]
