"""ATS adapters that fetch postings together with their salary data.

Use the factory function to instantiate adapters:
    from sixfigure.adapters import get_adapter
    adapter = get_adapter(source_config, advanced_config)
    raw_jobs = adapter.fetch_jobs(source_config)
"""

from .ashby import AshbyAdapter
from .base import BaseAdapter
from .exceptions import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)
from .factory import ADAPTERS, get_adapter
from .greenhouse import GreenhouseAdapter
from .lever import LeverAdapter

__all__ = [
    # Base and factory
    "BaseAdapter",
    "ADAPTERS",
    "get_adapter",
    # Adapters
    "GreenhouseAdapter",
    "LeverAdapter",
    "AshbyAdapter",
    # Exceptions
    "AdapterError",
    "AdapterHTTPError",
    "AdapterTimeoutError",
    "AdapterResponseError",
    "AdapterConfigurationError",
]
