"""Factory function for instantiating ATS adapters."""

from typing import Dict, Type

from ..config.models import AdvancedConfig, SourceConfig
from ..logging import get_logger
from .ashby import AshbyAdapter
from .base import BaseAdapter
from .exceptions import AdapterConfigurationError
from .greenhouse import GreenhouseAdapter
from .lever import LeverAdapter

logger = get_logger(__name__, component="adapter")

ADAPTERS: Dict[str, Type[BaseAdapter]] = {
    GreenhouseAdapter.ADAPTER_NAME: GreenhouseAdapter,
    LeverAdapter.ADAPTER_NAME: LeverAdapter,
    AshbyAdapter.ADAPTER_NAME: AshbyAdapter,
}


def get_adapter(source_config: SourceConfig, advanced_config: AdvancedConfig) -> BaseAdapter:
    """Instantiate the adapter for a source's ATS type.

    Timeout, user agent and max_jobs come from advanced_config.

    Raises:
        AdapterConfigurationError: If the ATS type is not supported or config is invalid

    Example:
        >>> source = SourceConfig(name="Example", type="lever", identifier="example")
        >>> adapter = get_adapter(source, AdvancedConfig())
        >>> jobs = adapter.fetch_jobs(source)
    """
    ats_type = str(getattr(source_config.type, "value", source_config.type)).lower()
    adapter_class = ADAPTERS.get(ats_type)

    if not adapter_class:
        raise AdapterConfigurationError(
            f"Unknown ATS type: {source_config.type}. Supported types: {', '.join(sorted(ADAPTERS))}"
        )

    logger.debug(
        "Creating adapter instance",
        extra={
            "event": "adapter.created",
            "ats_type": ats_type,
            "source": source_config.identifier,
            "adapter_class": adapter_class.__name__,
        },
    )

    try:
        return adapter_class(
            timeout=advanced_config.http_request_timeout,
            user_agent=advanced_config.user_agent,
            max_jobs=advanced_config.max_jobs_per_source,
        )
    except AdapterConfigurationError:
        raise
    except Exception as e:
        raise AdapterConfigurationError(f"Failed to create {ats_type} adapter: {e}") from e
