"""Configuration management module for Six Figure Jobs."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config
from .models import (
    ATSType,
    AdvancedConfig,
    AppConfig,
    CurrencyPatternConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    RepairConfig,
    SalaryConfig,
    SourceConfig,
)

__all__ = [
    # Main loader functions
    "load_config",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "SourceConfig",
    "SalaryConfig",
    "RepairConfig",
    "CurrencyPatternConfig",
    "LoggingConfig",
    "AdvancedConfig",
    "EnvironmentConfig",
    # Enums
    "ATSType",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
