"""Configuration package exports."""

from .loader import CONFIG_ENV_VAR, ConfigRepository
from .models import (
    IANA_SOURCE,
    PUBLIC_SUFFIX_SOURCE,
    GeneratorConfig,
    SourceConfig,
    default_sources,
)

__all__ = [
    "CONFIG_ENV_VAR",
    "ConfigRepository",
    "GeneratorConfig",
    "IANA_SOURCE",
    "PUBLIC_SUFFIX_SOURCE",
    "SourceConfig",
    "default_sources",
]
