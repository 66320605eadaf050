"""Configuration package.

Provides the XML configuration adapter, its typed container, and the adapter registry.
"""
from .base import (  # noqa: F401
    ConfigError,
    ConfigParseError,
    DecodeError,
    KeyNotFoundError,
    SectionNotFoundError,
    UnknownAdapterError,
    ValueTypeError,
    expand_value_env,
    expand_value_env_for_map,
    parse_bool,
    to_string,
)
from .decode import decode, error_unused, weakly_typed  # noqa: F401
from .registry import ConfigRegistry, default_registry  # noqa: F401
from .xml_config import XMLConfig, XMLConfigContainer  # noqa: F401
