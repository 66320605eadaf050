"""
xmlconf - XML Configuration Loader
==================================

Loads ``<config>``-wrapped XML documents into a typed, hierarchical key/value store.

Modules:
- config: XML adapter, typed container, decoder and adapter registry
- utils: Logging setup and XML conversion helpers

Usage:

    from xmlconf import default_registry

    cnf = default_registry().new_config("xml", "config.xml")
    port = cnf.default_int("httpport", 8080)
"""

__version__ = "1.0.0"

from .config import (
    ConfigError,
    ConfigParseError,
    ConfigRegistry,
    KeyNotFoundError,
    ValueTypeError,
    XMLConfig,
    XMLConfigContainer,
    default_registry,
)
from .utils.logger import setup_logging

__all__ = [
    "ConfigError",
    "ConfigParseError",
    "ConfigRegistry",
    "KeyNotFoundError",
    "ValueTypeError",
    "XMLConfig",
    "XMLConfigContainer",
    "default_registry",
    "setup_logging",
]
