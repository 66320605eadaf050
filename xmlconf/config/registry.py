"""
Configuration adapter registry.

Maps a backend name (``"xml"``) to an adapter object exposing ``parse(filename)``
and ``parse_data(data)``. Registries are plain objects built by the caller and
passed where needed; ``default_registry()`` returns one pre-populated with the
adapters this package ships.
"""

import logging
import os
from typing import Any, Dict, List, Protocol, Union

from .base import ConfigError, UnknownAdapterError
from .xml_config import XMLConfig

logger = logging.getLogger(__name__)


class ConfigAdapter(Protocol):
    """Anything that can turn a file or a buffer into a config container."""

    def parse(self, filename: Union[str, os.PathLike]) -> Any: ...

    def parse_data(self, data: Union[str, bytes]) -> Any: ...


class ConfigRegistry:
    """Registry of configuration adapters keyed by backend name."""

    def __init__(self):
        self._adapters: Dict[str, ConfigAdapter] = {}

    def register(self, name: str, adapter: ConfigAdapter) -> None:
        """
        Register an adapter under a name.

        Args:
            name: Backend name, e.g. ``"xml"``
            adapter: Adapter instance

        Raises:
            ValueError: If adapter is None
            ConfigError: If the name is already registered
        """
        if adapter is None:
            raise ValueError("config: register adapter is nil")
        if name in self._adapters:
            raise ConfigError(f"config: register called twice for adapter {name}")
        logger.debug(f"Registering config adapter: {name}")
        self._adapters[name] = adapter

    def get(self, name: str) -> ConfigAdapter:
        if name not in self._adapters:
            raise UnknownAdapterError(f"config: unknown adaptername {name!r} (forgotten import?)")
        return self._adapters[name]

    def names(self) -> List[str]:
        return sorted(self._adapters)

    def __contains__(self, name: str) -> bool:
        return name in self._adapters

    def new_config(self, adapter_name: str, filename: Union[str, os.PathLike]) -> Any:
        """Load ``filename`` with the adapter registered under ``adapter_name``."""
        return self.get(adapter_name).parse(filename)

    def new_config_data(self, adapter_name: str, data: Union[str, bytes]) -> Any:
        """Load an in-memory document with the adapter registered under ``adapter_name``."""
        return self.get(adapter_name).parse_data(data)


def default_registry() -> ConfigRegistry:
    """Create a registry with the built-in adapters registered."""
    registry = ConfigRegistry()
    registry.register("xml", XMLConfig())
    return registry


__all__ = ["ConfigAdapter", "ConfigRegistry", "default_registry"]
