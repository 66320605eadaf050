"""
Configuration Primitives
========================

Shared building blocks for configuration adapters:

- Exception hierarchy raised by adapters and accessors
- Environment placeholder expansion (``${KEY}`` / ``${KEY||default}``)
- Permissive boolean parsing and generic value stringification
"""

import json
import os
from typing import Any, Dict

TRUE_TOKENS = frozenset(["1", "t", "T", "true", "TRUE", "True"])
FALSE_TOKENS = frozenset(["0", "f", "F", "false", "FALSE", "False"])


class ConfigError(Exception):
    """Base class for all configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when a document cannot be turned into a configuration tree."""


class KeyNotFoundError(ConfigError, KeyError):
    """Raised when a strict accessor is asked for a key that does not exist."""

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0]) if self.args else ""


class SectionNotFoundError(KeyNotFoundError):
    """Raised when a key is missing or does not hold a nested section."""


class UnknownAdapterError(KeyNotFoundError):
    """Raised when no adapter is registered under a name."""


class ValueTypeError(ConfigError, ValueError):
    """Raised when a stored value cannot be interpreted as the requested type."""


class DecodeError(ConfigError, ValueError):
    """Raised when a mapping cannot be decoded into a target structure."""


def expand_value_env(value: str) -> str:
    """
    Expand an environment placeholder.

    Only values that are entirely a placeholder are expanded:
    ``${HOME}`` or ``${HOME||/home/default}``. If the variable is unset
    or empty the default (or an empty string) is used. Anything else is
    returned untouched.

    Args:
        value: Raw scalar value

    Returns:
        Expanded value
    """
    if len(value) < 3 or not value.startswith("${") or not value.endswith("}"):
        return value

    body = value[2:]
    key = ""
    default = ""
    for i, ch in enumerate(body):
        if ch == "|" and body[i + 1:i + 2] == "|":
            key = body[:i]
            default = body[i + 2:-1]
            break
        if ch == "}":
            key = body[:i]
            break

    real_value = os.environ.get(key, "")
    if real_value == "":
        real_value = default
    return real_value


def expand_value_env_for_map(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Expand environment placeholders for every scalar in a nested mapping.

    The mapping is modified in place and returned.
    """
    for key, value in data.items():
        data[key] = _expand_value(value)
    return data


def _expand_value(value: Any) -> Any:
    if isinstance(value, str):
        return expand_value_env(value)
    if isinstance(value, dict):
        return expand_value_env_for_map(value)
    if isinstance(value, list):
        return [_expand_value(item) for item in value]
    return value


def parse_bool(value: Any) -> bool:
    """
    Parse a boolean from a configuration value.

    Args:
        value: ``bool``, ``int``/``float`` 0 or 1, or one of the accepted string tokens

    Returns:
        Parsed boolean

    Raises:
        ValueTypeError: If the value is not a recognised boolean
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        if value in TRUE_TOKENS:
            return True
        if value in FALSE_TOKENS:
            return False
    elif isinstance(value, (int, float)) and value in (0, 1):
        return value == 1
    raise ValueTypeError(f"parsing {value!r}: invalid syntax")


def to_string(value: Any) -> str:
    """Render any configuration value as a string."""
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


__all__ = [
    "ConfigError",
    "ConfigParseError",
    "KeyNotFoundError",
    "SectionNotFoundError",
    "UnknownAdapterError",
    "ValueTypeError",
    "DecodeError",
    "expand_value_env",
    "expand_value_env_for_map",
    "parse_bool",
    "to_string",
]
