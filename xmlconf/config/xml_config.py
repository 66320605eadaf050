"""
XML Configuration Adapter
=========================

Loads ``<config>``-wrapped XML documents into a nested dictionary and exposes
typed accessors over it.

Example document::

    <config>
        <appname>demo</appname>
        <httpport>8080</httpport>
        <mysql>
            <host>${MYSQL_HOST||localhost}</host>
        </mysql>
    </config>

Values are always stored as strings; numeric and boolean interpretation
happens on read. Only the ``set`` path is locked: a container is meant for a
single writer with no concurrent readers.
"""

from __future__ import annotations

import logging
import os
import re
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
from xml.etree import ElementTree as ET

from dotenv import load_dotenv

from .base import (
    ConfigError,
    ConfigParseError,
    KeyNotFoundError,
    SectionNotFoundError,
    ValueTypeError,
    expand_value_env_for_map,
    parse_bool,
    to_string,
)
from .decode import DecodeOption, decode
from ..utils.xml_utils import doc_to_map, map_to_doc

logger = logging.getLogger(__name__)

ROOT_TAG = "config"
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# ASCII-only literals: no underscores, padding or non-ASCII digits
INT_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)
FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.ASCII | re.IGNORECASE,
)


class XMLConfig:
    """XML configuration adapter. Produces ``XMLConfigContainer`` objects."""

    def __init__(self, env_file: Optional[Union[str, os.PathLike]] = None):
        """
        Args:
            env_file: Optional dotenv file loaded before placeholder expansion
        """
        self.env_file = env_file

    def parse(self, filename: Union[str, os.PathLike]) -> "XMLConfigContainer":
        """
        Parse an XML configuration file.

        Raises:
            OSError: If the file cannot be read
            ConfigParseError: If the document is malformed or not wrapped in ``<config>``
        """
        path = Path(filename)
        with open(path, 'rb') as f:
            content = f.read()
        container = self.parse_data(content)
        logger.info(f"Loaded XML configuration from {path}")
        return container

    def parse_data(self, data: Union[str, bytes]) -> "XMLConfigContainer":
        """Parse an in-memory XML configuration document."""
        try:
            document = doc_to_map(data)
        except ET.ParseError as e:
            logger.error(f"Failed to parse XML configuration: {e}")
            raise ConfigParseError(f"xml parse error: {e}") from e

        value = document.get(ROOT_TAG)
        if value is None:
            logger.error("XML configuration is missing the <config> wrapping element")
            raise ConfigParseError("xml parse should include in <config></config> tags")
        if not isinstance(value, dict):
            logger.error("XML configuration <config> element has no nested elements")
            raise ConfigParseError("xml parse <config></config> tags should include sub tags")

        if self.env_file is not None:
            load_dotenv(self.env_file, override=False)

        data_map = expand_value_env_for_map(value)
        logger.debug(f"Parsed XML configuration with {len(data_map)} top-level keys")
        return XMLConfigContainer(data_map)


class XMLConfigContainer:
    """
    Typed access to one node of an XML configuration tree.

    Containers returned by ``sub`` share the nested dictionary with their
    parent: a ``set`` on the child is visible from the parent.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = data if data is not None else {}
        self._lock = threading.Lock()

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"XMLConfigContainer(keys={list(self._data)})"

    def to_dict(self) -> Dict[str, Any]:
        """Return the underlying node (not a copy)."""
        return self._data

    # ------------------------------------------------------------------
    def _scalar(self, key: str) -> str:
        """Return the string stored at ``key`` or raise a structured error."""
        if key not in self._data:
            raise KeyNotFoundError(f"not exist key: {key!r}")
        value = self._data[key]
        if not isinstance(value, str):
            raise ValueTypeError(f"the value of key {key!r} is not a scalar: {type(value).__name__}")
        return value

    def _sub(self, key: str) -> Dict[str, Any]:
        if key == "":
            return self._data
        if key not in self._data:
            raise KeyNotFoundError(f"the key is not found: {key}")
        value = self._data[key]
        if not isinstance(value, dict):
            raise ValueTypeError(f"the value of this key is not a structure: {key}")
        return value

    # ------------------------------------------------------------------
    def bool(self, key: str) -> bool:
        """Return the boolean value for a given key."""
        value = self._data.get(key)
        if value is None:
            raise KeyNotFoundError(f"not exist key: {key!r}")
        return parse_bool(value)

    def default_bool(self, key: str, default: bool) -> bool:
        try:
            return self.bool(key)
        except ConfigError:
            return default

    def int(self, key: str) -> int:
        """Return the base-10 integer value for a given key."""
        value = self._scalar(key)
        if not INT_PATTERN.fullmatch(value):
            raise ValueTypeError(f"parsing {value!r}: invalid syntax")
        return int(value, 10)

    def default_int(self, key: str, default: int) -> int:
        try:
            return self.int(key)
        except ConfigError:
            return default

    def int64(self, key: str) -> int:
        """Return the integer value for a given key, range-checked to signed 64 bits."""
        result = self.int(key)
        if not INT64_MIN <= result <= INT64_MAX:
            raise ValueTypeError(f"parsing {self._data[key]!r}: value out of range")
        return result

    def default_int64(self, key: str, default: int) -> int:
        try:
            return self.int64(key)
        except ConfigError:
            return default

    def float(self, key: str) -> float:
        """Return the float value for a given key."""
        value = self._scalar(key)
        if not FLOAT_PATTERN.fullmatch(value):
            raise ValueTypeError(f"parsing {value!r}: invalid syntax")
        return float(value)

    def default_float(self, key: str, default: float) -> float:
        try:
            return self.float(key)
        except ConfigError:
            return default

    def string(self, key: str) -> str:
        """Return the string value for a given key, or "" if absent or not a scalar."""
        value = self._data.get(key)
        if isinstance(value, str):
            return value
        return ""

    def default_string(self, key: str, default: str) -> str:
        value = self.string(key)
        if value == "":
            return default
        return value

    def strings(self, key: str) -> Optional[List[str]]:
        """Return the ``;``-separated list for a given key, or None if empty."""
        value = self.string(key)
        if value == "":
            return None
        return value.split(";")

    def default_strings(self, key: str, default: List[str]) -> List[str]:
        value = self.strings(key)
        if value is None:
            return default
        return value

    def get_section(self, section: str) -> Dict[str, str]:
        """Return the immediate children of a section rendered as strings."""
        value = self._data.get(section)
        if isinstance(value, dict):
            return {k: to_string(v) for k, v in value.items()}
        raise SectionNotFoundError(f"section '{section}' not found")

    def sub(self, key: str) -> "XMLConfigContainer":
        """Narrow to the section at ``key``; "" returns a container over this node."""
        return XMLConfigContainer(self._sub(key))

    def unmarshaler(self, prefix: str, obj: Any, *options: DecodeOption) -> Any:
        """
        Decode the section at ``prefix`` into a dataclass.

        Scalars are strings in XML (``<id>1</id>`` is "1"), so they are coerced
        to the annotated field types.
        """
        return decode(self._sub(prefix), obj, *options)

    def set(self, key: str, value: str) -> None:
        """Write a new value for key."""
        with self._lock:
            self._data[key] = str(value)

    def diy(self, key: str) -> Any:
        """Return the raw value for a given key."""
        if key in self._data:
            return self._data[key]
        raise KeyNotFoundError("not exist key")

    def on_change(self, key: str, fn) -> None:
        logger.warning("Unsupported operation")

    def save_config_file(self, filename: Union[str, os.PathLike]) -> None:
        """
        Save the configuration into a file.

        The file is created with owner-only permissions, existing content is
        replaced and symbolic links are not followed. Keys that are not valid
        XML names raise ``ConfigError`` before the file is touched.
        """
        try:
            content = map_to_doc(self._data, root=ROOT_TAG)
        except ValueError as e:
            logger.error(f"Cannot serialize configuration for {filename}: {e}")
            raise ConfigError(f"cannot save configuration: {e}") from e

        flags = os.O_RDWR | os.O_CREAT | os.O_TRUNC | getattr(os, 'O_NOFOLLOW', 0)
        fd = os.open(filename, flags, 0o600)
        try:
            f = os.fdopen(fd, 'wb')
        except Exception:
            os.close(fd)
            raise
        with f:
            f.write(content)
        logger.info(f"Configuration saved to {filename}")


__all__ = ["XMLConfig", "XMLConfigContainer", "ROOT_TAG"]
