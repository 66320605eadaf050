"""
Logging Utilities
=================

Logging setup for the ``xmlconf`` package logger.

Only the package logger is configured. Handlers installed by the host
application (on the root logger or anywhere else) are never touched, and
calling ``setup_logging`` again replaces just the handlers it added before.
"""

import logging
import logging.handlers
import os
import sys
from typing import Optional, Dict, Any

from ..config.base import ConfigError

APP_LOGGER_NAME = "xmlconf"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Marker attribute set on handlers owned by setup_logging
_OWNED_ATTR = "_xmlconf_owned"


def setup_logging(
    config: Optional[Any] = None,
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    max_file_size: str = "10MB",
    backup_count: int = 5,
    console: bool = True,
    propagate: bool = True
) -> logging.Logger:
    """
    Configure the ``xmlconf`` logger.

    Explicit arguments are overridden by a ``logging`` section (``level``,
    ``file``, ``max_file_size``, ``backup_count``) when ``config`` has one.

    Args:
        config: Dict or loaded XML container with an optional ``logging`` section
        log_level: Level name for the package logger
        log_file: Optional rotating log file
        max_file_size: Rotation size, e.g. '10MB'
        backup_count: Rotated files to keep
        console: Attach a stdout handler
        propagate: Let records reach the host application's handlers too

    Returns:
        The package logger
    """
    section = _logging_section(config)
    log_level = section.get('level', log_level)
    log_file = section.get('file', log_file)
    max_file_size = section.get('max_file_size', max_file_size)
    backup_count = int(section.get('backup_count', backup_count))

    level = getattr(logging, str(log_level).upper(), None)
    if not isinstance(level, int):
        level = logging.INFO

    package_logger = logging.getLogger(APP_LOGGER_NAME)
    _remove_owned_handlers(package_logger)
    package_logger.setLevel(level)
    package_logger.propagate = propagate

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
    handlers = []
    if console:
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=_parse_size(max_file_size),
            backupCount=backup_count,
            encoding='utf-8'
        ))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        setattr(handler, _OWNED_ATTR, True)
        package_logger.addHandler(handler)

    package_logger.debug(f"Logging configured - Level: {logging.getLevelName(level)}, File: {log_file}")
    return package_logger


def _remove_owned_handlers(target: logging.Logger):
    for handler in target.handlers[:]:
        if getattr(handler, _OWNED_ATTR, False):
            target.removeHandler(handler)
            handler.close()


def _logging_section(config: Optional[Any]) -> Dict[str, Any]:
    """Extract the ``logging`` section from a dict or an XML config container."""
    if config is None:
        return {}
    if isinstance(config, dict):
        return config.get('logging', {}) or {}
    try:
        return config.get_section('logging')
    except ConfigError:
        return {}


def _parse_size(size_str: str) -> int:
    """Parse '10MB' / '1GB' / '512' into bytes."""
    size_str = str(size_str).upper().strip()
    units = {'KB': 1024, 'MB': 1024 ** 2, 'GB': 1024 ** 3}
    multiplier = units.get(size_str[-2:])
    if multiplier:
        return int(float(size_str[:-2]) * multiplier)
    return int(size_str)


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package namespace unless already qualified."""
    if name == APP_LOGGER_NAME or name.startswith(APP_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER_NAME}.{name}")


__all__ = ["setup_logging", "get_logger", "APP_LOGGER_NAME"]
