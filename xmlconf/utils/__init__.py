"""
Utilities Module
================

Contains logging setup and XML conversion helpers.
"""

from .logger import setup_logging, get_logger
from .xml_utils import doc_to_map, map_to_doc

__all__ = [
    'setup_logging',
    'get_logger',
    'doc_to_map',
    'map_to_doc'
]
