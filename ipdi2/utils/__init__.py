"""
IPDI2 utilities package.
Internal utilities - not part of public API.
"""

from . import data_sources, formatters, validators

__all__ = [
    "data_sources",
    "formatters",
    "validators",
]
