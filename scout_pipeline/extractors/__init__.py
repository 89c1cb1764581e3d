"""
Listing-site extractors.

Each module registers one SourceConfig; importing this package makes all of
them available through the registry.
"""

from .base import Extractor, FieldRule, SourceConfig, build_records, parse_cards
from .registry import get, known_sources, register
from . import apna, linkedin, naukri, workindia  # noqa: F401  (registers sources)

__all__ = [
    "Extractor",
    "FieldRule",
    "SourceConfig",
    "build_records",
    "parse_cards",
    "get",
    "known_sources",
    "register",
]
