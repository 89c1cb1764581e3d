from __future__ import annotations

from typing import Dict, List

from .base import SourceConfig

# Global in-process registry: source name -> config
_REGISTRY: Dict[str, SourceConfig] = {}


def register(source: SourceConfig) -> SourceConfig:
    """
    Register a source config under its name (case-insensitive).
    Re-registering the same config is a no-op; a different one is rejected.
    """
    key = (source.name or "").strip().lower()
    if not key:
        raise ValueError(f"Cannot register source {source!r}: missing/empty name.")
    if key in _REGISTRY and _REGISTRY[key] is not source:
        raise ValueError(f"Source {key!r} already registered.")
    _REGISTRY[key] = source
    return source


def get(name: str) -> SourceConfig:
    """
    Look up a source by name (case-insensitive).
    Raises KeyError if not found.
    """
    key = (name or "").strip().lower()
    if key not in _REGISTRY:
        raise KeyError(f"No source registered for {name!r}.")
    return _REGISTRY[key]


def known_sources() -> List[str]:
    return list(_REGISTRY)
