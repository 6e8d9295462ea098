# src/buildsmith/config/__init__.py

"""Configuration handling for buildsmith.

This module provides configuration discovery, loading and resolution.
"""

from .config_loader import find_config, load_config, load_jsonc, load_toml
from .config_resolve import (
    load_and_resolve_config,
    normalize_roots,
    resolve_config,
)
from .config_types import ResolveMode, RootConfig, RootConfigResolved


__all__ = [  # noqa: RUF022
    # config_loader
    "find_config",
    "load_config",
    "load_jsonc",
    "load_toml",
    # config_resolve
    "load_and_resolve_config",
    "normalize_roots",
    "resolve_config",
    # config_types
    "ResolveMode",
    "RootConfig",
    "RootConfigResolved",
]
