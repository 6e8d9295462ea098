# tests/utils/builders.py
"""Factories for packages and resolved configs used across tests."""

from pathlib import Path
from typing import Any

import buildsmith.config.config_types as mod_types
import buildsmith.packages as mod_packages

from .constants import GO_PREFIX


def make_strings(
    *generic: str, **platforms: list[str]
) -> mod_packages.PlatformStrings:
    """PlatformStrings from positional generic values and per-platform kwargs."""
    return mod_packages.PlatformStrings(
        generic=list(generic),
        platforms={k: list(v) for k, v in platforms.items()},
    )


def make_target(
    sources: list[str] | None = None,
    imports: list[str] | None = None,
    *,
    copts: list[str] | None = None,
    clinkopts: list[str] | None = None,
) -> mod_packages.Target:
    return mod_packages.Target(
        sources=make_strings(*(sources or [])),
        imports=make_strings(*(imports or [])),
        copts=make_strings(*(copts or [])),
        clinkopts=make_strings(*(clinkopts or [])),
    )


def make_package(
    rel: str = "lib",
    *,
    root: Path | str = "/repo",
    name: str = "lib",
    **fields: Any,
) -> mod_packages.Package:
    """A package under root whose directory is root/rel."""
    pkg_dir = str(Path(root) / rel) if rel else str(root)
    return mod_packages.Package(dir=pkg_dir, rel=rel, name=name, **fields)


def make_resolved(
    *,
    go_prefix: str = GO_PREFIX,
    mode: mod_types.ResolveMode = "external",
    roots: list[str] | None = None,
    repo_root: Path | str = "/repo",
    build_file_name: str = "BUILD",
    external_repos: dict[str, str] | None = None,
    log_level: str = "info",
) -> mod_types.RootConfigResolved:
    return mod_types.RootConfigResolved(
        go_prefix=go_prefix,
        mode=mode,
        roots=roots or [],
        repo_root=Path(repo_root),
        build_file_name=build_file_name,
        external_repos=external_repos or {},
        log_level=log_level,
    )
