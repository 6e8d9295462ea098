# src/buildsmith/resolve.py
"""Import path → label resolution.

Imports inside the repository's Go prefix (or written relative) resolve
structurally. Every other import goes through the strategy selected by the
configured mode:

    external   @<repo>//<subpath>:go_default_library
    vendored   //vendor/<import>:go_default_library
    workspace  //<sub-project root>/vendor/<import>:go_default_library

Resolvers are frozen once built and can be shared by concurrent workers.
"""

from __future__ import annotations

import posixpath
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol

from .config.config_types import ResolveMode, RootConfigResolved
from .constants import DEFAULT_LIB_NAME, KNOWN_HOST_SEGMENTS
from .labels import Label
from .logs import getAppLogger


class ResolveError(ValueError):
    """An import path could not be mapped to a label."""

    def __init__(self, import_path: str, rel_dir: str, reason: str) -> None:
        self.import_path = import_path
        self.rel_dir = rel_dir
        self.reason = reason
        super().__init__(
            f"in dir {rel_dir!r}, could not resolve import path {import_path!r}:"
            f" {reason}"
        )


class Resolver(Protocol):
    def resolve(self, import_path: str, rel_dir: str) -> Label: ...


def is_relative(import_path: str) -> bool:
    return import_path.startswith(("./", "..")) or import_path == "."


def _is_within(path: str, root: str) -> bool:
    """True if path equals root or lies below it on a directory boundary."""
    return root == "" or path == root or path.startswith(root + "/")


# --- strategies ---------------------------------------------------------------


@dataclass(frozen=True)
class StructuredResolver:
    """Resolves imports below the repository's Go prefix to local packages."""

    go_prefix: str

    def resolve(self, import_path: str, rel_dir: str) -> Label:
        resolved = import_path
        if is_relative(import_path):
            resolved = posixpath.normpath(
                posixpath.join(self.go_prefix, rel_dir, import_path)
            )
            if resolved == ".":
                resolved = ""
        if resolved == self.go_prefix:
            return Label(pkg="", name=DEFAULT_LIB_NAME)
        prefix = self.go_prefix + "/" if self.go_prefix else ""
        if resolved.startswith(prefix) and not resolved.startswith(("/", "..")):
            return Label(pkg=resolved[len(prefix) :], name=DEFAULT_LIB_NAME)
        raise ResolveError(
            import_path,
            rel_dir,
            f"does not start with go_prefix {self.go_prefix!r}",
        )


def repo_name_for_import_root(root: str) -> str:
    """Name of the external repository holding an import root.

    The host's labels are reversed and joined with the path segments:
    golang.org/x/net → org_golang_x_net.
    """
    host, _, rest = root.partition("/")
    parts = list(reversed(host.split(".")))
    if rest:
        parts.extend(rest.split("/"))
    return "_".join(re.sub(r"[^a-z0-9_]", "_", p.lower()) for p in parts)


@dataclass(frozen=True)
class ExternalResolver:
    """Maps third-party imports to one external repository per import root.

    `registry` pairs import-prefix with repository name and takes precedence
    over the host conventions. It is kept sorted longest prefix first.
    """

    registry: tuple[tuple[str, str], ...] = ()

    @classmethod
    def from_mapping(cls, external_repos: Mapping[str, str]) -> ExternalResolver:
        entries = sorted(
            ((p.strip("/"), r) for p, r in external_repos.items()),
            key=lambda e: (-len(e[0]), e[0]),
        )
        return cls(registry=tuple(entries))

    def _import_root(self, import_path: str, rel_dir: str) -> tuple[str, str]:
        for prefix, repo in self.registry:
            if _is_within(import_path, prefix):
                return prefix, repo

        segments = import_path.split("/")
        host = segments[0]
        if "." not in host:
            raise ResolveError(import_path, rel_dir, "not a remote import path")

        count = KNOWN_HOST_SEGMENTS.get(host)
        if host == "gopkg.in" and len(segments) > 2 and ".v" not in segments[1]:
            # gopkg.in/user/pkg.v1
            count = 3
        if count is None:
            count = len(segments)
        if len(segments) < count:
            raise ResolveError(
                import_path,
                rel_dir,
                f"expected at least {count} path segments for host {host!r}",
            )
        root = "/".join(segments[:count])
        return root, repo_name_for_import_root(root)

    def resolve(self, import_path: str, rel_dir: str) -> Label:
        root, repo = self._import_root(import_path, rel_dir)
        pkg = import_path[len(root) :].lstrip("/")
        return Label(repo=repo, pkg=pkg, name=DEFAULT_LIB_NAME)


@dataclass(frozen=True)
class VendorResolver:
    """Maps every import into vendor/. Whether it exists is checked at build time."""

    def resolve(self, import_path: str, rel_dir: str) -> Label:  # noqa: ARG002
        return Label(pkg=posixpath.join("vendor", import_path), name=DEFAULT_LIB_NAME)


def sort_roots(roots: list[str]) -> tuple[str, ...]:
    """Order sub-project roots most specific first.

    Deeper roots come first; equal depths fall back to text order. Matching
    is done on directory boundaries, so "sub1" never claims "sub10/pkg".
    """
    unique = set(roots)
    return tuple(
        sorted(unique, key=lambda r: (-(r.count("/") + 1 if r else 0), r))
    )


@dataclass(frozen=True)
class WorkspaceResolver:
    """Resolves into the vendor/ directory of the enclosing sub-project."""

    roots: tuple[str, ...]

    def resolve(self, import_path: str, rel_dir: str) -> Label:
        for root in self.roots:
            if _is_within(rel_dir, root):
                return Label(
                    pkg=posixpath.join(root, "vendor", import_path),
                    name=DEFAULT_LIB_NAME,
                )
        raise ResolveError(import_path, rel_dir, "not inside any sub-project root")


# --- dispatch -----------------------------------------------------------------


@dataclass(frozen=True)
class LabelResolver:
    """Per import: local imports go structural, the rest to the mode strategy."""

    structured: StructuredResolver
    fallback: ExternalResolver | VendorResolver | WorkspaceResolver

    def is_local(self, import_path: str) -> bool:
        prefix = self.structured.go_prefix
        return (
            import_path == prefix
            or (bool(prefix) and import_path.startswith(prefix + "/"))
            or is_relative(import_path)
        )

    def resolve(self, import_path: str, rel_dir: str) -> Label:
        if self.is_local(import_path):
            return self.structured.resolve(import_path, rel_dir)
        return self.fallback.resolve(import_path, rel_dir)


def make_resolver(config: RootConfigResolved) -> LabelResolver:
    """Build the resolver for a resolved configuration.

    Raises:
        ValueError: If the configured mode is unknown
    """
    logger = getAppLogger()
    mode: ResolveMode = config["mode"]

    fallback: ExternalResolver | VendorResolver | WorkspaceResolver
    if mode == "external":
        fallback = ExternalResolver.from_mapping(config["external_repos"])
    elif mode == "vendored":
        fallback = VendorResolver()
    elif mode == "workspace":
        fallback = WorkspaceResolver(roots=sort_roots(config["roots"]))
    else:
        xmsg = f"Unknown resolve mode: {mode!r}"
        raise ValueError(xmsg)

    logger.debug("Resolving external imports with %s", type(fallback).__name__)
    return LabelResolver(
        structured=StructuredResolver(go_prefix=config["go_prefix"]),
        fallback=fallback,
    )
