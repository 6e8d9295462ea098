# src/buildsmith/packages.py
"""Input model handed over by the package scanner.

A scanner walks the source tree, classifies files per target and fills in
these records. Nothing here touches the filesystem.
"""

from __future__ import annotations

import posixpath
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass
class PlatformStrings:
    """A string set that may vary by target platform.

    `generic` applies to every platform. `platforms` maps a platform name
    (e.g. "linux_amd64") to strings that only apply there.
    """

    generic: list[str] = field(default_factory=list)
    platforms: dict[str, list[str]] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.generic and not any(self.platforms.values())

    def map(
        self, fn: Callable[[str], str]
    ) -> tuple[PlatformStrings, list[Exception]]:
        """Apply fn to every string.

        Strings for which fn raises are dropped; their errors are returned
        alongside the mapped result.
        """
        errors: list[Exception] = []

        def _apply(values: list[str]) -> list[str]:
            out: list[str] = []
            for value in values:
                try:
                    out.append(fn(value))
                except ValueError as e:
                    errors.append(e)
            return out

        mapped = PlatformStrings(
            generic=_apply(self.generic),
            platforms={
                platform: _apply(values)
                for platform, values in self.platforms.items()
            },
        )
        return mapped, errors

    def clean(self) -> PlatformStrings:
        """Return a sorted, deduplicated copy.

        Platform strings already present in the generic set are removed,
        and platforms left empty are dropped.
        """
        generic = sorted(set(self.generic))
        seen = set(generic)
        platforms: dict[str, list[str]] = {}
        for platform in sorted(self.platforms):
            values = sorted(set(self.platforms[platform]) - seen)
            if values:
                platforms[platform] = values
        return PlatformStrings(generic=generic, platforms=platforms)


@dataclass
class Target:
    """Sources and settings of one buildable target in a package."""

    sources: PlatformStrings = field(default_factory=PlatformStrings)
    imports: PlatformStrings = field(default_factory=PlatformStrings)
    copts: PlatformStrings = field(default_factory=PlatformStrings)
    clinkopts: PlatformStrings = field(default_factory=PlatformStrings)

    def has_sources(self) -> bool:
        return not self.sources.is_empty()


@dataclass
class Package:
    """A Go package directory as classified by the scanner.

    Attributes:
        dir: Directory of the package on disk
        rel: Slash-separated path relative to the repository root ("" for root)
        name: Go package name ("main" for commands)
        library: Non-test sources of the package
        cgo_library: Sources that must go through cgo
        binary: Sources only built into the command
        test: Internal (same-package) test sources
        xtest: External (_test package) test sources
        has_pb_go: Directory already contains generated .pb.go files
        has_testdata: Directory contains a testdata/ directory
        protos: .proto files in the directory
    """

    dir: str
    rel: str = ""
    name: str = ""
    library: Target = field(default_factory=Target)
    cgo_library: Target = field(default_factory=Target)
    binary: Target = field(default_factory=Target)
    test: Target = field(default_factory=Target)
    xtest: Target = field(default_factory=Target)
    has_pb_go: bool = False
    has_testdata: bool = False
    protos: list[str] = field(default_factory=list)

    def is_command(self) -> bool:
        return self.name == "main"

    @property
    def base_name(self) -> str:
        return posixpath.basename(self.dir.rstrip("/\\").replace("\\", "/"))
