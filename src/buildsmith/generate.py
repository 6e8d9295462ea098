# src/buildsmith/generate.py
"""Rule generation for one package.

Rules come out in a fixed order:

    go_prefix    repository root only
    cgo_library  cgo sources
    go_library   library sources, or a cgo library to wrap
    go_binary    command packages
    filegroup    .proto sources next to pre-generated .pb.go files
    go_test      internal tests
    go_test      external tests

A vendor/ tree can instead be described by a single build file holding the
cgo_library, go_library and filegroup rules of every vendored package, named
after each package's directory.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

from .config.config_types import RootConfigResolved
from .constants import (
    DEFAULT_CGO_LIB_NAME,
    DEFAULT_LIB_NAME,
    DEFAULT_PROTOS_NAME,
    DEFAULT_TEST_NAME,
    DEFAULT_XTEST_NAME,
    LOADABLE_KINDS,
    PLATFORM_LABEL_PREFIX,
    RULES_GO_BZL,
    TESTDATA_GLOB,
    VISIBILITY_PRIVATE,
    VISIBILITY_PUBLIC,
)
from .logs import getAppLogger
from .packages import Package, PlatformStrings, Target
from .resolve import Resolver
from .syntax import (
    AttrValue,
    BuildFile,
    GlobValue,
    ListItem,
    ListValue,
    Load,
    PlatformValue,
    Rule,
    Statement,
    StringValue,
    make_rule,
)


def check_internal_visibility(rel: str, visibility: str) -> str:
    """Narrow visibility for packages inside an `internal` directory.

    The last `internal` segment decides: a/b/internal/c is visible to
    //a/b:__subpackages__, internal/c to //:__subpackages__.
    """
    segments = rel.split("/") if rel else []
    for i in range(len(segments) - 1, -1, -1):
        if segments[i] == "internal":
            return f"//{'/'.join(segments[:i])}:__subpackages__"
    return visibility


def platform_value(strings: PlatformStrings) -> AttrValue:
    """Convert scanner strings to an attribute value, keeping their order."""
    generic = tuple(ListItem(v) for v in strings.generic)
    platforms = tuple(
        (f"{PLATFORM_LABEL_PREFIX}:{platform}", tuple(ListItem(v) for v in values))
        for platform, values in sorted(strings.platforms.items())
        if values
    )
    if not platforms:
        return ListValue(generic)
    return PlatformValue(generic=generic, platforms=platforms)


def compose_load(rules: list[Rule]) -> Load | None:
    """Load statement for the loadable kinds present, in catalog order.

    Returns None when no rule needs a load.
    """
    kinds = {rule.kind for rule in rules}
    symbols = tuple(kind for kind in LOADABLE_KINDS if kind in kinds)
    if not symbols:
        return None
    return Load(module=RULES_GO_BZL, symbols=symbols)


def rel_path(base: str, path: str) -> str:
    """Slash-separated path of `path` below `base`.

    Returns "" when both are the same directory or path is not below base.
    """
    try:
        rel = Path(os.path.normpath(path)).relative_to(os.path.normpath(base))
    except ValueError:
        return ""
    posix = rel.as_posix()
    return "" if posix == "." else posix


def prefixed_name(bf_rel: str, name: str) -> str:
    return f"{bf_rel}_{name}" if bf_rel else name


def prefixed_path(bf_rel: str, path: str) -> str:
    return f"{bf_rel}/{path}" if bf_rel else path


def derived_test_name(lib_name: str, default_name: str, suffix: str) -> str:
    """Name of a test rule for the library named lib_name.

    The default library gets the default test name; any other library
    gets its own name plus suffix, so tests of distinct libraries never clash.
    """
    if lib_name in ("", DEFAULT_LIB_NAME):
        return default_name
    return f"{lib_name}{suffix}"


class RuleGenerator:
    """Generates the rules of a package's build file.

    Holds only the resolved configuration and a shared resolver, so one
    instance can serve many packages at once.
    """

    def __init__(self, config: RootConfigResolved, resolver: Resolver) -> None:
        self.config = config
        self.resolver = resolver

    def build_file_path(self, pkg: Package) -> str:
        return os.path.join(pkg.dir, self.config["build_file_name"])

    def generate(self, pkg: Package) -> BuildFile:
        """Generate the build file tree for pkg: a load, then the rules."""
        return self._build_file(
            self.build_file_path(pkg), self.generate_rules(pkg)
        )

    def generate_vendor(
        self, build_dir: str, packages: Sequence[Package]
    ) -> BuildFile:
        """Generate one build file in build_dir for all vendored packages below it.

        Rule names, sources and protos are prefixed with each package's path
        relative to build_dir. Only library rules are generated; vendored
        tests and binaries are not built.
        """
        rules: list[Rule] = []
        for pkg in packages:
            rules.extend(self.generate_vendor_rules(build_dir, pkg))
        return self._build_file(
            os.path.join(build_dir, self.config["build_file_name"]), rules
        )

    def generate_rules(self, pkg: Package) -> list[Rule]:
        logger = getAppLogger()
        rules: list[Rule] = []

        if pkg.rel == "":
            rules.append(
                make_rule("go_prefix", [], args=(StringValue(self.config["go_prefix"]),))
            )

        cgo_name, rule = self._cgo_library(pkg)
        if rule is not None:
            rules.append(rule)

        lib_name, rule = self._library(pkg, cgo_name)
        if rule is not None:
            rules.append(rule)

        for rule in (
            self._binary(pkg, lib_name),
            self._filegroup(pkg),
            self._test(pkg, lib_name),
            self._xtest(pkg, lib_name),
        ):
            if rule is not None:
                rules.append(rule)

        logger.trace(
            f"[generate] {pkg.rel or '.'}: {[f'{r.kind}:{r.name}' for r in rules]}"
        )
        return rules

    def generate_vendor_rules(self, build_dir: str, pkg: Package) -> list[Rule]:
        logger = getAppLogger()
        bf_rel = rel_path(build_dir, pkg.dir)
        rules: list[Rule] = []

        cgo_name, rule = self._cgo_library(pkg, bf_rel)
        if rule is not None:
            rules.append(rule)

        _lib_name, rule = self._library(pkg, cgo_name, bf_rel)
        if rule is not None:
            rules.append(rule)

        rule = self._filegroup(pkg, bf_rel)
        if rule is not None:
            rules.append(rule)

        logger.trace(
            f"[generate_vendor] {bf_rel or '.'}:"
            f" {[f'{r.kind}:{r.name}' for r in rules]}"
        )
        return rules

    def _build_file(self, path: str, rules: list[Rule]) -> BuildFile:
        stmts: list[Statement] = []
        load = compose_load(rules)
        if load is not None:
            stmts.append(load)
        stmts.extend(rules)
        return BuildFile(path=path, stmts=tuple(stmts))

    # --- rule kinds ---------------------------------------------------------

    def _cgo_library(
        self, pkg: Package, bf_rel: str = ""
    ) -> tuple[str, Rule | None]:
        if not pkg.cgo_library.has_sources():
            return "", None
        rule = self._rule(
            pkg,
            "cgo_library",
            prefixed_name(bf_rel, DEFAULT_CGO_LIB_NAME),
            pkg.cgo_library,
            visibility=VISIBILITY_PRIVATE,
            bf_rel=bf_rel,
        )
        return rule.name, rule

    def _library(
        self, pkg: Package, cgo_name: str, bf_rel: str = ""
    ) -> tuple[str, Rule | None]:
        if not pkg.library.has_sources() and not cgo_name:
            return "", None
        if pkg.is_command():
            # only backs the binary
            visibility = VISIBILITY_PRIVATE
        else:
            visibility = check_internal_visibility(pkg.rel, VISIBILITY_PUBLIC)
        rule = self._rule(
            pkg,
            "go_library",
            # a vendored library is addressed by its directory
            bf_rel or DEFAULT_LIB_NAME,
            pkg.library,
            visibility=visibility,
            library=cgo_name,
            bf_rel=bf_rel,
        )
        return rule.name, rule

    def _binary(self, pkg: Package, lib_name: str) -> Rule | None:
        if not pkg.is_command():
            return None
        if not pkg.binary.has_sources() and not lib_name:
            return None
        return self._rule(
            pkg,
            "go_binary",
            pkg.base_name,
            pkg.binary,
            visibility=check_internal_visibility(pkg.rel, VISIBILITY_PUBLIC),
            library=lib_name,
        )

    def _filegroup(self, pkg: Package, bf_rel: str = "") -> Rule | None:
        if not pkg.has_pb_go or not pkg.protos:
            return None
        return make_rule(
            "filegroup",
            [
                ("name", StringValue(prefixed_name(bf_rel, DEFAULT_PROTOS_NAME))),
                ("srcs", ListValue.of([prefixed_path(bf_rel, p) for p in pkg.protos])),
                ("visibility", ListValue.of([VISIBILITY_PUBLIC])),
            ],
        )

    def _test(self, pkg: Package, lib_name: str) -> Rule | None:
        if not pkg.test.has_sources():
            return None
        return self._rule(
            pkg,
            "go_test",
            derived_test_name(lib_name, DEFAULT_TEST_NAME, "_test"),
            pkg.test,
            library=lib_name,
            has_testdata=pkg.has_testdata,
        )

    def _xtest(self, pkg: Package, lib_name: str) -> Rule | None:
        if not pkg.xtest.has_sources():
            return None
        # compiles against the library's public label, through deps
        return self._rule(
            pkg,
            "go_test",
            derived_test_name(lib_name, DEFAULT_XTEST_NAME, "_xtest"),
            pkg.xtest,
            has_testdata=pkg.has_testdata,
        )

    # --- attributes ---------------------------------------------------------

    def _rule(  # noqa: PLR0913
        self,
        pkg: Package,
        kind: str,
        name: str,
        target: Target,
        *,
        visibility: str = "",
        library: str = "",
        has_testdata: bool = False,
        bf_rel: str = "",
    ) -> Rule:
        attrs: list[tuple[str, AttrValue]] = [("name", StringValue(name))]
        if target.has_sources():
            sources = target.sources
            if bf_rel:
                sources, _ = sources.map(lambda s: prefixed_path(bf_rel, s))
            attrs.append(("srcs", platform_value(sources)))
        if not target.clinkopts.is_empty():
            attrs.append(("clinkopts", platform_value(target.clinkopts)))
        if not target.copts.is_empty():
            attrs.append(("copts", platform_value(target.copts)))
        if has_testdata:
            attrs.append(("data", GlobValue((TESTDATA_GLOB,))))
        if library:
            attrs.append(("library", StringValue(f":{library}")))
        if visibility:
            attrs.append(("visibility", ListValue.of([visibility])))
        if not target.imports.is_empty():
            deps = self.dependencies(target.imports, pkg.rel)
            if not deps.is_empty():
                attrs.append(("deps", platform_value(deps)))
        return make_rule(kind, attrs)

    def dependencies(self, imports: PlatformStrings, rel: str) -> PlatformStrings:
        """Resolve imports to label strings.

        Unresolvable imports are logged and dropped; the rest of the package
        is still generated.
        """
        logger = getAppLogger()

        def _resolve(import_path: str) -> str:
            return str(self.resolver.resolve(import_path, rel))

        deps, errors = imports.map(_resolve)
        for err in errors:
            logger.warning("%s", err)
        return deps.clean()
