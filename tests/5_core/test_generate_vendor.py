# tests/5_core/test_generate_vendor.py
"""Tests for the single vendor build file produced by RuleGenerator."""

import pytest

import buildsmith.generate as mod_generate
import buildsmith.resolve as mod_resolve
import buildsmith.syntax as mod_syntax
from tests.utils import make_package, make_resolved, make_target


VENDOR_DIR = "/repo/vendor"


def _generator() -> mod_generate.RuleGenerator:
    resolved = make_resolved(mode="vendored")
    return mod_generate.RuleGenerator(resolved, mod_resolve.make_resolver(resolved))


def _summary(build_file: mod_syntax.BuildFile) -> list[tuple[str, str]]:
    return [(r.kind, r.name) for r in build_file.rules]


@pytest.mark.parametrize(
    ("base", "path", "expected"),
    [
        ("/repo/vendor", "/repo/vendor/github.com/a/b", "github.com/a/b"),
        ("/repo/vendor", "/repo/vendor/", ""),
        ("/repo/vendor/", "/repo/vendor/x", "x"),
        ("/repo/vendor", "/repo/other", ""),
    ],
)
def test_rel_path(base: str, path: str, expected: str) -> None:
    assert mod_generate.rel_path(base, path) == expected


def test_vendor_rules_are_prefixed_by_package_path() -> None:
    # --- setup ---
    pkg = make_package(
        "vendor/github.com/a/b",
        name="b",
        library=make_target(["b.go"]),
        cgo_library=make_target(["cgo.go", "helper.c"]),
        test=make_target(["b_test.go"]),
        xtest=make_target(["x_test.go"]),
        has_pb_go=True,
        protos=["api.proto"],
    )

    # --- execute ---
    build_file = _generator().generate_vendor(VENDOR_DIR, [pkg])

    # --- verify ---
    assert build_file.path == "/repo/vendor/BUILD"
    load = build_file.stmts[0]
    assert isinstance(load, mod_syntax.Load)
    assert load.symbols == ("cgo_library", "go_library")
    # vendored tests are never built
    assert _summary(build_file) == [
        ("cgo_library", "github.com/a/b_cgo_default_library"),
        ("go_library", "github.com/a/b"),
        ("filegroup", "github.com/a/b_go_default_library_protos"),
    ]
    cgo, lib, protos = build_file.rules
    assert cgo.get("srcs") == mod_syntax.ListValue.of(
        ["github.com/a/b/cgo.go", "github.com/a/b/helper.c"]
    )
    assert lib.get("srcs") == mod_syntax.ListValue.of(["github.com/a/b/b.go"])
    assert lib.get("library") == mod_syntax.StringValue(
        ":github.com/a/b_cgo_default_library"
    )
    assert protos.get("srcs") == mod_syntax.ListValue.of(["github.com/a/b/api.proto"])


def test_vendor_command_packages_get_no_binary() -> None:
    pkg = make_package(
        "vendor/example.org/tool",
        name="main",
        library=make_target(["main.go"]),
    )
    build_file = _generator().generate_vendor(VENDOR_DIR, [pkg])
    assert _summary(build_file) == [("go_library", "example.org/tool")]


def test_vendor_internal_package_visibility() -> None:
    pkg = make_package(
        "vendor/example.org/x/internal/y", name="y", library=make_target(["y.go"])
    )
    build_file = _generator().generate_vendor(VENDOR_DIR, [pkg])
    (lib,) = build_file.rules
    assert lib.get("visibility") == mod_syntax.ListValue.of(
        ["//vendor/example.org/x:__subpackages__"]
    )


def test_vendor_rule_names_are_unique_across_packages() -> None:
    # --- setup ---
    packages = [
        make_package(
            f"vendor/{rel}",
            name=rel.rsplit("/", 1)[-1],
            library=make_target([f"{rel.rsplit('/', 1)[-1]}.go"]),
            cgo_library=make_target(["c.go"]),
            has_pb_go=True,
            protos=["p.proto"],
        )
        for rel in ("github.com/a/b", "github.com/a/b/c", "github.com/a/bc")
    ]

    # --- execute ---
    build_file = _generator().generate_vendor(VENDOR_DIR, packages)

    # --- verify ---
    rules = build_file.rules
    assert len(rules) == 9
    assert len({r.key for r in rules}) == len(rules)
    assert len({r.name for r in rules}) == len(rules)


def test_vendor_without_packages_has_no_load() -> None:
    build_file = _generator().generate_vendor(VENDOR_DIR, [])
    assert build_file.stmts == ()
