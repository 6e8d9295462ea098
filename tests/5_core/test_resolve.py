# tests/5_core/test_resolve.py
"""Tests for buildsmith.resolve."""

import pytest

import buildsmith.resolve as mod_resolve
from tests.utils import GO_PREFIX, make_resolved


def _resolve(import_path: str, rel_dir: str = "some/dir", **config: object) -> str:
    resolver = mod_resolve.make_resolver(make_resolved(**config))  # type: ignore[arg-type]
    return str(resolver.resolve(import_path, rel_dir))


# --- structured -----------------------------------------------------------------


@pytest.mark.parametrize(
    ("import_path", "rel_dir", "expected"),
    [
        (GO_PREFIX, "a", "//:go_default_library"),
        (f"{GO_PREFIX}/a/b", "c", "//a/b:go_default_library"),
        ("./sub", "a", "//a/sub:go_default_library"),
        ("../sibling", "a/b", "//a/sibling:go_default_library"),
        ("..", "a", "//:go_default_library"),
    ],
)
def test_local_imports_resolve_structurally(
    import_path: str, rel_dir: str, expected: str
) -> None:
    assert _resolve(import_path, rel_dir) == expected


def test_prefix_match_respects_segment_boundary() -> None:
    # example.com/repository is not inside example.com/repo
    label = _resolve("example.com/repository/x", mode="vendored")
    assert label == "//vendor/example.com/repository/x:go_default_library"


def test_relative_import_escaping_prefix_raises() -> None:
    resolver = mod_resolve.StructuredResolver(go_prefix=GO_PREFIX)
    with pytest.raises(mod_resolve.ResolveError, match="go_prefix") as exc_info:
        resolver.resolve("../../../elsewhere", "a")
    assert exc_info.value.import_path == "../../../elsewhere"
    assert exc_info.value.rel_dir == "a"


def test_empty_prefix_resolves_relative_only() -> None:
    resolver = mod_resolve.make_resolver(make_resolved(go_prefix="", mode="vendored"))
    assert resolver.is_local("./x")
    assert not resolver.is_local("example.com/x")
    assert str(resolver.resolve("./x", "a")) == "//a/x:go_default_library"


# --- external -------------------------------------------------------------------


@pytest.mark.parametrize(
    ("import_path", "expected"),
    [
        (
            "github.com/foo/bar",
            "@com_github_foo_bar//:go_default_library",
        ),
        (
            "github.com/foo/bar/baz/qux",
            "@com_github_foo_bar//baz/qux:go_default_library",
        ),
        (
            "golang.org/x/net/context",
            "@org_golang_x_net//context:go_default_library",
        ),
        (
            "google.golang.org/grpc/codes",
            "@org_golang_google_grpc//codes:go_default_library",
        ),
        (
            "gopkg.in/yaml.v2",
            "@in_gopkg_yaml_v2//:go_default_library",
        ),
        (
            "gopkg.in/user/pkg.v1/sub",
            "@in_gopkg_user_pkg_v1//sub:go_default_library",
        ),
        (
            "example.org/some-lib",
            "@org_example_some_lib//:go_default_library",
        ),
    ],
)
def test_external_mode_uses_host_conventions(import_path: str, expected: str) -> None:
    assert _resolve(import_path) == expected


def test_external_registry_longest_prefix_wins() -> None:
    repos = {
        "example.org/mono": "mono",
        "example.org/mono/tools/": "mono_tools",
    }
    assert (
        _resolve("example.org/mono/tools/lint", external_repos=repos)
        == "@mono_tools//lint:go_default_library"
    )
    assert (
        _resolve("example.org/mono/lib", external_repos=repos)
        == "@mono//lib:go_default_library"
    )
    # not a boundary match
    assert (
        _resolve("example.org/monolith", external_repos=repos)
        == "@org_example_monolith//:go_default_library"
    )


def test_external_registry_takes_precedence_over_hosts() -> None:
    label = _resolve(
        "github.com/foo/bar/x", external_repos={"github.com/foo": "foo_all"}
    )
    assert label == "@foo_all//bar/x:go_default_library"


@pytest.mark.parametrize("import_path", ["fmt", "net/http", "github.com/foo"])
def test_external_mode_rejects_unresolvable(import_path: str) -> None:
    with pytest.raises(mod_resolve.ResolveError, match="could not resolve"):
        _resolve(import_path)


def test_repo_name_for_import_root() -> None:
    assert mod_resolve.repo_name_for_import_root("golang.org/x/net") == (
        "org_golang_x_net"
    )
    assert mod_resolve.repo_name_for_import_root("GitHub.com/A-b/c.d") == (
        "com_github_a_b_c_d"
    )


# --- vendored -------------------------------------------------------------------


def test_vendored_mode() -> None:
    assert (
        _resolve("github.com/foo/bar", mode="vendored")
        == "//vendor/github.com/foo/bar:go_default_library"
    )


# --- workspace ------------------------------------------------------------------


def test_workspace_longest_root_wins() -> None:
    roots = ["", "sub1", "sub1/deeper"]
    assert (
        _resolve("github.com/x/y", "sub1/deeper/pkg", mode="workspace", roots=roots)
        == "//sub1/deeper/vendor/github.com/x/y:go_default_library"
    )
    assert (
        _resolve("github.com/x/y", "sub1/pkg", mode="workspace", roots=roots)
        == "//sub1/vendor/github.com/x/y:go_default_library"
    )
    assert (
        _resolve("github.com/x/y", "other", mode="workspace", roots=roots)
        == "//vendor/github.com/x/y:go_default_library"
    )


def test_workspace_root_matches_on_directory_boundary() -> None:
    roots = ["sub1", "sub10"]
    assert (
        _resolve("github.com/x/y", "sub10/pkg", mode="workspace", roots=roots)
        == "//sub10/vendor/github.com/x/y:go_default_library"
    )
    assert (
        _resolve("github.com/x/y", "sub1", mode="workspace", roots=roots)
        == "//sub1/vendor/github.com/x/y:go_default_library"
    )


def test_workspace_outside_every_root_raises() -> None:
    with pytest.raises(mod_resolve.ResolveError, match="sub-project root"):
        _resolve("github.com/x/y", "elsewhere", mode="workspace", roots=["sub1"])


def test_sort_roots_deepest_first() -> None:
    assert mod_resolve.sort_roots(["", "b", "a/c", "a", "b"]) == ("a/c", "a", "b", "")


# --- dispatch -------------------------------------------------------------------


def test_unknown_mode_raises_value_error() -> None:
    config = make_resolved()
    config["mode"] = "bogus"  # type: ignore[typeddict-item]
    with pytest.raises(ValueError, match="Unknown resolve mode"):
        mod_resolve.make_resolver(config)


def test_local_imports_win_in_every_mode() -> None:
    for mode in ("external", "vendored", "workspace"):
        assert (
            _resolve(f"{GO_PREFIX}/lib", mode=mode, roots=[""])
            == "//lib:go_default_library"
        )
