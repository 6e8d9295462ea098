# src/buildsmith/constants.py
"""Central constants used across the project."""

# --- env keys ---
DEFAULT_ENV_LOG_LEVEL: str = "LOG_LEVEL"

# --- program defaults ---
DEFAULT_LOG_LEVEL: str = "info"

# --- config defaults ---
DEFAULT_BUILD_FILE_NAME: str = "BUILD"
DEFAULT_MODE: str = "external"

# --- rule naming conventions ---
# Must stay consistent with DEFAULT_LIB in rules_go's go/private/common.bzl.
DEFAULT_LIB_NAME: str = "go_default_library"
DEFAULT_TEST_NAME: str = "go_default_test"
DEFAULT_XTEST_NAME: str = "go_default_xtest"
DEFAULT_PROTOS_NAME: str = "go_default_library_protos"
DEFAULT_CGO_LIB_NAME: str = "cgo_default_library"

# --- labels and visibility ---
RULES_GO_BZL: str = "@io_bazel_rules_go//go:def.bzl"
PLATFORM_LABEL_PREFIX: str = "@io_bazel_rules_go//go/platform"
CONDITIONS_DEFAULT: str = "//conditions:default"
VISIBILITY_PUBLIC: str = "//visibility:public"
VISIBILITY_PRIVATE: str = "//visibility:private"
TESTDATA_GLOB: str = "testdata/**"

# --- rule kind catalogs ---
# Kinds that need an explicit load from RULES_GO_BZL, in load order. Keep sorted.
LOADABLE_KINDS: tuple[str, ...] = (
    "cgo_library",
    "go_binary",
    "go_library",
    "go_prefix",
    "go_test",
)

# Kinds the generator owns. Anything else in a build file is left untouched.
MANAGED_KINDS: frozenset[str] = frozenset((*LOADABLE_KINDS, "filegroup"))

# Kinds whose presence means some other tool owns the directory.
SUPERSEDING_KINDS: frozenset[str] = frozenset({"go_proto_library"})

# --- merge markers ---
KEEP_MARKER: str = "keep"
IGNORE_DIRECTIVE: str = "buildsmith:ignore"

# Attributes recomputed on every run. When the generated rule no longer
# carries one, the existing value is dropped (except preserved elements).
REGENERATED_ATTRS: frozenset[str] = frozenset(
    {"clinkopts", "copts", "deps", "library", "srcs"},
)

# --- attribute ordering ---
# Attributes not listed here sort alphabetically at priority 0.
ATTR_PRIORITY: dict[str, int] = {
    "name": -99,
    "gwt_name": -98,
    "package_name": -97,
    "size": -95,
    "timeout": -94,
    "testonly": -93,
    "src": -92,
    "srcdir": -91,
    "srcs": -90,
    "out": -89,
    "outs": -88,
    "hdrs": -87,
    "has_services": -86,
    "include": -85,
    "of": -84,
    "baseline": -83,
    # all others sort here, at 0
    "destdir": 1,
    "exports": 2,
    "runtime_deps": 3,
    "deps": 4,
    "implementation": 5,
    "implements": 6,
    "alwayslink": 7,
}

# --- external repositories ---
# Hosts whose repository root is a fixed number of path segments.
KNOWN_HOST_SEGMENTS: dict[str, int] = {
    "github.com": 3,
    "gitlab.com": 3,
    "bitbucket.org": 3,
    "golang.org": 3,
    "google.golang.org": 2,
    "gopkg.in": 2,
}
