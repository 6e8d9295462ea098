# src/buildsmith/__init__.py

"""Buildsmith: generate and maintain Bazel build files for Go packages.

Full developer API
==================
This package re-exports the non-private symbols of its submodules for
programmatic use and custom integrations. Anything prefixed with "_" is
internal and may change.

Highlights:
    - RuleGenerator       → rules for one package
    - compose_load()      → the load statement a rule set needs
    - make_resolver()     → import path → label resolution
    - merge_files()       → reconcile generated and hand-edited trees
    - update_packages()   → the whole pipeline over many packages
"""

from .config import (
    ResolveMode,
    RootConfig,
    RootConfigResolved,
    find_config,
    load_and_resolve_config,
    load_config,
    resolve_config,
)
from .generate import RuleGenerator, check_internal_visibility, compose_load
from .labels import Label
from .logs import getAppLogger
from .merge import merge_files, merge_rules, merge_with_existing, read_existing
from .meta import PROGRAM_CONFIG, PROGRAM_DISPLAY, PROGRAM_ENV, PROGRAM_PACKAGE
from .packages import Package, PlatformStrings, Target
from .pipeline import (
    run_update,
    update_package,
    update_packages,
    update_vendor,
    write_build_file,
)
from .resolve import (
    ExternalResolver,
    LabelResolver,
    ResolveError,
    StructuredResolver,
    VendorResolver,
    WorkspaceResolver,
    make_resolver,
)
from .syntax import (
    BuildFile,
    BuildFileSyntaxError,
    Rule,
    format_build_file,
    parse_build_file,
)


__all__ = [  # noqa: RUF022
    # config
    "find_config",
    "load_and_resolve_config",
    "load_config",
    "resolve_config",
    "ResolveMode",
    "RootConfig",
    "RootConfigResolved",
    # generate
    "RuleGenerator",
    "check_internal_visibility",
    "compose_load",
    # labels
    "Label",
    # logs
    "getAppLogger",
    # merge
    "merge_files",
    "merge_rules",
    "merge_with_existing",
    "read_existing",
    # meta
    "PROGRAM_CONFIG",
    "PROGRAM_DISPLAY",
    "PROGRAM_ENV",
    "PROGRAM_PACKAGE",
    # packages
    "Package",
    "PlatformStrings",
    "Target",
    # pipeline
    "run_update",
    "update_package",
    "update_packages",
    "update_vendor",
    "write_build_file",
    # resolve
    "ExternalResolver",
    "LabelResolver",
    "ResolveError",
    "StructuredResolver",
    "VendorResolver",
    "WorkspaceResolver",
    "make_resolver",
    # syntax
    "BuildFile",
    "BuildFileSyntaxError",
    "Rule",
    "format_build_file",
    "parse_build_file",
]
