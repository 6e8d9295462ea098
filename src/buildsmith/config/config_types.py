# src/buildsmith/config/config_types.py


from pathlib import Path
from typing import Literal, TypedDict


# How imports outside the repository's Go prefix are resolved:
# - "external":  one external repository per remote import root
# - "vendored":  packages under the repository's vendor/ directory
# - "workspace": vendor/ directory of the enclosing sub-project root
ResolveMode = Literal["external", "vendored", "workspace"]


class RootConfig(TypedDict, total=False):
    go_prefix: str  # import path of the repository root
    mode: ResolveMode
    roots: list[str]  # sub-project directories (workspace mode)
    repo_root: str  # defaults to the config file's directory
    build_file_name: str
    external_repos: dict[str, str]  # import prefix -> repository name
    log_level: str


# Resolved types - all fields are guaranteed to be present with final values
class RootConfigResolved(TypedDict):
    go_prefix: str
    mode: ResolveMode
    roots: list[str]  # relative to repo_root, "" for the root itself
    repo_root: Path
    build_file_name: str
    external_repos: dict[str, str]
    log_level: str
