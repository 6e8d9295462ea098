# src/buildsmith/config/config_resolve.py


import posixpath
from pathlib import Path
from typing import Any, cast, get_args

from buildsmith.constants import (
    DEFAULT_BUILD_FILE_NAME,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MODE,
)
from buildsmith.logs import getAppLogger

from .config_loader import find_config, load_config
from .config_types import ResolveMode, RootConfig, RootConfigResolved


_KNOWN_KEYS = set(RootConfig.__annotations__)


def _require_str(raw: dict[str, Any], key: str, default: str) -> str:
    value = raw.get(key, default)
    if not isinstance(value, str):
        xmsg = f"Config key {key!r} must be a string, got {type(value).__name__}"
        raise ValueError(xmsg)  # noqa: TRY004
    return value


def _require_str_list(raw: dict[str, Any], key: str) -> list[str]:
    value = raw.get(key, [])
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        xmsg = f"Config key {key!r} must be a list of strings"
        raise ValueError(xmsg)
    return cast("list[str]", value)


def _require_str_dict(raw: dict[str, Any], key: str) -> dict[str, str]:
    value = raw.get(key, {})
    if not isinstance(value, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in value.items()
    ):
        xmsg = f"Config key {key!r} must map strings to strings"
        raise ValueError(xmsg)
    return dict(cast("dict[str, str]", value))


def normalize_roots(roots: list[str], repo_root: Path) -> list[str]:
    """Make sub-project roots slash-separated and relative to repo_root.

    The repository root itself becomes "". Duplicates are dropped.

    Raises:
        ValueError: If a root lies outside the repository
    """
    base = repo_root.resolve()
    normalized: list[str] = []
    for raw in roots:
        path = Path(raw)
        if path.is_absolute():
            try:
                rel = path.resolve().relative_to(base).as_posix()
            except ValueError:
                xmsg = f"Sub-project root {raw!r} is outside the repository {base}"
                raise ValueError(xmsg) from None
        else:
            rel = posixpath.normpath(raw.replace("\\", "/"))
            if rel == ".." or rel.startswith("../"):
                xmsg = f"Sub-project root {raw!r} is outside the repository {base}"
                raise ValueError(xmsg)
        if rel == ".":
            rel = ""
        if rel not in normalized:
            normalized.append(rel)
    return normalized


def resolve_config(
    raw_config: RootConfig | dict[str, Any],
    config_dir: Path,
    overrides: dict[str, Any] | None = None,
) -> RootConfigResolved:
    """Validate raw configuration and fill in defaults.

    Args:
        raw_config: Settings as loaded from a config file
        config_dir: Directory relative paths are resolved against
        overrides: Values that take precedence over the file (e.g. from code)

    Raises:
        ValueError: On unknown resolve modes or badly typed values
    """
    logger = getAppLogger()
    raw: dict[str, Any] = {**raw_config, **(overrides or {})}

    unknown = sorted(set(raw) - _KNOWN_KEYS)
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))

    mode = _require_str(raw, "mode", DEFAULT_MODE)
    valid_modes = get_args(ResolveMode)
    if mode not in valid_modes:
        xmsg = (
            f"Unknown resolve mode {mode!r}; expected one of: {', '.join(valid_modes)}"
        )
        raise ValueError(xmsg)

    repo_root = Path(_require_str(raw, "repo_root", "."))
    if not repo_root.is_absolute():
        repo_root = config_dir / repo_root
    repo_root = repo_root.resolve()

    go_prefix = _require_str(raw, "go_prefix", "").strip("/")
    if not go_prefix:
        logger.warning("No go_prefix configured; only relative imports are local")

    roots = normalize_roots(_require_str_list(raw, "roots"), repo_root)
    if mode == "workspace" and not roots:
        roots = [""]

    build_file_name = _require_str(raw, "build_file_name", DEFAULT_BUILD_FILE_NAME)
    if not build_file_name or "/" in build_file_name:
        xmsg = f"Invalid build_file_name: {build_file_name!r}"
        raise ValueError(xmsg)

    resolved = RootConfigResolved(
        go_prefix=go_prefix,
        mode=cast("ResolveMode", mode),
        roots=roots,
        repo_root=repo_root,
        build_file_name=build_file_name,
        external_repos=_require_str_dict(raw, "external_repos"),
        log_level=_require_str(raw, "log_level", DEFAULT_LOG_LEVEL),
    )
    logger.trace(f"[resolve_config] mode={mode}, prefix={go_prefix!r}, roots={roots}")
    return resolved


def load_and_resolve_config(
    cwd: Path,
    explicit: Path | str | None = None,
    overrides: dict[str, Any] | None = None,
) -> RootConfigResolved:
    """Find, load and resolve the project configuration.

    Without a config file, defaults (plus overrides) apply with cwd as the
    repository root.
    """
    config_path = find_config(cwd, explicit)
    if config_path is None:
        return resolve_config(RootConfig(), cwd, overrides)
    return resolve_config(load_config(config_path), config_path.parent, overrides)
