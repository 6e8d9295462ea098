# src/buildsmith/config/config_loader.py


import json
import re
from pathlib import Path
from typing import Any, cast

from buildsmith.logs import getAppLogger
from buildsmith.meta import PROGRAM_CONFIG

from .config_types import RootConfig


# Matches a JSON string, or a comment outside of one.
_JSONC_TOKEN_RE = re.compile(
    r'(?P<string>"(?:\\.|[^"\\])*")|(?P<comment>//[^\n]*|/\*.*?\*/|#[^\n]*)',
    re.DOTALL,
)
_TRAILING_COMMA_RE = re.compile(r",(?=\s*[}\]])")


def _strip_jsonc_comments(text: str) -> str:
    """Remove //, # and /* */ comments while leaving string contents alone."""

    def _replace(match: re.Match[str]) -> str:
        if match.group("string") is not None:
            return match.group("string")
        # keep line structure so JSON error positions stay meaningful
        return "\n" * match.group("comment").count("\n")

    return _JSONC_TOKEN_RE.sub(_replace, text)


def load_jsonc(path: Path) -> dict[str, Any] | list[Any] | None:
    """Load JSONC (JSON with comments and trailing commas).

    Returns None for files that are empty or only hold comments.
    """
    logger = getAppLogger()
    logger.trace(f"[load_jsonc] Loading from {path}")

    if not path.exists():
        xmsg = f"JSONC file not found: {path}"
        raise FileNotFoundError(xmsg)
    if not path.is_file():
        xmsg = f"Expected a file: {path}"
        raise ValueError(xmsg)

    text = _strip_jsonc_comments(path.read_text(encoding="utf-8"))
    text = _TRAILING_COMMA_RE.sub("", text).strip()
    if not text:
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        xmsg = (
            f"Invalid JSONC syntax in {path}:"
            f" {e.msg} (line {e.lineno}, column {e.colno})"
        )
        raise ValueError(xmsg) from e

    if not isinstance(data, (dict, list)):
        xmsg = f"Invalid JSONC root type: {type(data).__name__}"
        raise ValueError(xmsg)  # noqa: TRY004
    return cast("dict[str, Any] | list[Any]", data)


def load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file with `tomllib` (3.11+) or `tomli` (3.10)."""
    if not path.exists():
        xmsg = f"TOML file not found: {path}"
        raise FileNotFoundError(xmsg)

    try:
        import tomllib  # type: ignore[import-not-found,unused-ignore] # noqa: PLC0415
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef,unused-ignore] # noqa: PLC0415

    try:
        with path.open("rb") as f:
            return tomllib.load(f)  # type: ignore[no-any-return,unused-ignore]
    except tomllib.TOMLDecodeError as e:
        xmsg = f"Invalid TOML syntax in {path}: {e}"
        raise ValueError(xmsg) from e


def _has_tool_table(pyproject: Path) -> bool:
    try:
        data = load_toml(pyproject)
    except ValueError:
        return False
    return PROGRAM_CONFIG in data.get("tool", {})


def find_config(cwd: Path, explicit: Path | str | None = None) -> Path | None:
    """Locate a configuration file.

    Search order:
      1. Explicit path, if given
      2. From cwd upward: .{PROGRAM_CONFIG}.jsonc, .{PROGRAM_CONFIG}.json,
         then a pyproject.toml holding a [tool.{PROGRAM_CONFIG}] table

    Returns the first match (closest to cwd), or None if nothing was found.
    """
    logger = getAppLogger()

    if explicit is not None:
        config = Path(explicit).expanduser().resolve()
        logger.trace(f"[find_config] Checking explicit path: {config}")
        if not config.exists():
            xmsg = f"Specified config file not found: {config}"
            raise FileNotFoundError(xmsg)
        if config.is_dir():
            xmsg = f"Specified config path is a directory, not a file: {config}"
            raise ValueError(xmsg)
        return config

    candidate_names = [f".{PROGRAM_CONFIG}.jsonc", f".{PROGRAM_CONFIG}.json"]
    current = cwd.resolve()
    while True:
        for name in candidate_names:
            candidate = current / name
            if candidate.is_file():
                logger.trace(f"[find_config] Found {candidate}")
                return candidate
        pyproject = current / "pyproject.toml"
        if pyproject.is_file() and _has_tool_table(pyproject):
            logger.trace(f"[find_config] Found [tool.{PROGRAM_CONFIG}] in {pyproject}")
            return pyproject
        parent = current.parent
        if parent == current:
            break
        current = parent

    logger.debug("No config file found in %s or parents", cwd)
    return None


def load_config(config_path: Path) -> RootConfig:
    """Load raw configuration from a JSONC/JSON file or pyproject.toml.

    Returns an empty config for intentionally empty files.

    Raises:
        ValueError: If the file holds something other than a table of settings
    """
    logger = getAppLogger()

    if config_path.name == "pyproject.toml":
        data: Any = load_toml(config_path).get("tool", {}).get(PROGRAM_CONFIG, {})
    else:
        data = load_jsonc(config_path)

    if data is None:
        logger.debug("Config %s is empty, using defaults", config_path.name)
        return RootConfig()
    if not isinstance(data, dict):
        xmsg = (
            f"Invalid config in {config_path.name}: expected an object,"
            f" got {type(data).__name__}"
        )
        raise ValueError(xmsg)  # noqa: TRY004

    logger.trace(f"[load_config] Loaded keys: {sorted(data)}")
    return cast("RootConfig", data)
