# src/buildsmith/pipeline.py
"""Generate, merge and write build files for many packages.

Each package is an independent unit of work: its trees are private to the
worker handling it, and the only shared objects (resolved config, resolver)
are immutable after startup.
"""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

from .config import RootConfigResolved, load_and_resolve_config
from .generate import RuleGenerator
from .logs import getAppLogger
from .merge import merge_with_existing
from .packages import Package
from .resolve import make_resolver
from .syntax import BuildFile, format_build_file


def _current_text(path: Path) -> str | None:
    """Text currently at path, or None if it is missing or unreadable."""
    if not path.is_file():
        return None
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        # merge already fell back to pure generation for this file
        return None


def write_build_file(build_file: BuildFile) -> bool:
    """Write a build file if its text changed. Returns True when written.

    A path that cannot be written (e.g. a directory named like the build
    file) is logged and skipped so the other packages still get updated.
    """
    logger = getAppLogger()
    path = Path(build_file.path)
    text = format_build_file(build_file)
    if _current_text(path) == text:
        logger.trace(f"[write] {path} unchanged")
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        logger.error("Cannot write %s: %s", path, e)  # noqa: TRY400
        return False
    logger.debug("Wrote %s", path)
    return True


def update_package(
    pkg: Package,
    generator: RuleGenerator,
    *,
    dry_run: bool = False,
) -> BuildFile:
    """Generate pkg's rules, merge them with the file on disk and write it."""
    generated = generator.generate(pkg)
    merged = merge_with_existing(generated)
    if not dry_run:
        write_build_file(merged)
    return merged


def update_packages(
    packages: Sequence[Package],
    config: RootConfigResolved,
    *,
    max_workers: int | None = None,
    dry_run: bool = False,
) -> list[BuildFile]:
    """Update the build files of all packages concurrently.

    Results come back in the order of `packages`.
    """
    logger = getAppLogger()
    generator = RuleGenerator(config, make_resolver(config))

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        results = list(
            pool.map(
                lambda pkg: update_package(pkg, generator, dry_run=dry_run),
                packages,
            )
        )

    logger.info(
        "Updated %d build file%s%s",
        len(results),
        "" if len(results) == 1 else "s",
        " (dry run)" if dry_run else "",
    )
    return results


def update_vendor(
    build_dir: str,
    packages: Sequence[Package],
    config: RootConfigResolved,
    *,
    dry_run: bool = False,
) -> BuildFile:
    """Describe every vendored package below build_dir in one build file."""
    logger = getAppLogger()
    generator = RuleGenerator(config, make_resolver(config))
    merged = merge_with_existing(generator.generate_vendor(build_dir, packages))
    if not dry_run:
        write_build_file(merged)
    logger.info(
        "Updated vendor build file for %d package%s%s",
        len(packages),
        "" if len(packages) == 1 else "s",
        " (dry run)" if dry_run else "",
    )
    return merged


def run_update(
    packages: Sequence[Package],
    cwd: Path,
    *,
    config_path: Path | str | None = None,
    overrides: dict[str, Any] | None = None,
    max_workers: int | None = None,
    dry_run: bool = False,
) -> list[BuildFile]:
    """Load the project configuration, then update every package.

    Raises:
        ValueError: On invalid configuration (e.g. an unknown resolve mode)
    """
    config = load_and_resolve_config(cwd, config_path, overrides)
    getAppLogger().apply_config_level(config["log_level"])
    return update_packages(
        packages, config, max_workers=max_workers, dry_run=dry_run
    )
