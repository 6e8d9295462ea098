# src/buildsmith/merge.py
"""Reconcile freshly generated rules with a build file already on disk.

The generated tree owns machine-managed content; the existing tree owns
human edits. Rules pair up by (kind, name):

- matched rules merge attribute by attribute, the generated value winning
  except for list elements marked `# keep`, which are appended after the
  generated ones
- existing-only rules stay where they are
- generated-only rules are appended
- kinds the generator does not manage are never touched

The rules load statement is recomputed from the merged rule set, so
merging the same generated tree twice changes nothing the second time.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from .constants import (
    IGNORE_DIRECTIVE,
    MANAGED_KINDS,
    REGENERATED_ATTRS,
    RULES_GO_BZL,
    SUPERSEDING_KINDS,
)
from .generate import compose_load
from .logs import getAppLogger
from .syntax import (
    Attr,
    AttrValue,
    BuildFile,
    BuildFileSyntaxError,
    GlobValue,
    ListItem,
    ListValue,
    Load,
    PlatformValue,
    RawValue,
    Rule,
    Statement,
    StringValue,
    parse_build_file,
    sort_attrs,
)


# --- values -------------------------------------------------------------------


def _as_platform(value: AttrValue | None) -> PlatformValue | None:
    if isinstance(value, ListValue):
        return PlatformValue(generic=value.items)
    if isinstance(value, PlatformValue):
        return value
    return None


def _from_platform(value: PlatformValue) -> AttrValue:
    if not value.platforms:
        return ListValue(value.generic)
    return value


def _with_preserved(
    new_items: tuple[ListItem, ...], old_items: tuple[ListItem, ...]
) -> tuple[ListItem, ...]:
    kept = tuple(item for item in old_items if item.keep)
    kept_values = {item.value for item in kept}
    # surviving elements keep their comments
    old_by_value = {item.value: item for item in old_items if not item.keep}
    fresh = tuple(
        old_by_value.get(item.value, item)
        for item in new_items
        if item.value not in kept_values
    )
    return fresh + kept


def merge_values(old: AttrValue | None, new: AttrValue) -> AttrValue:
    """Merge one attribute value.

    Scalars, globs and raw expressions take the generated value. Lists keep
    the existing elements marked `# keep`, per platform for select() values.
    """
    if isinstance(new, (StringValue, GlobValue, RawValue)):
        return new

    new_pv = _as_platform(new)
    old_pv = _as_platform(old)
    if new_pv is None or old_pv is None:
        return new

    generic = _with_preserved(new_pv.generic, old_pv.generic)
    platforms = dict(new_pv.platforms)
    for key, items in old_pv.platforms:
        platforms[key] = _with_preserved(platforms.get(key, ()), items)

    return _from_platform(
        PlatformValue(
            generic=generic,
            platforms=tuple((k, v) for k, v in platforms.items() if v),
        )
    )


def preserved_value(old: AttrValue) -> AttrValue | None:
    """Only the `# keep` elements of a list value, or None if there are none."""
    pv = _as_platform(old)
    if pv is None:
        return None
    generic = tuple(item for item in pv.generic if item.keep)
    platforms: list[tuple[str, tuple[ListItem, ...]]] = []
    for key, items in pv.platforms:
        kept = tuple(item for item in items if item.keep)
        if kept:
            platforms.append((key, kept))
    if not generic and not platforms:
        return None
    return _from_platform(PlatformValue(generic=generic, platforms=tuple(platforms)))


# --- rules --------------------------------------------------------------------


def merge_rules(old: Rule, new: Rule) -> Rule:
    """Merge a generated rule into its existing counterpart.

    Attributes the generator no longer emits survive unless they are
    regenerated ones (srcs, deps, ...); of those only `# keep` elements stay.
    """
    attrs: list[Attr] = []
    for new_attr in new.attrs:
        old_attr = old.attr(new_attr.key)
        if old_attr is None:
            attrs.append(new_attr)
        elif old_attr.keep:
            attrs.append(old_attr)
        else:
            attrs.append(
                replace(old_attr, value=merge_values(old_attr.value, new_attr.value))
            )

    for old_attr in old.attrs:
        if new.attr(old_attr.key) is not None:
            continue
        if old_attr.keep or old_attr.key not in REGENERATED_ATTRS:
            attrs.append(old_attr)
            continue
        kept = preserved_value(old_attr.value)
        if kept is not None:
            attrs.append(replace(old_attr, value=kept))

    return Rule(
        kind=new.kind,
        attrs=sort_attrs(attrs),
        args=new.args,
        comments=old.comments,
        after_comments=old.after_comments,
        closing_comment=old.closing_comment,
    )


def _should_ignore(existing: BuildFile) -> bool:
    logger = getAppLogger()
    for comment in existing.all_comments():
        if comment.lstrip("#").strip() == IGNORE_DIRECTIVE:
            logger.debug("%s: ignore directive found, leaving file alone", existing.path)
            return True
    for rule in existing.rules:
        if rule.kind in SUPERSEDING_KINDS:
            logger.debug(
                "%s: %s present, leaving file alone", existing.path, rule.kind
            )
            return True
    return False


def merge_files(generated: BuildFile, existing: BuildFile | None) -> BuildFile:
    """Merge a generated build file tree into the existing one.

    Args:
        generated: Fresh output of the generator
        existing: Previously persisted tree for the same location, or None

    Returns:
        The reconciled tree
    """
    logger = getAppLogger()
    if existing is None:
        return generated
    if _should_ignore(existing):
        return existing

    new_rules: dict[tuple[str, str], Rule] = {}
    for rule in generated.rules:
        if rule.key in new_rules:
            logger.warning(
                "%s: duplicate generated rule %s %r, keeping the first",
                generated.path,
                rule.kind,
                rule.name,
            )
            continue
        new_rules[rule.key] = rule

    matched: set[tuple[str, str]] = set()
    seen: set[tuple[str, str]] = set()
    stmts: list[Statement] = []
    load_index: int | None = None
    load_comments: tuple[str, ...] = ()

    for stmt in existing.stmts:
        if isinstance(stmt, Load) and stmt.module == RULES_GO_BZL:
            # recomputed below
            if load_index is None:
                load_index = len(stmts)
                load_comments = stmt.comments
            continue

        if (
            isinstance(stmt, Rule)
            and stmt.kind in MANAGED_KINDS
            and stmt.key not in seen
        ):
            # later duplicates in the existing file stay as they are
            seen.add(stmt.key)
            new = new_rules.get(stmt.key)
            if new is not None:
                matched.add(stmt.key)
                if stmt.keep:
                    logger.trace(f"[merge] keeping {stmt.kind}:{stmt.name} as is")
                    stmts.append(stmt)
                else:
                    logger.trace(f"[merge] merging {stmt.kind}:{stmt.name}")
                    stmts.append(merge_rules(stmt, new))
                continue

        stmts.append(stmt)

    for key, rule in new_rules.items():
        if key not in matched:
            logger.trace(f"[merge] adding {rule.kind}:{rule.name}")
            stmts.append(rule)

    load = compose_load([s for s in stmts if isinstance(s, Rule)])
    if load is not None:
        stmts.insert(
            load_index if load_index is not None else 0,
            replace(load, comments=load_comments),
        )
    elif load_comments and stmts:
        # keep the header comments of a load that went away
        first = stmts[0]
        stmts[0] = replace(first, comments=load_comments + first.comments)

    return BuildFile(
        path=generated.path,
        stmts=tuple(stmts),
        trailing_comments=existing.trailing_comments,
    )


def read_existing(path: str) -> BuildFile | None:
    """Parse the build file at path.

    A missing file is the normal first-run case. A file that cannot be
    read or parsed is logged and treated as missing.
    """
    logger = getAppLogger()
    file_path = Path(path)
    if not file_path.exists():
        logger.trace(f"[merge] no existing file at {path}")
        return None

    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s, regenerating from scratch: %s", path, e)
        return None

    try:
        return parse_build_file(path, text)
    except BuildFileSyntaxError as e:
        logger.warning("Ignoring unparsable %s, regenerating from scratch: %s", path, e)
        return None


def merge_with_existing(generated: BuildFile) -> BuildFile:
    """Merge generated with whatever is persisted at generated.path."""
    return merge_files(generated, read_existing(generated.path))
