# src/buildsmith/syntax/syntax_print.py
"""Print a syntax tree in the canonical build file layout."""

from __future__ import annotations

import json

from buildsmith.constants import CONDITIONS_DEFAULT

from .syntax_types import (
    AttrValue,
    BuildFile,
    GlobValue,
    ListItem,
    ListValue,
    Load,
    PlatformValue,
    RawStatement,
    RawValue,
    Rule,
    Statement,
    StringValue,
)


INDENT = "    "


def quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def _format_list(items: tuple[ListItem, ...], depth: int) -> str:
    if not items:
        return "[]"
    if len(items) == 1 and not items[0].comment and not items[0].comments:
        return f"[{quote(items[0].value)}]"

    inner = INDENT * (depth + 1)
    lines = ["["]
    for item in items:
        lines.extend(f"{inner}{c}" for c in item.comments)
        line = f"{inner}{quote(item.value)},"
        if item.comment:
            line += f"  {item.comment}"
        lines.append(line)
    lines.append(f"{INDENT * depth}]")
    return "\n".join(lines)


def _format_select(
    platforms: tuple[tuple[str, tuple[ListItem, ...]], ...], depth: int
) -> str:
    inner = INDENT * (depth + 1)
    lines = ["select({"]
    for key, items in platforms:
        lines.append(f"{inner}{quote(key)}: {_format_list(items, depth + 1)},")
    lines.append(f"{inner}{quote(CONDITIONS_DEFAULT)}: [],")
    lines.append(f"{INDENT * depth}}})")
    return "\n".join(lines)


def format_value(value: AttrValue, depth: int = 0) -> str:
    """Format an attribute value whose first line sits at `depth` indents."""
    if isinstance(value, StringValue):
        return quote(value.value)
    if isinstance(value, ListValue):
        return _format_list(value.items, depth)
    if isinstance(value, GlobValue):
        patterns = ListValue.of(value.patterns)
        return f"glob({_format_list(patterns.items, depth)})"
    if isinstance(value, PlatformValue):
        parts: list[str] = []
        if value.generic or not value.platforms:
            parts.append(_format_list(value.generic, depth))
        if value.platforms:
            parts.append(_format_select(value.platforms, depth))
        return " + ".join(parts)
    if isinstance(value, RawValue):
        return value.text
    xmsg = f"Unknown attribute value type: {type(value).__name__}"
    raise TypeError(xmsg)


def format_load(load: Load) -> str:
    args = ", ".join(quote(s) for s in (load.module, *load.symbols))
    return f"load({args})"


def format_rule(rule: Rule) -> str:
    if rule.source is not None:
        return rule.source

    closing = f"  {rule.closing_comment}" if rule.closing_comment else ""
    if not rule.attrs and not rule.after_comments and len(rule.args) <= 1:
        args = "".join(format_value(a) for a in rule.args)
        return f"{rule.kind}({args}){closing}"

    lines = [f"{rule.kind}("]
    lines.extend(f"{INDENT}{format_value(arg, 1)}," for arg in rule.args)
    for attr in rule.attrs:
        lines.extend(f"{INDENT}{c}" for c in attr.comments)
        line = f"{INDENT}{attr.key} = {format_value(attr.value, 1)},"
        if attr.comment:
            line += f"  {attr.comment}"
        lines.append(line)
    lines.extend(f"{INDENT}{c}" for c in rule.after_comments)
    lines.append(f"){closing}")
    return "\n".join(lines)


def format_statement(stmt: Statement) -> str:
    if isinstance(stmt, Load):
        body = format_load(stmt)
    elif isinstance(stmt, Rule):
        body = format_rule(stmt)
    elif isinstance(stmt, RawStatement):
        body = stmt.text
    else:
        xmsg = f"Unknown statement type: {type(stmt).__name__}"
        raise TypeError(xmsg)
    return "\n".join((*stmt.comments, body))


def format_build_file(build_file: BuildFile) -> str:
    """Render a build file; statements are separated by one blank line."""
    chunks = [format_statement(stmt) for stmt in build_file.stmts]
    if build_file.trailing_comments:
        chunks.append("\n".join(build_file.trailing_comments))
    if not chunks:
        return ""
    return "\n\n".join(chunks) + "\n"
