# src/buildsmith/syntax/__init__.py

"""Build file syntax trees: value types, parsing and printing."""

from .syntax_parse import BuildFileSyntaxError, parse_build_file
from .syntax_print import format_build_file, format_rule, format_value, quote
from .syntax_types import (
    Attr,
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
    attr_sort_key,
    is_keep_comment,
    make_rule,
    sort_attrs,
)


__all__ = [  # noqa: RUF022
    # syntax_parse
    "BuildFileSyntaxError",
    "parse_build_file",
    # syntax_print
    "format_build_file",
    "format_rule",
    "format_value",
    "quote",
    # syntax_types
    "Attr",
    "AttrValue",
    "BuildFile",
    "GlobValue",
    "ListItem",
    "ListValue",
    "Load",
    "PlatformValue",
    "RawStatement",
    "RawValue",
    "Rule",
    "Statement",
    "StringValue",
    "attr_sort_key",
    "is_keep_comment",
    "make_rule",
    "sort_attrs",
]
