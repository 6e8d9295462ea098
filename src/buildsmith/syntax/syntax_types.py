# src/buildsmith/syntax/syntax_types.py
"""Syntax tree of a build file.

Attribute values form a closed set of shapes. The merge engine matches on
these shapes to decide whether to replace, preserve or union a value:

    StringValue    "text"
    ListValue      ["a", "b"]
    PlatformValue  ["a"] + select({"<platform>": ["b"], ...})
    GlobValue      glob(["pattern"])
    RawValue       any other expression, kept verbatim
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Union

from buildsmith.constants import ATTR_PRIORITY, KEEP_MARKER


def is_keep_comment(comment: str | None) -> bool:
    """Return True if a comment is exactly the preservation marker."""
    if not comment:
        return False
    return comment.lstrip("#").strip() == KEEP_MARKER


@dataclass(frozen=True)
class ListItem:
    """One string element of a list, with its comments."""

    value: str
    comment: str | None = None  # trailing line comment, including "#"
    comments: tuple[str, ...] = ()  # own-line comments above the element

    @property
    def keep(self) -> bool:
        return is_keep_comment(self.comment)


@dataclass(frozen=True)
class StringValue:
    value: str


@dataclass(frozen=True)
class ListValue:
    items: tuple[ListItem, ...] = ()

    @classmethod
    def of(cls, values: list[str] | tuple[str, ...]) -> ListValue:
        return cls(tuple(ListItem(v) for v in values))

    @property
    def values(self) -> list[str]:
        return [item.value for item in self.items]


@dataclass(frozen=True)
class PlatformValue:
    """A generic list plus per-platform additions rendered through select()."""

    generic: tuple[ListItem, ...] = ()
    platforms: tuple[tuple[str, tuple[ListItem, ...]], ...] = ()


@dataclass(frozen=True)
class GlobValue:
    patterns: tuple[str, ...]


@dataclass(frozen=True)
class RawValue:
    """Expression text the tool does not model."""

    text: str


AttrValue = Union[StringValue, ListValue, PlatformValue, GlobValue, RawValue]


@dataclass(frozen=True)
class Attr:
    key: str
    value: AttrValue
    comment: str | None = None  # trailing comment on the value's last line
    comments: tuple[str, ...] = ()  # own-line comments above the attribute

    @property
    def keep(self) -> bool:
        return is_keep_comment(self.comment)


def attr_sort_key(key: str) -> tuple[int, str]:
    return (ATTR_PRIORITY.get(key, 0), key)


def sort_attrs(attrs: tuple[Attr, ...] | list[Attr]) -> tuple[Attr, ...]:
    """Order attributes by the fixed priority table."""
    return tuple(sorted(attrs, key=lambda a: attr_sort_key(a.key)))


@dataclass(frozen=True)
class Rule:
    """A rule call: `kind(args..., key = value, ...)`."""

    kind: str
    attrs: tuple[Attr, ...] = ()
    args: tuple[AttrValue, ...] = ()
    comments: tuple[str, ...] = ()  # own-line comments above the rule
    after_comments: tuple[str, ...] = ()  # own-line comments before ")"
    closing_comment: str | None = None  # trailing comment after ")"
    # Original text for rules read from disk; printed as-is while unmodified.
    source: str | None = field(default=None, compare=False, repr=False)

    @property
    def name(self) -> str:
        value = self.get("name")
        if isinstance(value, StringValue):
            return value.value
        return ""

    @property
    def key(self) -> tuple[str, str]:
        return (self.kind, self.name)

    @property
    def keep(self) -> bool:
        return is_keep_comment(self.closing_comment) or any(
            is_keep_comment(c) for c in self.comments
        )

    def attr(self, key: str) -> Attr | None:
        for a in self.attrs:
            if a.key == key:
                return a
        return None

    def get(self, key: str) -> AttrValue | None:
        a = self.attr(key)
        return a.value if a is not None else None

    def with_attrs(self, attrs: tuple[Attr, ...] | list[Attr]) -> Rule:
        return replace(self, attrs=sort_attrs(attrs), source=None)


@dataclass(frozen=True)
class Load:
    """`load("<module>", "<symbol>", ...)`."""

    module: str
    symbols: tuple[str, ...]
    comments: tuple[str, ...] = ()


@dataclass(frozen=True)
class RawStatement:
    """A top-level statement kept verbatim."""

    text: str
    comments: tuple[str, ...] = ()


Statement = Union[Load, Rule, RawStatement]


@dataclass(frozen=True)
class BuildFile:
    path: str
    stmts: tuple[Statement, ...] = ()
    trailing_comments: tuple[str, ...] = ()

    @property
    def rules(self) -> list[Rule]:
        return [s for s in self.stmts if isinstance(s, Rule)]

    @property
    def loads(self) -> list[Load]:
        return [s for s in self.stmts if isinstance(s, Load)]

    def all_comments(self) -> list[str]:
        """Top-level own-line comments (statement and trailing comments)."""
        found: list[str] = []
        for stmt in self.stmts:
            found.extend(stmt.comments)
        found.extend(self.trailing_comments)
        return found


def make_rule(
    kind: str,
    attrs: list[tuple[str, AttrValue]],
    args: tuple[AttrValue, ...] = (),
) -> Rule:
    """Build a rule whose attribute order follows the priority table."""
    return Rule(
        kind=kind,
        attrs=sort_attrs([Attr(key, value) for key, value in attrs]),
        args=args,
    )
