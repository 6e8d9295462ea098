# src/buildsmith/syntax/syntax_parse.py
"""Read a build file into a syntax tree.

Build files use a Python-compatible subset of syntax, so the standard `ast`
module parses them; `tokenize` recovers the comments `ast` drops. Only
rule calls, loads and the value shapes in `syntax_types` are modeled.
Everything else is carried as verbatim text.
"""

from __future__ import annotations

import ast
import io
import tokenize
from dataclasses import dataclass

from buildsmith.constants import CONDITIONS_DEFAULT
from buildsmith.logs import getAppLogger

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
)


class BuildFileSyntaxError(ValueError):
    """Raised when build file text cannot be parsed."""


@dataclass(frozen=True)
class _Comment:
    col: int  # character column
    text: str
    own_line: bool


class _Source:
    """Source text plus its comments, indexed by line number."""

    def __init__(self, path: str, text: str) -> None:
        self.path = path
        self.text = text
        self.lines = text.splitlines()
        self.comments = _collect_comments(path, text)

    def own_line_comments(self, after: int, before: int) -> tuple[str, ...]:
        """Own-line comments strictly between two line numbers."""
        return tuple(
            c.text
            for line, c in sorted(self.comments.items())
            if after < line < before and c.own_line
        )

    def trailing_comment(self, node: ast.expr) -> str | None:
        """Comment that ends the line on which node ends, if nothing else does.

        Only a separating comma may stand between the node and the comment.
        """
        line = node.end_lineno
        if line is None or node.end_col_offset is None:
            return None
        comment = self.comments.get(line)
        if comment is None or comment.own_line:
            return None
        text = self.lines[line - 1]
        end = _char_col(text, node.end_col_offset)
        if end > comment.col or text[end : comment.col].strip() not in ("", ","):
            return None
        return comment.text

    def segment(self, node: ast.AST) -> str:
        return ast.get_source_segment(self.text, node) or ""

    def statement_text(self, node: ast.stmt) -> str:
        end = node.end_lineno or node.lineno
        return "\n".join(self.lines[node.lineno - 1 : end]).rstrip()


def _char_col(line: str, byte_col: int) -> int:
    # ast reports UTF-8 byte offsets; tokenize reports characters
    return len(line.encode("utf-8")[:byte_col].decode("utf-8", errors="ignore"))


def _collect_comments(path: str, text: str) -> dict[int, _Comment]:
    comments: dict[int, _Comment] = {}
    try:
        for tok in tokenize.generate_tokens(io.StringIO(text).readline):
            if tok.type != tokenize.COMMENT:
                continue
            line, col = tok.start
            comments[line] = _Comment(
                col=col,
                text=tok.string.rstrip(),
                own_line=not tok.line[:col].strip(),
            )
    except (tokenize.TokenError, SyntaxError) as e:
        xmsg = f"Cannot tokenize {path}: {e}"
        raise BuildFileSyntaxError(xmsg) from e
    return comments


# --- values -------------------------------------------------------------------


def _is_str(node: ast.expr) -> bool:
    return isinstance(node, ast.Constant) and isinstance(node.value, str)


def _is_call_to(node: ast.expr, func: str) -> bool:
    return (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id == func
    )


def _parse_items(src: _Source, node: ast.List) -> tuple[ListItem, ...] | None:
    items: list[ListItem] = []
    prev_line = node.lineno
    for elt in node.elts:
        if not _is_str(elt):
            return None
        assert isinstance(elt, ast.Constant)  # noqa: S101
        items.append(
            ListItem(
                value=elt.value,
                comment=src.trailing_comment(elt),
                comments=src.own_line_comments(prev_line, elt.lineno),
            )
        )
        prev_line = elt.end_lineno or elt.lineno
    return tuple(items)


def _parse_select(
    src: _Source, node: ast.expr
) -> tuple[tuple[str, tuple[ListItem, ...]], ...] | None:
    if not _is_call_to(node, "select"):
        return None
    assert isinstance(node, ast.Call)  # noqa: S101
    if len(node.args) != 1 or node.keywords or not isinstance(node.args[0], ast.Dict):
        return None
    platforms: list[tuple[str, tuple[ListItem, ...]]] = []
    for key, value in zip(node.args[0].keys, node.args[0].values):
        if key is None or not _is_str(key) or not isinstance(value, ast.List):
            return None
        assert isinstance(key, ast.Constant)  # noqa: S101
        items = _parse_items(src, value)
        if items is None:
            return None
        if key.value == CONDITIONS_DEFAULT:
            # only the empty default is implied by PlatformValue
            if items:
                return None
            continue
        platforms.append((key.value, items))
    return tuple(platforms)


def _parse_value(src: _Source, node: ast.expr) -> AttrValue:  # noqa: PLR0911
    if _is_str(node):
        text = src.segment(node)
        # implicit concatenation, triple quotes and prefixed strings stay raw
        if text[:1] in ("'", '"') and not text.startswith(('"""', "'''")):
            assert isinstance(node, ast.Constant)  # noqa: S101
            return StringValue(node.value)
        return RawValue(text)

    if isinstance(node, ast.List):
        items = _parse_items(src, node)
        if items is not None:
            return ListValue(items)

    if _is_call_to(node, "glob"):
        assert isinstance(node, ast.Call)  # noqa: S101
        if (
            len(node.args) == 1
            and not node.keywords
            and isinstance(node.args[0], ast.List)
            and all(_is_str(e) for e in node.args[0].elts)
        ):
            return GlobValue(
                tuple(e.value for e in node.args[0].elts if isinstance(e, ast.Constant))
            )

    platforms = _parse_select(src, node)
    if platforms is not None:
        return PlatformValue(generic=(), platforms=platforms)

    if (
        isinstance(node, ast.BinOp)
        and isinstance(node.op, ast.Add)
        and isinstance(node.left, ast.List)
    ):
        generic = _parse_items(src, node.left)
        platforms = _parse_select(src, node.right)
        if generic is not None and platforms is not None:
            return PlatformValue(generic=generic, platforms=platforms)

    return RawValue(src.segment(node))


# --- statements ---------------------------------------------------------------


def _parse_load(call: ast.Call, comments: tuple[str, ...]) -> Load | None:
    if call.keywords or not call.args or not all(_is_str(a) for a in call.args):
        return None
    values = [a.value for a in call.args if isinstance(a, ast.Constant)]
    return Load(module=values[0], symbols=tuple(values[1:]), comments=comments)


def _parse_rule(
    src: _Source,
    node: ast.stmt,
    call: ast.Call,
    kind: str,
    comments: tuple[str, ...],
) -> Rule | None:
    args: list[AttrValue] = []
    prev_line = call.lineno
    for arg in call.args:
        if isinstance(arg, ast.Starred):
            return None
        args.append(_parse_value(src, arg))
        prev_line = arg.end_lineno or arg.lineno

    attrs: list[Attr] = []
    for kw in call.keywords:
        if kw.arg is None:  # **kwargs
            return None
        value = _parse_value(src, kw.value)
        if kw.arg == "name" and not isinstance(value, StringValue):
            # rules with computed names cannot be matched
            return None
        attrs.append(
            Attr(
                key=kw.arg,
                value=value,
                comment=src.trailing_comment(kw.value),
                comments=src.own_line_comments(prev_line, kw.lineno),
            )
        )
        prev_line = kw.value.end_lineno or kw.lineno

    end_line = call.end_lineno or call.lineno
    return Rule(
        kind=kind,
        attrs=tuple(attrs),
        args=tuple(args),
        comments=comments,
        after_comments=src.own_line_comments(prev_line, end_line),
        closing_comment=src.trailing_comment(call),
        source=src.statement_text(node),
    )


def _parse_statement(
    src: _Source, node: ast.stmt, comments: tuple[str, ...]
) -> Statement:
    if (
        isinstance(node, ast.Expr)
        and isinstance(node.value, ast.Call)
        and isinstance(node.value.func, ast.Name)
    ):
        call = node.value
        kind = call.func.id  # type: ignore[attr-defined]
        stmt: Statement | None
        if kind == "load":
            stmt = _parse_load(call, comments)
        else:
            stmt = _parse_rule(src, node, call, kind, comments)
        if stmt is not None:
            return stmt
    return RawStatement(text=src.statement_text(node), comments=comments)


def parse_build_file(path: str, text: str) -> BuildFile:
    """Parse build file text.

    Raises:
        BuildFileSyntaxError: If the text is not valid build file syntax
    """
    logger = getAppLogger()
    try:
        tree = ast.parse(text, filename=path)
    except SyntaxError as e:
        xmsg = f"Cannot parse {path}: {e.msg} (line {e.lineno})"
        raise BuildFileSyntaxError(xmsg) from e

    src = _Source(path, text)
    stmts: list[Statement] = []
    prev_end = 0
    for node in tree.body:
        comments = src.own_line_comments(prev_end, node.lineno)
        stmts.append(_parse_statement(src, node, comments))
        prev_end = node.end_lineno or node.lineno

    trailing = src.own_line_comments(prev_end, len(src.lines) + 1)
    logger.trace(f"[parse] {path}: {len(stmts)} statements")
    return BuildFile(path=path, stmts=tuple(stmts), trailing_comments=trailing)
