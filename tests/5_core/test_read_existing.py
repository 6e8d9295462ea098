# tests/5_core/test_read_existing.py
"""Tests for buildsmith.merge.read_existing and merge_with_existing."""

from pathlib import Path

import buildsmith.merge as mod_merge
import buildsmith.syntax as mod_syntax


def test_missing_file_is_none(tmp_path: Path) -> None:
    assert mod_merge.read_existing(str(tmp_path / "BUILD")) is None


def test_unparsable_file_is_treated_as_absent(
    tmp_path: Path, captured_warnings: list[str]
) -> None:
    # --- setup ---
    path = tmp_path / "BUILD"
    path.write_text("go_library(\n", encoding="utf-8")

    # --- execute ---
    result = mod_merge.read_existing(str(path))

    # --- verify ---
    assert result is None
    assert len(captured_warnings) == 1
    assert "Ignoring unparsable" in captured_warnings[0]


def test_undecodable_file_is_treated_as_absent(
    tmp_path: Path, captured_warnings: list[str]
) -> None:
    path = tmp_path / "BUILD"
    path.write_bytes(b"\xff\xfe\x00bad")
    assert mod_merge.read_existing(str(path)) is None
    assert "Cannot read" in captured_warnings[0]


def test_merge_with_existing_reads_generated_path(tmp_path: Path) -> None:
    # --- setup ---
    path = tmp_path / "BUILD"
    path.write_text(
        'go_library(\n    name = "go_default_library",\n    tags = ["manual"],\n)\n',
        encoding="utf-8",
    )
    generated = mod_syntax.BuildFile(
        path=str(path),
        stmts=(
            mod_syntax.make_rule(
                "go_library",
                [("name", mod_syntax.StringValue("go_default_library"))],
            ),
        ),
    )

    # --- execute ---
    merged = mod_merge.merge_with_existing(generated)

    # --- verify ---
    assert merged.rules[0].get("tags") == mod_syntax.ListValue.of(["manual"])
