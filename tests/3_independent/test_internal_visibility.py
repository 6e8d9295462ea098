# tests/3_independent/test_internal_visibility.py
"""Tests for buildsmith.generate.check_internal_visibility."""

import pytest

import buildsmith.generate as mod_generate


PUBLIC = "//visibility:public"


@pytest.mark.parametrize(
    ("rel", "expected"),
    [
        ("", PUBLIC),
        ("a/b", PUBLIC),
        ("internal", "//:__subpackages__"),
        ("internal/c", "//:__subpackages__"),
        ("a/internal", "//a:__subpackages__"),
        ("a/b/internal/c", "//a/b:__subpackages__"),
        ("a/internal/b/internal/c", "//a/internal/b:__subpackages__"),
        ("a/internals/c", PUBLIC),
        ("a/my_internal", PUBLIC),
    ],
)
def test_check_internal_visibility(rel: str, expected: str) -> None:
    assert mod_generate.check_internal_visibility(rel, PUBLIC) == expected
