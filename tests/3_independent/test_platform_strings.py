# tests/3_independent/test_platform_strings.py
"""Tests for buildsmith.packages.PlatformStrings and Package helpers."""

import buildsmith.packages as mod_packages
from tests.utils import make_package, make_strings


def test_is_empty_ignores_empty_platform_lists() -> None:
    strings = make_strings(linux_amd64=[])
    assert strings.is_empty()
    assert not make_strings("a").is_empty()
    assert not make_strings(darwin_amd64=["x"]).is_empty()


def test_map_collects_errors_and_drops_failed_values() -> None:
    # --- setup ---
    strings = make_strings("ok", "bad", linux_amd64=["bad", "fine"])

    def _upper(value: str) -> str:
        if value == "bad":
            xmsg = f"cannot map {value}"
            raise ValueError(xmsg)
        return value.upper()

    # --- execute ---
    mapped, errors = strings.map(_upper)

    # --- verify ---
    assert mapped.generic == ["OK"]
    assert mapped.platforms == {"linux_amd64": ["FINE"]}
    assert [str(e) for e in errors] == ["cannot map bad", "cannot map bad"]


def test_clean_sorts_dedupes_and_drops_shadowed_platform_values() -> None:
    # --- setup ---
    strings = make_strings(
        "b",
        "a",
        "b",
        linux_amd64=["a", "z", "c"],
        darwin_amd64=["b"],
    )

    # --- execute ---
    cleaned = strings.clean()

    # --- verify ---
    assert cleaned.generic == ["a", "b"]
    assert cleaned.platforms == {"linux_amd64": ["c", "z"]}
    # original untouched
    assert strings.generic == ["b", "a", "b"]


def test_target_has_sources() -> None:
    assert not mod_packages.Target().has_sources()
    target = mod_packages.Target(sources=make_strings(windows_amd64=["w.go"]))
    assert target.has_sources()


def test_package_is_command_and_base_name() -> None:
    pkg = make_package("cmd/tool", name="main")
    assert pkg.is_command()
    assert pkg.base_name == "tool"
    assert not make_package("lib", name="lib").is_command()


def test_package_base_name_ignores_trailing_separator() -> None:
    pkg = mod_packages.Package(dir="/repo/cmd/tool/")
    assert pkg.base_name == "tool"
