from __future__ import annotations

from pathlib import Path

import pytest

from covgate.core.profile import (
    CoverageProfile,
    ProfileBlock,
    format_profile,
    parse_profile,
    read_profile,
    write_profile,
)
from covgate.core.types import CoverMode
from covgate.errors import ProfileFormatError, ProfileNotFoundError

SAMPLE = """\
mode: set
github.com/expr-lang/expr/vm/vm.go:12.34,15.2 3 1
github.com/expr-lang/expr/vm/vm.go:15.2,17.3 2 0
github.com/expr-lang/expr/checker/mock/mock.go:5.10,6.2 1 1
"""


def test_parse_profile_reads_header_and_blocks() -> None:
    profile = parse_profile(SAMPLE)
    assert profile.mode is CoverMode.SET
    assert len(profile) == 3
    assert profile.blocks[0] == ProfileBlock("github.com/expr-lang/expr/vm/vm.go", 12, 34, 15, 2, 3, 1)
    assert profile.blocks[1].covered is False
    assert profile.files == (
        "github.com/expr-lang/expr/vm/vm.go",
        "github.com/expr-lang/expr/checker/mock/mock.go",
    )


def test_format_profile_reproduces_input() -> None:
    assert format_profile(parse_profile(SAMPLE)) == SAMPLE


def test_parse_profile_skips_blank_lines() -> None:
    profile = parse_profile("\nmode: count\n\na.go:1.1,2.2 1 7\n\n")
    assert profile.mode is CoverMode.COUNT
    assert [b.count for b in profile] == [7]


def test_parse_profile_allows_header_only() -> None:
    profile = parse_profile("mode: atomic\n")
    assert profile.is_empty()
    assert profile.mode is CoverMode.ATOMIC


def test_paths_with_colons_keep_full_path() -> None:
    profile = parse_profile("mode: set\nC:/src/pkg/a.go:3.1,4.2 2 1\n")
    assert profile.blocks[0].path == "C:/src/pkg/a.go"


@pytest.mark.parametrize(
    ("text", "pattern"),
    [
        ("", "missing 'mode:' header"),
        ("a.go:1.1,2.2 1 1\n", "expected 'mode:' header"),
        ("mode: sometimes\n", "unknown cover mode"),
        ("mode: set\na.go:1.1,2.2 one 1\n", "malformed profile block"),
        ("mode: set\na.go 1 1\n", "malformed profile block"),
    ],
)
def test_parse_profile_rejects_invalid_input(text: str, pattern: str) -> None:
    with pytest.raises(ProfileFormatError, match=pattern):
        parse_profile(text)


def test_read_profile_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ProfileNotFoundError, match="not found"):
        read_profile(tmp_path / "nope.out")


def test_read_profile_names_file_on_format_error(tmp_path: Path) -> None:
    bad = tmp_path / "bad.out"
    bad.write_text("garbage\n", encoding="utf-8")
    with pytest.raises(ProfileFormatError, match="bad.out"):
        read_profile(bad)


def test_write_profile_is_deterministic(tmp_path: Path) -> None:
    profile = CoverageProfile(
        mode=CoverMode.SET,
        blocks=(ProfileBlock("pkg/a.go", 1, 1, 2, 2, 1, 1),),
    )
    first = write_profile(profile, tmp_path / "one" / "coverage.out").read_bytes()
    second = write_profile(profile, tmp_path / "two.out").read_bytes()
    assert first == second == b"mode: set\npkg/a.go:1.1,2.2 1 1\n"
