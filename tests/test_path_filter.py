from __future__ import annotations

import itertools
import logging
from pathlib import Path

import pytest

from covgate.core.path_filter import ExclusionPolicy, load_patterns
from covgate.core.profile import format_profile, parse_profile
from covgate.core.types import PatternSyntax
from covgate.errors import ConfigError

RAW = parse_profile(
    """\
mode: set
github.com/expr-lang/expr/vm/vm.go:1.1,2.2 3 1
github.com/expr-lang/expr/checker/mock/mock.go:1.1,2.2 2 1
github.com/expr-lang/expr/internal/spew/spew.go:1.1,2.2 4 0
github.com/expr-lang/expr/vm/runtime/helpers/helpers.go:1.1,2.2 5 1
github.com/expr-lang/expr/vm/runtime/runtime.go:1.1,2.2 1 0
github.com/expr-lang/expr/checker/mock/mock.go:3.1,4.2 1 0
"""
)

POLICIES = [
    (),
    ("checker/mock",),
    ("internal/spew", "vm/runtime/helpers"),
    ("vm/", "checker/mock"),
    ("does/not/exist",),
    ("expr",),
]


def test_empty_policy_is_identity() -> None:
    assert ExclusionPolicy().filter(RAW) is RAW
    assert ExclusionPolicy([]).filter(RAW) == RAW


def test_substring_filter_drops_matching_records() -> None:
    policy = ExclusionPolicy(["checker/mock", "internal/spew"])
    out = policy.filter(RAW)
    assert out.mode is RAW.mode
    assert [b.path for b in out] == [
        "github.com/expr-lang/expr/vm/vm.go",
        "github.com/expr-lang/expr/vm/runtime/helpers/helpers.go",
        "github.com/expr-lang/expr/vm/runtime/runtime.go",
    ]


def test_matching_is_case_sensitive() -> None:
    assert ExclusionPolicy(["Checker/Mock"]).filter(RAW) == RAW


def test_record_matching_several_patterns_is_excluded_once() -> None:
    out = ExclusionPolicy(["vm/runtime", "helpers", "runtime/helpers"]).filter(RAW)
    assert len(out) == len(RAW) - 2


def test_unmatched_pattern_is_a_noop(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="covgate"):
        out = ExclusionPolicy(["nothing/here"]).filter(RAW)
    assert out == RAW
    assert "matched no records" in caplog.text


def test_filter_does_not_mutate_input() -> None:
    before = format_profile(RAW)
    ExclusionPolicy(["vm/"]).filter(RAW)
    assert format_profile(RAW) == before


@pytest.mark.parametrize("patterns", POLICIES)
def test_filter_is_idempotent(patterns: tuple[str, ...]) -> None:
    policy = ExclusionPolicy(patterns)
    once = policy.filter(RAW)
    assert policy.filter(once) == once


@pytest.mark.parametrize("patterns", POLICIES)
def test_filter_is_sound_and_complete(patterns: tuple[str, ...]) -> None:
    out = ExclusionPolicy(patterns).filter(RAW)
    for block in out:
        assert not any(pat in block.path for pat in patterns)
    for block in RAW:
        assert block in out.blocks or any(pat in block.path for pat in patterns)


@pytest.mark.parametrize("patterns", POLICIES)
def test_pattern_order_does_not_matter(patterns: tuple[str, ...]) -> None:
    outputs = {format_profile(ExclusionPolicy(p).filter(RAW)) for p in itertools.permutations(patterns)}
    assert len(outputs) == 1


def test_policy_deduplicates_and_rejects_empty_patterns() -> None:
    assert ExclusionPolicy(["a", "b", "a"]).patterns == ("a", "b")
    with pytest.raises(ConfigError, match="non-empty"):
        ExclusionPolicy(["a", ""])


def test_excludes_and_matching() -> None:
    policy = ExclusionPolicy(["mock", "spew"])
    assert policy.excludes("pkg/checker/mock/mock.go")
    assert not policy.excludes("pkg/vm/vm.go")
    assert policy.matching("pkg/mock/spew.go") == ("mock", "spew")


def test_glob_syntax() -> None:
    policy = ExclusionPolicy(["**/checker/mock/**", "*_gen.go"], syntax=PatternSyntax.GLOB)
    assert policy.excludes("github.com/expr-lang/expr/checker/mock/mock.go")
    assert policy.excludes("github.com/expr-lang/expr/parser/lexer_gen.go")
    assert not policy.excludes("github.com/expr-lang/expr/checker/checker.go")
    out = policy.filter(RAW)
    assert "github.com/expr-lang/expr/checker/mock/mock.go" not in out.files
    assert len(out) == len(RAW) - 2


def test_glob_syntax_differs_from_substring() -> None:
    # a substring also hits "vm.go.bak"; a glob only matches the whole name
    assert ExclusionPolicy(["vm.go"]).excludes("github.com/x/vm.go.bak")
    assert not ExclusionPolicy(["vm.go"], syntax=PatternSyntax.GLOB).excludes("github.com/x/vm.go.bak")


def test_load_patterns(tmp_path: Path) -> None:
    patterns = tmp_path / "exclude.txt"
    patterns.write_text("# generated code\nchecker/mock\n\n  internal/spew  \n", encoding="utf-8")
    assert load_patterns(patterns) == ["checker/mock", "internal/spew"]


def test_load_patterns_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="cannot read exclusion patterns"):
        load_patterns(tmp_path / "missing.txt")
