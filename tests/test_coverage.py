"""Tests for the heuristic coverage estimator."""

from pathlib import Path

import pytest

from moveguard.context import SourceUnit
from moveguard.coverage.estimator import (
    CoverageEstimator,
    compute_test_coverage,
    count_code_lines,
    count_function_keywords,
    find_test_file,
)

NAMES = ["alpha", "bravo", "charlie", "delta", "echo", "foxtrot", "golf", "hotel", "india", "juliet"]

TOKEN_SOURCE = "module demo::token {\n" + "".join(f"    public fun {n}() {{}}\n" for n in NAMES) + "}\n"

TOKEN_TESTS = """#[test_only]
module demo::token_tests {
    use demo::token;

    #[test]
    fun test_alpha() { token::alpha(); token::bravo(); }

    #[test]
    fun test_charlie() { token::charlie(); }

    #[test]
    fun test_delta() { token::delta(); }
}
"""


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


def test_ratios_from_named_functions_and_test_count():
    source = SourceUnit.from_text(Path("sources/token.move"), TOKEN_SOURCE)
    coverage = compute_test_coverage(source, TOKEN_TESTS)
    assert coverage.function_ratio == pytest.approx(0.4)
    assert coverage.line_ratio == pytest.approx(min(0.4 * 0.7 + 0.6 * 0.3, 1.0))
    assert coverage.line_ratio == pytest.approx(0.46)


def test_no_test_markers_means_zero_line_ratio():
    source = SourceUnit.from_text(Path("token.move"), TOKEN_SOURCE)
    coverage = compute_test_coverage(source, "token::alpha();")
    assert coverage.function_ratio == pytest.approx(0.1)
    assert coverage.line_ratio == 0.0


def test_test_factor_caps_at_one():
    source = SourceUnit.from_text(Path("token.move"), TOKEN_SOURCE)
    tests = "#[test]\n" * 8 + " ".join(NAMES)
    coverage = compute_test_coverage(source, tests)
    assert coverage.function_ratio == 1.0
    assert coverage.line_ratio == pytest.approx(1.0)


def test_no_functions_gives_zero_function_ratio():
    source = SourceUnit.from_text(Path("consts.move"), "module demo::consts {\n    const MAX: u64 = 10;\n}\n")
    coverage = compute_test_coverage(source, "#[test]\n")
    assert coverage.function_ratio == 0.0
    assert coverage.line_ratio == pytest.approx(0.2 * 0.3)


def test_line_and_function_counting():
    source = SourceUnit.from_text(
        Path("x.move"),
        "module demo::x {\n\n    // comment\n    /// doc\n    fun a() {}\n    // fun b() {}\n}\n",
    )
    assert count_code_lines(source) == 3
    assert count_function_keywords(source) == 2


def test_find_test_file_uses_first_substring_match():
    files = [Path("tests/coin_tests.move"), Path("tests/token_extra_tests.move"), Path("tests/token_tests.move")]
    assert find_test_file("token", files) == Path("tests/token_extra_tests.move")
    assert find_test_file("nft", files) is None


def test_estimate_module_and_totals(tmp_path):
    _write(tmp_path / "sources" / "token.move", TOKEN_SOURCE)
    _write(tmp_path / "tests" / "token_tests.move", TOKEN_TESTS)

    report = CoverageEstimator(tmp_path / "sources", tmp_path / "tests").estimate()

    [module] = report.modules
    assert module.module_name == "token"
    assert module.path == tmp_path / "sources" / "token.move"
    assert module.lines_total == 12
    assert module.lines_covered_estimate == 5  # floor(12 * 0.46)
    assert module.functions_total == 10
    assert module.functions_covered_estimate == 4
    assert (report.lines_covered, report.lines_total) == (5, 12)
    assert (report.functions_covered, report.functions_total) == (4, 10)
    assert report.line_percentage == pytest.approx(5 / 12 * 100)
    assert report.function_percentage == pytest.approx(40.0)


def test_module_without_test_file_has_zero_coverage(tmp_path):
    _write(tmp_path / "sources" / "token.move", TOKEN_SOURCE)
    _write(tmp_path / "sources" / "vault.move", "module demo::vault {\n    fun open() {}\n}\n")
    _write(tmp_path / "tests" / "token_tests.move", TOKEN_TESTS)

    report = CoverageEstimator(tmp_path / "sources", tmp_path / "tests").estimate()

    vault = report.modules[1]
    assert vault.module_name == "vault"
    assert vault.lines_total == 3
    assert vault.lines_covered_estimate == 0
    assert vault.functions_covered_estimate == 0
    assert report.lines_total == 15
    assert report.lines_covered == 5


def test_missing_test_dir_gives_zero_ratios(tmp_path):
    _write(tmp_path / "sources" / "token.move", TOKEN_SOURCE)
    report = CoverageEstimator(tmp_path / "sources", tmp_path / "tests").estimate()
    assert report.modules[0].lines_covered_estimate == 0
    assert report.line_percentage == 0.0


def test_missing_source_dir_gives_empty_report(tmp_path):
    report = CoverageEstimator(tmp_path / "sources", tmp_path / "tests").estimate()
    assert report.modules == []
    assert report.lines_total == 0
    assert report.line_percentage == 0.0
    assert report.function_percentage == 0.0


def test_nested_test_files_are_found(tmp_path):
    _write(tmp_path / "sources" / "token.move", TOKEN_SOURCE)
    _write(tmp_path / "tests" / "unit" / "token_tests.move", TOKEN_TESTS)
    report = CoverageEstimator(tmp_path / "sources", tmp_path / "tests").estimate()
    assert report.modules[0].functions_covered_estimate == 4


def test_unreadable_test_file_aborts(tmp_path):
    _write(tmp_path / "sources" / "token.move", TOKEN_SOURCE)
    (tmp_path / "tests").mkdir()
    (tmp_path / "tests" / "token_tests.move").write_bytes(b"\xff\xfe")
    with pytest.raises(OSError):
        CoverageEstimator(tmp_path / "sources", tmp_path / "tests").estimate()
