"""End-to-end tests for the typer command line interface."""

import json

import pytest
from typer.testing import CliRunner

from moveguard.main import __version__, app

runner = CliRunner()

VAULT = """module demo::vault {
    public fun withdraw(v: &mut Vault, ctx: &mut TxContext) {
        let id = object::new(ctx);
        transfer::public_transfer(coin::take(&mut v.balance, 1, ctx), @0x1);
    }

    fun helper(): u64 {
        1
    }
}
"""

# No assignment in the three lines above the transfer
PAYOUT = """module demo::payout {
    public fun pay(c: Coin) {
        event::emit(Paid {});
        transfer::public_transfer(c, @0x1);
    }
}
"""

VAULT_TESTS = """#[test_only]
module demo::vault_tests {
    #[test]
    fun test_withdraw() { withdraw(); }
}
"""


@pytest.fixture
def package(tmp_path):
    (tmp_path / "sources").mkdir()
    (tmp_path / "sources" / "vault.move").write_text(VAULT)
    (tmp_path / "tests").mkdir()
    (tmp_path / "tests" / "vault_tests.move").write_text(VAULT_TESTS)
    return tmp_path


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_scan_json(package):
    """The assignment two lines above the transfer rules out a reentrancy finding."""
    result = runner.invoke(app, ["scan", "--format", "json", "--sources", str(package / "sources")])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["total_issues"] == len(payload["issues"])
    severities = {issue["severity"] for issue in payload["issues"]}
    assert severities == {"HIGH", "MEDIUM"}


def test_scan_json_reports_reentrancy(tmp_path):
    (tmp_path / "pay.move").write_text(PAYOUT)
    result = runner.invoke(app, ["scan", "--format", "json", "--sources", str(tmp_path)])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    critical = [issue for issue in payload["issues"] if issue["severity"] == "CRITICAL"]
    assert len(critical) == 1
    assert critical[0]["title"] == "Potential Reentrancy Risk"
    assert critical[0]["location"]["line"] == 4


def test_scan_basic_level_skips_access_control(package):
    result = runner.invoke(
        app, ["scan", "--level", "basic", "--format", "json", "--sources", str(package / "sources")]
    )
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert all(issue["severity"] != "MEDIUM" for issue in payload["issues"])


def test_scan_text_report(package):
    result = runner.invoke(app, ["scan", "--sources", str(package / "sources")])
    assert result.exit_code == 0
    assert "Security Scan Report" in result.stdout
    assert "Issue #1" in result.stdout


def test_scan_rejects_unknown_level(package):
    result = runner.invoke(app, ["scan", "--level", "paranoid", "--sources", str(package / "sources")])
    assert result.exit_code == 2


def test_scan_rejects_unknown_format(package):
    result = runner.invoke(app, ["scan", "--format", "xml", "--sources", str(package / "sources")])
    assert result.exit_code == 2


def test_scan_missing_sources_reports_no_issues(tmp_path):
    result = runner.invoke(app, ["scan", "--format", "json", "--sources", str(tmp_path / "nope")])
    assert result.exit_code == 0
    assert json.loads(result.stdout)["total_issues"] == 0


def test_scan_invalid_utf8_exits_with_error(tmp_path):
    (tmp_path / "bad.move").write_bytes(b"\xff\xfe\xfa")
    result = runner.invoke(app, ["scan", "--sources", str(tmp_path)])
    assert result.exit_code == 1
    assert "Error:" in result.output


def test_gas_profile_lists_functions(package):
    result = runner.invoke(app, ["gas", "profile", "--sources", str(package / "sources")])
    assert result.exit_code == 0
    assert "withdraw" in result.stdout
    assert "helper" in result.stdout


def test_gas_profile_function_filter(package):
    result = runner.invoke(app, ["gas", "profile", "--function", "help", "--sources", str(package / "sources")])
    assert result.exit_code == 0
    assert "helper" in result.stdout
    assert "withdraw" not in result.stdout


def test_gas_analyze_prints_statistics(package):
    result = runner.invoke(app, ["gas", "analyze", "--sources", str(package / "sources")])
    assert result.exit_code == 0
    assert "Total functions analyzed" in result.stdout
    assert "Efficient Functions" in result.stdout


def test_gas_optimize_on_empty_sources(tmp_path):
    (tmp_path / "sources").mkdir()
    result = runner.invoke(app, ["gas", "optimize", "--sources", str(tmp_path / "sources")])
    assert result.exit_code == 0
    assert "No obvious optimization" in result.stdout


def test_gas_rejects_unknown_action(package):
    result = runner.invoke(app, ["gas", "benchmark", "--sources", str(package / "sources")])
    assert result.exit_code == 2


def test_coverage_json_writes_file(package):
    out = package / "coverage"
    result = runner.invoke(
        app,
        [
            "coverage",
            "--format",
            "json",
            "--output",
            str(out),
            "--sources",
            str(package / "sources"),
            "--tests",
            str(package / "tests"),
        ],
    )
    assert result.exit_code == 0
    data = json.loads((out / "coverage.json").read_text(encoding="utf-8"))
    assert data["summary"]["functions"]["total"] == 2
    assert data["summary"]["functions"]["covered"] == 1


def test_coverage_html_writes_file(package):
    out = package / "html"
    result = runner.invoke(
        app,
        ["coverage", "--output", str(out), "--sources", str(package / "sources"), "--tests", str(package / "tests")],
    )
    assert result.exit_code == 0
    assert (out / "index.html").is_file()
    assert "HTML report generated" in result.stdout


def test_coverage_text(package):
    result = runner.invoke(
        app,
        ["coverage", "--format", "text", "--sources", str(package / "sources"), "--tests", str(package / "tests")],
    )
    assert result.exit_code == 0
    assert "Test Coverage Report" in result.stdout


def test_coverage_rejects_unknown_format(package):
    result = runner.invoke(app, ["coverage", "--format", "pdf", "--sources", str(package / "sources")])
    assert result.exit_code == 2
