"""Tests for JSON scan reports and coverage JSON/HTML export."""

import json
from datetime import datetime, timezone
from pathlib import Path

from moveguard.findings.models import CoverageEstimate, CoverageReport, Finding, Location, Severity
from moveguard.reporting import export

FIXED_NOW = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _finding(line: int) -> Finding:
    return Finding(
        severity=Severity.HIGH,
        title="Unchecked Transfer",
        description="Transfer without ownership validation",
        location=Location(path=Path("sources/coin.move"), line=line),
        recommendation="Add ownership checks before transfer",
    )


def _report() -> CoverageReport:
    module = CoverageEstimate(
        module_name="coin",
        path=Path("sources/coin.move"),
        lines_total=20,
        lines_covered_estimate=19,
        functions_total=4,
        functions_covered_estimate=1,
    )
    return CoverageReport(
        modules=[module],
        lines_covered=19,
        lines_total=20,
        functions_covered=1,
        functions_total=4,
    )


def test_scan_report_shape():
    report = export.scan_report([_finding(7), _finding(3)], FIXED_NOW)
    assert report["scan_date"] == "2024-01-02T03:04:05+00:00"
    assert report["total_issues"] == 2
    first = report["issues"][0]
    assert first["severity"] == "HIGH"
    assert first["title"] == "Unchecked Transfer"
    assert first["location"] == {"path": "sources/coin.move", "line": 7}
    assert [i["location"]["line"] for i in report["issues"]] == [7, 3]


def test_scan_report_empty_is_valid_json():
    payload = json.loads(export.dumps(export.scan_report([], FIXED_NOW)))
    assert payload["total_issues"] == 0
    assert payload["issues"] == []


def test_coverage_payload_summary():
    payload = export.coverage_payload(_report(), FIXED_NOW)
    assert payload["summary"]["lines"] == {"covered": 19, "total": 20, "percentage": 95.0}
    assert payload["summary"]["functions"] == {"covered": 1, "total": 4, "percentage": 25.0}
    [module] = payload["modules"]
    assert module["module_name"] == "coin"
    assert module["line_percentage"] == 95.0


def test_write_coverage_json_creates_directory(tmp_path):
    target = export.write_coverage_json(_report(), tmp_path / "out" / "coverage")
    assert target == tmp_path / "out" / "coverage" / "coverage.json"
    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["summary"]["lines"]["total"] == 20


def test_render_coverage_html_classes():
    page = export.render_coverage_html(_report(), FIXED_NOW)
    assert "<title>Coverage Report</title>" in page
    assert "sources/coin.move" in page
    assert 'class="metric-value high">95.0%' in page
    assert 'class="metric-value low">25.0%' in page


def test_render_coverage_html_escapes_paths():
    report = CoverageReport(
        modules=[
            CoverageEstimate(
                module_name="a<b",
                path=Path("sources/a<b.move"),
                lines_total=0,
                lines_covered_estimate=0,
                functions_total=0,
                functions_covered_estimate=0,
            )
        ]
    )
    page = export.render_coverage_html(report, FIXED_NOW)
    assert "a&lt;b.move" in page
    assert "a<b.move" not in page


def test_write_coverage_html(tmp_path):
    target = export.write_coverage_html(_report(), tmp_path)
    assert target.name == "index.html"
    assert "Test Coverage Report" in target.read_text(encoding="utf-8")
