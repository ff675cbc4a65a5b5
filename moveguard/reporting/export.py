# Machine-readable output: JSON scan reports and coverage JSON/HTML files.

from __future__ import annotations

import html
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from moveguard.findings.models import CoverageReport, Finding

logger = logging.getLogger(__name__)

COVERAGE_JSON_NAME = "coverage.json"
COVERAGE_HTML_NAME = "index.html"


def _timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def scan_report(findings: Sequence[Finding], now: Optional[datetime] = None) -> Dict[str, Any]:
    """JSON-ready scan report; issues keep discovery order."""
    return {
        "scan_date": _timestamp(now),
        "total_issues": len(findings),
        "issues": [f.model_dump(mode="json") for f in findings],
    }


def coverage_payload(report: CoverageReport, now: Optional[datetime] = None) -> Dict[str, Any]:
    return {
        "timestamp": _timestamp(now),
        "summary": {
            "lines": {
                "covered": report.lines_covered,
                "total": report.lines_total,
                "percentage": round(report.line_percentage, 1),
            },
            "functions": {
                "covered": report.functions_covered,
                "total": report.functions_total,
                "percentage": round(report.function_percentage, 1),
            },
        },
        "modules": [m.model_dump(mode="json") for m in report.modules],
    }


def dumps(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=2)


def write_coverage_json(report: CoverageReport, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / COVERAGE_JSON_NAME
    target.write_text(dumps(coverage_payload(report)), encoding="utf-8")
    logger.info("Wrote coverage JSON to %s", target)
    return target


def _pct_class(percentage: float) -> str:
    if percentage >= 90.0:
        return "high"
    if percentage >= 70.0:
        return "medium"
    return "low"


_HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>Coverage Report</title>
    <style>
        body {{ font-family: system-ui; margin: 20px; background: #f5f5f5; }}
        .container {{ max-width: 1200px; margin: 0 auto; background: white; padding: 30px; border-radius: 8px; }}
        .summary {{ display: grid; grid-template-columns: repeat(2, 1fr); gap: 20px; margin: 30px 0; }}
        .metric {{ background: #f8f9fa; padding: 20px; border-radius: 8px; text-align: center; }}
        .metric-value {{ font-size: 36px; font-weight: bold; }}
        .metric-label {{ color: #666; margin-top: 10px; }}
        table {{ width: 100%; border-collapse: collapse; margin: 20px 0; }}
        th, td {{ padding: 12px; text-align: left; border-bottom: 1px solid #ddd; }}
        th {{ background: #f8f9fa; font-weight: 600; }}
        .high {{ color: #28a745; }}
        .medium {{ color: #ffc107; }}
        .low {{ color: #dc3545; }}
    </style>
</head>
<body>
    <div class="container">
        <h1>Test Coverage Report</h1>
        <p>Generated: {generated}</p>
        <div class="summary">
            <div class="metric">
                <div class="metric-value {line_class}">{line_pct:.1f}%</div>
                <div class="metric-label">Line Coverage ({lines_covered} / {lines_total})</div>
            </div>
            <div class="metric">
                <div class="metric-value {function_class}">{function_pct:.1f}%</div>
                <div class="metric-label">Function Coverage ({functions_covered} / {functions_total})</div>
            </div>
        </div>
        <h2>Coverage by Module</h2>
        <table>
            <tr>
                <th>Module</th>
                <th>Lines</th>
                <th>Functions</th>
            </tr>
{rows}
        </table>
    </div>
</body>
</html>
"""

_ROW_TEMPLATE = """            <tr>
                <td>{name}</td>
                <td class="{line_class}">{line_pct:.1f}%</td>
                <td class="{function_class}">{function_pct:.1f}%</td>
            </tr>"""


def render_coverage_html(report: CoverageReport, now: Optional[datetime] = None) -> str:
    rows = "\n".join(
        _ROW_TEMPLATE.format(
            name=html.escape(str(m.path).replace("\\", "/")),
            line_class=_pct_class(m.line_percentage),
            line_pct=m.line_percentage,
            function_class=_pct_class(m.function_percentage),
            function_pct=m.function_percentage,
        )
        for m in report.modules
    )
    return _HTML_TEMPLATE.format(
        generated=html.escape(_timestamp(now)),
        line_class=_pct_class(report.line_percentage),
        line_pct=report.line_percentage,
        lines_covered=report.lines_covered,
        lines_total=report.lines_total,
        function_class=_pct_class(report.function_percentage),
        function_pct=report.function_percentage,
        functions_covered=report.functions_covered,
        functions_total=report.functions_total,
        rows=rows,
    )


def write_coverage_html(report: CoverageReport, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / COVERAGE_HTML_NAME
    target.write_text(render_coverage_html(report), encoding="utf-8")
    logger.info("Wrote coverage HTML to %s", target)
    return target
