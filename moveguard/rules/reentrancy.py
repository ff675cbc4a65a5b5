# Reentrancy risk detection: external transfer/coin calls not preceded by a state update

from __future__ import annotations

from typing import Optional

from moveguard.context import SourceUnit, lines_before
from moveguard.findings.models import Finding, Severity
from moveguard.rules.base import Rule

EXTERNAL_CALL_MARKERS = ("transfer::", "coin::")

LOOKBEHIND = 3


def _is_assignment(line: str) -> bool:
    """True for a line holding `=` but no `==` anywhere."""
    return "=" in line and "==" not in line


class ReentrancyRule(Rule):
    """Checks-effects-interactions heuristic; active at every strictness level."""

    id = "reentrancy"
    title = "Potential Reentrancy Risk"
    severity = Severity.CRITICAL
    description = "External call before state update"
    recommendation = "Update state before making external calls (checks-effects-interactions)"

    def check(self, context: SourceUnit, index: int) -> Optional[Finding]:
        line = context.lines[index]
        if not any(marker in line for marker in EXTERNAL_CALL_MARKERS):
            return None
        if any(_is_assignment(l) for l in lines_before(context, index, LOOKBEHIND)):
            return None
        return self._finding(context, index)
