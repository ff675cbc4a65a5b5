# Missing access control detection: public non-entry functions with no guard nearby

from __future__ import annotations

from typing import Optional

from moveguard.context import SourceUnit, take_lines
from moveguard.findings.models import Finding, Severity, Strictness
from moveguard.rules.base import Rule

PUBLIC_FUN_MARKER = "public fun"
ENTRY_MARKER = "entry"
ACCESS_MARKERS = ("assert!", "require", "capability")

# Window starts at the declaration line itself
LOOKAHEAD = 10


class MissingAccessControlRule(Rule):
    """
    Flags `public fun` declarations (excluding entry functions) when none of
    the ten lines starting at the declaration mentions an assertion, a
    `require` helper, or a capability.
    """

    id = "missing-access-control"
    title = "Missing Access Control"
    severity = Severity.MEDIUM
    description = "Public function without role-based access control"
    recommendation = "Implement admin-only modifier or capability pattern"
    levels = frozenset({Strictness.STANDARD, Strictness.STRICT})

    def check(self, context: SourceUnit, index: int) -> Optional[Finding]:
        line = context.lines[index]
        if PUBLIC_FUN_MARKER not in line or ENTRY_MARKER in line:
            return None
        window = take_lines(context, index, LOOKAHEAD)
        if any(marker in l for l in window for marker in ACCESS_MARKERS):
            return None
        return self._finding(context, index)
