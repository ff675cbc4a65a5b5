# Unused variable detection (strict only): immutable bindings never mentioned again nearby

from __future__ import annotations

import re
from typing import Optional

from moveguard.context import SourceUnit, take_lines
from moveguard.findings.models import Finding, Severity
from moveguard.rules.base import STRICT_ONLY, Rule

LET_MARKER = "let "
BINDING_NAME = re.compile(r"let\s+(\w+)")

LOOKAHEAD = 20


def extract_variable_name(line: str) -> Optional[str]:
    """Return the first word after `let`, or None if the line has no binding."""
    m = BINDING_NAME.search(line)
    return m.group(1) if m else None


class UnusedVariableRule(Rule):
    """
    Flags `let` bindings whose name does not appear (as a substring) in the
    next twenty lines. Lines containing `mut` or any underscore are skipped.
    """

    id = "unused-variable"
    title = "Unused Variable"
    severity = Severity.LOW
    recommendation = "Remove unused variable or prefix with underscore"
    levels = STRICT_ONLY

    def check(self, context: SourceUnit, index: int) -> Optional[Finding]:
        line = context.lines[index]
        if LET_MARKER not in line or "mut" in line or "_" in line:
            return None
        name = extract_variable_name(line)
        if name is None:
            return None
        if any(name in l for l in take_lines(context, index + 1, LOOKAHEAD)):
            return None
        return self._finding(context, index, f"Variable '{name}' declared but never used")
