# Unchecked transfer detection: transfers with no nearby ownership assertion

from __future__ import annotations

from typing import Optional

from moveguard.context import SourceUnit, lines_before
from moveguard.findings.models import Finding, Severity
from moveguard.rules.base import Rule

TRANSFER_MARKER = "transfer::"
ASSERT_MARKER = "assert!"
OWNERSHIP_MARKERS = ("owner", "sender")

LOOKBEHIND = 5


def _is_ownership_check(line: str) -> bool:
    return ASSERT_MARKER in line and any(marker in line for marker in OWNERSHIP_MARKERS)


class UncheckedTransferRule(Rule):
    """Flags `transfer::` calls with no `assert!(... owner/sender ...)` just above them."""

    id = "unchecked-transfer"
    title = "Unchecked Transfer"
    severity = Severity.HIGH
    description = "Transfer operation without ownership verification"
    recommendation = "Add ownership check before transfer: assert!(owner == sender)"

    def check(self, context: SourceUnit, index: int) -> Optional[Finding]:
        line = context.lines[index]
        if TRANSFER_MARKER not in line or ASSERT_MARKER in line:
            return None
        if any(_is_ownership_check(l) for l in lines_before(context, index, LOOKBEHIND)):
            return None
        return self._finding(context, index)
