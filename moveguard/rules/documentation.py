# Missing documentation detection (strict only): public functions without a `///` comment

from __future__ import annotations

from typing import Optional

from moveguard.context import SourceUnit
from moveguard.findings.models import Finding, Severity
from moveguard.rules.base import STRICT_ONLY, Rule

PUBLIC_FUN_MARKER = "public fun"
DOC_COMMENT_PREFIX = "///"


class MissingDocumentationRule(Rule):
    id = "missing-documentation"
    title = "Missing Documentation"
    severity = Severity.INFO
    description = "Public function lacks documentation comment"
    recommendation = "Add /// documentation comment explaining function purpose"
    levels = STRICT_ONLY

    def check(self, context: SourceUnit, index: int) -> Optional[Finding]:
        if PUBLIC_FUN_MARKER not in context.lines[index]:
            return None
        if index > 0 and context.lines[index - 1].strip().startswith(DOC_COMMENT_PREFIX):
            return None
        return self._finding(context, index)
