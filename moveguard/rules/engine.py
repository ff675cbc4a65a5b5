# Security rule engine: run every enabled line rule over every line of every file.

from __future__ import annotations

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from moveguard.config import default_rules
from moveguard.context import SourceUnit
from moveguard.findings.models import Finding, Severity, Strictness
from moveguard.rules.base import Rule

logger = logging.getLogger(__name__)


class SecurityRuleEngine:
    """
    Applies line-anchored security rules to a corpus.

    Findings come out in discovery order: file order, then line order, then
    rule order. Nothing is deduplicated; one line can trigger several rules.
    """

    def __init__(self, rules: Optional[Sequence[Rule]] = None) -> None:
        if rules is None:
            rules = default_rules()
        self.rules: List[Rule] = list(rules)

    def active_rules(self, strictness: Strictness) -> List[Rule]:
        return [rule for rule in self.rules if rule.enabled_at(strictness)]

    def scan_unit(self, unit: SourceUnit, strictness: Strictness) -> List[Finding]:
        rules = self.active_rules(strictness)
        findings: List[Finding] = []
        for index in range(len(unit.lines)):
            for rule in rules:
                finding = rule.check(unit, index)
                if finding is not None:
                    findings.append(finding)
        return findings

    def scan(
        self,
        corpus: Iterable[SourceUnit],
        strictness: str | Strictness = Strictness.STANDARD,
    ) -> List[Finding]:
        level = Strictness.parse(strictness)
        findings: List[Finding] = []
        files = 0
        for unit in corpus:
            files += 1
            unit_findings = self.scan_unit(unit, level)
            logger.debug("%s: %d finding(s)", unit.path, len(unit_findings))
            findings.extend(unit_findings)
        logger.info("Security scan (%s): %d finding(s) in %d file(s)", level.value, len(findings), files)
        return findings


def count_by_severity(findings: Iterable[Finding]) -> Dict[Severity, int]:
    """Return a count for every severity (zero included), most severe first."""
    counts = Counter(f.severity for f in findings)
    return {severity: counts.get(severity, 0) for severity in Severity}


def has_blocking_findings(findings: Iterable[Finding]) -> bool:
    """True if any finding is Critical or High."""
    return any(f.severity in (Severity.CRITICAL, Severity.HIGH) for f in findings)
