# Rule interface (abstract base class): defines the contract all security rules implement.
# Concrete rules (unchecked_transfer, reentrancy, etc.) subclass Rule and implement check().

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, FrozenSet, Optional

from moveguard.context import SourceUnit
from moveguard.findings.models import Finding, Location, Severity, Strictness

ALL_LEVELS: FrozenSet[Strictness] = frozenset(Strictness)
STRICT_ONLY: FrozenSet[Strictness] = frozenset({Strictness.STRICT})


class Rule(ABC):
    """
    Abstract base class for all line-anchored security rules.

    Subclasses must define:
    - id: str - unique rule identifier (e.g. "unchecked-transfer")
    - title: str - finding title (e.g. "Unchecked Transfer")
    - severity: Severity - severity of every finding this rule emits
    - check(context, index) -> Finding | None - inspect one trigger line

    Subclasses may narrow `levels` to the strictness levels they run at.
    The engine calls check() once per line, for every enabled rule in order.
    """

    id: ClassVar[str]
    title: ClassVar[str]
    severity: ClassVar[Severity]
    description: ClassVar[str] = ""
    recommendation: ClassVar[str] = ""
    levels: ClassVar[FrozenSet[Strictness]] = ALL_LEVELS

    def enabled_at(self, level: Strictness) -> bool:
        return level in self.levels

    @abstractmethod
    def check(self, context: SourceUnit, index: int) -> Optional[Finding]:
        """
        Decide whether line `index` of `context` triggers this rule.

        Args:
            context: The source file being scanned.
            index: 0-based index of the trigger line in context.lines.

        Returns:
            A Finding located at line index + 1, or None.
        """
        ...

    def _finding(self, context: SourceUnit, index: int, description: Optional[str] = None) -> Finding:
        return Finding(
            severity=self.severity,
            title=self.title,
            description=description if description is not None else self.description,
            location=Location(path=context.path, line=index + 1),
            recommendation=self.recommendation,
        )
