"""
Gas optimization advice: line rules that flag costly patterns with an
estimated per-call saving, and the advisor that ranks them.

Each rule looks at one trigger line plus a fixed window around it and either
returns an OptimizationSuggestion or None. Rules are independent; a line
that fires two rules produces two suggestions, and nothing is deduplicated
before ranking.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import ClassVar, Iterable, List, Optional, Sequence

from moveguard.context import SourceUnit, take_lines
from moveguard.findings.models import Location, OptimizationSuggestion

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 5


class OptimizationRule(ABC):
    """Base class for optimization rules; subclasses implement check()."""

    id: ClassVar[str]
    title: ClassVar[str]
    current_description: ClassVar[str]
    recommendation: ClassVar[str]

    @abstractmethod
    def check(self, context: SourceUnit, index: int) -> Optional[OptimizationSuggestion]:
        ...

    def _suggestion(self, context: SourceUnit, index: int, savings: int) -> OptimizationSuggestion:
        return OptimizationSuggestion(
            title=self.title,
            location=Location(path=context.path, line=index + 1),
            current_description=self.current_description,
            recommendation=self.recommendation,
            estimated_savings=savings,
        )


class ExcessiveAllocationRule(OptimizationRule):
    """More than two `object::new` calls within the 20-line window around the trigger."""

    id = "excessive-allocation"
    title = "Reduce Storage Allocations"
    current_description = "Multiple object creations in same function"
    recommendation = "Consider using shared objects or batch operations"

    MARKER = "object::new"
    RADIUS = 10
    THRESHOLD = 2
    SAVINGS_PER_EXTRA = 200

    def check(self, context: SourceUnit, index: int) -> Optional[OptimizationSuggestion]:
        if self.MARKER not in context.lines[index]:
            return None
        window = take_lines(context, index - self.RADIUS, 2 * self.RADIUS)
        count = sum(1 for line in window if self.MARKER in line)
        if count <= self.THRESHOLD:
            return None
        return self._suggestion(context, index, self.SAVINGS_PER_EXTRA * (count - 1))


class VectorOpsInLoopRule(OptimizationRule):
    id = "vector-ops-in-loop"
    title = "Optimize Vector Operations"
    current_description = "Vector operations inside loop"
    recommendation = "Use Table for O(1) lookups or batch vector operations"

    LOOP_MARKERS = ("while", "loop")
    VECTOR_MARKERS = ("vector::push_back", "vector::borrow")
    LOOKAHEAD = 15
    SAVINGS = 150

    def check(self, context: SourceUnit, index: int) -> Optional[OptimizationSuggestion]:
        line = context.lines[index]
        if not any(marker in line for marker in self.LOOP_MARKERS):
            return None
        window = take_lines(context, index, self.LOOKAHEAD)
        if not any(marker in l for l in window for marker in self.VECTOR_MARKERS):
            return None
        return self._suggestion(context, index, self.SAVINGS)


class RepeatedComputationRule(OptimizationRule):
    """
    An assignment computing a product or quotient, followed by at least two
    more products/quotients within the next ten lines.
    """

    id = "repeated-computation"
    title = "Cache Computed Values"
    current_description = "Repeated calculations"
    recommendation = "Store intermediate results in variables"

    CALCULATION = re.compile(r"(\w+\s*\*\s*\w+|\w+\s*/\s*\w+)")
    LOOKAHEAD = 10
    MIN_REPEATS = 2
    SAVINGS = 100

    def check(self, context: SourceUnit, index: int) -> Optional[OptimizationSuggestion]:
        line = context.lines[index]
        if "=" not in line or "==" in line or not self.CALCULATION.search(line):
            return None
        window = take_lines(context, index + 1, self.LOOKAHEAD)
        repeats = sum(1 for l in window if self.CALCULATION.search(l))
        if repeats < self.MIN_REPEATS:
            return None
        return self._suggestion(context, index, self.SAVINGS)


class InefficientLookupRule(OptimizationRule):
    id = "inefficient-lookup"
    title = "Use Efficient Data Structures"
    current_description = "Using vector for lookups"
    recommendation = "Use Table or ObjectTable for O(1) access"

    VECTOR_MARKER = "vector::"
    LOOKUP_MARKERS = ("borrow", "contains")
    SAVINGS = 180

    def check(self, context: SourceUnit, index: int) -> Optional[OptimizationSuggestion]:
        line = context.lines[index]
        if self.VECTOR_MARKER not in line or not any(m in line for m in self.LOOKUP_MARKERS):
            return None
        return self._suggestion(context, index, self.SAVINGS)


def default_optimization_rules() -> List[OptimizationRule]:
    return [
        ExcessiveAllocationRule(),
        VectorOpsInLoopRule(),
        RepeatedComputationRule(),
        InefficientLookupRule(),
    ]


class OptimizationAdvisor:
    """Collects suggestions per file in line order, then ranks by savings."""

    def __init__(self, rules: Optional[Sequence[OptimizationRule]] = None, top_n: int = DEFAULT_TOP_N) -> None:
        self.rules: List[OptimizationRule] = list(rules) if rules is not None else default_optimization_rules()
        self.top_n = top_n

    def analyze_unit(self, unit: SourceUnit) -> List[OptimizationSuggestion]:
        suggestions: List[OptimizationSuggestion] = []
        for index in range(len(unit.lines)):
            for rule in self.rules:
                suggestion = rule.check(unit, index)
                if suggestion is not None:
                    suggestions.append(suggestion)
        return suggestions

    def analyze(self, corpus: Iterable[SourceUnit]) -> List[OptimizationSuggestion]:
        suggestions: List[OptimizationSuggestion] = []
        for unit in corpus:
            suggestions.extend(self.analyze_unit(unit))
        logger.info("Found %d optimization candidate(s)", len(suggestions))
        return suggestions

    def rank_and_truncate(self, suggestions: Sequence[OptimizationSuggestion]) -> List[OptimizationSuggestion]:
        ranked = sorted(suggestions, key=lambda s: s.estimated_savings, reverse=True)
        return ranked[: self.top_n]

    def advise(self, corpus: Iterable[SourceUnit]) -> List[OptimizationSuggestion]:
        return self.rank_and_truncate(self.analyze(corpus))


def total_savings(suggestions: Iterable[OptimizationSuggestion]) -> int:
    return sum(s.estimated_savings for s in suggestions)
