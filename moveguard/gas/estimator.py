# Gas cost estimation: weighted marker counts from each function's opening brace to end of file.

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern, Sequence

from moveguard.context import SourceUnit
from moveguard.findings.models import FunctionSignatureMatch, GasEstimate, GasSummary, HotSpot

logger = logging.getLogger(__name__)

# Function declarations, optionally `public`, at the start of a line
FUNCTION_PATTERN = re.compile(r"^\s*(?:public\s+)?fun\s+(\w+)", re.MULTILINE)

OBJECT_NEW_MARKER = "object::new"
TRANSFER_MARKER = "transfer::"
TABLE_MARKER = "table::"
VECTOR_MARKER = "vector::"
BALANCE_MARKER = "balance::"

OBJECT_NEW_COST = 500
TABLE_OP_COST = 300
TRANSFER_COST = 200
VECTOR_OP_COST = 50
BALANCE_OP_COST = 100
BASE_COST = 200

HOT_SPOT_COUNT = 3
EFFICIENT_COUNT = 2


@lru_cache(maxsize=256)
def _body_pattern(function_name: str) -> Pattern[str]:
    """Signature through the first `{` after the parameter list."""
    return re.compile(r"fun\s+" + re.escape(function_name) + r"\s*\([^)]*\)[^{]*\{")


def find_signature(content: str, function_name: str) -> Optional[FunctionSignatureMatch]:
    """Return the first signature match for `function_name`, or None."""
    m = _body_pattern(function_name).search(content)
    if m is None:
        return None
    return FunctionSignatureMatch(name=function_name, body_scan_start_offset=m.end())


def default_estimate(function_name: str) -> GasEstimate:
    return GasEstimate(function=function_name, total=BASE_COST, storage=0, computation=BASE_COST)


def estimate_region(function_name: str, region: str) -> GasEstimate:
    storage = region.count(OBJECT_NEW_MARKER) * OBJECT_NEW_COST + region.count(TABLE_MARKER) * TABLE_OP_COST
    computation = (
        region.count(TRANSFER_MARKER) * TRANSFER_COST
        + region.count(VECTOR_MARKER) * VECTOR_OP_COST
        + region.count(BALANCE_MARKER) * BALANCE_OP_COST
    )
    return GasEstimate(
        function=function_name,
        total=storage + computation + BASE_COST,
        storage=storage,
        computation=computation,
    )


class GasCostEstimator:
    """
    Per-function gas estimates from keyword frequency.

    The scan region of a function runs from just past its opening brace to
    the end of the file, not to its closing brace. Earlier functions in a
    file therefore also count the operations of every function after them.
    Functions sharing a name all receive the estimate of the first match.
    """

    def estimate_function(self, unit: SourceUnit, function_name: str) -> GasEstimate:
        signature = find_signature(unit.content, function_name)
        if signature is None:
            logger.debug("No signature body found for %s in %s", function_name, unit.path)
            return default_estimate(function_name)
        return estimate_region(function_name, unit.content[signature.body_scan_start_offset :])

    def estimate_unit(self, unit: SourceUnit) -> List[GasEstimate]:
        return [self.estimate_function(unit, m.group(1)) for m in FUNCTION_PATTERN.finditer(unit.content)]

    def estimate(self, corpus: Iterable[SourceUnit]) -> List[GasEstimate]:
        estimates: List[GasEstimate] = []
        for unit in corpus:
            estimates.extend(self.estimate_unit(unit))
        logger.info("Estimated gas for %d function(s)", len(estimates))
        return estimates


def filter_estimates(estimates: Sequence[GasEstimate], function: Optional[str]) -> List[GasEstimate]:
    """Keep estimates whose function name contains `function` (all if None)."""
    if function is None:
        return list(estimates)
    return [e for e in estimates if function in e.function]


def _hot_spot_reason(estimate: GasEstimate) -> str:
    if estimate.storage > estimate.computation:
        return "High storage allocation"
    return "Complex computation"


def summarize_estimates(estimates: Sequence[GasEstimate]) -> GasSummary:
    """
    Aggregate statistics: count, integer average, highest and lowest totals,
    the top three consumers (when there are at least three) and the two
    cheapest functions (when there are at least two).
    """
    if not estimates:
        return GasSummary()

    count = len(estimates)
    # Ties: highest is the last maximal element, lowest the first minimal one
    highest = estimates[0]
    for e in estimates:
        if e.total >= highest.total:
            highest = e
    lowest = min(estimates, key=lambda e: e.total)

    ranked = sorted(estimates, key=lambda e: e.total, reverse=True)
    hot_spots: List[HotSpot] = []
    if count >= HOT_SPOT_COUNT:
        hot_spots = [
            HotSpot(function=e.function, total=e.total, reason=_hot_spot_reason(e))
            for e in ranked[:HOT_SPOT_COUNT]
        ]
    efficient: List[GasEstimate] = []
    if count >= EFFICIENT_COUNT:
        efficient = list(reversed(ranked))[:EFFICIENT_COUNT]

    return GasSummary(
        total_functions=count,
        average_total=sum(e.total for e in estimates) // count,
        highest=highest,
        lowest=lowest,
        hot_spots=hot_spots,
        efficient=efficient,
    )
