# Pydantic data models for analysis results: findings, gas estimates, suggestions, coverage.

from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field


class Severity(str, Enum):
    """Finding severity, most severe first. Order is used for grouping only."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"


class Strictness(str, Enum):
    """How many security rules are active: basic < standard < strict."""

    BASIC = "basic"
    STANDARD = "standard"
    STRICT = "strict"

    @classmethod
    def parse(cls, value: "str | Strictness") -> "Strictness":
        if isinstance(value, Strictness):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown strictness level '{value}' (expected one of: {allowed})") from None


class Location(BaseModel):
    """Where in the source a result was reported (file and 1-based line)."""

    path: Path
    line: int = Field(..., ge=1, description="1-based line number")

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"


class Finding(BaseModel):
    """A single security-rule detection (e.g. unchecked transfer at line 42)."""

    severity: Severity
    title: str
    description: str
    location: Location
    recommendation: str

    model_config = {"frozen": True}


class FunctionSignatureMatch(BaseModel):
    """A matched function signature and the offset just past its opening brace."""

    name: str
    body_scan_start_offset: int = Field(..., ge=0)

    model_config = {"frozen": True}


class GasEstimate(BaseModel):
    function: str
    total: int = Field(..., ge=0)
    storage: int = Field(..., ge=0)
    computation: int = Field(..., ge=0)

    model_config = {"frozen": True}


class HotSpot(BaseModel):
    function: str
    total: int
    reason: str


class GasSummary(BaseModel):
    """Aggregate statistics over a list of gas estimates."""

    total_functions: int = 0
    average_total: int = 0
    highest: Optional[GasEstimate] = None
    lowest: Optional[GasEstimate] = None
    hot_spots: List[HotSpot] = Field(default_factory=list)
    efficient: List[GasEstimate] = Field(default_factory=list)


class OptimizationSuggestion(BaseModel):
    title: str
    location: Location
    current_description: str
    recommendation: str
    estimated_savings: int = Field(..., ge=0)

    model_config = {"frozen": True}


class TestCoverage(BaseModel):
    """Heuristic coverage ratios for one source module."""

    __test__ = False  # keep pytest from collecting this as a test class

    line_ratio: float = Field(0.0, ge=0.0, le=1.0)
    function_ratio: float = Field(0.0, ge=0.0, le=1.0)


def _percentage(covered: int, total: int) -> float:
    if total == 0:
        return 0.0
    return covered / total * 100.0


class CoverageEstimate(BaseModel):
    module_name: str
    path: Path
    lines_total: int = Field(..., ge=0)
    lines_covered_estimate: int = Field(..., ge=0)
    functions_total: int = Field(..., ge=0)
    functions_covered_estimate: int = Field(..., ge=0)

    model_config = {"arbitrary_types_allowed": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def line_percentage(self) -> float:
        return _percentage(self.lines_covered_estimate, self.lines_total)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def function_percentage(self) -> float:
        return _percentage(self.functions_covered_estimate, self.functions_total)


class CoverageReport(BaseModel):
    """Per-module coverage estimates plus totals summed across modules."""

    modules: List[CoverageEstimate] = Field(default_factory=list)
    lines_covered: int = 0
    lines_total: int = 0
    functions_covered: int = 0
    functions_total: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def line_percentage(self) -> float:
        return _percentage(self.lines_covered, self.lines_total)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def function_percentage(self) -> float:
        return _percentage(self.functions_covered, self.functions_total)
