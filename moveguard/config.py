from __future__ import annotations

"""
Analysis configuration: strictness, project directories, and which security
rules are registered.

Rules are listed in evaluation order. The engine evaluates them per line in
this order, so reordering the list changes the order of reported findings.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from moveguard.findings.models import Strictness
from moveguard.rules.access_control import MissingAccessControlRule
from moveguard.rules.base import Rule
from moveguard.rules.documentation import MissingDocumentationRule
from moveguard.rules.reentrancy import ReentrancyRule
from moveguard.rules.unchecked_transfer import UncheckedTransferRule
from moveguard.rules.unused_variable import UnusedVariableRule

DEFAULT_SOURCE_DIR = Path("sources")
DEFAULT_TEST_DIR = Path("tests")
OUTPUT_FORMATS = ("text", "json")


def default_rules() -> List[Rule]:
    """Return fresh instances of every security rule, in evaluation order."""
    return [
        UncheckedTransferRule(),
        MissingAccessControlRule(),
        ReentrancyRule(),
        UnusedVariableRule(),
        MissingDocumentationRule(),
    ]


@dataclass
class Config:
    """
    Analysis configuration.

    Built by the CLI from its options and passed explicitly to every
    command handler; nothing here is process-wide state.
    """

    strictness: Strictness = Strictness.STANDARD
    source_dir: Path = DEFAULT_SOURCE_DIR
    test_dir: Path = DEFAULT_TEST_DIR
    output_format: str = "text"
    rules: Sequence[Rule] = field(default_factory=default_rules)

    def __post_init__(self) -> None:
        self.strictness = Strictness.parse(self.strictness)
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output format '{self.output_format}' (expected one of: {', '.join(OUTPUT_FORMATS)})"
            )


def get_default_config(
    strictness: str | Strictness = Strictness.STANDARD,
    source_dir: Path | None = None,
    test_dir: Path | None = None,
    output_format: str = "text",
) -> Config:
    """Return the default configuration, overriding only what the caller passes."""
    return Config(
        strictness=Strictness.parse(strictness),
        source_dir=source_dir if source_dir is not None else DEFAULT_SOURCE_DIR,
        test_dir=test_dir if test_dir is not None else DEFAULT_TEST_DIR,
        output_format=output_format,
    )

