# Per-file analysis context: store file path, raw content and its lines.
# Handles reading Move files and the saturating line windows every rule uses.

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence, Tuple

logger = logging.getLogger(__name__)


def split_lines(content: str) -> Tuple[str, ...]:
    """
    Split content into lines on '\\n', dropping one trailing '\\r' per line.

    A trailing newline does not produce a final empty line, and no other
    characters (form feeds, unicode separators) are treated as line breaks.
    """
    parts = content.split("\n")
    last = parts.pop()
    lines = [p[:-1] if p.endswith("\r") else p for p in parts]
    if last:
        lines.append(last)
    return tuple(lines)


@dataclass(frozen=True)
class SourceUnit:
    """
    One loaded Move source file: path, full content, and ordered raw lines.

    Rules read unit.lines for per-line checks and unit.content for
    whole-file pattern matching. Instances are never mutated.
    """

    path: Path
    content: str
    lines: Tuple[str, ...]

    @classmethod
    def from_text(cls, path: Path, content: str) -> "SourceUnit":
        return cls(path=Path(path), content=content, lines=split_lines(content))

    @property
    def stem(self) -> str:
        return self.path.stem


def take_lines(unit: SourceUnit, start: int, count: int) -> Sequence[str]:
    """
    Return up to `count` lines beginning at index `start`.

    Negative starts are clamped to 0 and the end is clamped to the file
    length, so callers never index outside the file.
    """
    start = max(start, 0)
    return unit.lines[start : start + count]


def lines_before(unit: SourceUnit, index: int, count: int) -> Sequence[str]:
    """
    Window anchored `count` lines above `index`: lines[max(0, index-count) : +count].

    Near the top of a file the window keeps its full width, so it can reach
    the trigger line and the lines after it.
    """
    return take_lines(unit, index - count, count)


def create_context(path: Path) -> SourceUnit:
    """
    Read a Move file into a SourceUnit.

    Raises:
        OSError: if the file cannot be read. Read failures abort the run.
    """
    try:
        content = path.read_bytes().decode("utf-8")
    except OSError as e:
        logger.error("Failed to read file %s: %s", path, e)
        raise
    except UnicodeDecodeError as e:
        logger.error("File %s is not valid UTF-8: %s", path, e)
        raise OSError(f"File {path} is not valid UTF-8: {e}") from e
    unit = SourceUnit.from_text(path, content)
    logger.debug("Loaded %s: %d line(s)", path, len(unit.lines))
    return unit


def load_corpus(paths: Iterable[Path]) -> list[SourceUnit]:
    """
    Read multiple Move files into SourceUnits, preserving input order.

    The first unreadable file raises; no partial corpus is returned.
    """
    corpus = [create_context(path) for path in paths]
    logger.info("Loaded %d source file(s)", len(corpus))
    return corpus
