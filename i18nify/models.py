"""Core data models shared across i18nify components."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple


class SpanKind(str, Enum):
    """Where a piece of extractable text was found."""

    MARKUP_ATTRIBUTE = "markup-attribute"
    MARKUP_BODY = "markup-body"
    MARKUP_INTERPOLATION = "markup-interpolation"
    SCRIPT_LITERAL = "script-literal"
    SCRIPT_TEMPLATE = "script-template"


@dataclass(frozen=True)
class TextSpan:
    """A located occurrence of extractable text within one buffer."""

    start: int
    end: int
    text: str
    kind: SpanKind

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise ValueError(f"Invalid span [{self.start}, {self.end})")


@dataclass(frozen=True)
class Replacement:
    """Edit applied by the span rewriter; ``start == end`` inserts."""

    start: int
    end: int
    text: str


@dataclass
class Region:
    """A block of a composite document with its offsets in the original content."""

    content: str
    start: int
    end: int
    attributes: Dict[str, Optional[str]] = field(default_factory=dict)

    @property
    def lang(self) -> Optional[str]:
        return self.attributes.get("lang")

    @property
    def setup(self) -> bool:
        return "setup" in self.attributes

    @property
    def label(self) -> str:
        return "<script setup>" if self.setup else "<script>"


@dataclass
class SourceDocument:
    """One input file and, for composite formats, its markup and script regions."""

    path: Path
    content: str
    template: Optional[Region] = None
    script: Optional[Region] = None
    skipped_scripts: List[Region] = field(default_factory=list)


@dataclass
class ExtractedText:
    """Key assigned to a span during a run."""

    key: str
    span: TextSpan


@dataclass
class FileOutcome:
    """Result of running the document pipeline over a single file."""

    path: Path
    original: str
    content: str
    extracted: List[ExtractedText] = field(default_factory=list)
    import_injected: bool = False

    @property
    def changed(self) -> bool:
        return self.content != self.original


@dataclass
class BatchReport:
    """Summary of an extraction batch."""

    outcomes: List[FileOutcome] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    dictionary_size: int = 0
    collisions: List[Tuple[str, str, str]] = field(default_factory=list)
    output: Optional[Path] = None
    dry_run: bool = False

    @property
    def changed_files(self) -> List[Path]:
        return [outcome.path for outcome in self.outcomes if outcome.changed]
