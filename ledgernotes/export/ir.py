"""Intermediate representation shared by every export format.

A note is converted once into a DocumentModel; the Markdown, HTML and Word
renderers only lay it out. Ledger totals are computed and formatted while
building the model, so every format prints the same strings.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Union

# Placeholder reasons
PLACEHOLDER_EMPTY = "empty"
PLACEHOLDER_INVALID = "invalid"

# Paragraph list styles
LIST_BULLET = "bullet"
LIST_NUMBER = "number"


@dataclass(frozen=True)
class Run:
    """A span of text with run-level styling. Colours are RRGGBB hex."""

    text: str
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strike: bool = False
    color: Optional[str] = None
    highlight: Optional[str] = None

    def with_text(self, text: str) -> "Run":
        return replace(self, text=text)


@dataclass
class Paragraph:
    """A block of runs: body text, heading (1-4) or list item."""

    runs: List[Run] = field(default_factory=list)
    heading: Optional[int] = None
    list_style: Optional[str] = None
    alignment: Optional[str] = None

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass
class TotalLine:
    """Aggregate of one flagged ledger column."""

    index: int
    header: str
    amount: float
    value: str  # formatted once, shared by every renderer

    @property
    def label(self) -> str:
        return f"Total {self.header}"


@dataclass
class LedgerTable:
    headers: List[str]
    rows: List[List[str]]
    sum_columns: List[int]
    totals: List[TotalLine] = field(default_factory=list)

    def is_sum_column(self, index: int) -> bool:
        return index in self.sum_columns


@dataclass
class Placeholder:
    """Stands in for ledger content that is empty or cannot be parsed."""

    reason: str


Block = Union[Paragraph, LedgerTable, Placeholder]


@dataclass
class DocumentModel:
    title: str
    mode: str
    tags: List[str]
    blocks: List[Block] = field(default_factory=list)
    is_ledger: bool = False
    # Source markup of rich notes; the HTML renderer passes it through
    source_html: str = ""
