"""Structural events and the constructs they open and close.

The tokenizer turns a markdown body into a flat stream of these values. Both
the canonicalizer and the stripper consume the stream front to back and never
look at markdown-it tokens directly.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class Alignment(str, Enum):
    """Table column alignment as declared in the delimiter row."""
    none   = "none"
    left   = "left"
    center = "center"
    right  = "right"


# --- constructs ---

@dataclass(frozen=True)
class Paragraph:
    pass


@dataclass(frozen=True)
class Heading:
    level: int                      # 1-6


@dataclass(frozen=True)
class BlockQuote:
    pass


@dataclass(frozen=True)
class List:
    start: Optional[int] = None     # first number of an ordered list; None when unordered

    @property
    def ordered(self) -> bool:
        return self.start is not None


@dataclass(frozen=True)
class ListItem:
    pass


@dataclass(frozen=True)
class CodeBlock:
    info: Optional[str] = None      # fence info string; None for indented blocks

    @property
    def fenced(self) -> bool:
        return self.info is not None


@dataclass(frozen=True)
class FootnoteDefinition:
    label: str


@dataclass(frozen=True)
class Table:
    alignments: tuple[Alignment, ...] = ()


@dataclass(frozen=True)
class TableHead:
    pass


@dataclass(frozen=True)
class TableRow:
    pass


@dataclass(frozen=True)
class TableCell:
    pass


@dataclass(frozen=True)
class Emphasis:
    pass


@dataclass(frozen=True)
class Strong:
    pass


@dataclass(frozen=True)
class Strikethrough:
    pass


@dataclass(frozen=True)
class Link:
    destination: str


@dataclass(frozen=True)
class Image:
    destination: str


Construct = Union[
    Paragraph, Heading, BlockQuote, List, ListItem, CodeBlock, FootnoteDefinition,
    Table, TableHead, TableRow, TableCell, Emphasis, Strong, Strikethrough, Link, Image,
]


# --- events ---

@dataclass(frozen=True)
class Start:
    construct: Construct


@dataclass(frozen=True)
class End:
    construct: Construct


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class InlineCode:
    text: str


@dataclass(frozen=True)
class RawMarkup:
    text: str


@dataclass(frozen=True)
class SoftBreak:
    pass


@dataclass(frozen=True)
class HardBreak:
    pass


@dataclass(frozen=True)
class Rule:
    pass


@dataclass(frozen=True)
class FootnoteReference:
    label: str


Event = Union[
    Start, End, Text, InlineCode, RawMarkup, SoftBreak, HardBreak, Rule, FootnoteReference,
]
