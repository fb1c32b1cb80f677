"""Canonical markdown re-serialization of a structural event stream.

A single left-to-right pass over the events rebuilds the markdown with one
fixed layout per construct, so text that is already canonical comes back
byte for byte. Nesting is tracked on an explicit stack rather than by
recursion because the stream only ever shows one event at a time.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from mdcanon.core.diagram import DiagramRenderer
from mdcanon.core.errors import RenderEncodingError, RenderError, UnknownConstruct
from mdcanon.core.events import (
    Alignment,
    BlockQuote,
    CodeBlock,
    Construct,
    Emphasis,
    End,
    Event,
    FootnoteDefinition,
    FootnoteReference,
    Heading,
    Image,
    InlineCode,
    Link,
    List,
    ListItem,
    Paragraph,
    RawMarkup,
    Start,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableHead,
    TableRow,
    Text,
)
from mdcanon.core.tokenize import DEFAULT_PRESET, tokenize


logger = logging.getLogger(__name__)

DIAGRAM_INFO   = "dot"
CSV_TABLE_INFO = "csv target=table"
CSV_CARD_INFO  = "csv target=card"
CSV_SENTINEL   = "!!!!"

LIST_INDENT = 2

ALIGNMENT_MARKS: dict[Alignment, str] = {
    Alignment.none:   "-",
    Alignment.left:   ":-",
    Alignment.center: ":-:",
    Alignment.right:  "-:",
}

INLINE_MARKS: dict[type, str] = {
    Emphasis:      "_",
    Strong:        "**",
    Strikethrough: "~~",
}

# Chunks starting with these attach to the previous token; chunks ending with
# HUG_NEXT attach to the following one.
HUG_PREVIOUS = (".", ",", ";", "]", ")", "}", "“", "”", "‘", "’")
HUG_NEXT     = ("[", "(", "{", "“", "‘")


class Buffer:
    """Output text that can drop characters from its tail."""

    def __init__(self) -> None:
        self._chars: list[str] = []

    def push(self, text: str) -> None:
        self._chars.extend(text)

    def pop(self) -> None:
        if self._chars:
            self._chars.pop()

    def last(self) -> str:
        return self._chars[-1] if self._chars else ""

    def ends_with(self, suffix: str) -> bool:
        n = len(suffix)
        return n <= len(self._chars) and "".join(self._chars[len(self._chars) - n:]) == suffix

    def trim(self, char: str = " ") -> None:
        """Drop one trailing char if the buffer ends with it."""
        if self.last() == char:
            self._chars.pop()

    def __str__(self) -> str:
        return "".join(self._chars)


@dataclass
class RenderState:
    """Open constructs, list nesting and output of one render call."""
    stack:      list = field(default_factory=list)
    list_depth: Optional[int] = None
    out:        Buffer = field(default_factory=Buffer)

    def top(self) -> Optional[Construct]:
        return self.stack[-1] if self.stack else None


def recompose_sentence(chunk: str, out: Buffer) -> None:
    """Append a text run so that words end up separated by exactly one space."""
    text = chunk.strip()
    if not text:
        if out.last() not in ("", " ", "\n") + HUG_NEXT:
            out.push(" ")
        return
    if text.startswith(HUG_PREVIOUS):
        out.trim(" ")
    out.push(text)
    if not text.endswith(HUG_NEXT):
        out.push(" ")


def code_span(text: str) -> str:
    """Wrap text in a backtick fence longer than any backtick run it contains."""
    longest = max((len(run) for run in re.findall(r"`+", text)), default=0)
    fence = "`" * (longest + 1)
    pad = " " if text.startswith("`") or text.endswith("`") else ""
    return f"{fence}{pad}{text}{pad}{fence}"


class Canonicalizer:
    """Renders structural events back into canonical markdown."""

    def __init__(self, renderer: Optional[DiagramRenderer] = None) -> None:
        self.renderer = renderer or DiagramRenderer()
        self._starts = {
            Paragraph:          self._start_paragraph,
            Heading:            self._start_heading,
            BlockQuote:         self._start_blockquote,
            List:               self._start_list,
            ListItem:           self._start_item,
            CodeBlock:          self._start_code_block,
            FootnoteDefinition: self._start_footnote,
            Table:              self._start_table,
            TableHead:          self._start_table_row,
            TableRow:           self._start_table_row,
            TableCell:          self._ignore,
            Emphasis:           self._start_inline,
            Strong:             self._start_inline,
            Strikethrough:      self._start_inline,
            Link:               self._start_link,
            Image:              self._start_image,
        }
        self._ends = {
            Paragraph:          self._end_paragraph,
            Heading:            self._end_heading,
            BlockQuote:         self._end_blockquote,
            List:               self._end_list,
            ListItem:           self._ignore,
            CodeBlock:          self._end_code_block,
            FootnoteDefinition: self._end_footnote,
            Table:              self._end_table,
            TableHead:          self._end_table_head,
            TableRow:           self._end_table_row,
            TableCell:          self._end_table_cell,
            Emphasis:           self._end_inline,
            Strong:             self._end_inline,
            Strikethrough:      self._end_inline,
            Link:               self._end_link,
            Image:              self._end_image,
        }

    def render(self, events: Iterable[Event]) -> str:
        """Consume events and return the canonical markdown."""
        state = RenderState()
        for event in events:
            if isinstance(state.top(), Image) and not (isinstance(event, End) and isinstance(event.construct, Image)):
                # image descriptions are not rendered
                continue
            if isinstance(event, Start):
                self._dispatch(self._starts, state, event.construct)
            elif isinstance(event, End):
                self._dispatch(self._ends, state, event.construct)
            elif isinstance(event, Text):
                self._text(state, event.text)
            elif isinstance(event, InlineCode):
                if state.out.ends_with("  "):
                    state.out.pop()
                state.out.push(code_span(event.text) + " ")
            elif isinstance(event, RawMarkup):
                state.out.push(event.text)
            elif isinstance(event, FootnoteReference):
                state.out.trim(" ")
                state.out.push(f"[^{event.label}] ")
        return str(state.out)

    @staticmethod
    def _dispatch(handlers: dict, state: RenderState, construct: Construct) -> None:
        handler = handlers.get(type(construct))
        if handler is None:
            raise UnknownConstruct(construct)
        handler(state, construct)

    def _ignore(self, state: RenderState, construct: Construct) -> None:
        pass

    # --- text ---

    def _text(self, state: RenderState, text: str) -> None:
        top = state.top()
        if isinstance(top, CodeBlock):
            if top.info == DIAGRAM_INFO:
                state.out.push(self.renderer.render(text))
            elif top.info == CSV_TABLE_INFO:
                # TODO: render the CSV rows as an HTML table instead of fencing the raw text
                state.out.push(f"{CSV_SENTINEL}\n{text}\n{CSV_SENTINEL}")
            else:
                state.out.push(text)
        else:
            recompose_sentence(text, state.out)

    # --- blocks ---

    def _start_paragraph(self, state: RenderState, construct: Paragraph) -> None:
        top = state.top()
        if isinstance(top, BlockQuote):
            # every paragraph of a quote carries its own marker; the quote stays on top
            state.out.push("\n> ")
        elif isinstance(top, FootnoteDefinition):
            state.stack.append(construct)
        else:
            state.out.push("\n")
            state.stack.append(construct)

    def _end_paragraph(self, state: RenderState, construct: Paragraph) -> None:
        state.out.trim(" ")
        if isinstance(state.top(), BlockQuote):
            state.out.push("\n>")
        else:
            state.out.push("\n")
            state.stack.pop()

    def _start_heading(self, state: RenderState, construct: Heading) -> None:
        state.out.push(f"\n{'#' * construct.level} ")
        state.stack.append(construct)

    def _end_heading(self, state: RenderState, construct: Heading) -> None:
        state.out.trim(" ")
        state.out.push("\n")
        state.stack.pop()

    def _start_blockquote(self, state: RenderState, construct: BlockQuote) -> None:
        state.stack.append(construct)

    def _end_blockquote(self, state: RenderState, construct: BlockQuote) -> None:
        # the last paragraph left a continuation marker behind
        state.out.trim(">")
        state.out.push("\n")
        state.stack.pop()

    def _start_list(self, state: RenderState, construct: List) -> None:
        state.stack.append(construct)
        state.list_depth = 0 if state.list_depth is None else state.list_depth + 1

    def _end_list(self, state: RenderState, construct: List) -> None:
        state.stack.pop()
        state.list_depth = state.list_depth - 1 if state.list_depth else None
        if state.list_depth is None:
            state.out.trim(" ")
            state.out.push("\n")

    def _start_item(self, state: RenderState, construct: ListItem) -> None:
        hint = state.stack.pop() if state.stack else None
        if not isinstance(hint, List):
            raise RenderError(f"List item outside of a list (found {hint!r})")

        indent = " " * (LIST_INDENT * (state.list_depth or 0))
        parent = state.top()
        if isinstance(parent, List) and parent.ordered:
            # align under the parent's number and dot
            indent += " "

        state.out.trim(" ")
        if hint.ordered:
            state.out.push(f"\n{indent}{hint.start}. ")
            state.stack.append(List(hint.start + 1))
        else:
            state.out.push(f"\n{indent}- ")
            state.stack.append(hint)

    def _start_code_block(self, state: RenderState, construct: CodeBlock) -> None:
        info = construct.info
        state.out.push("\n")
        if info is None:
            state.out.push("```")
        elif info == DIAGRAM_INFO:
            state.out.push(f'\n<div class="figure from-{info}">')
        elif info == CSV_TABLE_INFO:
            state.out.push(f'\n<div class="table-wrapper from-{info.split(" ")[0]}">')
        elif info == CSV_CARD_INFO:
            state.out.push(f'\n<div class="card-wrapper from-{info.split(" ")[0]}">')
        else:
            state.out.push(f"```{info}")
        state.out.push("\n")
        state.stack.append(construct)

    def _end_code_block(self, state: RenderState, construct: CodeBlock) -> None:
        if construct.info in (DIAGRAM_INFO, CSV_TABLE_INFO):
            state.out.push("</div>\n")
        else:
            state.out.push("```\n")
        state.stack.pop()

    def _start_footnote(self, state: RenderState, construct: FootnoteDefinition) -> None:
        state.out.push(f"\n[^{construct.label}]: ")
        state.stack.append(construct)

    def _end_footnote(self, state: RenderState, construct: FootnoteDefinition) -> None:
        state.stack.pop()

    # --- tables ---

    def _start_table(self, state: RenderState, construct: Table) -> None:
        state.out.push("\n")
        state.stack.append(construct)

    def _end_table(self, state: RenderState, construct: Table) -> None:
        state.stack.pop()
        state.out.push("\n")

    def _start_table_row(self, state: RenderState, construct: Union[TableHead, TableRow]) -> None:
        state.out.push("| ")

    def _end_table_head(self, state: RenderState, construct: TableHead) -> None:
        table = state.top()
        if not isinstance(table, Table):
            raise RenderError(f"Table head outside of a table (found {table!r})")
        marks = "|".join(ALIGNMENT_MARKS[alignment] for alignment in table.alignments)
        state.out.trim(" ")
        state.out.push(f"\n|{marks}|\n")

    def _end_table_row(self, state: RenderState, construct: TableRow) -> None:
        state.out.trim(" ")
        state.out.push("\n")

    def _end_table_cell(self, state: RenderState, construct: TableCell) -> None:
        state.out.push("| ")

    # --- inlines ---

    def _start_inline(self, state: RenderState, construct: Union[Emphasis, Strong, Strikethrough]) -> None:
        state.stack.append(construct)
        state.out.push(INLINE_MARKS[type(construct)])

    def _end_inline(self, state: RenderState, construct: Union[Emphasis, Strong, Strikethrough]) -> None:
        state.out.trim(" ")
        state.out.push(INLINE_MARKS[type(construct)] + " ")
        state.stack.pop()

    def _start_link(self, state: RenderState, construct: Link) -> None:
        state.stack.append(construct)
        state.out.push("[")

    def _end_link(self, state: RenderState, construct: Link) -> None:
        state.out.trim(" ")
        state.out.push(f"]({construct.destination}) ")
        state.stack.pop()

    def _start_image(self, state: RenderState, construct: Image) -> None:
        # alt text is always rendered empty
        state.out.push(f"![]({construct.destination})")
        state.stack.append(construct)

    def _end_image(self, state: RenderState, construct: Image) -> None:
        state.out.push(" ")
        state.stack.pop()


def canonicalize(
    body: Union[str, bytes],
    renderer: Optional[DiagramRenderer] = None,
    parser_config: str = DEFAULT_PRESET,
    ) -> str:
    """Return the canonical markdown for body.

    Raises RenderEncodingError for undecodable input, DiagramRenderError when
    a `dot` block fails to render and UnknownConstruct for unsupported events.
    """
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RenderEncodingError(f"Markdown body is not valid UTF-8: {e}") from e
    logger.debug("canonicalize: %d chars", len(body))
    return Canonicalizer(renderer).render(tokenize(body, parser_config))
