"""markdown-it tokenization into a flat stream of structural events"""

from typing import Callable, Iterator, Optional

from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.footnote import footnote_plugin

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
    HardBreak,
    Heading,
    Image,
    InlineCode,
    Link,
    List,
    ListItem,
    Paragraph,
    RawMarkup,
    Rule,
    SoftBreak,
    Start,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableHead,
    TableRow,
    Text,
)


DEFAULT_PRESET = "gfm-like"

ALIGN_STYLES: dict[str, Alignment] = {
    "text-align:left":   Alignment.left,
    "text-align:center": Alignment.center,
    "text-align:right":  Alignment.right,
}


def _footnote_label(token: Token) -> str:
    """Return the footnote label; anonymous inline footnotes fall back to their 1-based id."""
    meta = token.meta or {}
    return meta.get("label") or str(meta.get("id", 0) + 1)


OPENERS: dict[str, Callable[[Token], Construct]] = {
    "paragraph_open":    lambda tok: Paragraph(),
    "heading_open":      lambda tok: Heading(int(tok.tag[1:])),
    "blockquote_open":   lambda tok: BlockQuote(),
    "bullet_list_open":  lambda tok: List(),
    "ordered_list_open": lambda tok: List(int(tok.attrGet("start") or 1)),
    "list_item_open":    lambda tok: ListItem(),
    "footnote_open":     lambda tok: FootnoteDefinition(_footnote_label(tok)),
    "thead_open":        lambda tok: TableHead(),
    "tr_open":           lambda tok: TableRow(),
    "th_open":           lambda tok: TableCell(),
    "td_open":           lambda tok: TableCell(),
    "em_open":           lambda tok: Emphasis(),
    "strong_open":       lambda tok: Strong(),
    "s_open":            lambda tok: Strikethrough(),
    "link_open":         lambda tok: Link(str(tok.attrGet("href") or "")),
}


EXTENSIONS = ["table", "strikethrough"]


def make_parser(preset: str = DEFAULT_PRESET) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name.

    Tables, strikethrough and footnotes are enabled whatever the preset.
    """
    parser = MarkdownIt(preset, options_update={"linkify": False})
    return parser.enable(EXTENSIONS).use(footnote_plugin)


def table_alignments(tokens: list[Token], start: int) -> tuple[Alignment, ...]:
    """Read column alignments from the header cells following the table_open at start."""
    aligns = []
    for tok in tokens[start + 1:]:
        if tok.type == "thead_close":
            break
        if tok.type == "th_open":
            aligns.append(ALIGN_STYLES.get(str(tok.attrGet("style") or ""), Alignment.none))
    return tuple(aligns)


def _open_construct(tokens: list[Token], i: int, stack: list) -> Optional[Construct]:
    """Return the construct opened by tokens[i], or None when it has no event counterpart."""
    tok = tokens[i]
    if tok.type == "table_open":
        return Table(table_alignments(tokens, i))
    if tok.hidden:
        # paragraphs of tight list items
        return None
    if tok.type == "tr_open" and stack and isinstance(stack[-1], TableHead):
        return None
    factory = OPENERS.get(tok.type)
    return factory(tok) if factory else None


def _code_block(construct: CodeBlock, content: str) -> Iterator[Event]:
    yield Start(construct)
    if content:
        yield Text(content)
    yield End(construct)


def _walk(tokens: list[Token], stack: list) -> Iterator[Event]:
    """Translate tokens (and inline children) into events.

    Every opening token pushes onto stack, including the ones with no event
    counterpart (pushed as None), so closing tokens always pair with their opener.
    """
    for i, tok in enumerate(tokens):
        if tok.nesting == 1:
            construct = _open_construct(tokens, i, stack)
            stack.append(construct)
            if construct is not None:
                yield Start(construct)
        elif tok.nesting == -1:
            construct = stack.pop() if stack else None
            if construct is not None:
                yield End(construct)
        elif tok.type == "inline":
            yield from _walk(tok.children or [], stack)
        elif tok.type in ("text", "text_special"):
            yield Text(tok.content)
        elif tok.type == "code_inline":
            yield InlineCode(tok.content)
        elif tok.type == "html_inline":
            yield RawMarkup(tok.content)
        elif tok.type == "html_block":
            # one event per source line
            for line in tok.content.splitlines(keepends=True):
                yield RawMarkup(line)
        elif tok.type == "fence":
            yield from _code_block(CodeBlock(tok.info), tok.content)
        elif tok.type == "code_block":
            yield from _code_block(CodeBlock(None), tok.content)
        elif tok.type == "image":
            image = Image(str(tok.attrGet("src") or ""))
            yield Start(image)
            yield from _walk(tok.children or [], stack)
            yield End(image)
        elif tok.type == "softbreak":
            yield SoftBreak()
        elif tok.type == "hardbreak":
            yield HardBreak()
        elif tok.type == "hr":
            yield Rule()
        elif tok.type == "footnote_ref":
            yield FootnoteReference(_footnote_label(tok))


def tokenize(body: str, parser_config: str = DEFAULT_PRESET) -> Iterator[Event]:
    """Yield the structural events of body in document order.

    The stream is produced lazily and can only be consumed once.
    """
    tokens = make_parser(parser_config).parse(body)
    yield from _walk(tokens, [])

