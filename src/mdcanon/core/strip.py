"""Plain-text rendering of markdown: keeps visible text, drops formatting"""

from mdcanon.core.events import (
    BlockQuote,
    Emphasis,
    End,
    InlineCode,
    Link,
    RawMarkup,
    Start,
    Strikethrough,
    Strong,
    Text,
)
from mdcanon.core.tokenize import DEFAULT_PRESET, tokenize


TRANSPARENT = (Emphasis, Link, Strikethrough, Strong, BlockQuote)


def strip(body: str, parser_config: str = DEFAULT_PRESET) -> str:
    """Strip all markdown from body.

    Transparent inline constructs vanish, every other structural boundary
    becomes a newline and raw HTML tags are dropped while the text between
    them is kept. Never raises for string input.
    """
    parts: list[str] = []
    for event in tokenize(body, parser_config):
        if isinstance(event, InlineCode):
            parts.append(" ")
            parts.append(event.text)
        elif isinstance(event, Text):
            parts.append(event.text)
        elif isinstance(event, RawMarkup):
            if not event.text.startswith("<"):
                parts.append(event.text)
        elif isinstance(event, (Start, End)) and isinstance(event.construct, TRANSPARENT):
            continue
        else:
            parts.append("\n")
    return "".join(parts).strip()
