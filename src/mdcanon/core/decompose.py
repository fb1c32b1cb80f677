"""Split a raw document into preamble, title, summary and body"""

import re
from typing import Optional

from mdcanon.core.errors import MalformedPreamble, TitleNotFound
from mdcanon.core.models import Document
from mdcanon.core.tokenize import DEFAULT_PRESET, make_parser
from mdcanon.core.utils.tokens import heading_level, inline_source


PREAMBLE_RE = re.compile(r'^\s*---(\r?\n(?:.*?\r?\n)?)---(?:\r?\n|$)(.*)$', re.DOTALL)
BODY_MARKER = "<!-- body -->"


def take_preamble(blob: str) -> tuple[str, str]:
    """Return (preamble, remainder); the preamble keeps its leading newline verbatim."""
    m = PREAMBLE_RE.match(blob)
    if not m:
        raise MalformedPreamble("Expected a preamble block delimited by '---' lines")
    return m.group(1), m.group(2)


def find_title(text: str, parser_config: str = DEFAULT_PRESET) -> Optional[str]:
    """Return the raw inline source of the first level-1 heading, else None."""
    tokens = make_parser(parser_config).parse(text)
    for i, tok in enumerate(tokens):
        if heading_level(tok) == 1:
            return inline_source(tokens, i)
    return None


def take_title(text: str, parser_config: str = DEFAULT_PRESET) -> tuple[str, str]:
    """Return (title, remainder) where remainder is everything after `# <title>`, trimmed."""
    title = find_title(text, parser_config)
    if title:
        # the heading line itself, not a `## <title>` that happens to contain it
        m = re.search(rf"^# {re.escape(title)}", text, re.MULTILINE)
        if m:
            return title, text[m.end():].strip()
    raise TitleNotFound("Expected a '# <title>' heading after the preamble")


def take_summary(text: str) -> tuple[Optional[str], str]:
    """Return (summary, body) split on the body marker; summary is None without a marker."""
    summary, sep, body = text.partition(BODY_MARKER)
    if sep:
        return summary.strip(), body.strip()
    return None, text.strip()


def decompose(raw: str, parser_config: str = DEFAULT_PRESET) -> Document:
    """Decompose raw text into a Document.

    Raises MalformedPreamble when the `---` block is missing and TitleNotFound
    when no level-1 heading follows it.
    """
    preamble, rest = take_preamble(raw)
    title, rest = take_title(rest, parser_config)
    summary, body = take_summary(rest)
    return Document(preamble=preamble, title=title, summary=summary, body=body)
