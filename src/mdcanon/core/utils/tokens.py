"""Shared markdown-it token utilities"""

from typing import Optional

from markdown_it.token import Token


def heading_level(token: Token) -> Optional[int]:
    """Return the heading level (1-6) for an ATX heading_open token, else None."""
    if token.type != 'heading_open' or not token.markup.startswith('#'):
        return None
    if token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def inline_source(tokens: list[Token], i: int) -> Optional[str]:
    """Return the raw source of the inline token following tokens[i], if any."""
    if i + 1 < len(tokens) and tokens[i + 1].type == 'inline':
        return tokens[i + 1].content
    return None
