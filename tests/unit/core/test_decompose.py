"""Unit tests for core/decompose.py and the Document model"""

import pytest
from pydantic import ValidationError

from mdcanon.core.decompose import decompose, take_preamble, take_summary, take_title
from mdcanon.core.errors import DecomposeError, MalformedPreamble, TitleNotFound


def test_decompose_basic():
    """Preamble, title, summary and body are split on the fixed delimiters."""
    raw = "---\nfoo: bar\n---\n# Title\n\nSummary\n\n<!-- body -->\n\nBody."
    doc = decompose(raw)
    assert doc.title == "Title"
    assert doc.summary == "Summary"
    assert doc.body == "Body."
    assert doc.preamble == "\nfoo: bar\n"


def test_decompose_leading_whitespace_and_trailing_noise():
    """Whitespace before the preamble and after the body is tolerated."""
    raw = "\n---\nfoo: bar\n---\n# Title\n\nSummary\n\n<!-- body -->\n\nBody.\n        "
    doc = decompose(raw)
    assert doc.title == "Title"
    assert doc.summary == "Summary"
    assert doc.body == "Body."


def test_decompose_without_marker():
    """Without the body marker the summary is None and the body is the whole remainder."""
    raw = "---\nfoo: bar\n---\n# Title\n\nFirst paragraph.\n\nSecond paragraph.\n"
    doc = decompose(raw)
    assert doc.summary is None
    assert doc.body == "First paragraph.\n\nSecond paragraph."


def test_decompose_title_not_found():
    """A document without a level-1 heading fails with TitleNotFound."""
    with pytest.raises(TitleNotFound):
        decompose("---\nfoo: bar\n---\nJust text.\n\n## Not a title\n")


def test_decompose_missing_preamble():
    """A document without the `---` block fails with MalformedPreamble."""
    with pytest.raises(MalformedPreamble):
        decompose("# Title\n\nBody.\n")


def test_decompose_errors_are_value_errors():
    """Decomposition errors share a base class and remain ValueErrors."""
    with pytest.raises(ValueError):
        decompose("no preamble at all")
    assert issubclass(TitleNotFound, DecomposeError)


def test_take_preamble_requires_delimiter_line():
    """The closing delimiter must sit on its own line."""
    with pytest.raises(MalformedPreamble):
        take_preamble("---\nfoo: a---b\n")


def test_take_preamble_empty_block():
    """An empty preamble is valid."""
    preamble, rest = take_preamble("---\n---\n# Title\n")
    assert preamble == "\n"
    assert rest == "# Title\n"


def test_take_title_keeps_inline_markup():
    """The title is the raw heading source, inline markup included."""
    title, rest = take_title("# Heading `stuff`\n\nBody")
    assert title == "Heading `stuff`"
    assert rest == "Body"


def test_take_title_skips_lower_levels():
    """Level-2 headings before the title are not mistaken for it."""
    title, rest = take_title("## Intro\n\n# Real title\n\nBody")
    assert title == "Real title"
    assert rest == "Body"


def test_take_title_matches_heading_line():
    """A lower-level heading with the same text does not end the title search."""
    title, rest = take_title("## Title\n\n# Title\n\nBody")
    assert title == "Title"
    assert rest == "Body"


def test_take_summary_trims_both_sides():
    """Summary and body are trimmed around the marker."""
    assert take_summary("\n  Sum  \n<!-- body -->\n\n Body \n") == ("Sum", "Body")
    assert take_summary("  only body  ") == (None, "only body")


def test_document_metadata(sample_doc):
    """The preamble parses into a YAML mapping."""
    doc = decompose(sample_doc)
    assert doc.metadata() == {"type": "note", "id": "a-note", "author": "arnau"}


@pytest.mark.parametrize("preamble", ["foo: [unclosed\n", "- a\n- b\n"])
def test_document_metadata_invalid(preamble):
    """Invalid YAML or a non-mapping preamble raises MalformedPreamble."""
    doc = decompose(f"---\n{preamble}---\n# Title\n\nBody")
    with pytest.raises(MalformedPreamble):
        doc.metadata()


def test_document_is_immutable(sample_doc):
    """Documents cannot be modified once built."""
    doc = decompose(sample_doc)
    with pytest.raises(ValidationError):
        doc.title = "Other"
