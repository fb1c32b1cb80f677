"""Shared fixtures for core unit tests"""

import sys

import pytest

from mdcanon.core.diagram import DiagramRenderer


SAMPLE_DOC = """\
---
type: note
id: a-note
author: arnau
---
# A simple note

This note is showing the minimum required for a note.

<!-- body -->

From here onwards it's the body of the note.
"""

# Wraps stdin in an <svg> element so diagram output is predictable without Graphviz.
ECHO_SVG = "import sys; sys.stdout.write('<svg>' + sys.stdin.read().strip() + '</svg>')"
FAIL_WITH_STDERR = "import sys; sys.stderr.write('syntax error in line 1'); sys.exit(2)"


@pytest.fixture(name="echo_renderer")
def echo_renderer_fixture():
    return DiagramRenderer([sys.executable, "-c", ECHO_SVG])


@pytest.fixture(name="failing_renderer")
def failing_renderer_fixture():
    return DiagramRenderer([sys.executable, "-c", FAIL_WITH_STDERR])


@pytest.fixture(name="sample_doc")
def sample_doc_fixture():
    return SAMPLE_DOC
