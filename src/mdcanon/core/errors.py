"""Exception taxonomy for document decomposition and markdown rendering"""

from typing import Any, Optional


class MdcanonError(Exception):
    """Base class for every error raised by the engine."""


class DecomposeError(MdcanonError, ValueError):
    """A raw document could not be split into preamble, title, summary and body."""


class MalformedPreamble(DecomposeError):
    """The document does not open with a `---` delimited preamble block."""


class TitleNotFound(DecomposeError):
    """No `# <title>` heading follows the preamble."""


class RenderError(MdcanonError):
    """A single render call failed; no partial output is produced."""


class RenderEncodingError(RenderError):
    """Text or bytes could not be decoded while rendering."""


class UnknownConstruct(RenderError):
    """The event stream carried a construct the canonicalizer has no rule for."""

    def __init__(self, construct: Any) -> None:
        super().__init__(f"Unknown construct: {construct!r}")
        self.construct = construct


class DiagramRenderError(RenderError):
    """The external diagram renderer exited with a failure."""

    def __init__(self, message: str, stderr: str = "", returncode: Optional[int] = None) -> None:
        super().__init__(message)
        self.stderr = stderr
        self.returncode = returncode

    def __str__(self) -> str:
        msg = super().__str__()
        if self.returncode is not None:
            msg = f"{msg} (exit status {self.returncode})"
        if self.stderr:
            msg = f"{msg}\n{self.stderr.rstrip()}"
        return msg
