"""External diagram rendering through a Graphviz-compatible subprocess"""

import logging
import subprocess
from typing import Optional, Sequence

from mdcanon.core.errors import DiagramRenderError, RenderEncodingError


logger = logging.getLogger(__name__)

DEFAULT_COMMAND = ("dot", "-Tsvg")


def _decode(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise RenderEncodingError(f"Diagram renderer output is not valid UTF-8: {e}") from e


class DiagramRenderer:
    """Runs a command that reads a diagram description on stdin and writes graphics markup.

    Each call spawns, feeds and reaps its own child process; nothing is shared
    between calls.
    """

    def __init__(self, command: Sequence[str] = DEFAULT_COMMAND, timeout: Optional[float] = None) -> None:
        if not command:
            raise ValueError("Diagram renderer command must not be empty")
        self.command = list(command)
        self.timeout = timeout

    def render(self, source: str) -> str:
        """Return the renderer's stdout for source, raising DiagramRenderError on failure."""
        logger.debug("diagram(render): %s", " ".join(self.command))
        try:
            result = subprocess.run(
                self.command,
                input=source.encode("utf-8"),
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise DiagramRenderError(f"Diagram renderer not found: {self.command[0]}") from e
        except subprocess.TimeoutExpired as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="replace")
            raise DiagramRenderError(f"Diagram renderer timed out after {self.timeout}s", stderr) from e
        except OSError as e:
            raise DiagramRenderError(f"Diagram renderer failed to start: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace")
            raise DiagramRenderError("Diagram renderer failed", stderr, result.returncode)
        return _decode(result.stdout)
