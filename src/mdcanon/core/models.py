"""Data models for decomposed documents and the staging contract"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, field_validator

from mdcanon.core.errors import MalformedPreamble


class Document(BaseModel):
    """A raw document split into its structural parts. Immutable once built."""
    model_config = ConfigDict(frozen=True)

    preamble: str                   # verbatim text between the two `---` lines
    title:    str
    summary:  Optional[str] = None  # None when the body marker is absent
    body:     str

    @field_validator('title')
    @classmethod
    def _title_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be empty")
        return value

    def metadata(self) -> dict[str, Any]:
        """Parse the preamble as a YAML mapping."""
        try:
            data = yaml.safe_load(self.preamble) or {}
        except yaml.YAMLError as e:
            raise MalformedPreamble(f"Invalid YAML preamble: {e}") from e
        if not isinstance(data, dict):
            raise MalformedPreamble(f"Invalid YAML preamble: expected a mapping, got {type(data).__name__}")
        return data


class StagedDoc(BaseModel):
    """Staging contract: written by extract, read by export."""
    slug:     str
    path:     str
    checksum: str                   # sha256 of the raw source file
    metadata: dict[str, Any] = {}
    title:    str
    summary:  Optional[str] = None
    body:     str


@dataclass
class ParsedDoc:
    """Internal result of reading a source file; not persisted."""
    path:     Path
    slug:     str
    raw:      str
    checksum: str
    document: Document
    metadata: dict[str, Any]
