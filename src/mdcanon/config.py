"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDCANON_"


class Settings(BaseModel):
    app_name:        str = "mdcanon"
    source_dir:      str = Field(default="content",          description="Directory scanned for source documents")
    staging_dir:     str = Field(default=".mdcanon/staging", description="Staging directory for decomposed JSON")
    output_dir:      str = Field(default="dist",             description="Directory for canonical pages + JSON")
    parser_config:   str = Field(default="gfm-like",         description="MarkdownIt parser preset name")
    diagram_command: list[str] = Field(default=["dot", "-Tsvg"], min_length=1, description="Diagram renderer argv")
    diagram_timeout: Optional[float] = Field(default=None, gt=0, description="Seconds before the renderer is killed")
    log_level:       str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR)$")

    @field_validator('diagram_command', mode='before')
    @classmethod
    def _split_command(cls, value: Any) -> Any:
        """Accept a whitespace-separated string (env vars) as well as a list."""
        if isinstance(value, str):
            return value.split()
        return value

    @field_validator('log_level', mode='before')
    @classmethod
    def _upper_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDCANON_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return Settings(**data)
    except ValueError as e:
        raise ValueError(f"Invalid settings: {e}") from e
