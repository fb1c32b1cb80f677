"""Export: build canonical pages and sidecar JSON from staged documents"""

import json
import logging
from pathlib import Path
from typing import Optional

import yaml

from mdcanon.core.canonical import canonicalize
from mdcanon.core.diagram import DiagramRenderer
from mdcanon.core.models import StagedDoc
from mdcanon.core.strip import strip
from mdcanon.core.tokenize import DEFAULT_PRESET


logger = logging.getLogger(__name__)


def describe(staged: StagedDoc, parser_config: str = DEFAULT_PRESET) -> tuple[str, str]:
    """Return (title, description) as plain text."""
    title = strip(staged.title, parser_config)
    description = strip(staged.summary, parser_config) if staged.summary else ""
    return title, description


def build_page(
    staged: StagedDoc,
    renderer: Optional[DiagramRenderer] = None,
    parser_config: str = DEFAULT_PRESET,
    ) -> str:
    """Return a YAML front block (plain title, description, preamble fields) followed by the canonical body."""
    title, description = describe(staged, parser_config)
    fm = {'title': title, 'description': description}
    fm.update({k: v for k, v in staged.metadata.items() if k not in fm})
    header = yaml.dump(fm, default_flow_style=False, allow_unicode=True, sort_keys=False)
    body = canonicalize(staged.body, renderer, parser_config)
    return f"---\n{header}---\n{body.lstrip()}"


def build_sidecar(staged: StagedDoc, parser_config: str = DEFAULT_PRESET) -> dict:
    """Build the sidecar JSON dict: slug, path, checksum, plain title and description."""
    title, description = describe(staged, parser_config)
    return {
        "slug": staged.slug,
        "path": staged.path,
        "checksum": staged.checksum,
        "title": title,
        "description": description,
    }


def write_doc(
    staged: StagedDoc,
    output_dir: Path,
    renderer: Optional[DiagramRenderer] = None,
    parser_config: str = DEFAULT_PRESET,
    ) -> tuple[Path, Path]:
    """Write <slug>.md and <slug>.json for a single staged document.

    Returns (md_path, json_path).
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    md_path = output_dir / f"{staged.slug}.md"
    json_path = output_dir / f"{staged.slug}.json"

    md_path.write_text(build_page(staged, renderer, parser_config), encoding='utf-8')
    json_path.write_text(json.dumps(build_sidecar(staged, parser_config), indent=2), encoding='utf-8')
    logger.info("export(page): %s", md_path)
    return md_path, json_path
