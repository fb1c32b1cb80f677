"""Pipeline step functions: extract to staging, export to output"""

import logging
from pathlib import Path
from typing import Optional

from mdcanon.core.diagram import DiagramRenderer
from mdcanon.core.export import write_doc
from mdcanon.core.models import ParsedDoc, StagedDoc
from mdcanon.core.parse import discover_files, parse_file
from mdcanon.core.tokenize import DEFAULT_PRESET


logger = logging.getLogger(__name__)


def stage(parsed: ParsedDoc) -> StagedDoc:
    """Convert a parsed source file into the staging contract."""
    doc = parsed.document
    return StagedDoc(
        slug=parsed.slug,
        path=str(parsed.path),
        checksum=parsed.checksum,
        metadata=parsed.metadata,
        title=doc.title,
        summary=doc.summary,
        body=doc.body,
    )


def run_extract(
    path: str,
    staging_dir: Path,
    parser_config: str = DEFAULT_PRESET,
    ) -> list[tuple[Path, Path]]:
    """Decompose every file under path into StagedDoc JSON. Returns (source_path, staging_file) pairs."""
    staging_dir.mkdir(parents=True, exist_ok=True)
    results = []
    for p in discover_files(Path(path)):
        try:
            staged = stage(parse_file(p, parser_config))
            out_file = staging_dir / f"{staged.slug}.json"
            out_file.write_text(staged.model_dump_json(indent=2), encoding='utf-8')
            results.append((p, out_file))
        except Exception as e:
            raise RuntimeError(f"Failed to extract {p}: {e}") from e
    logger.debug("extract: %d document(s) staged in %s", len(results), staging_dir)
    return results


def run_export(
    staging_dir: Path,
    output_dir: Path,
    renderer: Optional[DiagramRenderer] = None,
    parser_config: str = DEFAULT_PRESET,
    ) -> list[tuple[str, Path]]:
    """Render every staged document into output_dir. Returns (slug, md_path) pairs.

    Returns [] when staging_dir is missing or empty.
    """
    files = sorted(staging_dir.glob('*.json')) if staging_dir.exists() else []
    results = []
    for f in files:
        try:
            staged = StagedDoc.model_validate_json(f.read_text(encoding='utf-8'))
            md_path, _ = write_doc(staged, output_dir, renderer, parser_config)
            results.append((staged.slug, md_path))
        except Exception as e:
            raise RuntimeError(f"Failed to export {f}: {e}") from e
    return results
