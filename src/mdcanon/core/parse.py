"""Source discovery and decomposition of markdown files"""

import logging
from pathlib import Path

from mdcanon.core.decompose import decompose
from mdcanon.core.models import ParsedDoc
from mdcanon.core.tokenize import DEFAULT_PRESET
from mdcanon.core.utils.hashing import checksum
from mdcanon.core.utils.slug import slugify


logger = logging.getLogger(__name__)

MD_EXTENSIONS = {'.md'}


def _is_hidden(path: Path, root: Path) -> bool:
    """True when any component of path below root starts with a dot."""
    return any(part.startswith('.') for part in path.relative_to(root).parts)


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md files under path, skipping hidden entries, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(
        p for p in path.rglob('*')
        if p.is_file() and p.suffix in MD_EXTENSIONS and not _is_hidden(p, path)
    )


def parse_file(path: Path, parser_config: str = DEFAULT_PRESET) -> ParsedDoc:
    """Read and decompose a single source file.

    The slug comes from the preamble `id` or `slug` field, else the file stem.
    """
    raw = path.read_text(encoding='utf-8')
    document = decompose(raw, parser_config)
    metadata = document.metadata()
    slug = str(metadata.get('id') or metadata.get('slug') or '') or slugify(path.stem)
    logger.info("source(document): %s", path)
    return ParsedDoc(
        path=path,
        slug=slug,
        raw=raw,
        checksum=checksum(raw),
        document=document,
        metadata=metadata,
    )
