"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from mdcanon.config import Settings, load_config
from mdcanon.core.canonical import canonicalize
from mdcanon.core.decompose import decompose
from mdcanon.core.diagram import DiagramRenderer
from mdcanon.core.errors import MdcanonError
from mdcanon.core.pipeline import run_export, run_extract
from mdcanon.core.strip import strip
from mdcanon.logging_setup import setup_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _renderer(settings: Settings) -> DiagramRenderer:
    return DiagramRenderer(settings.diagram_command, settings.diagram_timeout)


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _fail(f"Cannot read {path}", e)


def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable DEBUG logging")] = False,
    ):
    """Markdown decomposition and canonicalization."""
    settings = _settings()
    setup_logging(settings.log_level, verbose)


def decompose_cmd(
    path: Annotated[Path, typer.Argument(help="Source document with preamble and title")],
    ):
    """Print the preamble, title, summary and body of a document."""
    settings = _settings()
    try:
        doc = decompose(_read(path), settings.parser_config)
    except MdcanonError as e:
        _fail(f"Cannot decompose {path}", e)
    typer.echo(f"preamble:\n{doc.preamble.strip()}\n")
    typer.echo(f"title: {doc.title}\n")
    typer.echo(f"summary:\n{doc.summary if doc.summary is not None else '(none)'}\n")
    typer.echo(f"body:\n{doc.body}")


def canonicalize_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown body to canonicalize")],
    ):
    """Print the canonical markdown for a file."""
    settings = _settings()
    try:
        text = canonicalize(_read(path), _renderer(settings), settings.parser_config)
    except MdcanonError as e:
        _fail(f"Cannot canonicalize {path}", e)
    typer.echo(text.strip())


def strip_cmd(
    path: Annotated[Path, typer.Argument(help="Markdown body to strip")],
    ):
    """Print the plain text of a file."""
    settings = _settings()
    typer.echo(strip(_read(path), settings.parser_config))


def extract_cmd(
    path: Annotated[Optional[str], typer.Argument(help="File or directory to extract from")] = None,
    staging: Annotated[Optional[str], typer.Option("--staging-dir", help="Staging directory")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Decompose source documents into staged JSON."""
    settings = _settings(overrides={"source_dir": path, "staging_dir": staging, "parser_config": parser})
    staging_dir = Path(settings.staging_dir)
    try:
        results = run_extract(settings.source_dir, staging_dir, settings.parser_config)
    except RuntimeError as e:
        _fail(str(e))
    for src, out_file in results:
        typer.echo(f"  {src} -> {out_file}")
    typer.echo(f"Extracted {len(results)} document(s) to {staging_dir}/")


def export_cmd(
    staging: Annotated[Optional[str], typer.Option("--staging-dir", help="Staging directory")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    ):
    """Write canonical pages + sidecar JSON for every staged document."""
    settings = _settings(overrides={"staging_dir": staging, "output_dir": out})
    output_dir = Path(settings.output_dir)
    try:
        results = run_export(Path(settings.staging_dir), output_dir, _renderer(settings), settings.parser_config)
    except RuntimeError as e:
        _fail(str(e))
    if not results:
        typer.echo("Nothing staged. Run 'mdcanon extract <path>' first.")
        raise typer.Exit(1)
    for slug, md_path in results:
        typer.echo(f"  {slug} -> {md_path}")
    typer.echo(f"Exported {len(results)} document(s) to {output_dir}/")


def build_cmd(
    path: Annotated[Optional[str], typer.Argument(help="File or directory to process")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    staging: Annotated[Optional[str], typer.Option("--staging-dir", help="Staging directory")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Run the full pipeline: extract -> export."""
    settings = _settings(overrides={
        "source_dir": path, "output_dir": out,
        "staging_dir": staging, "parser_config": parser,
    })
    staging_dir = Path(settings.staging_dir)
    output_dir = Path(settings.output_dir)

    # --- extract ---
    try:
        extracted = run_extract(settings.source_dir, staging_dir, settings.parser_config)
    except RuntimeError as e:
        _fail(str(e))
    for src, out_file in extracted:
        typer.echo(f"  {src} -> {out_file}")
    typer.echo(f"Extracted {len(extracted)} document(s) to {staging_dir}/")

    # --- export ---
    try:
        results = run_export(staging_dir, output_dir, _renderer(settings), settings.parser_config)
    except RuntimeError as e:
        _fail(str(e))
    for slug, md_path in results:
        typer.echo(f"  {slug} -> {md_path}")
    typer.echo(f"Exported {len(results)} document(s) to {output_dir}/")
