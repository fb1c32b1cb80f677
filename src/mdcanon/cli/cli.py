"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdcanon.cli.commands import (
    build_cmd,
    canonicalize_cmd,
    decompose_cmd,
    export_cmd,
    extract_cmd,
    main_callback,
    strip_cmd,
)


app = typer.Typer(name="mdcanon", no_args_is_help=True, help="Markdown decomposition and canonicalization")

app.callback()(main_callback)
app.command(name="build")(build_cmd)
app.command(name="canonicalize")(canonicalize_cmd)
app.command(name="decompose")(decompose_cmd)
app.command(name="export")(export_cmd)
app.command(name="extract")(extract_cmd)
app.command(name="strip")(strip_cmd)
