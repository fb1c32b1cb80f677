from typer.testing import CliRunner

from mdcanon.cli.cli import app


def test_cli_smoke():
    runner = CliRunner()
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for name in ("build", "canonicalize", "decompose", "export", "extract", "strip"):
        assert name in result.output
