"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdfeed.cli.commands import build_cmd, preprocess_cmd, supports_cmd


app = typer.Typer(name="mdfeed", add_completion=False, help="RSS, Atom and JSON feeds for markdown books")

app.callback(invoke_without_command=True)(preprocess_cmd)
app.command(name="supports")(supports_cmd)
app.command(name="build")(build_cmd)
