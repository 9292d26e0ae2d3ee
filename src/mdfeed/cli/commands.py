"""CLI command implementations"""

import json
import sys
from pathlib import Path
from typing import Annotated, Any, Optional

import typer

from mdfeed.config import GENERATOR, FeedConfig, Settings, load_config
from mdfeed.core.pipeline import run_pipeline
from mdfeed.log import configure_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings.log_level, settings.log_format)
    return settings


def _read_payload() -> tuple[Any, Any]:
    """Read the host's [context, book] JSON array from stdin."""
    try:
        payload = json.loads(sys.stdin.read())
    except json.JSONDecodeError as e:
        _fail("Invalid JSON on stdin", e)
    if not isinstance(payload, list) or len(payload) < 2:
        _fail("Expected a [context, book] JSON array on stdin")
    return payload[0], payload[1]


def _run(src_dir: Path, settings: Settings, output_dir: Path) -> list[tuple[Path, int]]:
    try:
        return run_pipeline(src_dir, settings, output_dir)
    except RuntimeError as e:
        _fail(str(e))
    except (OSError, ValueError) as e:
        _fail("Feed generation failed", e)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(GENERATOR)
        raise typer.Exit()


def preprocess_cmd(
    ctx: typer.Context,
    version: Annotated[Optional[bool], typer.Option(
        "--version", "-V", callback=version_callback, is_eager=True, help="Print version and exit",
    )] = None,
    ):
    """Run as an mdBook preprocessor: read [context, book] on stdin, write feeds, echo the book."""
    if ctx.invoked_subcommand is not None:
        return
    base = _settings()
    context, book = _read_payload()
    config = FeedConfig.from_context(context, base=base)
    _run(config.src_dir, config.settings, config.src_dir)
    sys.stderr.flush()
    typer.echo(json.dumps(book, separators=(",", ":"), ensure_ascii=False))


def supports_cmd(
    renderer: Annotated[str, typer.Argument(help="Renderer name offered by mdBook")] = "html",
    ):
    """Report renderer support (always true)."""
    typer.echo("true")


def build_cmd(
    path: Annotated[str, typer.Argument(help="Directory of markdown chapters")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory (default: PATH)")] = None,
    site_url: Annotated[Optional[str], typer.Option("--site-url", help="Public base URL")] = None,
    title: Annotated[Optional[str], typer.Option("--title", help="Channel title")] = None,
    description: Annotated[Optional[str], typer.Option("--description", help="Channel description")] = None,
    full_preview: Annotated[Optional[bool], typer.Option("--full-preview/--short-preview", help="Full chapter HTML in items")] = None,
    paginated: Annotated[Optional[bool], typer.Option("--paginated/--single-page", help="Split into numbered pages")] = None,
    max_items: Annotated[Optional[int], typer.Option("--max-items", help="Items per page; 0 = unlimited")] = None,
    json_feed: Annotated[Optional[bool], typer.Option("--json-feed/--no-json-feed", help="Also write feed.json")] = None,
    atom: Annotated[Optional[bool], typer.Option("--atom/--no-atom", help="Also write atom.xml")] = None,
    ):
    """Build feeds for a directory without an mdBook host."""
    settings = _settings(overrides={
        "site_url": site_url, "title": title, "description": description,
        "full_preview": full_preview, "paginated": paginated, "max_items": max_items,
        "json_feed": json_feed, "atom": atom,
    })
    src_dir = Path(path)
    output_dir = src_dir
    if out:
        output_dir = Path(out)
        output_dir.mkdir(parents=True, exist_ok=True)

    written = _run(src_dir, settings, output_dir)
    for file_path, size in written:
        typer.echo(f"  {file_path} ({size} bytes)")
    typer.echo(f"Wrote {len(written)} feed file(s) to {output_dir}/")
