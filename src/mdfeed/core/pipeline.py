"""Pipeline step functions: collect, assemble, render, and write orchestration"""

from pathlib import Path

import structlog

from mdfeed.config import GENERATOR, Settings
from mdfeed.core.export import render_pages, write_outputs
from mdfeed.core.feed import build_feed
from mdfeed.core.models import FeedPage
from mdfeed.core.parse import collect_documents


logger = structlog.get_logger()


def run_build(src_dir: Path, settings: Settings) -> list[FeedPage]:
    """Collect chapters under src_dir and assemble RSS pages. Nothing is written."""
    logger.debug("build_started", src_dir=str(src_dir), **settings.model_dump(
        include={"site_url", "title", "full_preview", "paginated", "max_items", "json_feed", "atom"}
    ))
    documents = collect_documents(src_dir)
    return build_feed(
        documents,
        title=settings.title,
        site_url=settings.site_url,
        description=settings.description,
        full_preview=settings.full_preview,
        max_items=settings.max_items,
        paginated=settings.paginated,
        generator=GENERATOR,
        preset=settings.parser_config,
    )


def run_export(pages: list[FeedPage], settings: Settings, output_dir: Path) -> list[tuple[Path, int]]:
    """Render every format before writing anything. Returns (path, byte_count) pairs."""
    outputs = render_pages(pages, settings.site_url, settings.json_feed, settings.atom)
    return write_outputs(outputs, output_dir)


def run_pipeline(src_dir: Path, settings: Settings, output_dir: Path = None) -> list[tuple[Path, int]]:
    """Full run: build pages from src_dir and write them into output_dir (default src_dir)."""
    pages = run_build(src_dir, settings)
    return run_export(pages, settings, output_dir or src_dir)
