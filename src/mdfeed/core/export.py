"""Export: serialize feed pages as RSS 2.0, Atom 1.0 and JSON Feed, and write output files"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import structlog
from feedgen.feed import FeedGenerator

from mdfeed.config import DEFAULT_TITLE
from mdfeed.core.convert import ATOM_FILE_STEM, JSON_FILE_STEM, page_urls, rss_to_atom, rss_to_json_feed
from mdfeed.core.feed import page_file_name
from mdfeed.core.models import AtomFeed, FeedPage, JsonFeed
from mdfeed.core.utils.dates import parse_rfc2822


logger = structlog.get_logger()


def _newest(dates: list[Optional[datetime]]) -> Optional[datetime]:
    known = [d for d in dates if d is not None]
    return max(known) if known else None


def build_rss(page: FeedPage) -> str:
    """Return RSS 2.0 XML for one page; items keep page order."""
    fg = FeedGenerator()
    title = page.channel_title or DEFAULT_TITLE
    fg.title(title)
    fg.link(href=page.channel_link, rel='alternate')
    # RSS requires a non-empty channel title and description
    fg.description(page.channel_description or title)
    if page.generator:
        fg.generator(page.generator)

    if any(e.author and '@' not in e.author for e in page.entries):
        fg.load_extension('dc')

    dates = []
    for entry in page.entries:
        fe = fg.add_entry(order='append')
        if entry.title:
            fe.title(entry.title)
        if entry.link:
            fe.link(href=entry.link, rel='alternate')
        if entry.preview_html is not None:
            fe.description(entry.preview_html)
        if entry.guid:
            fe.guid(entry.guid, permalink=entry.permalink)
        published = parse_rfc2822(entry.pub_date)
        dates.append(published)
        if published:
            fe.pubDate(published)
        if entry.author:
            # RSS 2.0 <author> must be an e-mail address; plain names go to dc:creator
            if '@' in entry.author:
                fe.author(email=entry.author)
            else:
                fe.dc.dc_creator(entry.author)

    if newest := _newest(dates):
        fg.lastBuildDate(newest)
    return fg.rss_str(pretty=True).decode('utf-8')


def build_atom(feed: AtomFeed, now: datetime = None) -> str:
    """Return Atom 1.0 XML. Undated entries take the feed's updated time."""
    updated = _newest([e.updated for e in feed.entries]) or now or datetime.now(timezone.utc)

    fg = FeedGenerator()
    title = feed.title or DEFAULT_TITLE
    fg.id(feed.id or title)
    fg.title(title)
    fg.updated(updated)
    if feed.subtitle:
        fg.subtitle(feed.subtitle)
    for link in feed.links:
        fg.link(href=link.href, rel=link.rel)

    for entry in feed.entries:
        fe = fg.add_entry(order='append')
        fe.id(entry.id)
        fe.title(entry.title or entry.id)
        for link in entry.links:
            fe.link(href=link.href, rel=link.rel)
        if entry.content_html is not None:
            fe.content(entry.content_html, type='html')
        fe.updated(entry.updated or updated)
        if entry.updated:
            fe.published(entry.updated)
        if entry.author:
            fe.author(name=entry.author)
    return fg.atom_str(pretty=True).decode('utf-8')


def build_json(feed: JsonFeed) -> str:
    return feed.model_dump_json(indent=2, exclude_none=True)


def render_pages(
    pages: list[FeedPage],
    site_url: str,
    json_feed: bool = False,
    atom: bool = False,
    ) -> list[tuple[str, str]]:
    """Serialize every requested format for every page. Returns (file_name, content) pairs."""
    total = len(pages)
    outputs = [(page.file_name, build_rss(page)) for page in pages]

    if json_feed:
        for idx, page in enumerate(pages):
            self_url, next_url, _ = page_urls(site_url, JSON_FILE_STEM, 'json', idx, total)
            feed = rss_to_json_feed(page, feed_url=self_url, next_url=next_url)
            outputs.append((page_file_name(JSON_FILE_STEM, idx, 'json'), build_json(feed)))

    if atom:
        for idx, page in enumerate(pages):
            self_url, next_url, prev_url = page_urls(site_url, ATOM_FILE_STEM, 'xml', idx, total)
            feed = rss_to_atom(page, self_url=self_url, next_url=next_url, prev_url=prev_url)
            outputs.append((page_file_name(ATOM_FILE_STEM, idx, 'xml'), build_atom(feed)))

    return outputs


def write_outputs(outputs: list[tuple[str, str]], output_dir: Path) -> list[tuple[Path, int]]:
    """Write rendered feeds into output_dir. Returns (path, byte_count) pairs.

    Raises RuntimeError naming the file on the first write failure.
    """
    written = []
    for name, content in outputs:
        path = output_dir / name
        data = content.encode('utf-8')
        try:
            path.write_bytes(data)
        except OSError as e:
            raise RuntimeError(f"Failed to write {path}: {e}") from e
        logger.info("feed_written", path=str(path), bytes=len(data))
        written.append((path, len(data)))
    return written
