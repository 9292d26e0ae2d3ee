"""Feed assembly: chapter links, RSS items, and pagination into feed pages"""

import re
from pathlib import PurePosixPath

from mdfeed.core.models import Document, FeedEntry, FeedPage
from mdfeed.core.preview import build_preview
from mdfeed.core.utils.dates import to_rfc2822


RSS_FILE_STEM = 'rss'
README_RE = re.compile(r'^readme$', re.IGNORECASE)


def page_file_name(stem: str, page_idx: int, ext: str) -> str:
    """'rss.xml' for the first page (index 0), then 'rss2.xml', 'rss3.xml', ..."""
    suffix = '' if page_idx == 0 else str(page_idx + 1)
    return f"{stem}{suffix}.{ext}"


def chapter_link(base_url: str, relative_path: str) -> str:
    """Absolute URL of the rendered page for a chapter source path."""
    path = PurePosixPath(relative_path.replace('\\', '/'))
    if README_RE.match(path.stem):
        path = path.with_name('index')
    html_path = path.with_suffix('.html').as_posix()
    return f"{base_url.rstrip('/')}/{html_path.lstrip('/')}"


def build_entry(
    doc: Document,
    base_url: str,
    full_preview: bool = False,
    preset: str = 'gfm-like',
    ) -> FeedEntry:
    fm = doc.front_matter
    link = chapter_link(base_url, doc.relative_path)
    return FeedEntry(
        title=fm.title,
        link=link,
        preview_html=build_preview(doc.body, fm.description, full_preview, preset),
        guid=link,
        permalink=True,
        pub_date=to_rfc2822(fm.date) if fm.date else None,
        author=fm.author,
    )


def paginate(entries: list, max_items: int, paginated: bool) -> list[list]:
    """Split entries into consecutive chunks of max_items, or a single chunk.

    A single chunk is returned when pagination is off, max_items is 0, or
    everything fits on one page.
    """
    if not paginated or max_items == 0 or len(entries) <= max_items:
        return [list(entries)]
    return [entries[i:i + max_items] for i in range(0, len(entries), max_items)]


def build_feed(
    documents: list[Document],
    title: str,
    site_url: str,
    description: str,
    full_preview: bool = False,
    max_items: int = 0,
    paginated: bool = False,
    generator: str = None,
    preset: str = 'gfm-like',
    ) -> list[FeedPage]:
    """Build one or more RSS pages from newest-first documents.

    The first page is always 'rss.xml'; further pages are numbered from 2.
    Every page shares the channel title, link and description.
    """
    entries = [build_entry(d, site_url, full_preview, preset) for d in documents]
    channel_link = f"{site_url.rstrip('/')}/"
    return [
        FeedPage(
            file_name=page_file_name(RSS_FILE_STEM, idx, 'xml'),
            channel_title=title,
            channel_link=channel_link,
            channel_description=description,
            generator=generator,
            entries=chunk,
        )
        for idx, chunk in enumerate(paginate(entries, max_items, paginated))
    ]
