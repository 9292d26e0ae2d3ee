"""Pure conversions from a native RSS page to JSON Feed 1.1 and Atom 1.0 models"""

from typing import Optional

from mdfeed.core.feed import page_file_name
from mdfeed.core.models import (
    AtomEntry,
    AtomFeed,
    AtomLink,
    FeedPage,
    JsonFeed,
    JsonFeedAuthor,
    JsonFeedItem,
)
from mdfeed.core.utils.dates import parse_rfc2822, to_rfc3339


JSON_FILE_STEM = 'feed'
ATOM_FILE_STEM = 'atom'


def page_urls(
    site_url: str,
    stem: str,
    ext: str,
    page_idx: int,
    total_pages: int,
    ) -> tuple[str, Optional[str], Optional[str]]:
    """Return (self, next, prev) URLs for page_idx using the numbered file scheme."""
    base = site_url.rstrip('/')

    def url(idx: int) -> str:
        return f"{base}/{page_file_name(stem, idx, ext)}"

    next_url = url(page_idx + 1) if page_idx + 1 < total_pages else None
    prev_url = url(page_idx - 1) if page_idx > 0 else None
    return url(page_idx), next_url, prev_url


def rss_to_json_feed(
    page: FeedPage,
    feed_url: Optional[str] = None,
    next_url: Optional[str] = None,
    ) -> JsonFeed:
    items = []
    for entry in page.entries:
        published = parse_rfc2822(entry.pub_date)
        items.append(JsonFeedItem(
            id=entry.identity,
            url=entry.link,
            title=entry.title,
            content_html=entry.preview_html,
            date_published=to_rfc3339(published) if published else None,
            author=JsonFeedAuthor(name=entry.author) if entry.author else None,
        ))
    return JsonFeed(
        title=page.channel_title,
        home_page_url=page.channel_link,
        feed_url=feed_url,
        description=page.channel_description,
        next_url=next_url,
        items=items,
    )


def rss_to_atom(
    page: FeedPage,
    self_url: Optional[str] = None,
    next_url: Optional[str] = None,
    prev_url: Optional[str] = None,
    ) -> AtomFeed:
    """Map a page to Atom; with a self_url the feed id and rel links follow the page scheme."""
    entries = [
        AtomEntry(
            id=entry.identity,
            title=entry.title,
            links=[AtomLink(href=entry.link)] if entry.link else [],
            content_html=entry.preview_html,
            updated=parse_rfc2822(entry.pub_date),
            author=entry.author,
        )
        for entry in page.entries
    ]

    links = [AtomLink(href=page.channel_link)] if page.channel_link else []
    feed_id = page.channel_link or page.channel_title
    if self_url:
        feed_id = self_url
        links.append(AtomLink(href=self_url, rel='self'))
        if next_url:
            links.append(AtomLink(href=next_url, rel='next'))
        if prev_url:
            links.append(AtomLink(href=prev_url, rel='prev'))

    return AtomFeed(
        id=feed_id,
        title=page.channel_title,
        subtitle=page.channel_description or None,
        links=links,
        entries=entries,
    )
