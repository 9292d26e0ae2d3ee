"""Unit tests for core/feed.py"""

import math
from datetime import datetime, timezone

import pytest

from mdfeed.core.feed import build_entry, build_feed, chapter_link, page_file_name, paginate
from mdfeed.core.models import Document, FrontMatter


BASE = "https://example.com/book/"


def _doc(rel: str, title: str = "T", day: int = None, body: str = "Body text.\n", **fm) -> Document:
    date = datetime(2024, 1, day, tzinfo=timezone.utc) if day else None
    return Document(
        front_matter=FrontMatter(title=title, date=date, **fm),
        body=body,
        relative_path=rel,
    )


# --- links ---

@pytest.mark.parametrize("rel,expected", [
    ("intro.md", "https://example.com/book/intro.html"),
    ("part1/chapter.md", "https://example.com/book/part1/chapter.html"),
    ("part1\\chapter.md", "https://example.com/book/part1/chapter.html"),
    ("notes.markdown", "https://example.com/book/notes.html"),
    ("README.md", "https://example.com/book/index.html"),
    ("guide/readme.md", "https://example.com/book/guide/index.html"),
    ("guide/readme-first.md", "https://example.com/book/guide/readme-first.html"),
])
def test_chapter_link(rel, expected):
    link = chapter_link(BASE, rel)
    assert link == expected
    assert "\\" not in link
    assert link.endswith(".html")


@pytest.mark.parametrize("base", ["https://example.com", "https://example.com/", "https://example.com//"])
def test_chapter_link_single_slash(base):
    assert chapter_link(base, "a.md") == "https://example.com/a.html"


# --- entries ---

def test_build_entry_fields():
    doc = _doc("post.md", title="Hello", day=5, author="Ada", body="# Hi\n\nWorld content...\n")
    entry = build_entry(doc, BASE)
    assert entry.title == "Hello"
    assert entry.link == "https://example.com/book/post.html"
    assert entry.guid == entry.link
    assert entry.permalink is True
    assert entry.pub_date == "Fri, 05 Jan 2024 00:00:00 +0000"
    assert entry.author == "Ada"
    assert entry.preview_html == "<p>World content...</p>"


def test_build_entry_without_date_or_author():
    entry = build_entry(_doc("x.md"), BASE)
    assert entry.pub_date is None
    assert entry.author is None


def test_build_entry_full_preview():
    doc = _doc("x.md", body="# Heading\n\nText.\n")
    entry = build_entry(doc, BASE, full_preview=True)
    assert "<h1>Heading</h1>" in entry.preview_html


# --- pagination ---

def test_page_file_name():
    assert [page_file_name("rss", i, "xml") for i in range(3)] == ["rss.xml", "rss2.xml", "rss3.xml"]


@pytest.mark.parametrize("n,p", [(1, 1), (5, 2), (6, 2), (7, 3), (10, 10), (11, 10), (3, 1)])
def test_paginate_properties(n, p):
    """ceil(N/P) pages, page i holds [i*P, min((i+1)*P, N)), order preserved."""
    entries = list(range(n))
    chunks = paginate(entries, p, paginated=True)
    assert len(chunks) == math.ceil(n / p)
    for i, chunk in enumerate(chunks):
        assert chunk == entries[i * p:min((i + 1) * p, n)]
    assert [e for c in chunks for e in c] == entries


@pytest.mark.parametrize("paginated,max_items", [(False, 2), (True, 0), (True, 10)])
def test_paginate_single_page(paginated, max_items):
    entries = list(range(5))
    assert paginate(entries, max_items, paginated) == [entries]


def test_paginate_empty():
    assert paginate([], 3, paginated=True) == [[]]


# --- build_feed ---

def test_build_feed_single_page():
    docs = [_doc("post.md", title="Hello", day=5, body="# Hi\n\nWorld content...\n")]
    pages = build_feed(docs, "Book", BASE, "About", max_items=0, generator="mdfeed test")
    assert len(pages) == 1
    page = pages[0]
    assert page.file_name == "rss.xml"
    assert page.channel_title == "Book"
    assert page.channel_link == "https://example.com/book/"
    assert page.channel_description == "About"
    assert page.generator == "mdfeed test"
    assert [e.title for e in page.entries] == ["Hello"]
    assert "<p>World content...</p>" in page.entries[0].preview_html


def test_build_feed_paginated_five_docs():
    docs = [_doc(f"c{i}.md", title=f"C{i}", day=10 - i) for i in range(5)]
    pages = build_feed(docs, "Book", "https://example.com", "About", max_items=2, paginated=True)
    assert [p.file_name for p in pages] == ["rss.xml", "rss2.xml", "rss3.xml"]
    assert [len(p.entries) for p in pages] == [2, 2, 1]
    assert [e.title for p in pages for e in p.entries] == ["C0", "C1", "C2", "C3", "C4"]
    assert {p.channel_link for p in pages} == {"https://example.com/"}


def test_build_feed_no_documents():
    pages = build_feed([], "Book", BASE, "About", max_items=2, paginated=True)
    assert len(pages) == 1
    assert pages[0].entries == []


def test_guids_unique_and_stable():
    docs = [_doc(f"c{i}.md") for i in range(4)]
    first = build_feed(docs, "B", BASE, "D")
    second = build_feed(docs, "B", BASE, "D")
    guids = [e.guid for e in first[0].entries]
    assert len(set(guids)) == 4
    assert guids == [e.guid for e in second[0].entries]
