"""Markdown rendering and bounded HTML previews for feed item descriptions"""

import re
from functools import lru_cache
from typing import Optional

from markdown_it import MarkdownIt


MIN_BODY_PREVIEW_CHARS = 80     # shorter bodies yield to a frontmatter description
PREVIEW_MD_SLICE_CHARS = 4000
PREVIEW_MAX_PARAGRAPHS = 3
PREVIEW_MAX_CHARS = 800

PARA_OPEN_RE = re.compile(r'<p[\s>]')
PARA_CLOSE = '</p>'


@lru_cache(maxsize=None)
def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def render_markdown(md: str, preset: str = 'gfm-like') -> str:
    return _make_parser(preset).render(md)


def strip_leading_boilerplate(md: str) -> str:
    """Drop everything up to and including the first blank line after a heading.

    Leading TOCs, badges and similar navigation usually sit between the title
    heading and the intro text. Without a heading the text is returned as is.
    """
    seen_heading = False
    offset = 0
    for i, line in enumerate(md.splitlines(keepends=True)):
        offset += len(line)
        if i == 0 and not line.strip():
            continue
        if line.lstrip().startswith('#'):
            seen_heading = True
        if seen_heading and not line.strip():
            return md[offset:]
    return md


def utf8_prefix(text: str, max_chars: int) -> str:
    """First max_chars code points of text; never splits a character."""
    if max_chars <= 0:
        return ''
    return text[:max_chars]


def html_first_paragraphs(html: str, max_paragraphs: int, max_chars: int) -> str:
    """Concatenate up to max_paragraphs <p>...</p> blocks, capped at max_chars characters.

    Falls back to the whole fragment when it has no paragraph. The cap counts
    characters, not tags, so a long preview can end inside an element.
    """
    parts = []
    start = 0
    while len(parts) < max_paragraphs:
        m = PARA_OPEN_RE.search(html, start)
        if m is None:
            break
        close = html.find(PARA_CLOSE, m.start())
        if close < 0:
            break
        end = close + len(PARA_CLOSE)
        parts.append(html[m.start():end])
        start = end

    out = ''.join(parts) or html
    return out[:max_chars]


def select_source(body: str, description: Optional[str]) -> str:
    """Prefer the body unless it is short and a description override exists."""
    trimmed = body.strip()
    if len(trimmed) >= MIN_BODY_PREVIEW_CHARS or description is None:
        return trimmed
    return description


def build_preview(
    body: str,
    description: Optional[str] = None,
    full_preview: bool = False,
    preset: str = 'gfm-like',
    ) -> str:
    """Return the HTML placed in an item's description.

    full_preview renders the entire body untouched. Otherwise the chosen
    markdown is stripped of leading boilerplate, cut to a bounded slice,
    rendered, and reduced to its first few paragraphs.
    """
    if full_preview:
        return render_markdown(body, preset)

    source = select_source(body, description)
    source = strip_leading_boilerplate(source)
    source = utf8_prefix(source, PREVIEW_MD_SLICE_CHARS)
    html = render_markdown(source, preset)
    return html_first_paragraphs(html, PREVIEW_MAX_PARAGRAPHS, PREVIEW_MAX_CHARS)
