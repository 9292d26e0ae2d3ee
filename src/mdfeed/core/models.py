"""Data models for documents, native RSS pages, and the derived JSON Feed / Atom representations"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mdfeed.core.utils.dates import parse_date


JSON_FEED_VERSION = "https://jsonfeed.org/version/1.1"


class FrontMatter(BaseModel):
    """Parsed YAML header of one chapter."""
    model_config = ConfigDict(frozen=True)

    title:       str = Field(min_length=1)
    date:        Optional[datetime] = None   # always UTC-aware when present
    author:      Optional[str] = None
    description: Optional[str] = None        # user-supplied preview override

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value):
        return parse_date(value)


class Document(BaseModel):
    """One eligible Markdown file."""
    model_config = ConfigDict(frozen=True)

    front_matter:  FrontMatter
    body:          str      # markdown after the front matter, newline-terminated
    relative_path: str      # relative to the collection root, forward slashes


class FeedEntry(BaseModel):
    """One RSS <item>."""
    model_config = ConfigDict(frozen=True)

    title:        Optional[str] = None
    link:         Optional[str] = None
    preview_html: Optional[str] = None
    guid:         Optional[str] = None
    permalink:    bool = True
    pub_date:     Optional[str] = None   # RFC 2822, as RSS carries it
    author:       Optional[str] = None

    @property
    def identity(self) -> str:
        """guid, then link, then title."""
        return self.guid or self.link or self.title or ""


class FeedPage(BaseModel):
    """One RSS 2.0 channel and the file it is written to."""
    file_name:           str
    channel_title:       str
    channel_link:        str
    channel_description: str
    generator:           Optional[str] = None
    entries:             list[FeedEntry] = Field(default_factory=list)


class JsonFeedAuthor(BaseModel):
    name: str


class JsonFeedItem(BaseModel):
    id:             str
    url:            Optional[str] = None
    title:          Optional[str] = None
    content_html:   Optional[str] = None
    date_published: Optional[str] = None
    author:         Optional[JsonFeedAuthor] = None


class JsonFeed(BaseModel):
    version:       str = JSON_FEED_VERSION
    title:         str
    home_page_url: Optional[str] = None
    feed_url:      Optional[str] = None
    description:   Optional[str] = None
    next_url:      Optional[str] = None
    items:         list[JsonFeedItem] = Field(default_factory=list)


class AtomLink(BaseModel):
    href: str
    rel:  str = "alternate"


class AtomEntry(BaseModel):
    id:           str
    title:        Optional[str] = None
    links:        list[AtomLink] = Field(default_factory=list)
    content_html: Optional[str] = None
    updated:      Optional[datetime] = None
    author:       Optional[str] = None


class AtomFeed(BaseModel):
    id:       str
    title:    str
    subtitle: Optional[str] = None
    links:    list[AtomLink] = Field(default_factory=list)
    entries:  list[AtomEntry] = Field(default_factory=list)
