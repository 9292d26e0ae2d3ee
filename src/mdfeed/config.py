"""Application configuration: settings schema, config.yaml loader, and host payload reader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
VERSION = "1.3.1"
GENERATOR = f"mdfeed {VERSION}"
DEFAULT_TITLE = "My mdBook"

PREPROCESSOR_KEY = "/config/preprocessor/rss-feed"


class Settings(BaseModel):
    site_url:      str  = Field(default="https://example.com/", description="Public base URL of the rendered site")
    title:         str  = Field(default=DEFAULT_TITLE, description="Channel title")
    description:   str  = Field(default="Description", description="Channel description")
    full_preview:  bool = Field(default=False, description="Render whole chapters instead of short previews")
    paginated:     bool = Field(default=False, description="Split items across numbered feed files")
    max_items:     int  = Field(default=0, ge=0, description="Items per feed page; 0 = unlimited")
    json_feed:     bool = Field(default=False, description="Also write JSON Feed 1.1 files")
    atom:          bool = Field(default=False, description="Also write Atom 1.0 files")
    parser_config: str  = Field(default="gfm-like", description="MarkdownIt parser preset name")
    log_level:     str  = Field(default="INFO", description="Log level for stderr diagnostics")
    log_format:    str  = Field(default="console", pattern="^(console|json)$", description="console or json")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDFEED_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"MDFEED_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)


def _pointer(context: Any, pointer: str) -> Any:
    """Resolve a '/a/b/c' path against nested dicts; None when any step is missing."""
    node = context
    for key in pointer.strip("/").split("/"):
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node


def _typed(value: Any, kind: type, default: Any) -> Any:
    """Return value when it is of kind, else default. Booleans never count as ints."""
    if kind is int and isinstance(value, bool):
        return default
    return value if isinstance(value, kind) else default


class FeedConfig(BaseModel):
    """Fully resolved options for one preprocessor invocation."""
    src_dir:  Path
    settings: Settings

    @classmethod
    def from_context(cls, context: Any, base: Settings = None) -> "FeedConfig":
        """Read the host's context object; missing or mistyped values keep the base defaults."""
        base = base or Settings()
        root = _typed(_pointer(context, "/root"), str, ".")

        def opt(name: str, kind: type, default: Any) -> Any:
            return _typed(_pointer(context, f"{PREPROCESSOR_KEY}/{name}"), kind, default)

        max_items = opt("max-items", int, base.max_items)
        settings = base.model_copy(update={
            "site_url":     _typed(_pointer(context, "/config/output/html/site-url"), str, base.site_url),
            "title":        _typed(_pointer(context, "/config/book/title"), str, "") or base.title,
            "description":  _typed(_pointer(context, "/config/book/description"), str, base.description),
            "full_preview": opt("full-preview", bool, base.full_preview),
            "paginated":    opt("paginated", bool, base.paginated),
            "max_items":    max_items if max_items >= 0 else base.max_items,
            "json_feed":    opt("json-feed", bool, base.json_feed),
            "atom":         opt("atom", bool, base.atom),
        })
        return cls(src_dir=Path(root) / "src", settings=settings)
