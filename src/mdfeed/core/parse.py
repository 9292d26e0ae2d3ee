"""Chapter discovery, YAML frontmatter extraction, and newest-first collection"""

from datetime import datetime, timezone
from pathlib import Path, PurePath
from typing import Any, Optional

import structlog
import yaml
from pydantic import ValidationError

from mdfeed.core.models import Document, FrontMatter


MD_EXTENSIONS = {'.md', '.markdown'}
SUMMARY_FILE = 'summary.md'

logger = structlog.get_logger()


class FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps as plain strings so parse_date decides on them."""


FrontmatterLoader.add_constructor(
    "tag:yaml.org,2002:timestamp",
    lambda loader, node: loader.construct_scalar(node),
)


def _split_frontmatter(text: str) -> tuple[Optional[str], str]:
    """Return (yaml_block, body). yaml_block is None when the file has no delimited header.

    The header must open on the first line; an opening '---' without a closing
    one is treated as body text.
    """
    lines = text.splitlines()
    if not lines or lines[0].strip() != '---':
        return None, text if text.endswith('\n') else text + '\n'

    for i in range(1, len(lines)):
        if lines[i].strip() == '---':
            block = ''.join(line + '\n' for line in lines[1:i])
            return block, '\n'.join(lines[i + 1:]) + '\n'
    return None, text if text.endswith('\n') else text + '\n'


def _load_frontmatter(block: Optional[str]) -> Optional[FrontMatter]:
    """Parse a YAML block into FrontMatter; None when absent or malformed."""
    if block is None or not block.strip():
        return None
    try:
        data: Any = yaml.load(block, Loader=FrontmatterLoader)
    except (yaml.YAMLError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    try:
        return FrontMatter.model_validate(data)
    except ValidationError:
        return None


def _mtime(path: Path) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(path.stat().st_mtime, tz=timezone.utc)
    except OSError:
        return None


def _relative(root: Path, path: Path) -> str:
    try:
        rel: PurePath = path.relative_to(root)
    except ValueError:
        rel = path
    return rel.as_posix().replace('\\', '/')


def parse_file(root: Path, path: Path) -> Document:
    """Parse a single chapter into a Document.

    Without a usable frontmatter block, the title falls back to the file stem,
    the date to the file's modification time and the description to the body.
    Read errors propagate.
    """
    raw = path.read_text(encoding='utf-8')
    block, body = _split_frontmatter(raw)
    fm = _load_frontmatter(block)
    if fm is None:
        fm = FrontMatter(title=path.stem or path.name, date=_mtime(path), description=body)
    return Document(front_matter=fm, body=body, relative_path=_relative(root, path))


def discover_files(root: Path) -> list[Path]:
    """Return sorted markdown chapters under root, excluding SUMMARY.md."""
    if not root.is_dir():
        raise FileNotFoundError(f"Source directory not found: {root}")
    return sorted(
        p for p in root.rglob('*')
        if p.suffix.lower() in MD_EXTENSIONS
        and p.name.lower() != SUMMARY_FILE
        and p.is_file()
    )


def _sort_key(doc: Document) -> tuple[bool, datetime]:
    date = doc.front_matter.date
    return (date is not None, date or datetime.min.replace(tzinfo=timezone.utc))


def collect_documents(root: Path, skipped: list[tuple[Path, Exception]] = None) -> list[Document]:
    """Parse every chapter under root and order them newest first.

    Unreadable files are skipped (and reported through `skipped` when given).
    Undated documents sort last; ties keep discovery order.
    """
    docs = []
    failures = 0
    for p in discover_files(root):
        try:
            docs.append(parse_file(root, p))
        except (OSError, UnicodeDecodeError) as e:
            failures += 1
            logger.warning("document_skipped", path=str(p), error=str(e))
            if skipped is not None:
                skipped.append((p, e))
    docs.sort(key=_sort_key, reverse=True)
    logger.info("documents_collected", root=str(root), count=len(docs), skipped=failures)
    return docs
