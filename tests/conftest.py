"""Root test configuration: chapter-tree fixtures and logging reset"""

import os

import pytest
import structlog


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop logger configuration bound to a previous test's streams."""
    yield
    structlog.reset_defaults()


@pytest.fixture(name="write_chapter")
def write_chapter_fixture(tmp_path):
    """Factory writing a chapter under tmp_path/src; optional mtime (epoch seconds)."""
    src = tmp_path / "src"
    src.mkdir(exist_ok=True)

    def _write(rel: str, text: str, mtime: float = None):
        path = src / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        if mtime is not None:
            os.utime(path, (mtime, mtime))
        return path

    return _write


@pytest.fixture(name="src_dir")
def src_dir_fixture(tmp_path):
    src = tmp_path / "src"
    src.mkdir(exist_ok=True)
    return src
