"""Shared test fixtures for claycli package."""

import json

import pytest


PREFIX = "domain.com"

# Paragraph text containing a URL; must survive prefixing untouched
PARAGRAPH_TEXT = (
    'Sanjay Srivastava <a href="http://pages.uoregon.edu/sanjay/bigfive.html#whatisit" '
    'target="_blank">explains on his website</a>, each'
)


@pytest.fixture
def prefix():
    """The site prefix used across prefix tests."""
    return PREFIX


@pytest.fixture
def paragraph_text():
    """Rich text with an embedded link."""
    return PARAGRAPH_TEXT


@pytest.fixture
def sample_records():
    """Unprefixed records covering keys, child components, pages and text."""
    return [
        ("/_components/foo/instances/bar", {"a": "b"}),
        ("/_components/foo/instances/baz", {"a": {"_ref": "/_components/bar/instances/baz", "c": "d"}}),
        ("/_pages/abc", {"main": ["/_components/foo/instances/bar"]}),
        ("/_components/paragraph/instances/example", {"text": PARAGRAPH_TEXT}),
    ]


@pytest.fixture
def sample_dispatch_file(tmp_path, sample_records):
    """Write the sample records as a newline-delimited dispatch file."""
    file_path = tmp_path / "site.ndjson"
    lines = [json.dumps({key: value}) for key, value in sample_records]
    file_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return file_path


@pytest.fixture
def mock_project_root(tmp_path, monkeypatch):
    """Create a mock project with a .clay/ directory."""
    clay_dir = tmp_path / ".clay"
    clay_dir.mkdir()
    (clay_dir / "backups").mkdir()

    # Mock get_project_root to return our tmp_path
    from claycli.core import config
    # Clear the lru_cache first
    config.get_project_root.cache_clear()
    monkeypatch.setattr(config, "get_project_root", lambda: tmp_path)

    return tmp_path


@pytest.fixture
def no_project_root(monkeypatch):
    """Make project root lookup fail, as outside any initialized project."""
    from claycli.core import config

    def _missing():
        raise FileNotFoundError("no .clay/ directory")

    config.get_project_root.cache_clear()
    monkeypatch.setattr(config, "get_project_root", _missing)
