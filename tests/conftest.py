"""Pytest configuration and fixtures for ContentGuard tests."""

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from contentguard.core.config import ContentGuardSettings
from contentguard.core.repository import ContentRepository


@pytest.fixture
def settings() -> ContentGuardSettings:
    """Default settings, isolated from the environment's global instance."""
    return ContentGuardSettings()


@pytest.fixture
def repo_root(tmp_path: Path) -> Path:
    """Create an empty repository with a content root."""
    root = tmp_path.resolve()
    (root / "content").mkdir()
    return root


@pytest.fixture
def repository(repo_root: Path, settings: ContentGuardSettings) -> ContentRepository:
    return ContentRepository(repo_root, settings)


@pytest.fixture
def make_item(repo_root: Path) -> Callable[..., Path]:
    """Factory writing content/<type>/<slug>/index.json and index.mdx.

    metadata may be a dict (dumped as JSON) or raw text. Pass
    body=None to skip the body document.
    """

    def _make(
        content_type: str = "blog",
        slug: str = "hello-world",
        metadata: dict[str, Any] | str | None = None,
        body: str | None = "# Hello\n\nThis is a complete article body.\n",
    ) -> Path:
        directory = repo_root / "content" / content_type / slug
        directory.mkdir(parents=True, exist_ok=True)
        if metadata is not None:
            text = metadata if isinstance(metadata, str) else json.dumps(metadata, indent=2)
            (directory / "index.json").write_text(text, encoding="utf-8")
        if body is not None:
            (directory / "index.mdx").write_text(body, encoding="utf-8")
        return directory

    return _make


@pytest.fixture
def complete_metadata() -> dict[str, Any]:
    """Metadata that passes every rule set."""
    return {
        "title": "Hello World",
        "type": "blog",
        "description": "A sufficiently long description",
        "author": "Jane Doe",
        "language": "en",
        "tags": ["intro", "news"],
        "publishedAt": "2024-01-01",
    }
