"""Read-only access to a content repository on disk.

A repository is laid out as::

    <root>/content/<type>/<slug>/index.json
    <root>/content/<type>/<slug>/index.mdx

All reads go through an executor so validators can await them
without blocking the event loop.
"""

import asyncio
import os
from pathlib import Path
from typing import Callable, TypeVar

from contentguard.core.config import ContentGuardSettings, get_settings
from contentguard.core.exceptions import RepositoryError
from contentguard.core.logging import get_logger
from contentguard.core.types import ContentItem

logger = get_logger(__name__)

T = TypeVar("T")


class ContentRepository:
    """Content repository rooted at a directory.

    Example:
        >>> repo = ContentRepository("/work/site")
        >>> files = await repo.find_files(".json")
        >>> item = repo.content_item(files[0])
    """

    def __init__(
        self,
        root: Path | str,
        settings: ContentGuardSettings | None = None,
    ) -> None:
        """Initialize ContentRepository.

        Args:
            root: Repository root directory
            settings: Layout settings (global settings by default)
        """
        self.root = Path(root).resolve()
        self.settings = settings or get_settings()

    @property
    def content_path(self) -> Path:
        return self.root / self.settings.content_dir

    def has_content_root(self) -> bool:
        return self.content_path.is_dir()

    def is_metadata_document(self, path: Path | str) -> bool:
        return Path(path).name == self.settings.metadata_filename

    def is_body_document(self, path: Path | str) -> bool:
        return Path(path).name == self.settings.body_filename

    def body_path_for(self, metadata_path: Path | str) -> Path:
        """Companion body document sharing the metadata document's base name."""
        metadata_path = Path(metadata_path)
        body_suffix = Path(self.settings.body_filename).suffix
        return metadata_path.with_suffix(body_suffix)

    async def _run(self, func: Callable[..., T], *args) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)

    async def read_text(self, path: Path | str) -> str:
        """Read a UTF-8 document.

        Raises:
            RepositoryError: If the file cannot be read or decoded
        """
        try:
            return await self._run(Path(path).read_text, "utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise RepositoryError(
                f"Cannot read file: {e}",
                path=str(path),
                operation="read",
            ) from e

    async def exists(self, path: Path | str) -> bool:
        """Check whether a path exists, treating stat failures as missing."""
        try:
            return await self._run(os.path.exists, str(path))
        except (OSError, ValueError):
            return False

    async def find_files(self, suffix: str, directory: Path | None = None) -> list[str]:
        """Recursively list files ending with suffix, depth-first.

        Entries are visited in name order so repeated runs over an
        unchanged tree list files identically.

        Args:
            suffix: File extension to match (e.g., ".json")
            directory: Directory to descend (content root by default)

        Returns:
            Absolute file paths

        Raises:
            RepositoryError: If a directory cannot be listed
        """
        directory = directory or self.content_path
        try:
            entries = await self._run(_list_dir, directory)
        except OSError as e:
            raise RepositoryError(
                f"Cannot list directory: {e}",
                path=str(directory),
                operation="list",
            ) from e

        result: list[str] = []
        for entry_path, is_dir, is_file in entries:
            if is_dir:
                result.extend(await self.find_files(suffix, entry_path))
            elif is_file and entry_path.name.endswith(suffix):
                result.append(str(entry_path))
        return result

    def content_info(self, path: Path | str) -> tuple[str, str] | None:
        """Derive (content_type, slug) from a file path.

        The path, relative to the repository root, must start with the
        content directory followed by at least two more segments.

        Returns:
            (content_type, slug), or None when the path has another shape
        """
        try:
            relative = Path(path).resolve().relative_to(self.root)
        except ValueError:
            return None

        parts = relative.parts
        if len(parts) >= 3 and parts[0] == self.settings.content_dir:
            return parts[1], parts[2]
        return None

    def item_directory(self, content_type: str, slug: str) -> Path:
        return self.content_path / content_type / slug

    def content_item(self, path: Path | str) -> ContentItem | None:
        """Build the ContentItem a file belongs to."""
        info = self.content_info(path)
        if info is None:
            return None
        content_type, slug = info
        directory = self.item_directory(content_type, slug)
        return ContentItem(
            content_type=content_type,
            slug=slug,
            directory=directory,
            metadata_path=directory / self.settings.metadata_filename,
            body_path=directory / self.settings.body_filename,
        )

    async def items(self) -> list[ContentItem]:
        """List every content item that has a metadata or body document."""
        if not self.has_content_root():
            return []

        seen: dict[tuple[str, str], ContentItem] = {}
        for suffix in (
            Path(self.settings.metadata_filename).suffix,
            Path(self.settings.body_filename).suffix,
        ):
            for path in await self.find_files(suffix):
                if not (self.is_metadata_document(path) or self.is_body_document(path)):
                    continue
                item = self.content_item(path)
                if item is not None:
                    seen.setdefault(item.key, item)

        logger.debug(f"Found {len(seen)} content items under {self.content_path}")
        return list(seen.values())


def _list_dir(directory: Path) -> list[tuple[Path, bool, bool]]:
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)
        return [
            (Path(e.path), e.is_dir(), e.is_file())
            for e in entries
        ]
