"""Media reference validation.

Every media file referenced from a body or metadata document must
exist in the content item's directory. Remote (http/https) references
are not checked.
"""

import os
import posixpath
import re
from pathlib import Path
from typing import Any, Protocol

from contentguard.core.config import ContentGuardSettings
from contentguard.core.exceptions import RepositoryError
from contentguard.core.logging import get_logger
from contentguard.core.repository import ContentRepository
from contentguard.core.types import Problem, Severity, ValidationResult
from contentguard.validate.base import record_failure, validate_each
from contentguard.validate.positions import parse_json, reference_range

logger = get_logger(__name__)

SOURCE = "Media Validator"

REMOTE_URL_RE = re.compile(r"^https?://", re.IGNORECASE)

MARKDOWN_IMAGE_RE = re.compile(
    r"!\[[^\]]*\]\(\s*<?([^)\s>]+)>?(?:\s+[\"'][^\"']*[\"'])?\s*\)"
)
HTML_IMAGE_RE = re.compile(r"<img\b[^>]*?\bsrc=[\"']([^\"']+)[\"']", re.IGNORECASE)

METADATA_IMAGE_KEY_RE = re.compile(r"(image|imageurl|cover|thumbnail)$", re.IGNORECASE)
FILE_WITH_EXTENSION_RE = re.compile(r"\.[A-Za-z0-9]{2,5}$")


class MediaUrlSource(Protocol):
    """Extracts media URLs referenced from documents."""

    def extract_media_urls(self, text: str) -> list[str]:
        ...

    def extract_media_urls_from_metadata(self, document: Any) -> list[str]:
        ...


class MediaUrlExtractor:
    """Default media URL extraction.

    Finds markdown images, HTML <img> sources and bare references to
    the backend media endpoint. URLs are sanitized and returned once
    each, in first-seen order.

    Example:
        >>> extractor = MediaUrlExtractor()
        >>> extractor.extract_media_urls("![Cat](./cat.png)")
        ['./cat.png']
    """

    def __init__(self, marker: str = "/api/media/") -> None:
        self.marker = marker
        bare = re.escape(marker.strip("/"))
        self._endpoint_re = re.compile(
            rf"(?<![\w./-])(?:https?://[^\s\"'()<>]*?)?/?{bare}/[^\s\"')<>]*"
        )

    def extract_media_urls(self, text: str) -> list[str]:
        if not text:
            return []

        found: list[str] = []
        for pattern in (MARKDOWN_IMAGE_RE, HTML_IMAGE_RE):
            found.extend(m.group(1) for m in pattern.finditer(text))
        found.extend(m.group(0) for m in self._endpoint_re.finditer(text))

        urls = _unique(self.sanitize(url) for url in found)
        logger.debug(f"Found {len(urls)} unique media URLs")
        return urls

    def extract_media_urls_from_metadata(self, document: Any) -> list[str]:
        found: list[str] = []
        self._walk_metadata(document, None, found)
        return _unique(self.sanitize(url) for url in found)

    def _walk_metadata(self, value: Any, key: str | None, found: list[str]) -> None:
        if isinstance(value, dict):
            for k, v in value.items():
                self._walk_metadata(v, str(k), found)
        elif isinstance(value, list):
            for item in value:
                self._walk_metadata(item, key, found)
        elif isinstance(value, str) and value.strip():
            marker = self.marker.strip("/")
            if marker in value:
                found.append(value)
            elif (
                key is not None
                and METADATA_IMAGE_KEY_RE.search(key)
                and FILE_WITH_EXTENSION_RE.search(value.strip())
            ):
                found.append(value)

    def sanitize(self, url: str) -> str:
        """Strip markup noise around a URL and anchor endpoint references."""
        url = url.strip()
        for opening, closing in (("(", ")"), ("[", "]"), ("{", "}")):
            if len(url) > 2 and url.startswith(opening) and url.endswith(closing):
                url = url[1:-1]
        url = re.sub(r"[<>\"']", "", url)

        if REMOTE_URL_RE.match(url):
            return url

        marker = self.marker
        bare = marker.lstrip("/")
        api_prefix = "/" + marker.strip("/").split("/")[0] + "/"
        if marker in url and not url.startswith(api_prefix):
            url = url[url.index(marker):]
        elif bare in url and not url.startswith("/"):
            url = "/" + url[url.index(bare):]
        return url


class MediaReferencesValidator:
    """Validates that referenced media files exist on disk.

    A reference is resolved against the directory of the content item
    the document belongs to (content/<type>/<slug>/). References
    through the backend media endpoint resolve to the file name inside
    that directory.
    """

    id = "media"
    display_name = "Media References Validator"

    def __init__(
        self,
        repository: ContentRepository,
        extractor: MediaUrlSource | None = None,
        settings: ContentGuardSettings | None = None,
    ) -> None:
        self.repository = repository
        self.settings = settings or repository.settings
        self.extractor = extractor or MediaUrlExtractor(self.settings.media_endpoint_marker)

    async def validate_file(self, path: str) -> ValidationResult:
        result = ValidationResult()
        path = str(path)

        try:
            if self.repository.is_body_document(path):
                text = await self.repository.read_text(path)
                urls = self.extractor.extract_media_urls(text)
            elif self.repository.is_metadata_document(path):
                text = await self.repository.read_text(path)
                document, error = parse_json(text)
                if error is not None:
                    # Reported by the content and metadata validators
                    return result
                urls = self.extractor.extract_media_urls_from_metadata(document)
            else:
                return result

            if urls:
                info = self.repository.content_info(path)
                if info is not None:
                    content_type, slug = info
                    result.problems.extend(
                        await self.check_references(path, text, urls, content_type, slug)
                    )
        except RepositoryError as e:
            record_failure(result, self.id, e, path)

        return result

    async def validate_all(self) -> ValidationResult:
        if not self.repository.has_content_root():
            return ValidationResult()

        body_suffix = Path(self.settings.body_filename).suffix
        metadata_suffix = Path(self.settings.metadata_filename).suffix
        try:
            body_files = [
                f for f in await self.repository.find_files(body_suffix)
                if self.repository.is_body_document(f)
            ]
            metadata_files = [
                f for f in await self.repository.find_files(metadata_suffix)
                if self.repository.is_metadata_document(f)
            ]
        except RepositoryError as e:
            result = ValidationResult()
            record_failure(result, self.id, e)
            return result

        logger.info(
            f"Found {len(body_files)} body and {len(metadata_files)} metadata "
            f"documents for media validation"
        )
        return await validate_each([*body_files, *metadata_files], self.validate_file)

    def resolve(self, url: str, content_type: str, slug: str) -> Path:
        """Local path a media reference is expected at."""
        item_dir = self.repository.item_directory(content_type, slug)
        if self.settings.media_endpoint_marker in url:
            return item_dir / posixpath.basename(url)
        if os.path.isabs(url):
            return Path(url)
        return item_dir / url

    async def check_references(
        self,
        path: str,
        text: str,
        urls: list[str],
        content_type: str,
        slug: str,
    ) -> list[Problem]:
        problems: list[Problem] = []

        for url in urls:
            if REMOTE_URL_RE.match(url):
                continue

            local_path = self.resolve(url, content_type, slug)
            if not await self.repository.exists(local_path):
                problems.append(
                    Problem(
                        file_path=path,
                        message=f"Media file not found: {local_path.name}",
                        severity=Severity.WARNING,
                        range=reference_range(text, url),
                        source=SOURCE,
                        code="MEDIA_NOT_FOUND",
                    )
                )

        return problems


def _unique(urls) -> list[str]:
    seen: dict[str, None] = {}
    for url in urls:
        if url:
            seen.setdefault(url, None)
    return list(seen)
