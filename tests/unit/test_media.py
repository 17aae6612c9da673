"""Tests for media extraction and media reference validation."""

import pytest

from contentguard.core.types import Severity
from contentguard.validate.media import MediaReferencesValidator, MediaUrlExtractor


class TestMediaUrlExtractor:
    """Tests for the default media URL extractor."""

    def setup_method(self):
        self.extractor = MediaUrlExtractor()

    def test_markdown_images(self):
        """Test markdown image targets are extracted."""
        text = '# T\n\n![One](./one.png)\n![Two](images/two.jpg "Caption")\n'
        assert self.extractor.extract_media_urls(text) == ["./one.png", "images/two.jpg"]

    def test_html_images(self):
        """Test HTML img sources are extracted."""
        text = '<img alt="x" src="./hero.webp" width="100" />'
        assert self.extractor.extract_media_urls(text) == ["./hero.webp"]

    def test_endpoint_references_deduplicated(self):
        """Test endpoint references deduplicated."""
        text = (
            "![Cover](/api/media/blog/cover.png)\n"
            'See <a href="/api/media/blog/cover.png">the cover</a>.\n'
        )
        assert self.extractor.extract_media_urls(text) == ["/api/media/blog/cover.png"]

    def test_remote_endpoint_kept_whole(self):
        """Test remote endpoint kept whole."""
        text = "![Remote](https://cms.example.com/api/media/blog/cover.png)"
        assert self.extractor.extract_media_urls(text) == [
            "https://cms.example.com/api/media/blog/cover.png"
        ]

    def test_empty_text(self):
        """Test empty text has no references."""
        assert self.extractor.extract_media_urls("") == []

    def test_sanitize(self):
        """Test URL cleanup and endpoint anchoring."""
        assert self.extractor.sanitize(" (/api/media/a/b.png) ") == "/api/media/a/b.png"
        assert self.extractor.sanitize("api/media/a/b.png") == "/api/media/a/b.png"
        assert self.extractor.sanitize("../x/api/media/a/b.png") == "/api/media/a/b.png"
        assert self.extractor.sanitize("'./c.png'") == "./c.png"

    def test_metadata_urls(self):
        """Test media URLs are collected from nested metadata."""
        document = {
            "title": "Post",
            "coverImageUrl": "/api/media/blog/cover.png",
            "image": "./thumb.jpg",
            "author": {"avatarImage": "avatar.png"},
            "gallery": ["/api/media/blog/a.png", "not media"],
            "description": "Not an image.",
        }
        assert self.extractor.extract_media_urls_from_metadata(document) == [
            "/api/media/blog/cover.png",
            "./thumb.jpg",
            "avatar.png",
            "/api/media/blog/a.png",
        ]

    def test_metadata_non_object(self):
        """Test metadata non object."""
        assert self.extractor.extract_media_urls_from_metadata(None) == []


class StubExtractor:
    """Extractor returning fixed URLs."""

    def __init__(self, body_urls=None, metadata_urls=None):
        self.body_urls = body_urls or []
        self.metadata_urls = metadata_urls or []

    def extract_media_urls(self, text):
        return list(self.body_urls)

    def extract_media_urls_from_metadata(self, document):
        return list(self.metadata_urls)


class TestMediaReferencesValidator:
    """Tests for the MediaReferencesValidator class."""

    @pytest.fixture
    def validator(self, repository) -> MediaReferencesValidator:
        return MediaReferencesValidator(repository)

    @pytest.mark.asyncio
    async def test_missing_relative_file(self, validator, make_item):
        """Test missing relative file."""
        directory = make_item(body="# Title\n\n![Photo](./photo.png)\n")
        result = await validator.validate_file(str(directory / "index.mdx"))

        assert len(result.problems) == 1
        problem = result.problems[0]
        assert problem.message == "Media file not found: photo.png"
        assert problem.severity == Severity.WARNING
        assert problem.source == "Media Validator"
        assert problem.range.start.line == 2
        assert problem.range.start.character == 11

    @pytest.mark.asyncio
    async def test_existing_relative_file(self, validator, make_item):
        """Test existing relative file."""
        directory = make_item(body="# Title\n\n![Photo](./photo.png)\n")
        (directory / "photo.png").write_bytes(b"\x89PNG")
        result = await validator.validate_file(str(directory / "index.mdx"))
        assert result.problems == []

    @pytest.mark.asyncio
    async def test_remote_url_never_reported(self, validator, make_item):
        """Test remote url never reported."""
        directory = make_item(body="# Title\n\n![Remote](http://example.com/photo.png)\n")
        (directory / "photo.png").write_bytes(b"\x89PNG")
        result = await validator.validate_file(str(directory / "index.mdx"))
        assert result.problems == []

        directory.joinpath("photo.png").unlink()
        result = await validator.validate_file(str(directory / "index.mdx"))
        assert result.problems == []

    @pytest.mark.asyncio
    async def test_endpoint_reference_resolves_to_item_folder(self, validator, make_item):
        """Test endpoint reference resolves to item folder."""
        directory = make_item(body="# Title\n\n![Cover](/api/media/blog/hello-world/cover.png)\n")
        result = await validator.validate_file(str(directory / "index.mdx"))
        assert [p.message for p in result.problems] == ["Media file not found: cover.png"]

        (directory / "cover.png").write_bytes(b"\x89PNG")
        result = await validator.validate_file(str(directory / "index.mdx"))
        assert result.problems == []

    @pytest.mark.asyncio
    async def test_absolute_path_used_as_is(self, repository, make_item, tmp_path_factory):
        """Test absolute path used as is."""
        existing = tmp_path_factory.mktemp("assets") / "logo.svg"
        existing.write_text("<svg/>", encoding="utf-8")
        extractor = StubExtractor(body_urls=[str(existing), "/definitely/missing/logo2.svg"])
        validator = MediaReferencesValidator(repository, extractor=extractor)

        directory = make_item(body="# Title\n\nlogo2.svg\n")
        result = await validator.validate_file(str(directory / "index.mdx"))
        assert [p.message for p in result.problems] == ["Media file not found: logo2.svg"]
        assert result.problems[0].range.start.line == 2

    @pytest.mark.asyncio
    async def test_unlocated_reference_uses_placeholder(self, repository, make_item):
        """Test unlocated reference uses placeholder."""
        validator = MediaReferencesValidator(
            repository, extractor=StubExtractor(body_urls=["ghost.png"])
        )
        directory = make_item(body="# Title\n\nNothing here.\n")
        result = await validator.validate_file(str(directory / "index.mdx"))
        assert len(result.problems) == 1
        assert result.problems[0].range.is_placeholder

    @pytest.mark.asyncio
    async def test_metadata_references(self, validator, make_item, complete_metadata):
        """Test missing media referenced from metadata."""
        metadata = dict(complete_metadata, coverImageUrl="/api/media/blog/hello-world/cover.png")
        directory = make_item(metadata=metadata)
        result = await validator.validate_file(str(directory / "index.json"))
        assert [p.message for p in result.problems] == ["Media file not found: cover.png"]
        assert not result.problems[0].range.is_placeholder

    @pytest.mark.asyncio
    async def test_invalid_metadata_json_is_skipped(self, validator, make_item):
        """Test invalid metadata json is skipped."""
        directory = make_item(metadata='{"coverImageUrl": "/api/media/x.png",')
        result = await validator.validate_file(str(directory / "index.json"))
        assert result.problems == []
        assert result.failures == []

    @pytest.mark.asyncio
    async def test_path_outside_item_layout_skipped(self, repository, repo_root):
        """Test path outside item layout skipped."""
        validator = MediaReferencesValidator(
            repository, extractor=StubExtractor(body_urls=["missing.png"])
        )
        shallow = repo_root / "content" / "index.mdx"
        shallow.write_text("# Title\n\nmissing.png", encoding="utf-8")
        result = await validator.validate_file(str(shallow))
        assert result.problems == []

    @pytest.mark.asyncio
    async def test_validate_all(self, validator, make_item, complete_metadata):
        """Test validating every document in the repository."""
        make_item("blog", "a", complete_metadata, body="# A\n\n![x](./x.png)\n")
        make_item(
            "blog",
            "b",
            dict(complete_metadata, image="./cover.jpg"),
            body="# B\n\nNo media here.\n",
        )
        result = await validator.validate_all()
        assert [p.message for p in result.problems] == [
            "Media file not found: x.png",
            "Media file not found: cover.jpg",
        ]
