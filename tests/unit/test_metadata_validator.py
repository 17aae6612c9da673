"""Tests for the metadata fields validator."""

import pytest

from contentguard.core.config import ContentGuardSettings
from contentguard.core.repository import ContentRepository
from contentguard.core.types import Position, Severity
from contentguard.validate.metadata import MetadataFieldsValidator


@pytest.fixture
def validator(repository) -> MetadataFieldsValidator:
    return MetadataFieldsValidator(repository)


class TestMetadataFieldsValidator:
    """Tests for the MetadataFieldsValidator class."""

    def test_required_fields(self, validator):
        """Test the default required field set."""
        assert validator.required_fields == ["title", "description", "author", "language"]

    def test_body_field_enabled_by_setting(self, repo_root):
        """Test body field enabled by setting."""
        settings = ContentGuardSettings(check_body_file=True)
        validator = MetadataFieldsValidator(ContentRepository(repo_root, settings))
        assert validator.required_fields[-1] == "body"

    @pytest.mark.asyncio
    async def test_complete_metadata(self, validator, make_item, complete_metadata):
        """Test complete metadata yields no problems."""
        directory = make_item(metadata=complete_metadata)
        result = await validator.validate_file(str(directory / "index.json"))
        assert result.problems == []

    @pytest.mark.asyncio
    async def test_each_missing_field_reported(self, validator, make_item):
        """Test each missing field reported."""
        directory = make_item(metadata={"title": "Only a title", "type": "page"})
        result = await validator.validate_file(str(directory / "index.json"))

        assert [p.message for p in result.problems] == [
            "Missing required field: description",
            "Missing required field: author",
            "Missing required field: language",
        ]
        assert all(p.severity == Severity.ERROR for p in result.problems)
        assert all(p.source == "Metadata Validator" for p in result.problems)

    @pytest.mark.asyncio
    async def test_absent_field_points_at_closing_brace(self, validator, make_item):
        """Test absent field points at closing brace."""
        text = '{\n  "title": "T",\n  "description": "D",\n  "author": "A"\n}'
        directory = make_item(metadata=text)
        result = await validator.validate_file(str(directory / "index.json"))

        assert len(result.problems) == 1
        problem = result.problems[0]
        assert problem.message == "Missing required field: language"
        assert problem.range.start == Position(4, 0)
        assert problem.range.end == Position(4, 1)

    @pytest.mark.asyncio
    async def test_blank_field_is_located(self, validator, make_item):
        """Test blank field is located."""
        text = (
            '{\n  "title": "T",\n  "description": "D",\n'
            '  "author": "   ",\n  "language": "en"\n}'
        )
        directory = make_item(metadata=text)
        result = await validator.validate_file(str(directory / "index.json"))

        assert len(result.problems) == 1
        problem = result.problems[0]
        assert problem.message == "Missing required field: author"
        assert problem.range.start == Position(3, 2)

    @pytest.mark.asyncio
    async def test_invalid_json(self, validator, make_item):
        """Test parse errors yield one error at 0,0 and nothing else."""
        directory = make_item(metadata='{"title": ')
        result = await validator.validate_file(str(directory / "index.json"))

        assert len(result.problems) == 1
        assert result.problems[0].message.startswith("Invalid JSON: ")
        assert result.problems[0].range.is_placeholder

    @pytest.mark.asyncio
    async def test_body_documents_ignored(self, validator, make_item):
        """Test body documents ignored."""
        directory = make_item(metadata=None, body="")
        result = await validator.validate_file(str(directory / "index.mdx"))
        assert result.problems == []

    @pytest.mark.asyncio
    async def test_validate_all(self, validator, make_item, complete_metadata):
        """Test validating every document in the repository."""
        make_item("blog", "good", complete_metadata)
        make_item("blog", "bad", {"title": "Bad"})
        result = await validator.validate_all()
        assert len(result.problems) == 3
        assert all("/bad/" in p.file_path for p in result.problems)

    @pytest.mark.asyncio
    async def test_validate_all_without_content_root(self, tmp_path):
        """Test validate all without content root."""
        validator = MetadataFieldsValidator(ContentRepository(tmp_path, ContentGuardSettings()))
        result = await validator.validate_all()
        assert result.problems == []


class TestBodyFileCheck:
    """Tests for the optional companion body document rule."""

    @pytest.fixture
    def body_validator(self, repo_root) -> MetadataFieldsValidator:
        settings = ContentGuardSettings(check_body_file=True)
        return MetadataFieldsValidator(ContentRepository(repo_root, settings))

    @pytest.mark.asyncio
    async def test_disabled_by_default(self, validator, make_item, complete_metadata):
        """Test disabled by default."""
        directory = make_item(metadata=complete_metadata, body=None)
        result = await validator.validate_file(str(directory / "index.json"))
        assert result.problems == []

    @pytest.mark.asyncio
    async def test_missing_body_file(self, body_validator, make_item, complete_metadata):
        """Test missing body file."""
        directory = make_item(metadata=complete_metadata, body=None)
        result = await body_validator.validate_file(str(directory / "index.json"))
        assert [p.message for p in result.problems] == ["Missing required file: index.mdx"]

    @pytest.mark.asyncio
    async def test_empty_body_file(self, body_validator, make_item, complete_metadata):
        """Test empty body file."""
        directory = make_item(metadata=complete_metadata, body="  \n")
        result = await body_validator.validate_file(str(directory / "index.json"))
        assert len(result.problems) == 1
        assert result.problems[0].message == "Body content is empty"
        assert result.problems[0].file_path == str(directory / "index.mdx")

    @pytest.mark.asyncio
    async def test_present_body_file(self, body_validator, make_item, complete_metadata):
        """Test present body file."""
        directory = make_item(metadata=complete_metadata)
        result = await body_validator.validate_file(str(directory / "index.json"))
        assert result.problems == []
