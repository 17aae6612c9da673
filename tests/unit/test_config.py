"""Tests for configuration module."""

import pytest

from contentguard.core.config import (
    ContentGuardSettings,
    get_settings,
    load_repository_settings,
)
from contentguard.core.exceptions import ConfigurationError


class TestContentGuardSettings:
    """Tests for the ContentGuardSettings class."""

    def test_default_settings(self):
        """Test default settings creation."""
        settings = ContentGuardSettings()
        assert settings.content_dir == "content"
        assert settings.metadata_filename == "index.json"
        assert settings.body_filename == "index.mdx"
        assert settings.min_title_length == 3
        assert settings.min_body_length == 10
        assert settings.metadata_required_fields == ["title", "description", "author", "language"]
        assert settings.check_body_file is False
        assert settings.precise_positions is False
        assert settings.media_endpoint_marker == "/api/media/"

    def test_custom_settings(self):
        """Test settings passed at instantiation."""
        settings = ContentGuardSettings(log_level="DEBUG", min_title_length=5)
        assert settings.log_level == "DEBUG"
        assert settings.min_title_length == 5

    def test_settings_from_env(self, monkeypatch):
        """Test settings from environment variables."""
        monkeypatch.setenv("CONTENTGUARD_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("CONTENTGUARD_CHECK_BODY_FILE", "true")

        settings = ContentGuardSettings()
        assert settings.log_level == "WARNING"
        assert settings.check_body_file is True

    def test_get_settings_singleton(self):
        """Test get settings singleton."""
        assert get_settings() is get_settings()

    def test_negative_length_rejected(self):
        """Test negative length rejected."""
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            ContentGuardSettings(min_title_length=-1)


class TestRepositorySettings:
    """Tests for per-repository override files."""

    def test_no_override_file(self, tmp_path):
        """Test base settings are returned unchanged."""
        base = ContentGuardSettings()
        assert load_repository_settings(tmp_path, base) is base

    def test_override_file_applied(self, tmp_path):
        """Test override file applied."""
        (tmp_path / ".contentguard.yaml").write_text(
            "min_title_length: 8\n"
            "described_types: [blog, post, news]\n"
            "unknown_key: ignored\n",
            encoding="utf-8",
        )
        settings = load_repository_settings(tmp_path, ContentGuardSettings())
        assert settings.min_title_length == 8
        assert settings.described_types == ["blog", "post", "news"]
        assert settings.metadata_filename == "index.json"

    def test_empty_override_file(self, tmp_path):
        """Test empty override file."""
        (tmp_path / ".contentguard.yaml").write_text("", encoding="utf-8")
        base = ContentGuardSettings()
        assert load_repository_settings(tmp_path, base) is base

    def test_invalid_yaml(self, tmp_path):
        """Test malformed YAML raises ConfigurationError."""
        (tmp_path / ".contentguard.yaml").write_text("min_title_length: [1,\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_repository_settings(tmp_path, ContentGuardSettings())

    def test_non_mapping(self, tmp_path):
        """Test a non-mapping override file is rejected."""
        (tmp_path / ".contentguard.yaml").write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_repository_settings(tmp_path, ContentGuardSettings())

    def test_invalid_value(self, tmp_path):
        """Test out-of-range override values are rejected."""
        (tmp_path / ".contentguard.yaml").write_text("min_body_length: -5\n", encoding="utf-8")
        with pytest.raises(ConfigurationError) as exc_info:
            load_repository_settings(tmp_path, ContentGuardSettings())
        assert exc_info.value.setting_name == "config_filename"
