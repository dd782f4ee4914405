"""Tests for application configuration."""

import os
from unittest.mock import patch

import pytest

from forms_manager.core.config import (
    Settings,
    clear_settings_cache,
    get_settings,
    load_settings_from_env,
)


class TestSettings:
    """Tests for Settings dataclass."""

    def test_default_settings(self):
        """Default settings are valid."""
        settings = Settings()
        assert settings.app_name == "forms-manager"
        assert settings.port == 3001
        assert settings.environment == "development"
        assert settings.max_versions == 100
        assert settings.publish_audit_events is False

    def test_is_production(self):
        assert Settings(environment="development").is_production is False
        prod = Settings(environment="production", database_url="postgresql://db/forms")
        assert prod.is_production is True

    def test_production_requires_database_url(self):
        with pytest.raises(ValueError, match="DATABASE_URL is required"):
            Settings(environment="production")

    def test_publishing_requires_topic(self):
        """Audit publishing cannot be enabled without somewhere to publish."""
        with pytest.raises(ValueError, match="SNS_TOPIC_ARN is required"):
            Settings(publish_audit_events=True)

    def test_async_database_url(self):
        settings = Settings(database_url="postgresql://user:pw@db:5432/forms")
        assert settings.async_database_url == "postgresql+asyncpg://user:pw@db:5432/forms"

    def test_async_database_url_keeps_explicit_driver(self):
        settings = Settings(database_url="postgresql+asyncpg://db/forms")
        assert settings.async_database_url == "postgresql+asyncpg://db/forms"


class TestLoadSettingsFromEnv:
    """Tests for loading settings from environment."""

    def test_loads_defaults_without_env(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = load_settings_from_env()
            assert settings.app_name == "forms-manager"
            assert settings.database_url == ""
            assert settings.sns_topic_arn is None

    def test_loads_string_from_env(self):
        with patch.dict(os.environ, {"APP_NAME": "forms-manager-dev"}, clear=True):
            assert load_settings_from_env().app_name == "forms-manager-dev"

    def test_loads_bool_from_env(self):
        env = {"PUBLISH_AUDIT_EVENTS": "true", "SNS_TOPIC_ARN": "arn:aws:sns:eu-west-2:000000000000:forms"}
        with patch.dict(os.environ, env, clear=True):
            assert load_settings_from_env().publish_audit_events is True

        with patch.dict(os.environ, {"PUBLISH_AUDIT_EVENTS": "false"}, clear=True):
            assert load_settings_from_env().publish_audit_events is False

    def test_loads_int_from_env(self):
        with patch.dict(os.environ, {"PORT": "9000", "MAX_VERSIONS": "5"}, clear=True):
            settings = load_settings_from_env()
            assert settings.port == 9000
            assert settings.max_versions == 5

    def test_empty_optional_values_are_none(self):
        env = {"FORM_DEFINITION_BUCKET_NAME": "", "PUBLIC_KEY_FOR_SECRETS": ""}
        with patch.dict(os.environ, env, clear=True):
            settings = load_settings_from_env()
            assert settings.form_definition_bucket_name is None
            assert settings.public_key_for_secrets is None


class TestGetSettings:
    """Tests for cached settings getter."""

    def test_get_settings_is_cached(self):
        clear_settings_cache()
        assert get_settings() is get_settings()

    def test_clear_cache_allows_reload(self):
        clear_settings_cache()
        first = get_settings()

        clear_settings_cache()
        assert get_settings() is not first
