"""Unit tests for client settings configuration."""

from mds_core.config import SchemaGeneration, Settings


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.api_version == "v3.0"
    assert settings.schema_generation == SchemaGeneration.METADATAS
    assert settings.auth_item.background_fetch_oid_config is True
    assert settings.storage_prefix == "mds-core-"
    assert not settings.is_legacy


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("MDS_API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv("MDS_SCHEMA_GENERATION", "legacy")
    monkeypatch.setenv("MDS_AUTH_ITEM__BACKGROUND_FETCH_OID_CONFIG", "false")

    settings = Settings(_env_file=None)

    assert settings.api_base_url == "https://api.example.com"
    assert settings.is_legacy
    assert settings.auth_item.background_fetch_oid_config is False


def test_endpoint_builds_public_api_url():
    settings = Settings(_env_file=None, api_base_url="https://api.example.com/")
    assert settings.endpoint("auth_items") == "https://api.example.com/public/v3.0/auth_items"
