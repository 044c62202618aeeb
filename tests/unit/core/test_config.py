"""Unit tests for core config parsing."""

from __future__ import annotations

import pytest

from core.config import ArchiveStoreConfig
from core.errors import ArchiveConfigError


def test_from_env_uses_default_store_name(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Config should default the store root to open-metadata-archive in the cwd."""
    monkeypatch.delenv("OMARCHIVE_STORE_NAME", raising=False)
    monkeypatch.chdir(tmp_path)

    config = ArchiveStoreConfig.from_env()

    assert config.store_root == (tmp_path / "open-metadata-archive").resolve()


def test_from_env_reads_store_name(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve the store root from environment."""
    monkeypatch.setenv("OMARCHIVE_STORE_NAME", "./.tmp-archive")

    config = ArchiveStoreConfig.from_env()

    assert config.store_root.name == ".tmp-archive"


def test_from_env_parses_history_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should enable version history for a truthy environment value."""
    monkeypatch.setenv("OMARCHIVE_KEEP_VERSION_HISTORY", "yes")

    config = ArchiveStoreConfig.from_env()

    assert config.keep_version_history is True


def test_from_env_history_flag_defaults_off(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should keep history disabled when the variable is unset."""
    monkeypatch.delenv("OMARCHIVE_KEEP_VERSION_HISTORY", raising=False)

    config = ArchiveStoreConfig.from_env()

    assert config.keep_version_history is False


def test_from_env_raises_for_invalid_history_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for a history flag that is not a boolean."""
    monkeypatch.setenv("OMARCHIVE_KEEP_VERSION_HISTORY", "sometimes")

    with pytest.raises(ArchiveConfigError):
        ArchiveStoreConfig.from_env()


def test_from_env_reads_s3_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should carry S3 session settings from environment."""
    monkeypatch.setenv("OMARCHIVE_S3_REGION", "eu-west-1")
    monkeypatch.setenv("OMARCHIVE_S3_PROFILE", "archive")

    config = ArchiveStoreConfig.from_env()

    assert (config.s3_region, config.s3_profile) == ("eu-west-1", "archive")


def test_from_properties_reads_store_name(tmp_path) -> None:
    """Connector properties should select the archive directory."""
    properties = {"archiveStoreName": str(tmp_path / "connector-archive")}

    config = ArchiveStoreConfig.from_properties(properties)

    assert config.store_root == (tmp_path / "connector-archive").resolve()


def test_from_properties_present_flag_without_value_enables_history() -> None:
    """A present history property with no value should enable history."""
    config = ArchiveStoreConfig.from_properties({"keepVersionHistory": None})

    assert config.keep_version_history is True


def test_from_properties_explicit_false_disables_history() -> None:
    """An explicit false history property should keep history disabled."""
    config = ArchiveStoreConfig.from_properties({"keepVersionHistory": "false"})

    assert config.keep_version_history is False


def test_from_properties_absent_flag_disables_history() -> None:
    """Missing connector properties should keep history disabled."""
    config = ArchiveStoreConfig.from_properties(None)

    assert config.keep_version_history is False


def test_from_properties_raises_for_invalid_flag() -> None:
    """Unparseable history properties should raise a config error."""
    with pytest.raises(ArchiveConfigError):
        ArchiveStoreConfig.from_properties({"keepVersionHistory": "maybe"})


def test_from_properties_raises_for_non_path_store_name() -> None:
    """A non-string store name should raise a config error."""
    with pytest.raises(ArchiveConfigError):
        ArchiveStoreConfig.from_properties({"archiveStoreName": 42})
