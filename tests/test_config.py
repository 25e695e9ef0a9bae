"""Tests for environment-driven configuration."""

import pytest

from choropleth.config import get_config, reload_config


@pytest.fixture
def env(monkeypatch):
    """Environment patcher that reloads the configuration once the patches are undone."""
    yield monkeypatch
    monkeypatch.undo()
    reload_config()


def test_defaults():
    config = get_config()
    assert config.default_scheme_id == "buenos-aries"
    assert config.neutral_color == "#e5e5e5"
    assert config.matching.threshold == 0.6
    assert config.upload.allowed_table_extensions == [".csv"]
    assert "defs" in config.extraction.reserved_id_prefixes


def test_environment_overrides(env):
    env.setenv("MATCH_THRESHOLD", "0.8")
    env.setenv("ALLOWED_TABLE_EXTENSIONS", ".csv, .TSV")
    env.setenv("DEFAULT_BUCKETS", "7")

    config = reload_config()

    assert get_config() is config
    assert config.matching.threshold == 0.8
    assert config.upload.allowed_table_extensions == [".csv", ".tsv"]
    assert config.default_buckets == 7
