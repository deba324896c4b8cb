"""
Unit tests for config.py
"""

import os
import tempfile
from unittest import mock

import pytest
import yaml

from sqldumper.config import ConfigLoader
from sqldumper.exceptions import ConfigurationError
from sqldumper.models import CompressMethod, DumpSettings


def _write_config(config) -> str:
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        yaml.dump(config, f)
        return f.name


class TestConfigLoader:
    """Tests for ConfigLoader class."""

    @pytest.fixture
    def sample_config(self):
        """Sample configuration dictionary."""
        return {
            "connection": {
                "dsn": "mysql:host=localhost;dbname=shop",
                "user": "root",
                "password": "secret"
            },
            "dump": {
                "add-drop-table": True,
                "compress": "gzip",
                "exclude-tables": ["sessions", "/^tmp_/i"]
            },
            "output": {
                "file": "./backups/shop.sql.gz"
            },
            "logging": {
                "level": "INFO",
                "file": "./logs/dump.log"
            }
        }

    @pytest.fixture
    def config_file(self, sample_config):
        """Create a temporary config file."""
        path = _write_config(sample_config)
        yield path
        os.unlink(path)

    def test_load_config(self, config_file):
        """Test loading a valid config file."""
        loader = ConfigLoader(config_file)
        assert loader.config is not None

    def test_file_not_found(self):
        """Test that FileNotFoundError is raised for missing file."""
        with pytest.raises(FileNotFoundError):
            ConfigLoader("/nonexistent/path/config.yaml")

    def test_get_connection(self, config_file):
        """Test getting connection settings."""
        connection = ConfigLoader(config_file).get_connection()
        assert connection == {
            "dsn": "mysql:host=localhost;dbname=shop",
            "user": "root",
            "password": "secret"
        }

    def test_get_dump_settings(self, config_file):
        """Test dump options are turned into validated settings."""
        settings = ConfigLoader(config_file).get_dump_settings()
        assert isinstance(settings, DumpSettings)
        assert settings.add_drop_table is True
        assert settings.compress is CompressMethod.GZIP
        assert settings.exclude_tables == ("sessions", "/^tmp_/i")

    def test_unknown_dump_option_rejected(self):
        """Test an unknown option in the dump section fails validation."""
        path = _write_config({"dump": {"add-drop-tables": True}})
        try:
            loader = ConfigLoader(path)
            with pytest.raises(ConfigurationError) as exc_info:
                loader.get_dump_settings()
            assert "add-drop-tables" in str(exc_info.value)
        finally:
            os.unlink(path)

    def test_get_output_settings(self, config_file):
        """Test getting output settings."""
        output = ConfigLoader(config_file).get_output_settings()
        assert output["file"] == "./backups/shop.sql.gz"

    def test_get_logging_settings(self, config_file):
        """Test getting logging settings."""
        logging = ConfigLoader(config_file).get_logging_settings()
        assert logging["level"] == "INFO"
        assert logging["file"] == "./logs/dump.log"

    def test_getters_return_copies(self, config_file):
        """Test callers may mutate returned sections."""
        loader = ConfigLoader(config_file)
        loader.get_logging_settings()["level"] = "DEBUG"
        assert loader.get_logging_settings()["level"] == "INFO"

    def test_empty_sections(self):
        """Test handling of missing config sections."""
        path = _write_config({"connection": {"dsn": "sqlite:app.db"}})
        loader = ConfigLoader(path)
        os.unlink(path)

        assert loader.get_connection() == {"dsn": "sqlite:app.db", "user": "", "password": ""}
        assert loader.get_dump_settings() == DumpSettings()
        assert loader.get_output_settings() == {}
        assert loader.get_logging_settings() == {}

    def test_empty_file(self):
        """Test an empty file behaves like an empty mapping."""
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            path = f.name
        loader = ConfigLoader(path)
        os.unlink(path)

        assert loader.config == {}
        assert loader.get_connection()["dsn"] == ""

    def test_section_must_be_mapping(self):
        """Test a scalar section is rejected."""
        path = _write_config({"dump": ["add-drop-table"]})
        try:
            with pytest.raises(ConfigurationError) as exc_info:
                ConfigLoader(path)
            assert "dump" in str(exc_info.value)
        finally:
            os.unlink(path)

    def test_numeric_password_becomes_string(self):
        """Test YAML numbers used as passwords are handed over as text."""
        path = _write_config({"connection": {"dsn": "mysql:host=h;dbname=d", "password": 1234}})
        loader = ConfigLoader(path)
        os.unlink(path)
        assert loader.get_connection()["password"] == "1234"


class TestEnvironmentVariables:
    """Tests for environment variable resolution."""

    @pytest.fixture
    def env_config_file(self):
        """Create a temporary config file with env vars."""
        path = _write_config({
            "connection": {
                "dsn": "mysql:host=${DB_HOST};dbname=shop",
                "user": "${DB_USER}",
                "password": "${DB_PASSWORD}"
            },
            "output": {
                "file": "${OUTPUT_DIR}/shop.sql"
            }
        })
        yield path
        os.unlink(path)

    def test_resolve_env_vars(self, env_config_file):
        """Test environment variables are resolved."""
        with mock.patch.dict(os.environ, {
            "DB_HOST": "db.example.com",
            "DB_USER": "myuser",
            "DB_PASSWORD": "mypassword",
            "OUTPUT_DIR": "/var/backups"
        }):
            loader = ConfigLoader(env_config_file)
            connection = loader.get_connection()
            assert connection["dsn"] == "mysql:host=db.example.com;dbname=shop"
            assert connection["user"] == "myuser"
            assert connection["password"] == "mypassword"
            assert loader.get_output_settings()["file"] == "/var/backups/shop.sql"

    def test_missing_env_var_becomes_empty(self, env_config_file):
        """Test missing environment variables become empty strings."""
        with mock.patch.dict(os.environ, {}, clear=True):
            connection = ConfigLoader(env_config_file).get_connection()
            assert connection["user"] == ""
            assert connection["password"] == ""

    def test_env_var_in_nested_list(self):
        """Test env var resolution in nested lists."""
        path = _write_config({"dump": {"include-tables": ["${TABLE_1}", "${TABLE_2}"]}})
        with mock.patch.dict(os.environ, {"TABLE_1": "users", "TABLE_2": "orders"}):
            loader = ConfigLoader(path)
        os.unlink(path)

        assert loader.get_dump_settings().include_tables == ("users", "orders")

    def test_non_string_values_unchanged(self):
        """Test that non-string values are not modified."""
        path = _write_config({"dump": {"net_buffer_length": 4096, "hex-blob": False, "where": None}})
        loader = ConfigLoader(path)
        os.unlink(path)

        dump = loader.get_dump_options()
        assert dump["net_buffer_length"] == 4096
        assert dump["hex-blob"] is False
        assert dump["where"] is None
