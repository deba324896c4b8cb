"""
Configuration loading and validation for SQL Dumper.
"""

import os
import re
from typing import Any

import yaml

from .exceptions import ConfigurationError
from .models import DumpSettings


class ConfigLoader:
    """Loads and validates configuration from YAML file.

    Expected layout::

        connection:
          dsn: "mysql:host=localhost;dbname=shop"
          user: "${DB_USER}"
          password: "${DB_PASSWORD}"
        dump:
          add-drop-table: true
          exclude-tables: [sessions, "/^tmp_/i"]
        output:
          file: ./backups/shop.sql.gz
        logging:
          level: INFO
    """

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')
    SECTIONS = ('connection', 'dump', 'output', 'logging')

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from YAML file."""
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f) or {}

        if not isinstance(config, dict):
            raise ConfigurationError(f"Configuration file '{self.config_path}' must contain a mapping")

        for section in self.SECTIONS:
            value = config.get(section)
            if value is not None and not isinstance(value, dict):
                raise ConfigurationError(f"Section '{section}' must be a mapping")

        return self._resolve_env_vars(config)

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Recursively resolve environment variables in config."""
        if isinstance(obj, str):
            for match in self.ENV_VAR_PATTERN.findall(obj):
                obj = obj.replace(f'${{{match}}}', os.environ.get(match, ''))
            return obj
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def _section(self, name: str) -> dict[str, Any]:
        return dict(self.config.get(name) or {})

    def get_connection(self) -> dict[str, Any]:
        """Get connection settings: dsn, user and password."""
        connection = self._section('connection')
        return {
            'dsn': connection.get('dsn', ''),
            'user': connection.get('user', '') or '',
            'password': str(connection.get('password', '') or ''),
        }

    def get_dump_options(self) -> dict[str, Any]:
        """Get the raw dump option overrides."""
        return self._section('dump')

    def get_dump_settings(self) -> DumpSettings:
        """Get validated dump settings; unknown options raise ConfigurationError."""
        return DumpSettings.from_dict(self.get_dump_options())

    def get_output_settings(self) -> dict[str, Any]:
        """Get output settings."""
        return self._section('output')

    def get_logging_settings(self) -> dict[str, Any]:
        """Get logging settings."""
        return self._section('logging')
