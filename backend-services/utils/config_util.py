"""
Gateway Configuration Module

Two kinds of configuration feed the gateway:

- GatewaySettings: process-level knobs read from the environment
  (GRAPHQL_SERVER_URL, PORT, ENV, OTEL_* ...).
- RestifiedConfig: the endpoint table and header policy, read once from a
  JSON or YAML file and validated before the server accepts traffic.

Usage:
    from utils.config_util import GatewaySettings, load_config_from_env

    settings = GatewaySettings()
    config = load_config_from_env(settings)
"""

import os
import json
import yaml
import logging
from typing import Any, Dict, Optional
from pathlib import Path

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from models.config_model import RestifiedConfig
from services.endpoint_service import EndpointService
from utils.constants import Defaults

logger = logging.getLogger('restified.gateway')


class ConfigurationError(Exception):
    """Raised when the gateway configuration is missing or invalid."""

    def __init__(self, message: str, problems: Optional[list[str]] = None):
        super().__init__(message)
        self.problems = problems or []

    def __str__(self) -> str:
        base = super().__str__()
        if not self.problems:
            return base
        return base + ': ' + '; '.join(self.problems)


class GatewaySettings(BaseSettings):
    """Environment-level settings, collected once at startup."""

    model_config = SettingsConfigDict(extra='ignore')

    graphql_server_url: str = Defaults.GRAPHQL_SERVER_URL
    env: str = ''
    host: str = Defaults.HOST
    port: int = Defaults.PORT
    dev_reload: bool = False

    restified_config_file: Optional[str] = None
    restified_config_path: Optional[str] = None
    hasura_ddn_plugin_config_path: Optional[str] = None

    otel_exporter_otlp_endpoint: Optional[str] = None
    otel_exporter_pat: Optional[str] = None

    @property
    def development(self) -> bool:
        return self.env.strip().lower() == 'development'

    def config_file(self) -> Optional[Path]:
        """Resolve the configuration file location.

        RESTIFIED_CONFIG_FILE points at a file; RESTIFIED_CONFIG_PATH and
        HASURA_DDN_PLUGIN_CONFIG_PATH point at a directory holding
        configuration.json.
        """
        if self.restified_config_file:
            return Path(self.restified_config_file)
        directory = self.restified_config_path or self.hasura_ddn_plugin_config_path
        if directory:
            return Path(directory) / Defaults.CONFIG_FILE_NAME
        return None


def _format_validation_error(exc: ValidationError) -> list[str]:
    problems = []
    for err in exc.errors():
        loc = '.'.join(str(p) for p in err.get('loc', ())) or '<root>'
        problems.append(f"{loc}: {err.get('msg')}")
    return problems


def parse_config(data: Any) -> RestifiedConfig:
    """Validate raw configuration data and log overlapping endpoint templates."""
    try:
        config = RestifiedConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError('Invalid gateway configuration', _format_validation_error(e)) from e

    for earlier, later in EndpointService.find_overlapping_endpoints(config.restified_endpoints):
        logger.warning(
            f'Endpoint {later.path} {sorted(later.methods)} overlaps {earlier.path} '
            f'{sorted(earlier.methods)}; the earlier declaration wins'
        )
    return config


def read_config_file(filepath: str | Path) -> Dict[str, Any]:
    """Load raw configuration from a YAML or JSON file"""
    path = Path(filepath)
    if not path.exists():
        raise ConfigurationError(f'Configuration file not found: {path}')

    try:
        with open(path, 'r', encoding='utf-8') as f:
            if path.suffix in ['.yaml', '.yml']:
                file_config = yaml.safe_load(f) or {}
            elif path.suffix == '.json':
                file_config = json.load(f)
            else:
                raise ConfigurationError(f'Unsupported config file format: {path.suffix}')
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f'Unable to parse configuration file {path}', [str(e)]) from e

    if not isinstance(file_config, dict):
        raise ConfigurationError(f'Configuration file {path} must contain an object')
    return file_config


def load_config(filepath: str | Path) -> RestifiedConfig:
    config = parse_config(read_config_file(filepath))
    logger.info(
        f'Loaded configuration from {filepath} '
        f'({len(config.restified_endpoints)} endpoint(s))'
    )
    return config


def load_config_from_env(settings: Optional[GatewaySettings] = None) -> RestifiedConfig:
    settings = settings or GatewaySettings()
    path = settings.config_file()
    if path is None:
        raise ConfigurationError(
            'No gateway configuration found. Set RESTIFIED_CONFIG_FILE, '
            'RESTIFIED_CONFIG_PATH or HASURA_DDN_PLUGIN_CONFIG_PATH.'
        )
    return load_config(os.fspath(path))
