"""
Configuration system using Pydantic for type-safe settings management.

This module provides the settings consumed by the credential helper: the
ordered list of token sources, the set of GCR registry hostnames, OAuth
scopes and the keyring namespace of the credential store.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gcr_credhelper.config.registries import (
    DEFAULT_TOKEN_SOURCES,
    GCR_SCOPES,
    SUPPORTED_GCR_REGISTRIES,
)
from gcr_credhelper.enums import TokenSource
from gcr_credhelper.exceptions import ConfigurationError


def default_config_path() -> Path:
    """Return the per-user configuration file location."""
    config_home = os.getenv("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(config_home) / "gcr-credhelper" / "config.yaml"


class HelperSettings(BaseSettings):
    """Credential helper settings.

    Values come from (highest priority first) explicit keyword arguments,
    ``GCR_CREDHELPER_*`` environment variables and built-in defaults. Use
    :meth:`from_yaml` to load a user configuration file.
    """

    model_config = SettingsConfigDict(
        env_prefix="GCR_CREDHELPER_",
        case_sensitive=False,
        frozen=True,
    )

    token_sources: tuple[str, ...] = Field(
        default=DEFAULT_TOKEN_SOURCES,
        description="Token sources to try, in order (env, gcloud_sdk, store)",
    )
    registries: frozenset[str] = Field(
        default=SUPPORTED_GCR_REGISTRIES,
        description="Registry hostnames that use the GCR access token path",
    )
    oauth_scopes: tuple[str, ...] = Field(default=GCR_SCOPES, description="OAuth scopes for GCR tokens")
    gcloud_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds to wait for 'gcloud auth print-access-token' (None waits indefinitely)",
    )
    keyring_service: str = Field(
        default="gcr-credhelper",
        min_length=1,
        description="Keyring service name under which credentials are stored",
    )

    @field_validator("token_sources")
    @classmethod
    def validate_token_sources(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        """Reject identifiers that are not recognized token sources."""
        known = TokenSource.values()
        unknown = [source for source in value if source not in known]
        if unknown:
            raise ValueError(f"unknown token source(s): {', '.join(unknown)}; expected one of {', '.join(known)}")
        return value

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> HelperSettings:
        """Load settings from YAML file with environment variable interpolation.

        Supports ${VAR_NAME} syntax for environment variable substitution.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            HelperSettings instance

        Raises:
            ConfigurationError: If config file is invalid or missing
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            yaml_content = config_file.read_text()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {config_path}") from e

        try:
            yaml_content = cls._interpolate_env_vars(yaml_content)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment variable reference in config: {e}") from e

        try:
            config_dict = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

        # An empty file means "all defaults"
        if config_dict is None:
            config_dict = {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a YAML object, not a list or scalar")

        try:
            return cls(**config_dict)
        except Exception as e:
            raise ConfigurationError(f"Failed to validate configuration: {e}") from e

    def save_yaml(self, config_path: str | Path) -> None:
        """Write the settings to a YAML file, creating parent directories.

        Raises:
            ConfigurationError: If the file cannot be written
        """
        config_file = Path(config_path)
        data = {
            "token_sources": list(self.token_sources),
            "registries": sorted(self.registries),
            "oauth_scopes": list(self.oauth_scopes),
            "gcloud_timeout": self.gcloud_timeout,
            "keyring_service": self.keyring_service,
        }
        try:
            config_file.parent.mkdir(parents=True, exist_ok=True)
            config_file.write_text(yaml.safe_dump(data, sort_keys=False))
        except OSError as e:
            raise ConfigurationError(f"Cannot write configuration file: {config_path}") from e

    @staticmethod
    def _interpolate_env_vars(content: str) -> str:
        """Interpolate ${VAR_NAME} placeholders with environment variables.

        Supports two syntaxes:
        - ${VAR_NAME} - Required environment variable (raises if not set)
        - ${VAR_NAME:-default} - Optional with default value

        YAML comment lines are left unchanged.

        Raises:
            ValueError: If a required environment variable is not set
        """
        pattern = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default_value = match.group(2)
            value = os.getenv(var_name)

            if value is not None:
                return value
            elif default_value is not None:
                return default_value
            else:
                raise ValueError(f"Environment variable {var_name} is not set")

        def process_line(line: str) -> str:
            if line.lstrip().startswith("#"):
                return line
            return pattern.sub(replace_var, line)

        return "\n".join(process_line(line) for line in content.split("\n"))


def load_settings(config_path: str | Path | None = None) -> HelperSettings:
    """Load settings from *config_path*, or defaults if the file does not exist.

    Args:
        config_path: Configuration file; defaults to :func:`default_config_path`

    Raises:
        ConfigurationError: If an existing file is invalid
    """
    path = Path(config_path) if config_path is not None else default_config_path()
    if not path.exists():
        try:
            return HelperSettings()
        except Exception as e:
            raise ConfigurationError(f"Failed to validate configuration: {e}") from e
    return HelperSettings.from_yaml(path)
