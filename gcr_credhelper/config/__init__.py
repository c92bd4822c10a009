"""Configuration for gcr-credhelper."""

from gcr_credhelper.config.registries import (
    DEFAULT_TOKEN_SOURCES,
    GCR_OAUTH2_USERNAME,
    GCR_SCOPES,
    SUPPORTED_GCR_REGISTRIES,
)
from gcr_credhelper.config.settings import HelperSettings, default_config_path, load_settings

__all__ = [
    "DEFAULT_TOKEN_SOURCES",
    "GCR_OAUTH2_USERNAME",
    "GCR_SCOPES",
    "SUPPORTED_GCR_REGISTRIES",
    "HelperSettings",
    "default_config_path",
    "load_settings",
]
