"""Configuration models and the lazily-loaded global settings."""

from .config import (
    BrowserConfig,
    Config,
    DocumentConfig,
    HttpConfig,
    LazyConfig,
    MonitoringConfig,
    OcrConfig,
    ScoringConfig,
    find_config_file,
    settings,
)

__all__ = [
    "BrowserConfig",
    "Config",
    "DocumentConfig",
    "HttpConfig",
    "LazyConfig",
    "MonitoringConfig",
    "OcrConfig",
    "ScoringConfig",
    "find_config_file",
    "settings",
]
